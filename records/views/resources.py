"""
Collection and detail endpoints for the clinical resources.

Every resource in :data:`records.services.catalog.RESOURCES` gets

* ``GET/POST /api/<name>``: list with query filters, create (201)
* ``GET/PATCH/DELETE /api/<name>/<id>``: read, partial update, delete (204)

The view functions are generated so that all resources share one code
path; resource-specific rules live in the services.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..services.catalog import RESOURCES


def collection_view(resource):
    def view(request):
        if request.method == 'POST':
            obj = resource.create(request.data)
            return Response(resource.serialize(resource.get(obj.pk)), status=status.HTTP_201_CREATED)
        rows = resource.list(request.query_params)
        return Response(resource.serialize_many(rows))

    view.__name__ = view.__qualname__ = resource.name.replace('-', '_') + '_collection'
    view.__doc__ = f'List or create {resource.name}.'
    return api_view(['GET', 'POST'])(permission_classes([IsAuthenticated])(view))


def detail_view(resource):
    def view(request, pk):
        if request.method == 'PATCH':
            obj = resource.update(pk, request.data)
            return Response(resource.serialize(resource.get(obj.pk)))
        if request.method == 'DELETE':
            resource.delete(pk)
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(resource.serialize(resource.get(pk)))

    view.__name__ = view.__qualname__ = resource.name.replace('-', '_') + '_detail'
    view.__doc__ = f'Read, patch or delete one of {resource.name}.'
    return api_view(['GET', 'PATCH', 'DELETE'])(permission_classes([IsAuthenticated])(view))


COLLECTION_VIEWS = {name: collection_view(r) for name, r in RESOURCES.items()}
DETAIL_VIEWS = {name: detail_view(r) for name, r in RESOURCES.items()}
