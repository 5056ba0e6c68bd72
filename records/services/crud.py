"""
Generic list/get/create/update/delete for the clinical resources.

A :class:`Resource` ties a model to its serializer, its list query
serializer and the filters that query may apply.  Views stay thin and
resources with extra rules (scoped listings, status workflows, one open
admission per patient, bill totals) subclass or configure this class in
:mod:`records.services.catalog`.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from functools import reduce
from operator import or_
from typing import Any, Callable, Optional

from django.db import transaction
from django.db.models import Model, Q, QuerySet
from rest_framework.exceptions import NotFound, ValidationError

from .transitions import check_transition

logger = logging.getLogger(__name__)


@dataclass
class Resource:
    name: str
    model: type[Model]
    serializer: type
    query: type
    # query parameter -> ORM lookup
    filters: dict[str, str] = field(default_factory=dict)
    search_fields: tuple[str, ...] = ()
    # at least one of these parameters must be present on list
    scope: tuple[str, ...] = ()
    transitions: Optional[dict] = None
    prefetch: tuple[str, ...] = ()
    extra_filter: Optional[Callable[[QuerySet, dict], QuerySet]] = None

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def queryset(self) -> QuerySet:
        qs = self.model.objects.all()
        if self.prefetch:
            qs = qs.prefetch_related(*self.prefetch)
        return qs

    def parse_query(self, params) -> dict:
        q = self.query(data=params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        if self.scope and not any(vd.get(p) not in (None, '') for p in self.scope):
            names = ' or '.join(self.scope)
            raise ValidationError({'detail': f'{names} is required to list {self.name}.'})
        return vd

    def list(self, params) -> QuerySet:
        vd = self.parse_query(params)
        qs = self.queryset()
        for param, lookup in self.filters.items():
            value = vd.get(param)
            if value not in (None, ''):
                qs = qs.filter(**{lookup: value})
        term = (vd.get('search') or '').strip()
        if term and self.search_fields:
            qs = qs.filter(reduce(or_, (Q(**{f'{f}__icontains': term}) for f in self.search_fields)))
        if self.extra_filter:
            qs = self.extra_filter(qs, vd)
        return qs

    def get(self, pk) -> Model:
        try:
            key = uuid.UUID(str(pk))
        except ValueError:
            raise NotFound(f'{self.name} "{pk}" not found')
        obj = self.queryset().filter(pk=key).first()
        if obj is None:
            raise NotFound(f'{self.name} "{pk}" not found')
        return obj

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def create(self, data: dict[str, Any]) -> Model:
        s = self.serializer(data=data)
        s.is_valid(raise_exception=True)
        with transaction.atomic():
            self.before_create(s.validated_data)
            obj = s.save()
        logger.info('created %s %s', self.name, obj.pk)
        return obj

    def update(self, pk, data: dict[str, Any]) -> Model:
        with transaction.atomic():
            obj = self.get_for_update(pk)
            s = self.serializer(obj, data=data, partial=True)
            s.is_valid(raise_exception=True)
            self.before_update(obj, s.validated_data)
            obj = s.save()
        logger.info('updated %s %s fields=%s', self.name, obj.pk, sorted(s.validated_data))
        return obj

    def delete(self, pk) -> None:
        obj = self.get(pk)
        obj.delete()
        logger.info('deleted %s %s', self.name, pk)

    def get_for_update(self, pk) -> Model:
        obj = self.get(pk)
        return self.model.objects.select_for_update().get(pk=obj.pk)

    def serialize(self, obj) -> dict:
        return self.serializer(obj).data

    def serialize_many(self, rows) -> list:
        return self.serializer(rows, many=True).data

    # hooks
    def before_create(self, vd: dict) -> None:
        pass

    def before_update(self, obj, vd: dict) -> None:
        if self.transitions is not None and 'status' in vd:
            check_transition(self.transitions, obj.status, vd['status'])
