"""
Front page statistics.

Counts of patients, today's appointments, admitted and critical ward
patients and doctors, plus the last few of today's appointments.  The
payload is cached, pass ``refresh=1`` to recompute it.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..services.dashboard import dashboard_stats


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    refresh = (request.query_params.get('refresh') or '0') in ['1', 'true', 'True']
    return Response(dashboard_stats(refresh=refresh))
