"""
Headline figures for the front page.

The numbers are cheap to compute but requested on every page load, so
the payload is cached for ``DASHBOARD_CACHE_SECONDS``.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from ..models import Appointment, Doctor, IPDPatient, Patient

CACHE_KEY = 'dashboard:stats'
RECENT_APPOINTMENTS = 4


def _recent(today) -> list[dict]:
    rows = list(Appointment.objects.filter(date=today).order_by('-time', '-id')[:RECENT_APPOINTMENTS])
    # soft references may dangle, so no joins
    patients = Patient.objects.in_bulk([a.patient_id for a in rows])
    doctors = Doctor.objects.in_bulk([a.doctor_id for a in rows])
    data = []
    for a in reversed(rows):
        patient = patients.get(a.patient_id)
        doctor = doctors.get(a.doctor_id)
        data.append({
            'id': str(a.id),
            'patient_id': str(a.patient_id),
            'patient_name': patient.name if patient else None,
            'doctor_id': str(a.doctor_id),
            'doctor_name': doctor.name if doctor else None,
            'time': a.time.strftime('%H:%M'),
            'type': a.type,
            'status': a.status,
        })
    return data


def compute_stats() -> dict:
    today = timezone.localdate()
    admitted = IPDPatient.objects.filter(status=IPDPatient.STATUS_ADMITTED)
    return {
        'date': today.isoformat(),
        'total_patients': Patient.objects.count(),
        'todays_appointments': Appointment.objects.filter(date=today).count(),
        'ipd_patients': admitted.count(),
        'critical_patients': admitted.filter(severity=IPDPatient.SEVERITY_CRITICAL).count(),
        'doctors': Doctor.objects.count(),
        'recent_appointments': _recent(today),
    }


def dashboard_stats(*, refresh: bool = False) -> dict:
    if not refresh:
        cached = cache.get(CACHE_KEY)
        if cached is not None:
            return cached
    data = compute_stats()
    cache.set(CACHE_KEY, data, getattr(settings, 'DASHBOARD_CACHE_SECONDS', 60))
    return data
