"""
Ward admissions.

A patient may hold at most one ``Admitted`` admission.  The patient row
is locked while the check runs so two concurrent admissions for the same
patient cannot both pass.  Discharge is one-way.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import Conflict
from ..models import IPDPatient, Patient
from .crud import Resource

logger = logging.getLogger(__name__)


def _ensure_no_open_admission(patient, exclude_id=None) -> None:
    Patient.objects.select_for_update().filter(pk=patient.pk).first()
    open_qs = IPDPatient.objects.filter(patient_id=patient.pk, status=IPDPatient.STATUS_ADMITTED)
    if exclude_id is not None:
        open_qs = open_qs.exclude(pk=exclude_id)
    if open_qs.exists():
        raise Conflict(f'Patient {patient.pk} is already admitted.')


class AdmissionResource(Resource):
    def before_create(self, vd):
        _ensure_no_open_admission(vd['patient'])

    def before_update(self, obj, vd):
        super().before_update(obj, vd)
        patient = vd.get('patient')
        if patient is not None and patient.pk != obj.patient_id and obj.status == IPDPatient.STATUS_ADMITTED:
            _ensure_no_open_admission(patient, exclude_id=obj.pk)

    def discharge(self, pk, when=None) -> IPDPatient:
        with transaction.atomic():
            adm = self.get_for_update(pk)
            if adm.status == IPDPatient.STATUS_DISCHARGED:
                raise Conflict(f'Admission {adm.pk} was already discharged.')
            adm.status = IPDPatient.STATUS_DISCHARGED
            adm.discharge_date = when or timezone.now()
            adm.save(update_fields=['status', 'discharge_date'])
        logger.info('discharged admission %s', adm.pk)
        return adm
