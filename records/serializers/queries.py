"""
Query-string serializers for the list endpoints.

Parameter names follow the camelCase convention of the web client.  Each
resource in :mod:`records.services.catalog` points at one of these.
"""
from __future__ import annotations

from rest_framework import serializers

from ..models import Appointment, Bill, DoctorVisit, IPDPatient, IVSchedule, MedicineSchedule


class SearchQuery(serializers.Serializer):
    search = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PatientQuery(SearchQuery):
    pass


class DoctorQuery(SearchQuery):
    specialization = serializers.CharField(max_length=255, required=False)


class AppointmentQuery(serializers.Serializer):
    patientId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)


class DateRangeQuery(SearchQuery):
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and start > end:
            raise serializers.ValidationError({'endDate': 'endDate must not be before startDate.'})
        return attrs


class PatientHistoryQuery(DateRangeQuery):
    patientId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)


class AdmissionQuery(SearchQuery):
    patientId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)
    severity = serializers.ChoiceField(choices=IPDPatient.SEVERITY_CHOICES, required=False)
    roomNumber = serializers.CharField(max_length=20, required=False)
    status = serializers.ChoiceField(choices=IPDPatient.STATUS_CHOICES, required=False)


class VitalQuery(DateRangeQuery):
    ipdPatientId = serializers.UUIDField(required=False)
    hours = serializers.IntegerField(min_value=1, max_value=24 * 30, required=False)
    latest = serializers.BooleanField(required=False, default=False)


class MedicineScheduleQuery(SearchQuery):
    ipdPatientId = serializers.UUIDField(required=False)
    nurse = serializers.CharField(max_length=255, required=False)
    status = serializers.ChoiceField(choices=MedicineSchedule.STATUS_CHOICES, required=False)
    date = serializers.DateField(required=False)


class IVScheduleQuery(serializers.Serializer):
    ipdPatientId = serializers.UUIDField(required=False)
    nurse = serializers.CharField(max_length=255, required=False)
    status = serializers.ChoiceField(choices=IVSchedule.STATUS_CHOICES, required=False)
    date = serializers.DateField(required=False)


class DoctorVisitQuery(SearchQuery):
    ipdPatientId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)
    date = serializers.DateField(required=False)
    vitalsStatus = serializers.ChoiceField(choices=DoctorVisit.VITALS_STATUS_CHOICES, required=False)


class BillQuery(serializers.Serializer):
    patientId = serializers.UUIDField(required=False)
    doctorId = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=Bill.STATUS_CHOICES, required=False)


class BillItemQuery(serializers.Serializer):
    billId = serializers.UUIDField(required=False)
