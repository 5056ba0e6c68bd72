"""
The clinical resources served under ``/api/<name>``.

Each entry declares which list parameters map onto which ORM lookups.
Scoped resources refuse to list without their scope parameter.
"""
from __future__ import annotations

from datetime import timedelta

from django.utils import timezone

from ..models import (
    Appointment, Bill, BillItem, Doctor, DoctorVisit, IPDPatient, IVSchedule, MedicalRecord,
    MedicineSchedule, Patient, Prescription, Vital,
)
from ..serializers import queries
from ..serializers.billing import BillItemSerializer, BillSerializer
from ..serializers.resources import (
    AppointmentSerializer, DoctorSerializer, DoctorVisitSerializer, IPDPatientSerializer,
    IVScheduleSerializer, MedicalRecordSerializer, MedicineScheduleSerializer, PatientSerializer,
    PrescriptionSerializer, VitalSerializer,
)
from . import transitions
from .admissions import AdmissionResource
from .crud import Resource


def _vital_window(qs, vd):
    hours = vd.get('hours')
    if hours:
        qs = qs.filter(time__gte=timezone.now() - timedelta(hours=hours))
    if vd.get('latest'):
        qs = qs[:1]
    return qs


RESOURCES: dict[str, Resource] = {r.name: r for r in [
    Resource(
        'patients', Patient, PatientSerializer, queries.PatientQuery,
        search_fields=('name', 'contact', 'email', 'abha_id'),
    ),
    Resource(
        'doctors', Doctor, DoctorSerializer, queries.DoctorQuery,
        filters={'specialization': 'specialization__iexact'},
        search_fields=('name', 'specialization', 'email'),
    ),
    Resource(
        'appointments', Appointment, AppointmentSerializer, queries.AppointmentQuery,
        filters={'patientId': 'patient_id', 'doctorId': 'doctor_id', 'date': 'date', 'status': 'status'},
        transitions=transitions.APPOINTMENT,
    ),
    Resource(
        'medical-records', MedicalRecord, MedicalRecordSerializer, queries.PatientHistoryQuery,
        filters={'patientId': 'patient_id', 'doctorId': 'doctor_id', 'startDate': 'date__gte', 'endDate': 'date__lte'},
        search_fields=('condition', 'notes'),
    ),
    Resource(
        'prescriptions', Prescription, PrescriptionSerializer, queries.PatientHistoryQuery,
        filters={'patientId': 'patient_id', 'doctorId': 'doctor_id', 'startDate': 'date__gte', 'endDate': 'date__lte'},
        search_fields=('medication', 'dosage'),
    ),
    AdmissionResource(
        'ipd-patients', IPDPatient, IPDPatientSerializer, queries.AdmissionQuery,
        filters={
            'patientId': 'patient_id', 'doctorId': 'assigned_doctor_id', 'severity': 'severity',
            'roomNumber': 'room_number', 'status': 'status',
        },
        search_fields=('condition', 'room_number', 'bed_number'),
    ),
    Resource(
        'vitals', Vital, VitalSerializer, queries.VitalQuery,
        filters={'ipdPatientId': 'ipd_patient_id', 'startDate': 'time__date__gte', 'endDate': 'time__date__lte'},
        scope=('ipdPatientId',),
        extra_filter=_vital_window,
    ),
    Resource(
        'medicine-schedule', MedicineSchedule, MedicineScheduleSerializer, queries.MedicineScheduleQuery,
        filters={'ipdPatientId': 'ipd_patient_id', 'nurse': 'nurse__iexact', 'status': 'status', 'date': 'time__date'},
        search_fields=('medicine', 'dosage', 'notes'),
        scope=('ipdPatientId', 'nurse'),
        transitions=transitions.MEDICINE,
    ),
    Resource(
        'iv-schedule', IVSchedule, IVScheduleSerializer, queries.IVScheduleQuery,
        filters={'ipdPatientId': 'ipd_patient_id', 'nurse': 'nurse__iexact', 'status': 'status', 'date': 'time__date'},
        scope=('ipdPatientId', 'nurse'),
        transitions=transitions.IV,
    ),
    Resource(
        'doctor-visits', DoctorVisit, DoctorVisitSerializer, queries.DoctorVisitQuery,
        filters={'ipdPatientId': 'ipd_patient_id', 'doctorId': 'doctor_id', 'date': 'time__date', 'vitalsStatus': 'vitals_status'},
        search_fields=('visit_type', 'notes', 'prescription'),
        scope=('ipdPatientId', 'doctorId'),
    ),
    Resource(
        'bills', Bill, BillSerializer, queries.BillQuery,
        filters={'patientId': 'patient_id', 'doctorId': 'doctor_id', 'status': 'status'},
        prefetch=('bill_items', 'payments'),
    ),
    Resource(
        'bill-items', BillItem, BillItemSerializer, queries.BillItemQuery,
        filters={'billId': 'bill_id'},
    ),
]}


def get_resource(name: str) -> Resource:
    return RESOURCES[name]
