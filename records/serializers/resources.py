"""
Serializers for the clinical resources.

Each serializer exposes the model's snake_case columns verbatim.  Links
to other rows are written and read as ``<name>_id`` and must refer to
an existing row when written.  ``id`` and ``created_at`` are assigned
by the server.
"""
from __future__ import annotations

from rest_framework import serializers

from ..models import (
    WEEKDAYS, Appointment, Doctor, DoctorVisit, IPDPatient, IVSchedule, MedicalRecord,
    MedicineSchedule, Patient, Prescription, Vital,
)
from .common import CleanTextMixin, ref

SERVER_FIELDS = ['id', 'created_at']


class PatientSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('name', 'gender', 'contact', 'address')

    class Meta:
        model = Patient
        fields = ['id', 'name', 'age', 'gender', 'contact', 'email', 'abha_id', 'address', 'photo_url', 'created_at']
        read_only_fields = SERVER_FIELDS


class DoctorSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('name', 'specialization', 'contact')
    availability = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), required=False, allow_null=True,
    )

    class Meta:
        model = Doctor
        fields = ['id', 'name', 'specialization', 'contact', 'email', 'experience', 'availability', 'created_at']
        read_only_fields = SERVER_FIELDS

    def validate_availability(self, v):
        if v is None:
            return v
        # set semantics, kept in calendar order
        return [d for d in WEEKDAYS if d in set(v)]


class AppointmentSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('type',)
    patient_id = ref(Patient, 'patient')
    doctor_id = ref(Doctor, 'doctor')

    class Meta:
        model = Appointment
        fields = ['id', 'patient_id', 'doctor_id', 'date', 'time', 'type', 'status', 'created_at']
        read_only_fields = SERVER_FIELDS


class MedicalRecordSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('condition', 'notes')
    patient_id = ref(Patient, 'patient')
    doctor_id = ref(Doctor, 'doctor', required=False)

    class Meta:
        model = MedicalRecord
        fields = ['id', 'patient_id', 'doctor_id', 'date', 'condition', 'notes', 'created_at']
        read_only_fields = SERVER_FIELDS


class PrescriptionSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('medication', 'dosage')
    patient_id = ref(Patient, 'patient')
    doctor_id = ref(Doctor, 'doctor', required=False)

    class Meta:
        model = Prescription
        fields = ['id', 'patient_id', 'doctor_id', 'date', 'medication', 'dosage', 'created_at']
        read_only_fields = SERVER_FIELDS


class IPDPatientSerializer(CleanTextMixin, serializers.ModelSerializer):
    """Admission.  ``status`` and ``discharge_date`` change only through discharge."""
    clean_fields = ('room_number', 'bed_number', 'condition')
    patient_id = ref(Patient, 'patient')
    assigned_doctor_id = ref(Doctor, 'assigned_doctor', required=False)

    class Meta:
        model = IPDPatient
        fields = [
            'id', 'patient_id', 'room_number', 'bed_number', 'admission_date', 'condition',
            'severity', 'assigned_doctor_id', 'status', 'discharge_date', 'created_at',
        ]
        read_only_fields = SERVER_FIELDS + ['status', 'discharge_date']


class VitalSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('notes',)
    ipd_patient_id = ref(IPDPatient, 'ipd_patient')
    blood_pressure = serializers.RegexField(
        r'^\d{2,3}/\d{2,3}$',
        max_length=16,
        error_messages={'invalid': 'Blood pressure must look like "120/80".'},
    )

    class Meta:
        model = Vital
        fields = [
            'id', 'ipd_patient_id', 'time', 'heart_rate', 'temperature', 'blood_pressure',
            'oxygen_saturation', 'notes', 'created_at',
        ]
        read_only_fields = SERVER_FIELDS


class MedicineScheduleSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('medicine', 'dosage', 'frequency', 'nurse', 'notes')
    ipd_patient_id = ref(IPDPatient, 'ipd_patient')

    class Meta:
        model = MedicineSchedule
        fields = [
            'id', 'ipd_patient_id', 'time', 'medicine', 'dosage', 'frequency', 'status',
            'nurse', 'notes', 'created_at',
        ]
        read_only_fields = SERVER_FIELDS


class IVScheduleSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('fluid', 'volume', 'rate', 'nurse', 'notes')
    ipd_patient_id = ref(IPDPatient, 'ipd_patient')

    class Meta:
        model = IVSchedule
        fields = [
            'id', 'ipd_patient_id', 'time', 'fluid', 'volume', 'rate', 'status',
            'nurse', 'notes', 'created_at',
        ]
        read_only_fields = SERVER_FIELDS


class DoctorVisitSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('visit_type', 'notes', 'prescription')
    ipd_patient_id = ref(IPDPatient, 'ipd_patient')
    doctor_id = ref(Doctor, 'doctor', required=False)
    vitals_status = serializers.ChoiceField(
        choices=DoctorVisit.VITALS_STATUS_CHOICES, required=False, allow_null=True,
    )

    class Meta:
        model = DoctorVisit
        fields = [
            'id', 'ipd_patient_id', 'doctor_id', 'time', 'visit_type', 'notes',
            'vitals_status', 'prescription', 'created_at',
        ]
        read_only_fields = SERVER_FIELDS


class DischargeSerializer(serializers.Serializer):
    discharge_date = serializers.DateTimeField(required=False, allow_null=True)
