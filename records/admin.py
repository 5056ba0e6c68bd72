"""
Django admin registrations for the clinic models.

Superusers can inspect and correct rows through ``/admin/``.  Derived
bill fields are shown read-only so that payments keep going through the
API.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    Appointment, Bill, BillItem, Doctor, DoctorVisit, IPDPatient, IVSchedule, MedicalRecord,
    MedicineSchedule, Patient, Payment, Prescription, Profile, User, Vital,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'username', 'is_staff', 'is_superuser', 'last_login')
    search_fields = ('email', 'username', 'first_name', 'last_name')


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('email', 'full_name', 'role', 'department')
    list_filter = ('role',)
    search_fields = ('email', 'full_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'age', 'gender', 'contact', 'abha_id', 'created_at')
    search_fields = ('name', 'contact', 'email', 'abha_id')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'specialization', 'experience', 'contact')
    list_filter = ('specialization',)
    search_fields = ('name', 'specialization', 'email')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('date', 'time', 'type', 'status', 'patient_id', 'doctor_id')
    list_filter = ('status', 'date')


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('date', 'condition', 'patient_id', 'doctor_id')
    search_fields = ('condition', 'notes')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('date', 'medication', 'dosage', 'patient_id')
    search_fields = ('medication',)


@admin.register(IPDPatient)
class IPDPatientAdmin(admin.ModelAdmin):
    list_display = ('room_number', 'bed_number', 'condition', 'severity', 'status', 'admission_date')
    list_filter = ('status', 'severity')
    readonly_fields = ('discharge_date',)


@admin.register(Vital)
class VitalAdmin(admin.ModelAdmin):
    list_display = ('time', 'heart_rate', 'temperature', 'blood_pressure', 'oxygen_saturation', 'ipd_patient_id')


@admin.register(MedicineSchedule)
class MedicineScheduleAdmin(admin.ModelAdmin):
    list_display = ('time', 'medicine', 'dosage', 'status', 'nurse')
    list_filter = ('status',)


@admin.register(IVSchedule)
class IVScheduleAdmin(admin.ModelAdmin):
    list_display = ('time', 'fluid', 'volume', 'rate', 'status', 'nurse')
    list_filter = ('status',)


@admin.register(DoctorVisit)
class DoctorVisitAdmin(admin.ModelAdmin):
    list_display = ('time', 'visit_type', 'vitals_status', 'doctor_id')


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ('amount', 'payment_method', 'transaction_id', 'created_at')


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'total_amount', 'paid_amount', 'status')
    list_filter = ('status',)
    readonly_fields = ('paid_amount', 'status')
    inlines = [BillItemInline, PaymentInline]
