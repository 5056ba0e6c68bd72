"""
Database models for the clinic backend.

Every clinical entity uses an opaque UUID primary key and a ``created_at``
timestamp.  Relationships between entities are soft: foreign keys are
declared without database constraints and with ``DO_NOTHING`` so that
deleting a referenced row never removes or rewrites its dependents.  The
serializers still require a referenced row to exist at write time.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def soft_fk(to, related_name, *, null=False):
    """Foreign key without cascade semantics or a database constraint."""
    return models.ForeignKey(
        to,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name=related_name,
        null=null,
        blank=null,
    )


class User(AbstractUser):
    """Identity record.  Staff sign in with their e-mail address."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    def __str__(self) -> str:
        return self.email or self.username


class Profile(models.Model):
    """Clinic-facing profile of a signed-in user.

    The primary key is the user's id, so the profile id equals the
    identity id handed out by the authentication endpoints.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_NURSE = 'nurse'
    ROLE_STAFF = 'staff'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_STAFF, 'Staff'),
    ]
    DEFAULT_ROLE = ROLE_DOCTOR

    user = models.OneToOneField(User, primary_key=True, on_delete=models.CASCADE, related_name='profile')
    email = models.EmailField()
    full_name = models.CharField(max_length=255, blank=True, null=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=DEFAULT_ROLE)
    phone = models.CharField(max_length=32, blank=True, null=True)
    department = models.CharField(max_length=255, blank=True, null=True)
    doctor = soft_fk('Doctor', 'profiles', null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Patient(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField(validators=[MaxValueValidator(150)])
    gender = models.CharField(max_length=20)
    contact = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    # National health registry id (ABHA), stored opaquely
    abha_id = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    address = models.TextField(blank=True, null=True)
    photo_url = models.URLField(max_length=512, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', 'id']

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class Doctor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255, db_index=True)
    contact = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    experience = models.PositiveIntegerField(blank=True, null=True)
    # Weekday labels, see WEEKDAYS
    availability = models.JSONField(default=list, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return f"{self.name} ({self.specialization})"


class Appointment(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_UPCOMING = 'Upcoming'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_UPCOMING, 'Upcoming'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = soft_fk(Patient, 'appointments')
    doctor = soft_fk(Doctor, 'appointments')
    date = models.DateField(db_index=True)
    time = models.TimeField()
    type = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['date', 'time', 'id']

    def __str__(self) -> str:
        return f"Appointment {self.date} {self.time} ({self.status})"


class MedicalRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = soft_fk(Patient, 'medical_records')
    doctor = soft_fk(Doctor, 'medical_records', null=True)
    date = models.DateField()
    condition = models.CharField(max_length=255)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', 'id']

    def __str__(self) -> str:
        return f"{self.condition} @ {self.date}"


class Prescription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = soft_fk(Patient, 'prescriptions')
    doctor = soft_fk(Doctor, 'prescriptions', null=True)
    date = models.DateField()
    medication = models.CharField(max_length=255)
    dosage = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', 'id']

    def __str__(self) -> str:
        return f"{self.medication} {self.dosage}"


class IPDPatient(models.Model):
    """A ward admission.  Parent of vitals, schedules and doctor visits."""
    SEVERITY_CRITICAL = 'Critical'
    SEVERITY_STABLE = 'Stable'
    SEVERITY_RECOVERING = 'Recovering'
    SEVERITY_CHOICES = [
        (SEVERITY_CRITICAL, 'Critical'),
        (SEVERITY_STABLE, 'Stable'),
        (SEVERITY_RECOVERING, 'Recovering'),
    ]

    STATUS_ADMITTED = 'Admitted'
    STATUS_DISCHARGED = 'Discharged'
    STATUS_CHOICES = [
        (STATUS_ADMITTED, 'Admitted'),
        (STATUS_DISCHARGED, 'Discharged'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = soft_fk(Patient, 'admissions')
    room_number = models.CharField(max_length=20)
    bed_number = models.CharField(max_length=20)
    admission_date = models.DateField()
    condition = models.CharField(max_length=255)
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES, db_index=True)
    assigned_doctor = soft_fk(Doctor, 'admissions', null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ADMITTED, db_index=True)
    discharge_date = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-admission_date', 'id']
        indexes = [
            models.Index(fields=['patient', 'status'], name='ipd_patient_status_idx'),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number}/{self.bed_number} ({self.status})"


class Vital(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ipd_patient = soft_fk(IPDPatient, 'vitals')
    time = models.DateTimeField()
    heart_rate = models.PositiveIntegerField(validators=[MinValueValidator(20), MaxValueValidator(300)])
    temperature = models.FloatField(validators=[MinValueValidator(25.0), MaxValueValidator(45.0)])
    # "systolic/diastolic", e.g. "120/80"
    blood_pressure = models.CharField(max_length=16)
    oxygen_saturation = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-time', 'id']
        indexes = [
            models.Index(fields=['ipd_patient', 'time'], name='vital_admission_time_idx'),
        ]

    def __str__(self) -> str:
        return f"Vitals {self.time:%F %T} HR={self.heart_rate} BP={self.blood_pressure}"


class MedicineSchedule(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_PENDING = 'Pending'
    STATUS_GIVEN = 'Given'
    STATUS_MISSED = 'Missed'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_PENDING, 'Pending'),
        (STATUS_GIVEN, 'Given'),
        (STATUS_MISSED, 'Missed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ipd_patient = soft_fk(IPDPatient, 'medicine_schedule')
    time = models.DateTimeField()
    medicine = models.CharField(max_length=255)
    dosage = models.CharField(max_length=100)
    frequency = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    nurse = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['time', 'id']
        indexes = [
            models.Index(fields=['ipd_patient', 'time'], name='medsched_admission_time_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.medicine} {self.dosage} ({self.status})"


class IVSchedule(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_RUNNING = 'Running'
    STATUS_COMPLETED = 'Completed'
    STATUS_STOPPED = 'Stopped'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_RUNNING, 'Running'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_STOPPED, 'Stopped'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ipd_patient = soft_fk(IPDPatient, 'iv_schedule')
    time = models.DateTimeField()
    fluid = models.CharField(max_length=255)
    volume = models.CharField(max_length=50)
    rate = models.CharField(max_length=50)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    nurse = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['time', 'id']
        indexes = [
            models.Index(fields=['ipd_patient', 'time'], name='ivsched_admission_time_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.fluid} {self.volume} @ {self.rate} ({self.status})"


class DoctorVisit(models.Model):
    VITALS_STABLE = 'Stable'
    VITALS_IMPROVING = 'Improving'
    VITALS_CRITICAL = 'Critical'
    VITALS_DECLINING = 'Declining'
    VITALS_STATUS_CHOICES = [
        (VITALS_STABLE, 'Stable'),
        (VITALS_IMPROVING, 'Improving'),
        (VITALS_CRITICAL, 'Critical'),
        (VITALS_DECLINING, 'Declining'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ipd_patient = soft_fk(IPDPatient, 'doctor_visits')
    doctor = soft_fk(Doctor, 'visits', null=True)
    time = models.DateTimeField()
    visit_type = models.CharField(max_length=100)
    notes = models.TextField(blank=True, null=True)
    vitals_status = models.CharField(max_length=20, choices=VITALS_STATUS_CHOICES, blank=True, null=True)
    # Free text, deliberately not linked to Prescription rows
    prescription = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-time', 'id']
        indexes = [
            models.Index(fields=['ipd_patient', 'time'], name='visit_admission_time_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.visit_type} @ {self.time:%F %T}"


class Bill(models.Model):
    STATUS_PAID = 'Paid'
    STATUS_PARTIALLY_PAID = 'Partially Paid'
    STATUS_UNPAID = 'Unpaid'
    STATUS_CHOICES = [
        (STATUS_PAID, 'Paid'),
        (STATUS_PARTIALLY_PAID, 'Partially Paid'),
        (STATUS_UNPAID, 'Unpaid'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = soft_fk(Patient, 'bills')
    doctor = soft_fk(Doctor, 'bills', null=True)
    appointment = soft_fk(Appointment, 'bills', null=True)
    date = models.DateField()
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_UNPAID, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', 'id']

    def __str__(self) -> str:
        return f"Bill {self.id} {self.paid_amount}/{self.total_amount} ({self.status})"


class BillItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill = soft_fk(Bill, 'bill_items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    rate = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity} = {self.amount}"


class Payment(models.Model):
    """A single payment recorded against a bill."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill = soft_fk(Bill, 'payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=50)
    transaction_id = models.CharField(max_length=128, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.payment_method} {self.amount} -> {self.bill_id}"
