"""
Management command to populate the database with demo data.

Creates one sign-in account per role, a handful of doctors and patients,
today's appointments, ward admissions with vitals, medication and IV
schedules and doctor visits, and bills in every payment state.  Running
it twice does not duplicate the accounts; clinical rows are only created
when the patient table is empty unless ``--force`` is given.
"""
from __future__ import annotations

import random
from datetime import time, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from records.models import (
    Appointment, Bill, Doctor, DoctorVisit, IPDPatient, IVSchedule, MedicalRecord, MedicineSchedule,
    Patient, Prescription, Profile, User, Vital,
)
from records.services.billing import create_bill, record_payment

ACCOUNTS = [
    ('admin@clinic.test', 'Asha Rao', Profile.ROLE_ADMIN),
    ('doctor@clinic.test', 'Dr. Vikram Shah', Profile.ROLE_DOCTOR),
    ('nurse@clinic.test', 'Meera Iyer', Profile.ROLE_NURSE),
    ('staff@clinic.test', 'Rohan Das', Profile.ROLE_STAFF),
]

DOCTORS = [
    ('Dr. Vikram Shah', 'Cardiology', ['Monday', 'Wednesday', 'Friday']),
    ('Dr. Priya Nair', 'Pediatrics', ['Tuesday', 'Thursday', 'Saturday']),
    ('Dr. Arjun Mehta', 'Orthopedics', ['Monday', 'Tuesday', 'Wednesday', 'Thursday']),
    ('Dr. Sara Khan', 'General Medicine', ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']),
]

PATIENT_NAMES = [
    'Aarav Kumar', 'Diya Patel', 'Kabir Singh', 'Ananya Gupta', 'Ishaan Verma',
    'Saanvi Reddy', 'Vivaan Joshi', 'Myra Pillai', 'Reyansh Bose', 'Kiara Menon',
]

CONDITIONS = ['Pneumonia', 'Fractured femur', 'Dengue fever', 'Post-operative care', 'Hypertension']


class Command(BaseCommand):
    help = 'Populate the database with demo accounts and clinical data'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='Clinic-Demo-2024', help='password for the demo accounts')
        parser.add_argument('--patients', type=int, default=len(PATIENT_NAMES))
        parser.add_argument('--force', action='store_true', help='add clinical rows even if patients exist')
        parser.add_argument('--seed', type=int, default=7)

    def handle(self, *args, **options):
        self.rng = random.Random(options['seed'])
        self.ensure_accounts(options['password'])
        if Patient.objects.exists() and not options['force']:
            self.stdout.write('Patients already present, skipping clinical data (use --force).')
            return
        with transaction.atomic():
            doctors = self.create_doctors()
            patients = self.create_patients(options['patients'])
            self.create_appointments(patients, doctors)
            self.create_history(patients, doctors)
            self.create_admissions(patients[:3], doctors)
            self.create_bills(patients, doctors)
        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def ensure_accounts(self, password):
        for email, full_name, role in ACCOUNTS:
            user, created = User.objects.get_or_create(
                email=email, defaults={'username': email, 'first_name': full_name},
            )
            user.set_password(password)
            user.is_active = True
            user.is_staff = role == Profile.ROLE_ADMIN
            user.save()
            Profile.objects.update_or_create(
                user=user, defaults={'email': email, 'full_name': full_name, 'role': role},
            )
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))

    def create_doctors(self):
        doctors = []
        for name, specialty, days in DOCTORS:
            doctors.append(Doctor.objects.create(
                name=name, specialization=specialty, availability=days,
                experience=self.rng.randint(3, 25),
                email=name.split()[-1].lower() + '@clinic.test',
                contact=f'98{self.rng.randint(10000000, 99999999)}',
            ))
        return doctors

    def create_patients(self, count):
        patients = []
        for i in range(count):
            name = PATIENT_NAMES[i % len(PATIENT_NAMES)]
            patients.append(Patient.objects.create(
                name=name,
                age=self.rng.randint(2, 85),
                gender=self.rng.choice(['Male', 'Female']),
                contact=f'97{self.rng.randint(10000000, 99999999)}',
                email=name.split()[0].lower() + f'{i}@example.com',
                abha_id=f'91-{self.rng.randint(1000, 9999)}-{self.rng.randint(1000, 9999)}-{self.rng.randint(1000, 9999)}',
                address=f'{self.rng.randint(1, 200)} MG Road, Bengaluru',
            ))
        return patients

    def create_appointments(self, patients, doctors):
        today = timezone.localdate()
        for i, patient in enumerate(patients):
            Appointment.objects.create(
                patient=patient,
                doctor=doctors[i % len(doctors)],
                date=today + timedelta(days=i % 3),
                time=time(9 + i % 8, 30 if i % 2 else 0),
                type=self.rng.choice(['Consultation', 'Follow-up', 'Check-up']),
                status=Appointment.STATUS_SCHEDULED,
            )

    def create_history(self, patients, doctors):
        today = timezone.localdate()
        for patient in patients[:5]:
            doctor = self.rng.choice(doctors)
            MedicalRecord.objects.create(
                patient=patient, doctor=doctor, date=today - timedelta(days=self.rng.randint(5, 90)),
                condition=self.rng.choice(CONDITIONS), notes='Reviewed at outpatient clinic.',
            )
            Prescription.objects.create(
                patient=patient, doctor=doctor, date=today - timedelta(days=self.rng.randint(1, 30)),
                medication='Paracetamol 500mg', dosage='1 tablet twice daily',
            )

    def create_admissions(self, patients, doctors):
        now = timezone.now()
        severities = [IPDPatient.SEVERITY_CRITICAL, IPDPatient.SEVERITY_STABLE, IPDPatient.SEVERITY_RECOVERING]
        for i, patient in enumerate(patients):
            adm = IPDPatient.objects.create(
                patient=patient, room_number=f'{101 + i}', bed_number=f'B{i + 1}',
                admission_date=timezone.localdate() - timedelta(days=i + 1),
                condition=CONDITIONS[i % len(CONDITIONS)], severity=severities[i % 3],
                assigned_doctor=doctors[i % len(doctors)],
            )
            for h in range(0, 24, 6):
                Vital.objects.create(
                    ipd_patient=adm, time=now - timedelta(hours=h),
                    heart_rate=self.rng.randint(60, 110), temperature=round(self.rng.uniform(36.4, 38.9), 1),
                    blood_pressure=f'{self.rng.randint(105, 145)}/{self.rng.randint(65, 95)}',
                    oxygen_saturation=self.rng.randint(92, 100),
                )
            MedicineSchedule.objects.create(
                ipd_patient=adm, time=now + timedelta(hours=2), medicine='Ceftriaxone', dosage='1 g',
                frequency='Every 12 hours', nurse='Meera Iyer',
            )
            IVSchedule.objects.create(
                ipd_patient=adm, time=now + timedelta(hours=1), fluid='Normal saline', volume='500 ml',
                rate='100 ml/hr', nurse='Meera Iyer',
            )
            DoctorVisit.objects.create(
                ipd_patient=adm, doctor=adm.assigned_doctor, time=now - timedelta(hours=3),
                visit_type='Morning round', vitals_status=DoctorVisit.VITALS_STABLE,
                notes='Responding to treatment.',
            )

    def create_bills(self, patients, doctors):
        payments = [Decimal('0'), Decimal('500'), Decimal('1200')]
        for i, patient in enumerate(patients[:3]):
            bill = create_bill({
                'patient': patient,
                'doctor': doctors[i % len(doctors)],
                'bill_items': [
                    {'description': 'Consultation', 'quantity': 1, 'rate': Decimal('500'), 'amount': Decimal('500')},
                    {'description': 'Lab tests', 'quantity': 2, 'rate': Decimal('350'), 'amount': Decimal('700')},
                ],
            })
            if payments[i]:
                record_payment(bill.pk, amount=payments[i], payment_method='Cash')
        self.stdout.write(f"{Bill.objects.count()} bills")
