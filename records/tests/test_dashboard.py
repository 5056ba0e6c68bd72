from datetime import time, timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from records.models import Appointment, Bill, Doctor, IPDPatient, Patient, Profile, User

pytestmark = pytest.mark.django_db


def test_dashboard_counts(api, admission, doctor):
    today = timezone.localdate()
    for h in range(8, 14):
        Appointment.objects.create(patient=admission.patient, doctor=doctor, date=today, time=time(h, 0), type='OPD')
    Appointment.objects.create(patient=admission.patient, doctor=doctor, date=today + timedelta(days=1),
                               time=time(9, 0), type='OPD')

    r = api.get('/api/dashboard')
    assert r.status_code == 200
    stats = r.json()
    assert stats['total_patients'] == 1
    assert stats['todays_appointments'] == 6
    assert stats['ipd_patients'] == 1
    assert stats['critical_patients'] == 1
    assert stats['doctors'] == 1
    assert [a['time'] for a in stats['recent_appointments']] == ['10:00', '11:00', '12:00', '13:00']
    assert stats['recent_appointments'][0]['patient_name'] == 'Aarav Kumar'


def test_dashboard_is_cached_until_refresh(api, patient):
    assert api.get('/api/dashboard').json()['total_patients'] == 1
    Patient.objects.create(name='Diya Patel', age=30, gender='Female')
    assert api.get('/api/dashboard').json()['total_patients'] == 1
    assert api.get('/api/dashboard', {'refresh': '1'}).json()['total_patients'] == 2


def test_discharged_admissions_are_not_counted(api, admission):
    admission.status = IPDPatient.STATUS_DISCHARGED
    admission.save()
    assert api.get('/api/dashboard').json()['ipd_patients'] == 0


def test_healthz_reports_database_and_cache(anon):
    r = anon.get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True, 'cache': True}


def test_seed_demo_data_is_idempotent_for_accounts():
    out = StringIO()
    call_command('seed_demo_data', '--password', 'Demo-Passw0rd-1', stdout=out)
    assert Profile.objects.filter(role='nurse').count() == 1
    assert Doctor.objects.count() == 4
    assert IPDPatient.objects.filter(status='Admitted').count() == 3
    assert set(Bill.objects.values_list('status', flat=True)) == {'Unpaid', 'Partially Paid', 'Paid'}

    call_command('seed_demo_data', stdout=out)
    assert User.objects.filter(email='admin@clinic.test').count() == 1
    assert Doctor.objects.count() == 4
    assert 'skipping clinical data' in out.getvalue()


def test_refresh_caches_command(patient):
    out = StringIO()
    call_command('refresh_caches', stdout=out)
    assert '1 patients' in out.getvalue()
