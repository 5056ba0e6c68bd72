"""Status workflows, ward admissions and the admission-scoped listings."""
from datetime import timedelta

import pytest
from django.utils import timezone

from records.models import (
    Appointment, DoctorVisit, IPDPatient, IVSchedule, MedicineSchedule, Patient, Vital,
)
from records.services import transitions

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('table,current,new,allowed', [
    (transitions.APPOINTMENT, 'Scheduled', 'In Progress', True),
    (transitions.APPOINTMENT, 'Upcoming', 'Scheduled', True),
    (transitions.APPOINTMENT, 'In Progress', 'Completed', True),
    (transitions.APPOINTMENT, 'Scheduled', 'Completed', False),
    (transitions.APPOINTMENT, 'Cancelled', 'Scheduled', False),
    (transitions.APPOINTMENT, 'Completed', 'Completed', True),
    (transitions.MEDICINE, 'Pending', 'Given', True),
    (transitions.MEDICINE, 'Given', 'Pending', False),
    (transitions.MEDICINE, 'Missed', 'Given', False),
    (transitions.IV, 'Stopped', 'Running', True),
    (transitions.IV, 'Completed', 'Running', False),
    (transitions.IV, 'Scheduled', 'Completed', False),
])
def test_transition_tables(table, current, new, allowed):
    assert transitions.can_transition(table, current, new) is allowed


def test_illegal_appointment_transition_is_conflict(api, patient, doctor):
    appt = Appointment.objects.create(patient=patient, doctor=doctor, date='2024-05-01', time='09:00', type='Check-up')
    r = api.patch(f'/api/appointments/{appt.pk}', {'status': 'Completed'}, format='json')
    assert r.status_code == 409
    err = r.json()['error']
    assert err['code'] == 'conflict'
    assert 'Scheduled' in err['message'] and 'Completed' in err['message']
    appt.refresh_from_db()
    assert appt.status == 'Scheduled'


def test_appointment_walks_through_its_lifecycle(api, patient, doctor):
    appt = Appointment.objects.create(patient=patient, doctor=doctor, date='2024-05-01', time='09:00', type='Check-up')
    for status in ['Upcoming', 'In Progress', 'Completed']:
        r = api.patch(f'/api/appointments/{appt.pk}', {'status': status}, format='json')
        assert r.status_code == 200, r.json()
    assert api.patch(f'/api/appointments/{appt.pk}', {'status': 'Cancelled'}, format='json').status_code == 409


def test_any_status_is_accepted_at_creation(api, admission):
    r = api.post('/api/iv-schedule', {
        'ipd_patient_id': str(admission.pk), 'time': '2024-05-01T10:00:00Z', 'fluid': 'Ringer lactate',
        'volume': '1 l', 'rate': '125 ml/hr', 'status': 'Completed',
    }, format='json')
    assert r.status_code == 201
    assert r.json()['status'] == 'Completed'


def test_medicine_terminal_status_cannot_be_reopened(api, admission):
    dose = MedicineSchedule.objects.create(
        ipd_patient=admission, time=timezone.now(), medicine='Insulin', dosage='4 U', frequency='Before meals',
        status=MedicineSchedule.STATUS_MISSED,
    )
    r = api.patch(f'/api/medicine-schedule/{dose.pk}', {'status': 'Given'}, format='json')
    assert r.status_code == 409
    # other fields can still be edited
    r = api.patch(f'/api/medicine-schedule/{dose.pk}', {'notes': 'Patient was in surgery'}, format='json')
    assert r.status_code == 200


def test_admission_is_created_admitted_and_status_is_read_only(api, doctor):
    p = Patient.objects.create(name='Ishaan Verma', age=12, gender='Male')
    r = api.post('/api/ipd-patients', {
        'patient_id': str(p.pk), 'room_number': '305', 'bed_number': 'A', 'admission_date': '2024-05-03',
        'condition': 'Appendicitis', 'severity': 'Stable', 'status': 'Discharged',
    }, format='json')
    assert r.status_code == 201
    assert r.json()['status'] == 'Admitted'
    assert r.json()['discharge_date'] is None


def test_second_open_admission_for_a_patient_is_conflict(api, admission):
    r = api.post('/api/ipd-patients', {
        'patient_id': str(admission.patient_id), 'room_number': '102', 'bed_number': 'B2',
        'admission_date': '2024-05-03', 'condition': 'Relapse', 'severity': 'Critical',
    }, format='json')
    assert r.status_code == 409
    assert r.json()['error']['code'] == 'conflict'
    assert IPDPatient.objects.filter(patient_id=admission.patient_id).count() == 1


def test_discharge_closes_admission_once(api, admission):
    r = api.post(f'/api/ipd-patients/{admission.pk}/discharge', {}, format='json')
    assert r.status_code == 200
    assert r.json()['status'] == 'Discharged'
    assert r.json()['discharge_date']

    again = api.post(f'/api/ipd-patients/{admission.pk}/discharge', {}, format='json')
    assert again.status_code == 409

    # the patient may be admitted again once discharged
    r = api.post('/api/ipd-patients', {
        'patient_id': str(admission.patient_id), 'room_number': '110', 'bed_number': 'C1',
        'admission_date': '2024-06-01', 'condition': 'Follow-up surgery', 'severity': 'Recovering',
    }, format='json')
    assert r.status_code == 201


def test_discharge_accepts_explicit_date_and_unknown_id_is_not_found(api, admission):
    r = api.post(f'/api/ipd-patients/{admission.pk}/discharge', {'discharge_date': '2024-05-10T12:00:00Z'}, format='json')
    assert r.json()['discharge_date'] == '2024-05-10T12:00:00Z'
    missing = api.post('/api/ipd-patients/00000000-0000-0000-0000-000000000000/discharge', {}, format='json')
    assert missing.status_code == 404


def test_admissions_filter_by_status(api, admission, doctor):
    other = Patient.objects.create(name='Saanvi Reddy', age=66, gender='Female')
    IPDPatient.objects.create(
        patient=other, room_number='9', bed_number='1', admission_date='2024-01-01', condition='Fracture',
        severity='Recovering', status=IPDPatient.STATUS_DISCHARGED,
    )
    active = api.get('/api/ipd-patients', {'status': 'Admitted'}).json()
    assert [a['id'] for a in active] == [str(admission.pk)]
    by_doctor = api.get('/api/ipd-patients', {'doctorId': str(doctor.pk)}).json()
    assert [a['id'] for a in by_doctor] == [str(admission.pk)]


@pytest.mark.parametrize('name', ['vitals', 'medicine-schedule', 'iv-schedule', 'doctor-visits'])
def test_scoped_listing_requires_its_scope(api, name):
    r = api.get(f'/api/{name}')
    assert r.status_code == 400
    assert r.json()['error']['code'] == 'validation'


def test_vitals_listing_returns_only_the_requested_admission(api, admission):
    other_patient = Patient.objects.create(name='Vivaan Joshi', age=33, gender='Male')
    other = IPDPatient.objects.create(
        patient=other_patient, room_number='7', bed_number='2', admission_date='2024-05-01',
        condition='Asthma', severity='Stable',
    )
    now = timezone.now()
    for adm, hr in [(admission, 80), (other, 90), (admission, 85), (other, 95)]:
        Vital.objects.create(ipd_patient=adm, time=now, heart_rate=hr, temperature=37, blood_pressure='120/80',
                             oxygen_saturation=98)

    rows = api.get('/api/vitals', {'ipdPatientId': str(admission.pk)}).json()
    assert len(rows) == 2
    assert {r['ipd_patient_id'] for r in rows} == {str(admission.pk)}


def test_vitals_latest_and_last_hours(api, admission):
    now = timezone.now()
    for hours_ago, hr in [(30, 70), (5, 75), (1, 78)]:
        Vital.objects.create(ipd_patient=admission, time=now - timedelta(hours=hours_ago), heart_rate=hr,
                             temperature=36.8, blood_pressure='118/76', oxygen_saturation=99)
    scope = {'ipdPatientId': str(admission.pk)}

    rows = api.get('/api/vitals', scope).json()
    assert [r['heart_rate'] for r in rows] == [78, 75, 70]

    latest = api.get('/api/vitals', {**scope, 'latest': 'true'}).json()
    assert [r['heart_rate'] for r in latest] == [78]

    recent = api.get('/api/vitals', {**scope, 'hours': 24}).json()
    assert [r['heart_rate'] for r in recent] == [78, 75]


def test_nursing_schedules_can_be_listed_per_nurse(api, admission):
    now = timezone.now()
    MedicineSchedule.objects.create(ipd_patient=admission, time=now + timedelta(hours=2), medicine='B',
                                    dosage='1', frequency='OD', nurse='Meera Iyer')
    MedicineSchedule.objects.create(ipd_patient=admission, time=now + timedelta(hours=1), medicine='A',
                                    dosage='1', frequency='OD', nurse='meera iyer')
    MedicineSchedule.objects.create(ipd_patient=admission, time=now, medicine='C', dosage='1', frequency='OD',
                                    nurse='Anita Das')
    rows = api.get('/api/medicine-schedule', {'nurse': 'Meera Iyer'}).json()
    assert [r['medicine'] for r in rows] == ['A', 'B']

    IVSchedule.objects.create(ipd_patient=admission, time=now, fluid='D5W', volume='500 ml', rate='50 ml/hr',
                              nurse='Anita Das')
    assert len(api.get('/api/iv-schedule', {'nurse': 'Anita Das'}).json()) == 1


def test_doctor_visits_by_doctor_and_vitals_status(api, admission, doctor):
    now = timezone.now()
    DoctorVisit.objects.create(ipd_patient=admission, doctor=doctor, time=now - timedelta(hours=2),
                               visit_type='Round', vitals_status='Stable')
    DoctorVisit.objects.create(ipd_patient=admission, doctor=None, time=now, visit_type='Emergency',
                               vitals_status='Critical')
    by_doctor = api.get('/api/doctor-visits', {'doctorId': str(doctor.pk)}).json()
    assert [v['visit_type'] for v in by_doctor] == ['Round']

    critical = api.get('/api/doctor-visits', {'ipdPatientId': str(admission.pk), 'vitalsStatus': 'Critical'}).json()
    assert [v['visit_type'] for v in critical] == ['Emergency']
    assert critical[0]['doctor_id'] is None


@pytest.mark.parametrize('value,status', [('', 400), ('Unknown', 400), (None, 201), ('Improving', 201)])
def test_vitals_status_is_one_of_the_known_values_or_null(api, admission, value, status):
    r = api.post('/api/doctor-visits', {
        'ipd_patient_id': str(admission.pk), 'time': '2024-05-01T07:30:00Z',
        'visit_type': 'Morning round', 'vitals_status': value,
    }, format='json')
    assert r.status_code == status
    if status == 201:
        assert r.json()['vitals_status'] == value
