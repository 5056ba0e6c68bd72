from datetime import date
from decimal import Decimal

import pytest

from hmsclient.errors import ApiError
from hmsclient.forms import AdmissionForm, AppointmentForm, PaymentForm, PatientForm
from hmsclient.listing import (
    SortState, filter_by, filter_date, format_currency, format_date, search, sort_rows, status_tone,
)

ADMISSION = {
    'patient_id': 'p1',
    'room_number': '101',
    'bed_number': 'B1',
    'admission_date': '2024-05-01',
    'condition': 'Pneumonia',
    'severity': 'Critical',
}


@pytest.mark.parametrize('missing,message', [
    ('patient_id', 'Please select a patient'),
    ('room_number', 'Room number is required'),
    ('bed_number', 'Bed number is required'),
    ('admission_date', 'Admission date is required'),
    ('condition', 'Condition is required'),
    ('severity', 'Severity is required'),
])
def test_admission_form_requires_fields(missing, message):
    calls = []
    form = AdmissionForm({**ADMISSION, missing: ''})
    assert form.submit(calls.append) is None
    assert form.errors == {missing: message}
    assert calls == []


def test_admission_form_submits_cleaned_payload():
    notes = []
    form = AdmissionForm(ADMISSION, notifier=lambda level, msg: notes.append((level, msg)))
    result = form.submit(lambda data: data)
    assert result['admission_date'] == date(2024, 5, 1)
    assert 'assigned_doctor_id' not in result
    assert notes == [('success', 'Patient admitted successfully')]


def test_setting_a_field_clears_its_error():
    form = PatientForm({'gender': 'Female'})
    assert not form.validate()
    assert set(form.errors) == {'name', 'age'}
    form.set('name', 'Diya')
    assert set(form.errors) == {'age'}


def test_coercion_errors():
    form = PatientForm({'name': 'Diya', 'age': 'old', 'gender': 'Female'})
    assert not form.validate()
    assert form.errors['age'] == 'Age must be a whole number'
    form.set('age', '200')
    assert not form.validate()
    assert form.errors['age'] == 'Age must be between 0 and 150'


def test_submit_is_ignored_while_running():
    form = PaymentForm({'amount': '100', 'payment_method': 'Cash'})
    calls = []

    def action(data):
        calls.append(data)
        # a second click while the first request is in flight
        assert form.submit(action) is None
        return 'ok'

    assert form.submit(action) == 'ok'
    assert len(calls) == 1
    assert calls[0]['amount'] == Decimal('100')
    assert form.submitting is False


def test_server_errors_are_reported():
    notes = []
    form = PatientForm({'name': 'Diya', 'age': 30, 'gender': 'Female'},
                       notifier=lambda level, msg: notes.append((level, msg)))

    def action(data):
        raise ApiError('validation', 'email: Enter a valid email address.',
                       details={'email': ['Enter a valid email address.']})

    assert form.submit(action) is None
    assert form.errors == {'email': 'Enter a valid email address.'}
    assert notes == [('error', 'Could not save: email: Enter a valid email address.')]


def test_appointment_status_defaults_to_scheduled():
    form = AppointmentForm({'patient_id': 'p', 'doctor_id': 'd', 'date': '2024-05-01', 'time': '10:30',
                            'type': 'Consultation'})
    assert form.payload()['status'] == 'Scheduled'


def test_payment_must_be_positive():
    form = PaymentForm({'amount': '0', 'payment_method': 'Cash'})
    assert not form.validate()
    assert form.errors['amount'] == 'Amount must be greater than zero'


ROWS = [
    {'id': '2', 'name': 'bob', 'status': 'Paid', 'date': '2024-05-01'},
    {'id': '1', 'name': 'Alice', 'status': 'Unpaid', 'date': '2024-05-02T09:00:00Z'},
    {'id': '3', 'name': None, 'status': 'Paid', 'date': None},
]


def test_sort_by_name_and_id():
    assert [r['id'] for r in sort_rows(ROWS, 'name')] == ['1', '2', '3']
    assert [r['id'] for r in sort_rows(ROWS, 'id', 'desc')] == ['3', '2', '1']
    assert [r['id'] for r in sort_rows(ROWS, 'name', 'desc')] == ['2', '1', '3']


def test_sort_state_toggle():
    state = SortState()
    assert state.toggle('name').order == 'desc'
    assert state.toggle('name').order == 'asc'
    state.toggle('date')
    assert (state.key, state.order) == ('date', 'asc')


def test_search_and_filters():
    assert [r['id'] for r in search(ROWS, 'ALI', ['name'])] == ['1']
    assert len(search(ROWS, '  ', ['name'])) == 3
    assert [r['id'] for r in filter_by(ROWS, 'status', 'Paid')] == ['2', '3']
    assert len(filter_by(ROWS, 'status', 'all')) == 3
    assert [r['id'] for r in filter_date(ROWS, 'date', date(2024, 5, 2))] == ['1']


def test_formatting():
    assert format_currency(1234) == '₹1,234.00'
    assert format_currency('99.995') == '₹100.00'
    assert format_currency(None) == '₹0.00'
    assert format_date('2024-05-02') == '02 May 2024'
    assert format_date(None) == ''
    assert status_tone('Partially Paid') == 'warning'
    assert status_tone('Whatever') == 'neutral'
