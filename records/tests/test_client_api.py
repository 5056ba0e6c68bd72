import json
from datetime import date

import pytest
import requests
from requests.adapters import BaseAdapter
from rest_framework_simplejwt.tokens import RefreshToken

from hmsclient import ApiClient
from hmsclient.api import Navigator, camel, query_params
from hmsclient.errors import ApiError, kind_for_status
from hmsclient.storage import ACCESS_KEY, REFRESH_KEY, FileTokenStorage, MemoryTokenStorage
from records.models import Appointment


pytestmark = pytest.mark.django_db


class RefusingAdapter(BaseAdapter):
    def send(self, request, **kwargs):
        raise requests.ConnectionError('connection refused')

    def close(self):
        pass


@pytest.fixture
def client(http, user):
    storage = MemoryTokenStorage({ACCESS_KEY: str(RefreshToken.for_user(user).access_token)})
    return ApiClient('http://testserver', storage=storage, session=http, navigator=Navigator('/patients'))


def test_camel_case_query_params():
    assert camel('ipd_patient_id') == 'ipdPatientId'
    assert query_params({'patient_id': 'x', 'status': None, 'search': '', 'latest': True}) == {
        'patientId': 'x', 'latest': 'true',
    }


@pytest.mark.parametrize('status,kind', [
    (400, 'validation'), (401, 'unauthorized'), (403, 'unauthorized'),
    (404, 'not_found'), (409, 'conflict'), (500, 'unknown'), (None, 'unknown'),
])
def test_kind_for_status(status, kind):
    assert kind_for_status(status) == kind


def test_error_body_is_flattened():
    err = ApiError.from_body(400, {'ok': False, 'error': {'code': 'validation', 'message': {'age': ['Too old.']}}})
    assert err.kind == 'validation'
    assert err.message == 'age: Too old.'
    assert err.details == {'age': ['Too old.']}


def test_crud_round_trip(client, transport):
    created = client.patients.create({'name': 'Kabir Singh', 'age': 30, 'gender': 'Male'})
    assert created.ok, created.error
    pid = created.data['id']

    listed = client.patients.list(search='kabir')
    assert [p['id'] for p in listed.data] == [pid]

    patched = client.patients.update(pid, {'contact': '9000000000'})
    assert patched.data['contact'] == '9000000000'

    assert client.patients.delete(pid).data is True
    gone = client.patients.get(pid)
    assert gone.data is None
    assert gone.error.kind == 'not_found'
    assert all(c['authorization'].startswith('Bearer ') for c in transport.calls)


def test_filters_are_sent_camel_cased(client, transport, patient, doctor):
    Appointment.objects.create(patient=patient, doctor=doctor, date=date(2024, 5, 1), time='10:00', type='OPD')
    r = client.appointments.list(patient_id=patient.id, date=date(2024, 5, 1))
    assert len(r.data) == 1
    assert transport.calls[-1]['query'] == f'patientId={patient.id}&date=2024-05-01'


def test_validation_error_keeps_field_details(client):
    r = client.patients.create({'age': 30, 'gender': 'Male'})
    assert r.error.kind == 'validation'
    assert r.error.status == 400
    assert 'name' in r.error.details


def test_conflict_on_paying_a_settled_bill(client, bill):
    first = client.bills.record_payment(bill.id, 1000, 'Cash')
    assert first.data['status'] == 'Paid'
    again = client.bills.record_payment(bill.id, 1, 'Cash')
    assert again.error.kind == 'conflict'


def test_discharge_through_client(client, admission):
    r = client.ipd_patients.discharge(admission.id)
    assert r.data['status'] == 'Discharged'
    assert r.data['discharge_date']


def test_unauthorized_clears_credentials_and_redirects(http, transport, db):
    redirects = []
    storage = MemoryTokenStorage({ACCESS_KEY: 'stale', REFRESH_KEY: 'stale-refresh'})
    client = ApiClient('http://testserver', storage=storage, session=http,
                       navigator=Navigator('/patients', on_redirect=redirects.append))

    r = client.patients.list()
    assert r.error.kind == 'unauthorized'
    assert client.access_token is None
    assert client.refresh_token is None
    assert redirects == ['/login']

    client.patients.list()
    assert transport.calls[-1]['authorization'] is None


@pytest.mark.parametrize('where', ['/login', '/register'])
def test_no_redirect_from_public_views(http, db, where):
    redirects = []
    client = ApiClient('http://testserver', storage=MemoryTokenStorage({ACCESS_KEY: 'stale'}), session=http,
                       navigator=Navigator(where, on_redirect=redirects.append))
    assert client.dashboard.get().error.kind == 'unauthorized'
    assert redirects == []
    assert client.navigator.current == where


def test_network_failure_is_unknown():
    s = requests.Session()
    s.mount('http://', RefusingAdapter())
    client = ApiClient('http://nowhere.invalid', session=s)
    r = client.patients.list()
    assert r.data is None
    assert r.error.kind == 'unknown'
    assert 'connection refused' in r.error.message


def test_login_stores_tokens_and_logout(http, user, password, tmp_path):
    path = tmp_path / 'creds.json'
    client = ApiClient('http://testserver', storage=FileTokenStorage(path), session=http)
    r = client.auth.login('Doctor@Clinic.test', password)
    assert r.ok, r.error
    assert client.access_token == r.data['access_token']
    assert json.loads(path.read_text())[REFRESH_KEY] == r.data['refresh_token']

    # a new client picks the stored credentials up
    again = ApiClient('http://testserver', storage=FileTokenStorage(path), session=http)
    assert again.auth.me().data['email'] == 'doctor@clinic.test'

    assert again.auth.refresh().ok
    assert again.auth.logout().data['blacklisted'] == 1


def test_logout_without_token_makes_no_call(http, transport, db):
    client = ApiClient('http://testserver', session=http)
    assert client.auth.logout().ok
    assert transport.calls == []


def test_refresh_without_token():
    client = ApiClient('http://testserver')
    assert client.auth.refresh().error.kind == 'unauthorized'


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv('HMS_API_URL', 'https://clinic.example/')
    monkeypatch.setenv('HMS_CREDENTIALS_FILE', str(tmp_path / 'c.json'))
    client = ApiClient.from_env()
    assert client.base_url == 'https://clinic.example'
    assert isinstance(client.storage, FileTokenStorage)
    assert client.storage.path == tmp_path / 'c.json'
