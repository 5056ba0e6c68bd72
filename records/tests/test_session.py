import pytest

from hmsclient import ApiClient, ApiResponse, Identity, Session, StoreRegistry
from hmsclient.api import Navigator
from hmsclient.errors import ApiError
from hmsclient.storage import ACCESS_KEY, MemoryTokenStorage

pytestmark = pytest.mark.django_db


@pytest.fixture
def client(http):
    return ApiClient('http://testserver', session=http, navigator=Navigator('/login'))


@pytest.fixture
def session(client):
    s = Session(client, refresh_interval=3600)
    yield s
    s.stop_refresh_timer()


def test_login_sets_user_and_schedules_refresh(session, user, password):
    result = session.login('doctor@clinic.test', password)
    assert result.success
    assert session.authenticated
    assert session.user.email == 'doctor@clinic.test'
    assert session.user.role == 'doctor'
    assert session.refresh_scheduled


def test_failed_login(session, user):
    result = session.login('doctor@clinic.test', 'wrong-password')
    assert not result.success
    assert result.error.kind == 'validation'
    assert not session.authenticated
    assert not session.refresh_scheduled


def test_initialize_restores_stored_credential(client, user, password):
    assert client.auth.login('doctor@clinic.test', password).ok
    fresh = Session(client, refresh_interval=3600)
    try:
        ident = fresh.initialize()
        assert ident.email == 'doctor@clinic.test'
        assert fresh.refresh_scheduled
    finally:
        fresh.stop_refresh_timer()


def test_initialize_with_rejected_credential(http, db):
    client = ApiClient('http://testserver', storage=MemoryTokenStorage({ACCESS_KEY: 'stale'}), session=http)
    s = Session(client)
    assert s.initialize() is None
    assert client.access_token is None
    assert not s.refresh_scheduled


def test_initialize_without_credential_makes_no_call(session, transport):
    assert session.initialize() is None
    assert transport.calls == []


def test_logout_clears_everything(session, user, password):
    session.login('doctor@clinic.test', password)
    session.logout()
    assert session.user is None
    assert session.api.access_token is None
    assert session.api.refresh_token is None
    assert not session.refresh_scheduled


def test_register(session, db):
    result = session.register('nurse@clinic.test', 'An0ther-Str0ng-One', 'Meera Iyer', role='nurse')
    assert result.success
    assert not session.authenticated
    assert session.login('nurse@clinic.test', 'An0ther-Str0ng-One').success
    assert session.user.is_nurse


def test_timer_tick_refreshes_token(session, transport, user, password):
    session.login('doctor@clinic.test', password)
    session._tick()
    assert session.authenticated
    assert session.refresh_scheduled
    assert transport.calls[-1]['path'] == '/api/auth/refresh'


class FailingAuth:
    def __init__(self):
        self.logged_out = False

    def refresh(self):
        return ApiResponse(error=ApiError('unauthorized', 'Token is invalid or expired'))

    def logout(self):
        self.logged_out = True
        return ApiResponse(data={'ok': True})


class FakeApi:
    access_token = 'token'

    def __init__(self):
        self.auth = FailingAuth()
        self.cleared = False

    def clear_credentials(self):
        self.cleared = True

    def on_unauthorized(self, listener):
        self.listener = listener


def test_failed_refresh_signs_out():
    api = FakeApi()
    s = Session(api, refresh_interval=3600)
    s.user = Identity(id='u1', email='a@clinic.test', role='admin')
    s._tick()
    assert s.user is None
    assert api.cleared
    assert api.auth.logged_out
    assert not s.refresh_scheduled


def test_identity_roles():
    ident = Identity.from_profile({'id': 'u1', 'email': 'x@clinic.test', 'role': 'staff'})
    assert ident.is_staff
    assert ident.allowed('admin', 'staff')
    assert not ident.allowed('doctor')
    assert ident.allowed()


def test_rejected_credential_signs_the_session_out(client, user, password):
    registry = StoreRegistry(client)
    s = Session(client, refresh_interval=3600, registry=registry)
    try:
        assert s.login('doctor@clinic.test', password).success
        patients = registry.patients
        patients.fetch()

        client.set_credentials('expired')
        r = client.patients.list()

        assert r.error.kind == 'unauthorized'
        assert client.access_token is None
        assert not s.authenticated
        assert not s.refresh_scheduled
        assert patients.disposed
        assert registry.patients is not patients
    finally:
        s.stop_refresh_timer()
