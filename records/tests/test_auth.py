import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from records.models import Doctor, Profile, User

pytestmark = pytest.mark.django_db


def login(client, email, password):
    return client.post('/api/auth/login', {'email': email, 'password': password}, format='json')


def test_login_returns_tokens_and_profile(anon, user, password):
    r = login(anon, 'Doctor@Clinic.test', password)
    assert r.status_code == 200, r.json()
    body = r.json()
    assert body['access_token'] and body['refresh_token']
    assert isinstance(body['expires_at'], int)
    assert body['user']['id'] == str(user.pk)
    assert body['user']['email'] == 'doctor@clinic.test'
    assert body['user']['role'] == 'doctor'

    anon.credentials(HTTP_AUTHORIZATION=f'Bearer {body["access_token"]}')
    assert anon.get('/api/auth/me').json()['id'] == str(user.pk)


@pytest.mark.parametrize('email,pw', [
    ('doctor@clinic.test', 'wrong-password'),
    ('nobody@clinic.test', 'Str0ng-Passw0rd!'),
])
def test_bad_credentials_are_rejected(anon, user, email, pw):
    r = login(anon, email, pw)
    assert r.status_code == 400
    assert r.json()['error'] == {'code': 'validation', 'message': 'Invalid email or password.'}


def test_login_ignores_stale_bearer_token(anon, user, password):
    anon.credentials(HTTP_AUTHORIZATION='Bearer expired.or.garbage')
    assert login(anon, user.email, password).status_code == 200


def test_register_creates_account_and_profile(anon):
    r = anon.post('/api/auth/register', {
        'email': 'Nurse@Clinic.test', 'password': 'Ward-Seven-2024', 'full_name': 'Meera Iyer',
        'role': 'nurse', 'department': 'Ward 7',
    }, format='json')
    assert r.status_code == 201, r.json()
    assert r.json()['message']
    assert r.json()['user']['role'] == 'nurse'
    assert r.json()['user']['email'] == 'nurse@clinic.test'

    assert login(anon, 'nurse@clinic.test', 'Ward-Seven-2024').status_code == 200
    assert Profile.objects.get(email='nurse@clinic.test').department == 'Ward 7'


def test_register_rejects_duplicate_email_and_weak_password(anon, user):
    dup = anon.post('/api/auth/register', {
        'email': user.email, 'password': 'Another-Passw0rd', 'full_name': 'Someone',
    }, format='json')
    assert dup.status_code == 400
    assert 'email' in dup.json()['error']['message']

    weak = anon.post('/api/auth/register', {
        'email': 'new@clinic.test', 'password': '123', 'full_name': 'New Person',
    }, format='json')
    assert weak.status_code == 400
    assert not User.objects.filter(email='new@clinic.test').exists()


def test_me_creates_profile_with_default_role(api, user):
    assert not Profile.objects.filter(user=user).exists()
    r = api.get('/api/auth/me')
    assert r.status_code == 200
    assert r.json()['role'] == 'doctor'
    assert r.json()['full_name'] == 'Vikram Shah'
    assert Profile.objects.filter(user=user).count() == 1


def test_profile_patch_cannot_change_role(api, user, doctor):
    r = api.patch('/api/profile', {
        'full_name': 'Dr. Vikram Shah', 'phone': '9811111111', 'department': 'Cardiology',
        'doctor_id': str(doctor.pk), 'role': 'admin',
    }, format='json')
    assert r.status_code == 200, r.json()
    body = r.json()
    assert body['role'] == 'doctor'
    assert body['doctor_id'] == str(doctor.pk)
    assert body['department'] == 'Cardiology'
    assert api.get('/api/profile').json()['full_name'] == 'Dr. Vikram Shah'


def test_check_reports_authentication(anon, api):
    assert anon.get('/api/auth/check').json() == {'authenticated': False}
    assert api.get('/api/auth/check').json() == {'authenticated': True}


def test_refresh_issues_new_access_token(anon, user, password):
    tokens = login(anon, user.email, password).json()
    r = anon.post('/api/auth/refresh', {'refresh_token': tokens['refresh_token']}, format='json')
    assert r.status_code == 200
    assert r.json()['access_token']
    assert r.json()['expires_at'] >= tokens['expires_at']

    bad = anon.post('/api/auth/refresh', {'refresh_token': 'garbage'}, format='json')
    assert bad.status_code == 401
    assert bad.json()['error']['code'] == 'unauthorized'


def test_logout_revokes_refresh_tokens(user, password):
    client = APIClient()
    tokens = login(client, user.email, password).json()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {tokens["access_token"]}')

    r = client.post('/api/auth/logout', {}, format='json')
    assert r.status_code == 200
    assert r.json()['blacklisted'] >= 1
    assert BlacklistedToken.objects.filter(token__user=user).exists()

    client.credentials()
    again = client.post('/api/auth/refresh', {'refresh_token': tokens['refresh_token']}, format='json')
    assert again.status_code == 401


def test_logout_requires_authentication(anon):
    assert anon.post('/api/auth/logout', {}, format='json').status_code == 401


def test_doctor_link_must_exist(api):
    r = api.patch('/api/profile', {'doctor_id': '6f1d0000-0000-4000-8000-000000000000'}, format='json')
    assert r.status_code == 400
    assert not Doctor.objects.exists()
