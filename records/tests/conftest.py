from datetime import date, timedelta
from decimal import Decimal
from urllib.parse import urlsplit

import pytest
import requests
from django.core.cache import cache
from django.test import Client
from django.utils import timezone
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from records.models import Bill, Doctor, IPDPatient, Patient, User

PASSWORD = 'Str0ng-Passw0rd!'


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttling and the dashboard both live in the cache
    cache.clear()
    yield
    cache.clear()


def make_user(email='doctor@clinic.test', password=PASSWORD, full_name='Vikram Shah'):
    return User.objects.create_user(username=email, email=email, password=password, first_name=full_name)


def bearer(user) -> str:
    return f'Bearer {RefreshToken.for_user(user).access_token}'


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def user(db):
    return make_user()


@pytest.fixture
def api(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=bearer(user))
    return client


@pytest.fixture
def anon(db):
    return APIClient()


@pytest.fixture
def patient(db):
    return Patient.objects.create(name='Aarav Kumar', age=42, gender='Male', contact='9876543210')


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(name='Dr. Priya Nair', specialization='Cardiology', availability=['Monday'])


@pytest.fixture
def admission(patient, doctor):
    return IPDPatient.objects.create(
        patient=patient, room_number='101', bed_number='B1', admission_date=date.today() - timedelta(days=1),
        condition='Pneumonia', severity=IPDPatient.SEVERITY_CRITICAL, assigned_doctor=doctor,
    )


@pytest.fixture
def bill(patient):
    return Bill.objects.create(
        patient=patient, date=timezone.localdate(),
        subtotal=Decimal('1000'), discount=Decimal('0'), total_amount=Decimal('1000'),
    )


class DjangoTestAdapter(BaseAdapter):
    """Route ``requests`` calls into the Django test client."""

    def __init__(self):
        super().__init__()
        self.client = Client()
        self.calls = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        url = urlsplit(request.url)
        path = url.path + (f'?{url.query}' if url.query else '')
        extra = {}
        auth = request.headers.get('Authorization')
        if auth:
            extra['HTTP_AUTHORIZATION'] = auth
        body = request.body or b''
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.calls.append({'method': request.method, 'path': url.path, 'query': url.query, 'authorization': auth})
        dj = self.client.generic(
            request.method, path, data=body,
            content_type=request.headers.get('Content-Type') or 'application/json', **extra,
        )
        resp = requests.Response()
        resp.status_code = dj.status_code
        resp._content = dj.content
        resp.headers = CaseInsensitiveDict(dict(dj.headers.items()))
        resp.encoding = 'utf-8'
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass


@pytest.fixture
def transport(db):
    return DjangoTestAdapter()


@pytest.fixture
def http(transport):
    s = requests.Session()
    s.mount('http://testserver', transport)
    return s
