"""
HTTP access to the clinic API.

Every call returns an :class:`ApiResponse` holding either ``data`` or an
:class:`~hmsclient.errors.ApiError`; transport failures are converted
too, so nothing raises past this module.  A 401 answer drops the stored
credentials, tells the :meth:`ApiClient.on_unauthorized` listeners and
sends the navigator to the sign-in view.
"""
from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Optional

import requests

from .errors import UNKNOWN, ApiError
from .storage import ACCESS_KEY, REFRESH_KEY, FileTokenStorage, MemoryTokenStorage, TokenStorage

logger = logging.getLogger(__name__)

LOGIN_PATH = '/login'
PUBLIC_PATHS = ('/login', '/register')
DEFAULT_TIMEOUT = 10


@dataclass
class ApiResponse:
    data: Any = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Navigator:
    """Where the user currently is.  ``on_redirect`` is called with the new path."""

    def __init__(self, current: str = '/', on_redirect: Optional[Callable[[str], None]] = None):
        self.current = current
        self.on_redirect = on_redirect

    def redirect(self, path: str) -> None:
        logger.info('redirecting %s -> %s', self.current, path)
        self.current = path
        if self.on_redirect:
            self.on_redirect(path)


def camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(p[:1].upper() + p[1:] for p in rest)


def jsonable(value):
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    return value


def query_params(filters: dict) -> dict:
    params = {}
    for k, v in filters.items():
        if v is None or v == '':
            continue
        if isinstance(v, bool):
            v = 'true' if v else 'false'
        params[camel(k)] = jsonable(v)
    return params


class ApiClient:
    def __init__(
        self,
        base_url: str,
        storage: Optional[TokenStorage] = None,
        session: Optional[requests.Session] = None,
        navigator: Optional[Navigator] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip('/')
        self.storage = storage if storage is not None else MemoryTokenStorage()
        self.http = session or requests.Session()
        self.navigator = navigator or Navigator()
        self.timeout = timeout
        self._unauthorized_listeners: list[Callable[[], None]] = []

        self.patients = ResourceClient(self, 'patients')
        self.doctors = ResourceClient(self, 'doctors')
        self.appointments = ResourceClient(self, 'appointments')
        self.medical_records = ResourceClient(self, 'medical-records')
        self.prescriptions = ResourceClient(self, 'prescriptions')
        self.ipd_patients = AdmissionsClient(self, 'ipd-patients')
        self.vitals = ResourceClient(self, 'vitals')
        self.medicine_schedule = ResourceClient(self, 'medicine-schedule')
        self.iv_schedule = ResourceClient(self, 'iv-schedule')
        self.doctor_visits = ResourceClient(self, 'doctor-visits')
        self.bills = BillsClient(self, 'bills')
        self.bill_items = ResourceClient(self, 'bill-items')
        self.auth = AuthClient(self)
        self.profile = ProfileClient(self)
        self.dashboard = DashboardClient(self)

    @classmethod
    def from_env(cls, **kwargs) -> 'ApiClient':
        """Build a client from ``HMS_API_URL`` and ``HMS_CREDENTIALS_FILE``."""
        base_url = os.getenv('HMS_API_URL', 'http://127.0.0.1:8000')
        creds = os.getenv('HMS_CREDENTIALS_FILE', '~/.config/hmsclient/credentials.json')
        kwargs.setdefault('storage', FileTokenStorage(creds))
        return cls(base_url, **kwargs)

    # ------------------------------------------------------------------
    @property
    def access_token(self) -> Optional[str]:
        return self.storage.get(ACCESS_KEY)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.storage.get(REFRESH_KEY)

    def set_credentials(self, access: str, refresh: Optional[str] = None) -> None:
        self.storage.set(ACCESS_KEY, access)
        if refresh is not None:
            self.storage.set(REFRESH_KEY, refresh)

    def clear_credentials(self) -> None:
        self.storage.clear()

    def on_unauthorized(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` whenever the server rejects the credential."""
        self._unauthorized_listeners.append(listener)

        def unsubscribe():
            if listener in self._unauthorized_listeners:
                self._unauthorized_listeners.remove(listener)
        return unsubscribe

    def _handle_unauthorized(self) -> None:
        self.clear_credentials()
        for listener in list(self._unauthorized_listeners):
            listener()
        if self.navigator.current not in PUBLIC_PATHS:
            self.navigator.redirect(LOGIN_PATH)

    def request(self, method: str, path: str, *, params=None, json=None) -> ApiResponse:
        headers = {'Accept': 'application/json'}
        token = self.access_token
        if token:
            headers['Authorization'] = f'Bearer {token}'
        url = f'{self.base_url}/api/{path.lstrip("/")}'
        try:
            resp = self.http.request(
                method, url, params=params, json=jsonable(json) if json is not None else None,
                headers=headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning('%s %s failed: %s', method, url, e)
            return ApiResponse(error=ApiError(UNKNOWN, f'Network error: {e}'))

        if resp.status_code == 204 or not resp.content:
            body = None
        else:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text

        if resp.status_code >= 400:
            err = ApiError.from_body(resp.status_code, body)
            logger.info('%s %s -> %s %s: %s', method, url, resp.status_code, err.kind, err.message)
            if resp.status_code == 401:
                self._handle_unauthorized()
            return ApiResponse(error=err)
        return ApiResponse(data=body)


class ResourceClient:
    """CRUD calls for one collection endpoint."""

    def __init__(self, api: ApiClient, path: str):
        self.api = api
        self.path = path

    def list(self, **filters) -> ApiResponse:
        return self.api.request('GET', self.path, params=query_params(filters))

    def get(self, id) -> ApiResponse:
        return self.api.request('GET', f'{self.path}/{id}')

    def create(self, payload: dict) -> ApiResponse:
        return self.api.request('POST', self.path, json=payload)

    def update(self, id, patch: dict) -> ApiResponse:
        return self.api.request('PATCH', f'{self.path}/{id}', json=patch)

    def delete(self, id) -> ApiResponse:
        resp = self.api.request('DELETE', f'{self.path}/{id}')
        if resp.ok:
            resp.data = True
        return resp


class BillsClient(ResourceClient):
    def record_payment(self, bill_id, amount, payment_method: str, transaction_id: Optional[str] = None) -> ApiResponse:
        payload = {'amount': amount, 'payment_method': payment_method}
        if transaction_id:
            payload['transaction_id'] = transaction_id
        return self.api.request('POST', f'{self.path}/{bill_id}/payments', json=payload)


class AdmissionsClient(ResourceClient):
    def discharge(self, admission_id, discharge_date=None) -> ApiResponse:
        payload = {'discharge_date': discharge_date} if discharge_date else {}
        return self.api.request('POST', f'{self.path}/{admission_id}/discharge', json=payload)


class AuthClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def login(self, email: str, password: str) -> ApiResponse:
        resp = self.api.request('POST', 'auth/login', json={'email': email, 'password': password})
        if resp.ok:
            self.api.set_credentials(resp.data['access_token'], resp.data.get('refresh_token'))
        return resp

    def register(self, email: str, password: str, full_name: str, **extra) -> ApiResponse:
        payload = {'email': email, 'password': password, 'full_name': full_name}
        payload.update({k: v for k, v in extra.items() if v is not None})
        return self.api.request('POST', 'auth/register', json=payload)

    def logout(self) -> ApiResponse:
        if not self.api.access_token:
            return ApiResponse(data={'ok': True, 'blacklisted': 0})
        return self.api.request('POST', 'auth/logout', json={})

    def me(self) -> ApiResponse:
        return self.api.request('GET', 'auth/me')

    def check(self) -> ApiResponse:
        return self.api.request('GET', 'auth/check')

    def refresh(self) -> ApiResponse:
        token = self.api.refresh_token
        if not token:
            return ApiResponse(error=ApiError('unauthorized', 'No refresh token stored.'))
        resp = self.api.request('POST', 'auth/refresh', json={'refresh_token': token})
        if resp.ok:
            self.api.set_credentials(resp.data['access_token'])
        return resp


class ProfileClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def get(self) -> ApiResponse:
        return self.api.request('GET', 'profile')

    def update(self, patch: dict) -> ApiResponse:
        return self.api.request('PATCH', 'profile', json=patch)


class DashboardClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def get(self, refresh: bool = False) -> ApiResponse:
        return self.api.request('GET', 'dashboard', params={'refresh': '1'} if refresh else None)
