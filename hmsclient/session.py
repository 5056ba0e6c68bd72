"""
Signed-in user and credential lifecycle.

:meth:`Session.initialize` restores a stored credential by asking the
server who it belongs to.  While signed in, a daemon timer renews the
access token every :data:`REFRESH_INTERVAL` seconds; a failed renewal
signs the user out.  Roles only decide what the client shows.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .errors import ApiError

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = 20 * 60


@dataclass
class AuthResult:
    success: bool
    error: Optional[ApiError] = None


@dataclass
class Identity:
    id: str
    email: str
    role: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    doctor_id: Optional[str] = None

    @classmethod
    def from_profile(cls, data: dict) -> 'Identity':
        return cls(
            id=str(data['id']),
            email=data.get('email') or '',
            role=data.get('role') or 'doctor',
            full_name=data.get('full_name'),
            phone=data.get('phone'),
            department=data.get('department'),
            doctor_id=data.get('doctor_id'),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def is_doctor(self) -> bool:
        return self.role == 'doctor'

    @property
    def is_nurse(self) -> bool:
        return self.role == 'nurse'

    @property
    def is_staff(self) -> bool:
        return self.role == 'staff'

    def allowed(self, *roles: str) -> bool:
        return not roles or self.role in roles


class Session:
    """Signed-in state.  A 401 from any call signs the session out.

    When a :class:`~hmsclient.registry.StoreRegistry` is given its stores
    are disposed on sign-out so no cached rows outlive the credential.
    """

    def __init__(self, api, refresh_interval: float = REFRESH_INTERVAL, registry=None):
        self.api = api
        self.registry = registry
        self.user: Optional[Identity] = None
        self.loading = False
        self.refresh_interval = refresh_interval
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        api.on_unauthorized(self._signed_out)

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    def allowed(self, *roles: str) -> bool:
        return self.user is not None and self.user.allowed(*roles)

    def initialize(self) -> Optional[Identity]:
        """Restore the user behind a stored credential, if any."""
        if not self.api.access_token:
            return None
        self.loading = True
        try:
            resp = self.api.auth.me()
        finally:
            self.loading = False
        if resp.error:
            logger.info('stored credential rejected: %s', resp.error.message)
            self.api.clear_credentials()
            self.user = None
            return None
        self.user = Identity.from_profile(resp.data)
        self.start_refresh_timer()
        return self.user

    def login(self, email: str, password: str) -> AuthResult:
        resp = self.api.auth.login(email, password)
        if resp.error:
            return AuthResult(False, resp.error)
        self.user = Identity.from_profile(resp.data['user'])
        logger.info('signed in as %s (%s)', self.user.email, self.user.role)
        self.start_refresh_timer()
        return AuthResult(True)

    def register(self, email: str, password: str, full_name: str, role: str = 'doctor', **extra) -> AuthResult:
        resp = self.api.auth.register(email, password, full_name, role=role, **extra)
        if resp.error:
            return AuthResult(False, resp.error)
        return AuthResult(True)

    def logout(self) -> None:
        """Sign out.  Local state is cleared even if the server call fails."""
        self.stop_refresh_timer()
        resp = self.api.auth.logout()
        if resp.error:
            logger.info('server logout failed: %s', resp.error.message)
        self.api.clear_credentials()
        self._signed_out()

    def _signed_out(self) -> None:
        self.stop_refresh_timer()
        if self.user is not None:
            logger.info('signed out %s', self.user.email)
        self.user = None
        if self.registry is not None:
            self.registry.reset()

    def refresh_auth(self) -> bool:
        resp = self.api.auth.refresh()
        if resp.error:
            logger.warning('token refresh failed, signing out: %s', resp.error.message)
            self.logout()
            return False
        return True

    # ------------------------------------------------------------------
    # refresh timer
    # ------------------------------------------------------------------
    def _tick(self) -> None:
        with self._lock:
            self._timer = None
        if self.user is None:
            return
        if self.refresh_auth():
            self.start_refresh_timer()

    def start_refresh_timer(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.refresh_interval, self._tick)
            self._timer.daemon = True
            self._timer.start()

    def stop_refresh_timer(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def refresh_scheduled(self) -> bool:
        return self._timer is not None
