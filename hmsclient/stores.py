"""
In-memory mirrors of the API collections.

A store holds ``items``, ``loading`` and ``error`` for one entity.
Reads record failures in ``error`` and leave ``items`` untouched;
writes record the failure and raise it so the caller can report it.
Rows are added to ``items`` only after the server has acknowledged the
write.  Once :meth:`Store.dispose` has been called, results that arrive
later are dropped.

The query helpers (``by_date``, ``search`` ...) return fresh lists and
never touch ``items``.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .errors import CONFLICT, ApiError

logger = logging.getLogger(__name__)

Listener = Callable[['Store'], None]


class Store:
    def __init__(self, client):
        self.client = client
        self.items: list[dict] = []
        self.loading = False
        self.error: Optional[ApiError] = None
        self.disposed = False
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # subscription
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def dispose(self) -> None:
        self.disposed = True
        self._listeners.clear()

    # ------------------------------------------------------------------
    # state changes
    # ------------------------------------------------------------------
    def _begin(self) -> None:
        if self.disposed:
            return
        self.loading = True
        self._notify()

    def _fail(self, err: ApiError) -> None:
        logger.debug('%s error: %r', type(self).__name__, err)
        if self.disposed:
            return
        self.error = err
        self.loading = False
        self._notify()

    def _settle(self, mutate: Optional[Callable[[], None]] = None) -> None:
        if self.disposed:
            return
        if mutate:
            mutate()
        self.error = None
        self.loading = False
        self._notify()

    def _index(self, id) -> int:
        for i, row in enumerate(self.items):
            if row.get('id') == id:
                return i
        return -1

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def fetch(self, **filters) -> list[dict]:
        self._begin()
        resp = self.client.list(**filters)
        if resp.error:
            self._fail(resp.error)
            return self.items
        rows = list(resp.data or [])
        self._settle(lambda: self._adopt(rows, filters))
        return rows

    def _adopt(self, rows: list[dict], filters: dict) -> None:
        self.items = rows

    def get(self, id) -> Optional[dict]:
        resp = self.client.get(id)
        if resp.error:
            self._fail(resp.error)
            return None
        if self.error is not None:
            self._settle()
        return resp.data

    def query(self, **filters) -> list[dict]:
        """Filtered list from the server, ``items`` is left alone."""
        resp = self.client.list(**filters)
        if resp.error:
            self._fail(resp.error)
            return []
        return list(resp.data or [])

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def accepts(self, row: dict) -> bool:
        return True

    def create(self, payload: dict) -> dict:
        resp = self.client.create(payload)
        if resp.error:
            self._fail(resp.error)
            raise resp.error
        row = resp.data

        def append():
            if self.accepts(row):
                self.items = self.items + [row]
        self._settle(append)
        return row

    def replace(self, row: dict) -> None:
        def swap():
            i = self._index(row.get('id'))
            if i >= 0:
                items = list(self.items)
                items[i] = row
                self.items = items
        self._settle(swap)

    def update(self, id, patch: dict) -> dict:
        resp = self.client.update(id, patch)
        if resp.error:
            self._fail(resp.error)
            raise resp.error
        self.replace(resp.data)
        return resp.data

    def delete(self, id) -> None:
        resp = self.client.delete(id)
        if resp.error:
            self._fail(resp.error)
            raise resp.error

        def remove():
            self.items = [r for r in self.items if r.get('id') != id]
        self._settle(remove)


class ScopedStore(Store):
    """Store whose rows only make sense under one ward admission."""
    scope_field = 'ipd_patient_id'

    def __init__(self, client):
        super().__init__(client)
        self.scope: Optional[str] = None

    def _require(self, scope_id) -> str:
        if not scope_id:
            raise ValueError(f'{type(self).__name__} needs an {self.scope_field} to fetch')
        return str(scope_id)

    def fetch(self, ipd_patient_id=None, **filters) -> list[dict]:
        return super().fetch(**{self.scope_field: self._require(ipd_patient_id)}, **filters)

    def _adopt(self, rows, filters):
        # the scope moves only together with the rows it describes
        self.scope = filters[self.scope_field]
        self.items = rows

    def for_admission(self, ipd_patient_id, **filters) -> list[dict]:
        return self.query(**{self.scope_field: self._require(ipd_patient_id)}, **filters)

    def accepts(self, row):
        return self.scope is not None and str(row.get(self.scope_field)) == self.scope


class PatientStore(Store):
    def search(self, term: str) -> list[dict]:
        return self.query(search=term)


class DoctorStore(Store):
    def by_specialization(self, specialization: str) -> list[dict]:
        return self.query(specialization=specialization)

    def search(self, term: str) -> list[dict]:
        return self.query(search=term)


class AppointmentStore(Store):
    def by_date(self, day) -> list[dict]:
        return self.query(date=day)

    def by_doctor(self, doctor_id) -> list[dict]:
        return self.query(doctor_id=doctor_id)

    def by_patient(self, patient_id) -> list[dict]:
        return self.query(patient_id=patient_id)

    def by_status(self, status: str) -> list[dict]:
        return self.query(status=status)


class HistoryStore(Store):
    """Medical records and prescriptions: per-patient, dated rows."""

    def by_patient(self, patient_id) -> list[dict]:
        return self.query(patient_id=patient_id)

    def by_doctor(self, doctor_id) -> list[dict]:
        return self.query(doctor_id=doctor_id)

    def date_range(self, start, end, patient_id=None) -> list[dict]:
        return self.query(start_date=start, end_date=end, patient_id=patient_id)

    def search(self, term: str, patient_id=None) -> list[dict]:
        return self.query(search=term, patient_id=patient_id)


class MedicalRecordStore(HistoryStore):
    pass


class PrescriptionStore(HistoryStore):
    pass


class AdmissionStore(Store):
    def active(self) -> list[dict]:
        return self.query(status='Admitted')

    def by_patient(self, patient_id) -> list[dict]:
        return self.query(patient_id=patient_id)

    def by_doctor(self, doctor_id) -> list[dict]:
        return self.query(doctor_id=doctor_id)

    def by_severity(self, severity: str) -> list[dict]:
        return self.query(severity=severity)

    def by_room(self, room_number: str) -> list[dict]:
        return self.query(room_number=room_number)

    def search(self, term: str) -> list[dict]:
        return self.query(search=term)

    def discharge(self, id, discharge_date=None) -> dict:
        resp = self.client.discharge(id, discharge_date)
        if resp.error:
            self._fail(resp.error)
            raise resp.error
        self.replace(resp.data)
        return resp.data


class VitalStore(ScopedStore):
    def latest(self, ipd_patient_id) -> Optional[dict]:
        rows = self.for_admission(ipd_patient_id, latest=True)
        return rows[0] if rows else None

    def last_hours(self, ipd_patient_id, hours: int) -> list[dict]:
        return self.for_admission(ipd_patient_id, hours=hours)

    def date_range(self, ipd_patient_id, start, end) -> list[dict]:
        return self.for_admission(ipd_patient_id, start_date=start, end_date=end)


class NursingStore(ScopedStore):
    """Medicine and IV schedules: also listable per nurse across admissions."""

    def by_nurse(self, nurse: str) -> list[dict]:
        if not nurse:
            raise ValueError('nurse is required')
        return self.query(nurse=nurse)

    def by_status(self, ipd_patient_id, status: str) -> list[dict]:
        return self.for_admission(ipd_patient_id, status=status)

    def by_date(self, ipd_patient_id, day) -> list[dict]:
        return self.for_admission(ipd_patient_id, date=day)


class MedicineScheduleStore(NursingStore):
    def search(self, ipd_patient_id, term: str) -> list[dict]:
        return self.for_admission(ipd_patient_id, search=term)


class IVScheduleStore(NursingStore):
    pass


class DoctorVisitStore(ScopedStore):
    def by_doctor(self, doctor_id) -> list[dict]:
        if not doctor_id:
            raise ValueError('doctor_id is required')
        return self.query(doctor_id=doctor_id)

    def by_date(self, ipd_patient_id, day) -> list[dict]:
        return self.for_admission(ipd_patient_id, date=day)

    def by_vitals_status(self, ipd_patient_id, status: str) -> list[dict]:
        return self.for_admission(ipd_patient_id, vitals_status=status)

    def search(self, ipd_patient_id, term: str) -> list[dict]:
        return self.for_admission(ipd_patient_id, search=term)


class BillStore(Store):
    def by_patient(self, patient_id) -> list[dict]:
        return self.query(patient_id=patient_id)

    def by_status(self, status: str) -> list[dict]:
        return self.query(status=status)

    def record_payment(self, bill_id, amount, payment_method: str, transaction_id: Optional[str] = None) -> dict:
        i = self._index(bill_id)
        if i >= 0 and self.items[i].get('status') == 'Paid':
            err = ApiError(CONFLICT, f'Bill {bill_id} is already paid.')
            self._fail(err)
            raise err
        resp = self.client.record_payment(bill_id, amount, payment_method, transaction_id)
        if resp.error:
            self._fail(resp.error)
            raise resp.error
        self.replace(resp.data)
        return resp.data


class BillItemStore(Store):
    def by_bill(self, bill_id) -> list[dict]:
        return self.query(bill_id=bill_id)


class ProfileStore:
    """The signed-in user's profile."""

    def __init__(self, client):
        self.client = client
        self.profile: Optional[dict] = None
        self.loading = False
        self.error: Optional[ApiError] = None
        self.disposed = False

    @property
    def role(self) -> Optional[str]:
        return (self.profile or {}).get('role')

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

    def dispose(self) -> None:
        self.disposed = True

    def load(self) -> Optional[dict]:
        self.loading = True
        resp = self.client.get()
        if self.disposed:
            return resp.data
        self.loading = False
        if resp.error:
            self.error = resp.error
            return self.profile
        self.profile, self.error = resp.data, None
        return self.profile

    def update(self, patch: dict) -> dict:
        resp = self.client.update(patch)
        if resp.error:
            if not self.disposed:
                self.error = resp.error
            raise resp.error
        if not self.disposed:
            self.profile, self.error = resp.data, None
        return resp.data