"""
One shared store per entity.

Views that ask the registry for ``patients`` all receive the same
:class:`~hmsclient.stores.PatientStore`, so a row created in one place is
visible everywhere without a refetch.
"""
from __future__ import annotations

from . import stores

STORE_TYPES = {
    'patients': ('patients', stores.PatientStore),
    'doctors': ('doctors', stores.DoctorStore),
    'appointments': ('appointments', stores.AppointmentStore),
    'medical_records': ('medical_records', stores.MedicalRecordStore),
    'prescriptions': ('prescriptions', stores.PrescriptionStore),
    'ipd_patients': ('ipd_patients', stores.AdmissionStore),
    'vitals': ('vitals', stores.VitalStore),
    'medicine_schedule': ('medicine_schedule', stores.MedicineScheduleStore),
    'iv_schedule': ('iv_schedule', stores.IVScheduleStore),
    'doctor_visits': ('doctor_visits', stores.DoctorVisitStore),
    'bills': ('bills', stores.BillStore),
    'bill_items': ('bill_items', stores.BillItemStore),
    'profile': ('profile', stores.ProfileStore),
}


class StoreRegistry:
    def __init__(self, api):
        self.api = api
        self._stores: dict = {}

    def get(self, name: str):
        store = self._stores.get(name)
        if store is None:
            try:
                client_attr, store_cls = STORE_TYPES[name]
            except KeyError:
                raise KeyError(f'unknown store {name!r}') from None
            store = store_cls(getattr(self.api, client_attr))
            self._stores[name] = store
        return store

    def __getattr__(self, name: str):
        if name.startswith('_') or name not in STORE_TYPES:
            raise AttributeError(name)
        return self.get(name)

    def reset(self) -> None:
        """Dispose every store, e.g. on sign-out."""
        for store in self._stores.values():
            store.dispose()
        self._stores.clear()
