"""Allowed status changes for rows that move through a workflow."""
from __future__ import annotations

from ..exceptions import Conflict
from ..models import Appointment, IVSchedule, MedicineSchedule

APPOINTMENT = {
    Appointment.STATUS_SCHEDULED: {Appointment.STATUS_UPCOMING, Appointment.STATUS_IN_PROGRESS, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_UPCOMING: {Appointment.STATUS_SCHEDULED, Appointment.STATUS_IN_PROGRESS, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_IN_PROGRESS: {Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_COMPLETED: set(),
    Appointment.STATUS_CANCELLED: set(),
}

MEDICINE = {
    MedicineSchedule.STATUS_SCHEDULED: {MedicineSchedule.STATUS_PENDING, MedicineSchedule.STATUS_GIVEN, MedicineSchedule.STATUS_MISSED},
    MedicineSchedule.STATUS_PENDING: {MedicineSchedule.STATUS_GIVEN, MedicineSchedule.STATUS_MISSED},
    MedicineSchedule.STATUS_GIVEN: set(),
    MedicineSchedule.STATUS_MISSED: set(),
}

IV = {
    IVSchedule.STATUS_SCHEDULED: {IVSchedule.STATUS_RUNNING, IVSchedule.STATUS_STOPPED},
    IVSchedule.STATUS_RUNNING: {IVSchedule.STATUS_COMPLETED, IVSchedule.STATUS_STOPPED},
    IVSchedule.STATUS_STOPPED: {IVSchedule.STATUS_RUNNING},
    IVSchedule.STATUS_COMPLETED: set(),
}


def can_transition(table: dict, current: str, new: str) -> bool:
    """Return True if ``current`` may move to ``new``.  Re-setting the same value is allowed."""
    return new == current or new in table.get(current, set())


def check_transition(table: dict, current: str, new: str) -> None:
    if not can_transition(table, current, new):
        raise Conflict(f'Cannot change status from "{current}" to "{new}".')
