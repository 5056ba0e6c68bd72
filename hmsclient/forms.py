"""
Form state and validation for the create/edit dialogs.

A form validates required fields locally and only calls its action when
every field is valid.  While a submission is in flight further submits
are ignored, so a double click cannot create two rows.  Outcomes are
reported through ``notifier(level, message)``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from .errors import ApiError

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


class FieldError(ValueError):
    pass


def _blank(v) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def to_int(v):
    try:
        return int(str(v).strip())
    except ValueError:
        raise FieldError('must be a whole number')


def to_float(v):
    try:
        return float(str(v).strip())
    except ValueError:
        raise FieldError('must be a number')


def to_decimal(v):
    try:
        return Decimal(str(v).strip())
    except InvalidOperation:
        raise FieldError('must be an amount')


def to_date(v):
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip())
    except ValueError:
        raise FieldError('must be a date (YYYY-MM-DD)')


def to_time(v):
    if isinstance(v, time):
        return v
    try:
        return time.fromisoformat(str(v).strip())
    except ValueError:
        raise FieldError('must be a time (HH:MM)')


def to_datetime(v):
    if isinstance(v, datetime):
        return v
    try:
        return datetime.fromisoformat(str(v).strip())
    except ValueError:
        raise FieldError('must be a date and time')


def to_text(v):
    return str(v).strip()


def to_list(v):
    if isinstance(v, str):
        return [p.strip() for p in v.split(',') if p.strip()]
    return list(v)


@dataclass
class Field:
    required: bool = False
    message: Optional[str] = None
    coerce: Callable[[Any], Any] = to_text
    check: Optional[Callable[[Any], Optional[str]]] = None


def between(lo, hi):
    def check(v):
        if v < lo or v > hi:
            return f'must be between {lo} and {hi}'
        return None
    return check


def positive(v):
    return None if v > 0 else 'must be greater than zero'


class Form:
    fields: dict[str, Field] = {}
    success_message = 'Saved successfully'
    failure_message = 'Could not save'

    def __init__(self, initial: Optional[dict] = None, notifier: Optional[Notifier] = None):
        self.values: dict[str, Any] = {name: None for name in self.fields}
        self.values.update(initial or {})
        self.errors: dict[str, str] = {}
        self.submitting = False
        self.notifier = notifier or (lambda level, message: None)

    def set(self, name: str, value) -> None:
        if name not in self.fields:
            raise KeyError(name)
        self.values[name] = value
        self.errors.pop(name, None)

    def clean(self) -> dict:
        data, errors = {}, {}
        for name, f in self.fields.items():
            value = self.values.get(name)
            if _blank(value):
                if f.required:
                    errors[name] = f.message or f'{name.replace("_", " ").capitalize()} is required'
                continue
            try:
                value = f.coerce(value)
            except FieldError as e:
                errors[name] = f'{name.replace("_", " ").capitalize()} {e}'
                continue
            problem = f.check(value) if f.check else None
            if problem:
                errors[name] = f'{name.replace("_", " ").capitalize()} {problem}'
                continue
            data[name] = value
        self.errors = errors
        return data

    def validate(self) -> bool:
        self.clean()
        return not self.errors

    def payload(self) -> dict:
        return self.clean()

    def submit(self, action: Callable[[dict], Any]):
        """Validate and pass the cleaned payload to ``action``.

        Returns the action's result, or ``None`` when validation failed,
        a submission was already running or the action raised
        :class:`ApiError`.
        """
        if self.submitting:
            return None
        data = self.clean()
        if self.errors:
            return None
        self.submitting = True
        try:
            result = action(data)
        except ApiError as e:
            logger.info('%s submit failed: %s', type(self).__name__, e)
            if e.kind == 'validation' and isinstance(e.details, dict):
                for name, msgs in e.details.items():
                    if name in self.fields:
                        self.errors[name] = msgs[0] if isinstance(msgs, list) and msgs else str(msgs)
            self.notifier('error', f'{self.failure_message}: {e.message}')
            return None
        finally:
            self.submitting = False
        self.notifier('success', self.success_message)
        return result


class PatientForm(Form):
    fields = {
        'name': Field(True, 'Name is required'),
        'age': Field(True, 'Age is required', to_int, between(0, 150)),
        'gender': Field(True, 'Gender is required'),
        'contact': Field(),
        'email': Field(),
        'abha_id': Field(),
        'address': Field(),
        'photo_url': Field(),
    }
    success_message = 'Patient saved successfully'


class DoctorForm(Form):
    fields = {
        'name': Field(True, 'Name is required'),
        'specialization': Field(True, 'Specialization is required'),
        'contact': Field(),
        'email': Field(),
        'experience': Field(False, None, to_int, between(0, 80)),
        'availability': Field(False, None, to_list),
    }
    success_message = 'Doctor saved successfully'


class AppointmentForm(Form):
    fields = {
        'patient_id': Field(True, 'Please select a patient'),
        'doctor_id': Field(True, 'Please select a doctor'),
        'date': Field(True, 'Date is required', to_date),
        'time': Field(True, 'Time is required', to_time),
        'type': Field(True, 'Appointment type is required'),
        'status': Field(),
    }
    success_message = 'Appointment booked successfully'

    def clean(self) -> dict:
        data = super().clean()
        if not self.errors:
            data.setdefault('status', 'Scheduled')
        return data


class AdmissionForm(Form):
    fields = {
        'patient_id': Field(True, 'Please select a patient'),
        'room_number': Field(True, 'Room number is required'),
        'bed_number': Field(True, 'Bed number is required'),
        'admission_date': Field(True, 'Admission date is required', to_date),
        'condition': Field(True, 'Condition is required'),
        'severity': Field(True, 'Severity is required'),
        'assigned_doctor_id': Field(),
    }
    success_message = 'Patient admitted successfully'


class VitalForm(Form):
    fields = {
        'ipd_patient_id': Field(True, 'Admission is required'),
        'time': Field(True, 'Time is required', to_datetime),
        'heart_rate': Field(True, 'Heart rate is required', to_int, between(20, 300)),
        'temperature': Field(True, 'Temperature is required', to_float, between(25, 45)),
        'blood_pressure': Field(True, 'Blood pressure is required'),
        'oxygen_saturation': Field(True, 'Oxygen saturation is required', to_int, between(0, 100)),
        'notes': Field(),
    }
    success_message = 'Vitals recorded successfully'


class MedicineScheduleForm(Form):
    fields = {
        'ipd_patient_id': Field(True, 'Admission is required'),
        'time': Field(True, 'Time is required', to_datetime),
        'medicine': Field(True, 'Medicine is required'),
        'dosage': Field(True, 'Dosage is required'),
        'frequency': Field(True, 'Frequency is required'),
        'status': Field(),
        'nurse': Field(),
        'notes': Field(),
    }
    success_message = 'Medicine scheduled successfully'


class IVScheduleForm(Form):
    fields = {
        'ipd_patient_id': Field(True, 'Admission is required'),
        'time': Field(True, 'Time is required', to_datetime),
        'fluid': Field(True, 'Fluid is required'),
        'volume': Field(True, 'Volume is required'),
        'rate': Field(True, 'Rate is required'),
        'status': Field(),
        'nurse': Field(),
        'notes': Field(),
    }
    success_message = 'IV scheduled successfully'


class DoctorVisitForm(Form):
    fields = {
        'ipd_patient_id': Field(True, 'Admission is required'),
        'doctor_id': Field(),
        'time': Field(True, 'Time is required', to_datetime),
        'visit_type': Field(True, 'Visit type is required'),
        'notes': Field(),
        'vitals_status': Field(),
        'prescription': Field(),
    }
    success_message = 'Visit recorded successfully'


class MedicalRecordForm(Form):
    fields = {
        'patient_id': Field(True, 'Please select a patient'),
        'doctor_id': Field(),
        'date': Field(True, 'Date is required', to_date),
        'condition': Field(True, 'Condition is required'),
        'notes': Field(),
    }
    success_message = 'Medical record saved successfully'


class PrescriptionForm(Form):
    fields = {
        'patient_id': Field(True, 'Please select a patient'),
        'doctor_id': Field(),
        'date': Field(True, 'Date is required', to_date),
        'medication': Field(True, 'Medication is required'),
        'dosage': Field(True, 'Dosage is required'),
    }
    success_message = 'Prescription saved successfully'


class PaymentForm(Form):
    fields = {
        'amount': Field(True, 'Amount is required', to_decimal, positive),
        'payment_method': Field(True, 'Payment method is required'),
        'transaction_id': Field(),
    }
    success_message = 'Payment recorded successfully'
