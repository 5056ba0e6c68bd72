"""
Bills and payments.

``paid_amount`` moves only through :func:`record_payment`, which locks
the bill row for the duration of the read-modify-write so concurrent
payments are applied one after another.  ``status`` is always derived
from ``paid_amount`` and ``total_amount``.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from ..exceptions import Conflict
from ..models import Bill, BillItem, Payment

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def derive_status(paid: Decimal, total: Decimal) -> str:
    if paid > 0 and paid >= total:
        return Bill.STATUS_PAID
    if paid > 0:
        return Bill.STATUS_PARTIALLY_PAID
    return Bill.STATUS_UNPAID


def _check_totals(subtotal, discount, total, paid) -> None:
    if discount > subtotal:
        raise ValidationError({'discount': 'Discount may not exceed the subtotal.'})
    if total < paid:
        raise ValidationError({'total_amount': f'Total may not be less than the amount already paid ({paid}).'})


@transaction.atomic
def create_bill(vd: dict) -> Bill:
    items = vd.pop('bill_items', [])
    subtotal = vd.pop('subtotal', None)
    if subtotal is None:
        subtotal = sum((i['amount'] for i in items), ZERO)
    discount = vd.pop('discount', ZERO)
    total = vd.pop('total_amount', None)
    if total is None:
        total = subtotal - discount
    _check_totals(subtotal, discount, total, ZERO)
    bill = Bill.objects.create(
        date=vd.pop('date', None) or timezone.localdate(),
        subtotal=subtotal,
        discount=discount,
        total_amount=total,
        paid_amount=ZERO,
        status=Bill.STATUS_UNPAID,
        **vd,
    )
    for item in items:
        BillItem.objects.create(bill=bill, **item)
    return bill


def update_bill(bill: Bill, vd: dict) -> Bill:
    """Apply a partial update to a bill that the caller has locked."""
    if ('subtotal' in vd or 'discount' in vd) and 'total_amount' not in vd:
        vd['total_amount'] = vd.get('subtotal', bill.subtotal) - vd.get('discount', bill.discount)
    for k, v in vd.items():
        setattr(bill, k, v)
    _check_totals(bill.subtotal, bill.discount, bill.total_amount, bill.paid_amount)
    bill.status = derive_status(bill.paid_amount, bill.total_amount)
    bill.save()
    return bill


def record_payment(bill_id, *, amount: Decimal, payment_method: str, transaction_id=None) -> Bill:
    with transaction.atomic():
        bill = Bill.objects.select_for_update().filter(pk=bill_id).first()
        if bill is None:
            raise NotFound(f'bill "{bill_id}" not found')
        if bill.status == Bill.STATUS_PAID:
            raise Conflict(f'Bill {bill.pk} is already paid.')
        outstanding = bill.total_amount - bill.paid_amount
        if amount <= 0:
            raise ValidationError({'amount': 'Payment amount must be positive.'})
        if amount > outstanding:
            raise ValidationError({'amount': f'Payment exceeds the outstanding balance of {outstanding}.'})
        Payment.objects.create(
            bill=bill, amount=amount, payment_method=payment_method, transaction_id=transaction_id or None,
        )
        bill.paid_amount += amount
        bill.status = derive_status(bill.paid_amount, bill.total_amount)
        bill.save(update_fields=['paid_amount', 'status'])
    logger.info('payment %s on bill %s, status %s', amount, bill.pk, bill.status)
    return bill
