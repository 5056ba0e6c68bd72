"""
Client-side projections of a fetched collection.

Search, filters and sorting operate on the rows a store already holds;
nothing here talks to the server.  Formatting helpers render amounts,
dates and status badges the way the list views show them.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

ALL = 'all'
ASC = 'asc'
DESC = 'desc'
CURRENCY = '₹'


def _text(v) -> str:
    return '' if v is None else str(v).casefold()


def search(rows: Iterable[dict], term: Optional[str], fields: Sequence[str]) -> list[dict]:
    """Rows where any of ``fields`` contains ``term``, ignoring case."""
    rows = list(rows)
    needle = _text(term).strip()
    if not needle:
        return rows
    return [r for r in rows if any(needle in _text(r.get(f)) for f in fields)]


def filter_by(rows: Iterable[dict], field: str, value) -> list[dict]:
    """Rows whose ``field`` equals ``value``; ``None`` or ``'all'`` keeps everything."""
    rows = list(rows)
    if value is None or value == ALL:
        return rows
    return [r for r in rows if r.get(field) == value]


def filter_date(rows: Iterable[dict], field: str, day) -> list[dict]:
    """Rows whose date or timestamp ``field`` falls on ``day``."""
    rows = list(rows)
    if day is None or day == ALL:
        return rows
    wanted = day.isoformat() if isinstance(day, date) else str(day)
    return [r for r in rows if str(r.get(field) or '')[:10] == wanted]


def sort_rows(rows: Iterable[dict], key: str, order: str = ASC) -> list[dict]:
    """Case-insensitive stable sort.  Missing values sort last."""
    rows = list(rows)
    present = [r for r in rows if r.get(key) is not None]
    absent = [r for r in rows if r.get(key) is None]
    present.sort(key=lambda r: _text(r.get(key)), reverse=(order == DESC))
    return present + absent


@dataclass
class SortState:
    key: str = 'name'
    order: str = ASC

    def toggle(self, key: str) -> 'SortState':
        """Same key flips the order, a new key starts ascending."""
        if key == self.key:
            self.order = DESC if self.order == ASC else ASC
        else:
            self.key, self.order = key, ASC
        return self

    def apply(self, rows: Iterable[dict]) -> list[dict]:
        return sort_rows(list(rows), self.key, self.order)


def format_currency(amount) -> str:
    if amount is None or amount == '':
        amount = 0
    value = Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f'{sign}{CURRENCY}{abs(value):,.2f}'


def format_date(value, fmt: str = '%d %b %Y') -> str:
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return value
    return value.strftime(fmt)


STATUS_TONES = {
    # appointments
    'Scheduled': 'info',
    'Upcoming': 'info',
    'In Progress': 'warning',
    'Completed': 'success',
    'Cancelled': 'danger',
    # medicine / IV
    'Given': 'success',
    'Pending': 'warning',
    'Missed': 'danger',
    'Running': 'warning',
    'Stopped': 'neutral',
    # admissions
    'Critical': 'danger',
    'Stable': 'success',
    'Recovering': 'info',
    'Improving': 'success',
    'Declining': 'danger',
    'Admitted': 'info',
    'Discharged': 'neutral',
    # bills
    'Paid': 'success',
    'Partially Paid': 'warning',
    'Unpaid': 'danger',
}


def status_tone(status: Optional[str]) -> str:
    return STATUS_TONES.get(status or '', 'neutral')
