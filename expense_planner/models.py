"""Expense record types and the small parsing helpers they rely on."""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional

DEFAULT_PAYMENT_METHOD = 'cash'
DEFAULT_FREQUENCY = 'once'
DEFAULT_STATUS = 'completed'

_DATE_FORMATS = ('%Y-%m-%d', '%m/%d/%Y', '%Y/%m/%d', '%b %d, %Y', '%B %d, %Y')

# Persisted (camelCase) key -> dataclass attribute
_FIELD_ALIASES = {
    'paymentMethod': 'payment_method',
    'isRecurring': 'is_recurring',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}
_ATTRIBUTE_KEYS = {attr: key for key, attr in _FIELD_ALIASES.items()}


def generate_expense_id() -> str:
    """Return an opaque id such as ``exp_1718000000000_3f9a0c1d2``."""
    return f"exp_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date, ignoring any time-of-day component.

    Accepts ``date``/``datetime`` objects, ISO strings (with or without a
    time part) and a few common display formats. Returns None when the
    value can't be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert a numeric-like value to float, returning ``default`` on failure."""
    if isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result):
        return default
    return result


def to_bool(value: Any) -> bool:
    """Read a stored flag; strings such as 'false', '0' and '' count as False."""
    if isinstance(value, str):
        return value.strip().lower() not in {'', 'false', '0', 'no', 'off'}
    return bool(value)


def attribute_name(key: str) -> str:
    """Dataclass attribute for a persisted key, e.g. paymentMethod -> payment_method."""
    return _FIELD_ALIASES.get(key, key)


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map persisted camelCase keys onto dataclass attribute names."""
    return {attribute_name(key): value for key, value in data.items()}


@dataclass
class ExpenseRecord:
    """A single spending transaction."""
    id: str
    amount: float
    merchant: str
    category: str = 'other'
    date: str = field(default_factory=today_iso)  # YYYY-MM-DD
    notes: str = ''
    payment_method: str = DEFAULT_PAYMENT_METHOD
    is_recurring: bool = False
    frequency: str = DEFAULT_FREQUENCY
    status: str = DEFAULT_STATUS
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    @property
    def parsed_date(self) -> Optional[date]:
        return parse_date(self.date)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the persisted camelCase keys."""
        return {
            _ATTRIBUTE_KEYS.get(f.name, f.name): getattr(self, f.name)
            for f in fields(self)
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ExpenseRecord':
        """Build a record from a stored or imported document.

        Missing fields take their defaults, a missing id is generated and an
        unparseable amount becomes 0.0. Unknown keys are ignored.
        """
        values = normalize_keys(data)
        return cls(
            id=str(values.get('id') or generate_expense_id()),
            amount=to_float(values.get('amount')),
            merchant=str(values.get('merchant') or ''),
            category=str(values.get('category') or 'other'),
            date=str(values.get('date') or today_iso()),
            notes=str(values.get('notes') or ''),
            payment_method=str(values.get('payment_method') or DEFAULT_PAYMENT_METHOD),
            is_recurring=to_bool(values.get('is_recurring', False)),
            frequency=str(values.get('frequency') or DEFAULT_FREQUENCY),
            status=str(values.get('status') or DEFAULT_STATUS),
            created_at=str(values.get('created_at') or utc_now_iso()),
            updated_at=str(values.get('updated_at') or utc_now_iso()),
        )


@dataclass
class ExpensePatch:
    """Partial update for an expense.

    Only mutable fields appear here. When applied, every field that is not
    None replaces the record's value and None leaves it untouched. ``id`` and
    ``created_at`` can't be patched; ``updated_at`` is refreshed by the store.
    """
    amount: Optional[float] = None
    merchant: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    is_recurring: Optional[bool] = None
    frequency: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ExpensePatch':
        values = normalize_keys(data)
        allowed = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in allowed})

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> 'ExpensePatch':
        return cls(**{f.name: getattr(record, f.name) for f in fields(cls)})

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def apply(self, record: ExpenseRecord) -> ExpenseRecord:
        """Return a copy of ``record`` with this patch merged in."""
        merged = record.to_dict()
        for name, value in self.changes().items():
            merged[_ATTRIBUTE_KEYS.get(name, name)] = value
        return ExpenseRecord.from_dict(merged)
