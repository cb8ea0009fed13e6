"""Expense utilities - validation, categorization, filtering and summaries.

Every function here is pure: it takes records (or a draft mapping from the
entry form) and returns new values without touching storage. Functions that
receive something other than a list of records degrade to an empty result
rather than raising.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .categories import (
    DEFAULT_CATEGORY_ID,
    MERCHANT_PATTERNS,
    Category,
    get_category_by_id,
)
from .models import (
    DEFAULT_FREQUENCY,
    DEFAULT_PAYMENT_METHOD,
    DEFAULT_STATUS,
    ExpenseRecord,
    attribute_name,
    generate_expense_id,
    normalize_keys,
    parse_date,
    to_bool,
    to_float,
    today_iso,
    utc_now_iso,
)

PERIOD_ALIASES = {
    'week': 'last-7-days',
    'month': 'last-30-days',
    'year': 'last-year',
}
PERIODS = ('today', 'last-7-days', 'last-30-days', 'last-year', 'all')
PERIOD_LABELS = {
    'today': 'Today',
    'last-7-days': 'Last 7 Days',
    'last-30-days': 'Last 30 Days',
    'last-year': 'Last Year',
    'all': 'All Time',
}

NUMERIC_SORT_FIELDS = {'amount'}
DATE_SORT_FIELDS = {'date'}

__all__ = [
    'generate_expense_id',
    'suggest_category',
    'validate_expense',
    'is_duplicate_expense',
    'find_duplicates',
    'filter_expenses',
    'sort_expenses',
    'calculate_total',
    'group_by_category',
    'category_breakdown',
    'get_expenses_by_period',
    'create_expense',
    'format_amount',
    'format_date',
]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


def suggest_category(merchant_name: Optional[str]) -> Optional[str]:
    """Suggest a category id from a merchant name.

    Args:
        merchant_name: Merchant or description text typed by the user

    Returns:
        Id of the first category whose patterns match, or None

    Example:
        >>> suggest_category('Whole Foods Market')
        'food'
        >>> suggest_category('Shell Station #12')
        'transportation'
    """
    if not merchant_name or not isinstance(merchant_name, str):
        return None

    normalized = merchant_name.strip()
    if not normalized:
        return None

    for category_id, patterns in MERCHANT_PATTERNS:
        for pattern in patterns:
            if pattern.search(normalized):
                return category_id
    return None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_expense(draft: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate expense form input.

    All checks run; errors are accumulated rather than stopping at the
    first failure.

    Args:
        draft: Form values. Keys may be snake_case or the persisted camelCase.

    Returns:
        Dict with 'is_valid' (bool) and 'errors' (list of messages)
    """
    values = normalize_keys(draft or {})
    errors: List[str] = []

    amount = values.get('amount')
    parsed_amount = None if _is_blank(amount) else to_float(amount, default=None)
    if parsed_amount is None:
        errors.append('Amount is required and must be a valid number')
    elif parsed_amount <= 0:
        errors.append('Amount must be greater than zero')

    raw_date = values.get('date')
    if _is_blank(raw_date):
        errors.append('Date is required')
    elif parse_date(raw_date) is None:
        errors.append('Invalid date format')

    if _is_blank(values.get('merchant')):
        errors.append('Merchant name is required')

    if _is_blank(values.get('category')):
        errors.append('Category is required')

    payment_method = values.get('payment_method')
    if payment_method is not None and not isinstance(payment_method, str):
        errors.append('Invalid payment method')

    if to_bool(values.get('is_recurring')) and _is_blank(values.get('frequency')):
        errors.append('Frequency is required for recurring expenses')

    return {
        'is_valid': not errors,
        'errors': errors,
    }


# ---------------------------------------------------------------------------
# Duplicate detection
# ---------------------------------------------------------------------------


def _get(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return normalize_keys(record).get(name, default)
    return getattr(record, name, default)


def is_duplicate_expense(first: Any, second: Any) -> bool:
    """Check whether two expenses look like the same transaction.

    Same amount (within a cent), same calendar date and the same merchant
    name ignoring case and surrounding whitespace. Accepts records or
    draft mappings.
    """
    if not first or not second:
        return False

    amount_a = to_float(_get(first, 'amount'), default=None)
    amount_b = to_float(_get(second, 'amount'), default=None)
    if amount_a is None or amount_b is None:
        return False
    same_amount = abs(amount_a - amount_b) < 0.01

    date_a = parse_date(_get(first, 'date'))
    date_b = parse_date(_get(second, 'date'))
    same_date = date_a is not None and date_a == date_b

    merchant_a = str(_get(first, 'merchant') or '').strip().lower()
    merchant_b = str(_get(second, 'merchant') or '').strip().lower()

    return same_amount and same_date and merchant_a == merchant_b


def find_duplicates(draft: Any, records: Iterable[ExpenseRecord],
                    exclude_id: Optional[str] = None) -> List[ExpenseRecord]:
    """Return stored records that look like duplicates of ``draft``.

    Advisory only; callers decide whether to warn.
    """
    return [
        record for record in records or []
        if record.id != exclude_id and is_duplicate_expense(draft, record)
    ]


# ---------------------------------------------------------------------------
# Filtering and sorting
# ---------------------------------------------------------------------------


def filter_expenses(expenses: Sequence[ExpenseRecord],
                    filters: Optional[Mapping[str, Any]] = None,
                    custom_categories: Optional[Iterable[Category]] = None) -> List[ExpenseRecord]:
    """Filter expenses by category, payment method, date range and text.

    Args:
        expenses: Records to filter
        filters: Optional keys 'category', 'payment_method', 'start_date',
                 'end_date' and 'search'. Empty values are ignored and all
                 supplied criteria must match.
        custom_categories: Used to resolve category names for text search

    Returns:
        New list with the matching records in their original order
    """
    if not isinstance(expenses, (list, tuple)):
        return []
    filters = normalize_keys(filters or {})
    custom = list(custom_categories or [])

    category = filters.get('category')
    payment_method = filters.get('payment_method')
    start_date = parse_date(filters.get('start_date'))
    end_date = parse_date(filters.get('end_date'))
    search = str(filters.get('search') or '').strip().lower()

    result = []
    for expense in expenses:
        if category and expense.category != category:
            continue
        if payment_method and expense.payment_method != payment_method:
            continue

        if start_date or end_date:
            expense_date = expense.parsed_date
            if expense_date is None:
                continue
            if start_date and expense_date < start_date:
                continue
            if end_date and expense_date > end_date:
                continue

        if search:
            category_name = get_category_by_id(expense.category, custom).name
            haystacks = (expense.merchant or '', expense.notes or '', category_name)
            if not any(search in text.lower() for text in haystacks):
                continue

        result.append(expense)
    return result


def _sort_key(field: str):
    if field in DATE_SORT_FIELDS:
        def key(expense):
            parsed = parse_date(getattr(expense, field, None))
            # Unparseable dates sort before every real date
            return (0, date.min) if parsed is None else (1, parsed)
    elif field in NUMERIC_SORT_FIELDS:
        def key(expense):
            return to_float(getattr(expense, field, None))
    else:
        def key(expense):
            return str(getattr(expense, field, '') or '').lower()
    return key


def sort_expenses(expenses: Sequence[ExpenseRecord], field: str = 'date',
                  order: str = 'desc') -> List[ExpenseRecord]:
    """Return a new list sorted by ``field``.

    Dates and amounts compare by value, everything else as case-insensitive
    text. The sort is stable in both directions and the input is left as is.

    Args:
        expenses: Records to sort
        field: Record attribute; camelCase names are accepted too
        order: 'asc' or 'desc'
    """
    if not isinstance(expenses, (list, tuple)):
        return []
    field = attribute_name(field)
    return sorted(expenses, key=_sort_key(field), reverse=(order == 'desc'))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def calculate_total(expenses: Iterable[Any]) -> float:
    """Sum expense amounts; unparseable amounts count as zero."""
    if expenses is None or isinstance(expenses, (str, bytes, Mapping)):
        return 0.0
    return sum(to_float(_get(expense, 'amount')) for expense in expenses)


def group_by_category(expenses: Sequence[ExpenseRecord],
                      custom_categories: Optional[Iterable[Category]] = None) -> Dict[str, Dict[str, Any]]:
    """Group expenses by category id.

    Returns:
        Mapping of category id -> dict with 'category' (resolved Category),
        'expenses' (member records), 'total' and 'percentage' (share of the
        overall total, 0 when the overall total is 0)
    """
    if not isinstance(expenses, (list, tuple)):
        return {}
    custom = list(custom_categories or [])

    grouped: Dict[str, Dict[str, Any]] = {}
    for expense in expenses:
        category_id = expense.category or DEFAULT_CATEGORY_ID
        if category_id not in grouped:
            grouped[category_id] = {
                'category': get_category_by_id(category_id, custom),
                'expenses': [],
                'total': 0.0,
                'percentage': 0.0,
            }
        grouped[category_id]['expenses'].append(expense)
        grouped[category_id]['total'] += to_float(expense.amount)

    overall = sum(group['total'] for group in grouped.values())
    if overall > 0:
        for group in grouped.values():
            group['percentage'] = (group['total'] / overall) * 100
    return grouped


def category_breakdown(expenses: Sequence[ExpenseRecord],
                       custom_categories: Optional[Iterable[Category]] = None) -> List[Dict[str, Any]]:
    """Category groups ordered by total spend, largest first."""
    grouped = group_by_category(expenses, custom_categories)
    return sorted(grouped.values(), key=lambda group: group['total'], reverse=True)


def _subtract_year(moment: datetime) -> datetime:
    year = moment.year - 1
    day = min(moment.day, calendar.monthrange(year, moment.month)[1])
    return moment.replace(year=year, day=day)


def get_period_start(period: str, now: Optional[datetime] = None) -> Optional[date]:
    """First calendar date inside a period window, or None for 'all'."""
    now = now or datetime.now()
    period = PERIOD_ALIASES.get(period, period)
    if period == 'today':
        return now.date()
    if period == 'last-7-days':
        return (now - timedelta(days=7)).date()
    if period == 'last-30-days':
        return (now - timedelta(days=30)).date()
    if period == 'last-year':
        return _subtract_year(now).date()
    return None


def get_expenses_by_period(expenses: Sequence[ExpenseRecord], period: str = 'last-30-days',
                           now: Optional[datetime] = None) -> List[ExpenseRecord]:
    """Keep expenses dated inside ``[now - offset, now]``, both ends inclusive.

    Args:
        expenses: Records to window
        period: 'today', 'last-7-days', 'last-30-days', 'last-year' or
                'all' ('week', 'month' and 'year' are accepted as aliases).
                Unknown periods return every record.
        now: Reference time, defaults to the current local time
    """
    if not isinstance(expenses, (list, tuple)):
        return []
    now = now or datetime.now()
    start = get_period_start(period, now)
    if start is None:
        return list(expenses)

    end = now.date()
    result = []
    for expense in expenses:
        expense_date = expense.parsed_date
        if expense_date is not None and start <= expense_date <= end:
            result.append(expense)
    return result


# ---------------------------------------------------------------------------
# Construction and display
# ---------------------------------------------------------------------------


def create_expense(data: Optional[Mapping[str, Any]] = None) -> ExpenseRecord:
    """Build a complete record from form data, filling in defaults.

    An existing ``id`` and ``created_at`` are carried through so the same
    function serves edits; ``updated_at`` is always set to now.
    """
    values = normalize_keys(data or {})
    record_date = values.get('date')
    parsed_date = parse_date(record_date)
    if parsed_date is not None:
        record_date = parsed_date.isoformat()

    return ExpenseRecord(
        id=values.get('id') or generate_expense_id(),
        amount=to_float(values.get('amount')),
        merchant=str(values.get('merchant') or '').strip(),
        category=values.get('category') or DEFAULT_CATEGORY_ID,
        date=record_date or today_iso(),
        notes=values.get('notes') or '',
        payment_method=values.get('payment_method') or DEFAULT_PAYMENT_METHOD,
        is_recurring=to_bool(values.get('is_recurring') or False),
        frequency=values.get('frequency') or DEFAULT_FREQUENCY,
        status=values.get('status') or DEFAULT_STATUS,
        created_at=values.get('created_at') or utc_now_iso(),
        updated_at=utc_now_iso(),
    )


def format_amount(amount: Any, currency: str = 'USD') -> str:
    """Format an amount for display, e.g. ``$1,234.56``."""
    value = to_float(amount)
    symbol = '$' if currency == 'USD' else f"{currency} "
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date(value: Any, style: str = 'medium') -> str:
    """Format a date for display.

    Styles: 'short' (Jan 5, 2024), 'medium' (January 5, 2024) and
    'long' (Friday, January 5, 2024). Unparseable input is returned as text.
    """
    parsed = parse_date(value)
    if parsed is None:
        return str(value or '')
    if style == 'short':
        return f"{parsed:%b} {parsed.day}, {parsed.year}"
    if style == 'long':
        return f"{parsed:%A, %B} {parsed.day}, {parsed.year}"
    return f"{parsed:%B} {parsed.day}, {parsed.year}"
