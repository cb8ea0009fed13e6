"""Expense categories, merchant patterns and form option lists.

Built-in categories are static. User-defined categories share the same
shape and are merged in after the built-ins whenever a full list is needed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple


@dataclass(frozen=True)
class Category:
    """A tag with display metadata used to classify expenses."""
    id: str
    name: str
    icon: str = '📦'
    color: str = '#95A5A6'
    subcategories: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'icon': self.icon,
            'color': self.color,
            'subcategories': list(self.subcategories),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Category':
        category_id = str(data.get('id') or '')
        return cls(
            id=category_id,
            name=str(data.get('name') or category_id),
            icon=str(data.get('icon') or '📦'),
            color=str(data.get('color') or '#95A5A6'),
            subcategories=tuple(data.get('subcategories') or ()),
        )


EXPENSE_CATEGORIES: Tuple[Category, ...] = (
    Category('housing', 'Housing', '🏠', '#4A90E2',
             ('Rent', 'Mortgage', 'Property Tax', 'Home Insurance', 'HOA Fees', 'Maintenance')),
    Category('utilities', 'Utilities', '💡', '#F5A623',
             ('Electricity', 'Water', 'Gas', 'Internet', 'Phone', 'Trash')),
    Category('food', 'Food & Dining', '🍽️', '#E74C3C',
             ('Groceries', 'Restaurants', 'Fast Food', 'Coffee Shops', 'Delivery')),
    Category('transportation', 'Transportation', '🚗', '#9B59B6',
             ('Gas', 'Public Transit', 'Car Payment', 'Car Insurance', 'Maintenance', 'Parking', 'Rideshare')),
    Category('healthcare', 'Healthcare', '⚕️', '#1ABC9C',
             ('Insurance', 'Doctor Visits', 'Prescriptions', 'Dental', 'Vision', 'Medical Supplies')),
    Category('entertainment', 'Entertainment', '🎮', '#E67E22',
             ('Streaming Services', 'Movies', 'Games', 'Concerts', 'Hobbies', 'Books')),
    Category('shopping', 'Shopping', '🛍️', '#3498DB',
             ('Clothing', 'Electronics', 'Home Goods', 'Gifts', 'Personal Care')),
    Category('education', 'Education', '📚', '#16A085',
             ('Tuition', 'Books', 'Courses', 'School Supplies', 'Student Loans')),
    Category('personal', 'Personal Care', '💆', '#F39C12',
             ('Haircut', 'Gym', 'Spa', 'Beauty Products', 'Laundry', 'Dry Cleaning')),
    Category('travel', 'Travel', '✈️', '#2ECC71',
             ('Flights', 'Hotels', 'Vacation', 'Business Travel')),
    Category('insurance', 'Insurance', '🛡️', '#34495E',
             ('Life Insurance', 'Health Insurance', 'Home Insurance', 'Auto Insurance')),
    Category('debt', 'Debt Payments', '💳', '#C0392B',
             ('Credit Card', 'Personal Loan', 'Student Loan', 'Car Loan', 'Other Debt')),
    Category('savings', 'Savings', '💰', '#27AE60',
             ('Emergency Fund', 'Retirement', 'Investment', 'General Savings')),
    Category('charity', 'Charity & Tithing', '🙏', '#8E44AD',
             ('Tithing', 'Donations', 'Charity', 'Offering')),
    Category('pets', 'Pets', '🐾', '#D35400',
             ('Pet Food', 'Vet', 'Pet Insurance', 'Grooming', 'Pet Supplies')),
    Category('other', 'Other', '📦', '#95A5A6', ('Miscellaneous',)),
)

DEFAULT_CATEGORY_ID = 'other'
_CATEGORIES_BY_ID = {category.id: category for category in EXPENSE_CATEGORIES}
OTHER_CATEGORY = _CATEGORIES_BY_ID[DEFAULT_CATEGORY_ID]


def _patterns(*expressions: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(expr, re.IGNORECASE) for expr in expressions)


# Checked top to bottom; the first category with a matching pattern wins
MERCHANT_PATTERNS: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = (
    ('housing', _patterns(
        r'rent', r'landlord', r'property management', r'mortgage', r'hoa',
    )),
    ('utilities', _patterns(
        r'electric', r'power', r'energy', r'water', r'gas company', r'internet',
        r'comcast', r'verizon', r'at&t', r'spectrum', r'xfinity', r'cox',
    )),
    ('food', _patterns(
        r'grocery', r'supermarket', r'whole foods', r'trader joe', r'safeway',
        r'kroger', r'walmart', r'costco', r'restaurant', r'cafe', r'coffee',
        r'starbucks', r'dunkin', r'mcdonald', r'burger', r'pizza', r'chipotle',
        r'doordash', r'uber eats', r'grubhub', r'postmates',
    )),
    ('transportation', _patterns(
        r'gas station', r'fuel', r'shell', r'chevron', r'bp', r'exxon', r'mobil',
        r'uber', r'lyft', r'taxi', r'transit', r'metro', r'parking', r'toll',
        r'auto insurance', r'car wash', r'jiffy lube',
    )),
    ('healthcare', _patterns(
        r'pharmacy', r'cvs', r'walgreens', r'rite aid', r'hospital', r'clinic',
        r'doctor', r'dental', r'vision', r'medical', r'health',
    )),
    ('entertainment', _patterns(
        r'netflix', r'hulu', r'disney', r'spotify', r'apple music', r'youtube',
        r'hbo', r'amazon prime', r'movie', r'cinema', r'theater', r'game',
        r'steam', r'playstation', r'xbox', r'nintendo',
    )),
    ('shopping', _patterns(
        r'amazon', r'target', r'best buy', r'apple store', r'mall', r'clothing',
        r'fashion', r'nordstrom', r'macy', r'home depot', r'lowe', r'ikea',
    )),
    ('education', _patterns(
        r'university', r'college', r'school', r'tuition', r'books', r'coursera',
        r'udemy', r'edx', r'student loan',
    )),
    ('personal', _patterns(
        r'gym', r'fitness', r'salon', r'spa', r'haircut', r'barber', r'massage',
        r'yoga', r'pilates', r'laundry', r'dry clean',
    )),
    ('travel', _patterns(
        r'airline', r'flight', r'hotel', r'airbnb', r'vrbo', r'expedia',
        r'booking\.com', r'kayak', r'travel',
    )),
    ('insurance', _patterns(
        r'insurance', r'state farm', r'geico', r'progressive', r'allstate',
    )),
    ('debt', _patterns(
        r'credit card', r'loan payment', r'paypal credit', r'affirm', r'afterpay',
    )),
    ('charity', _patterns(
        r'church', r'donation', r'charity', r'tithing', r'offering', r'non-profit',
    )),
    ('pets', _patterns(
        r'pet', r'vet', r'veterinary', r'petsmart', r'petco', r'chewy',
    )),
)

FREQUENCY_OPTIONS = [
    {'value': 'once', 'label': 'One-time'},
    {'value': 'daily', 'label': 'Daily'},
    {'value': 'weekly', 'label': 'Weekly'},
    {'value': 'biweekly', 'label': 'Bi-weekly'},
    {'value': 'monthly', 'label': 'Monthly'},
    {'value': 'quarterly', 'label': 'Quarterly'},
    {'value': 'yearly', 'label': 'Yearly'},
]

PAYMENT_METHODS = [
    {'value': 'cash', 'label': 'Cash', 'icon': '💵'},
    {'value': 'debit', 'label': 'Debit Card', 'icon': '💳'},
    {'value': 'credit', 'label': 'Credit Card', 'icon': '💳'},
    {'value': 'check', 'label': 'Check', 'icon': '📝'},
    {'value': 'transfer', 'label': 'Bank Transfer', 'icon': '🏦'},
    {'value': 'digital', 'label': 'Digital Wallet', 'icon': '📱'},
    {'value': 'other', 'label': 'Other', 'icon': '💰'},
]

def all_categories(custom_categories: Optional[Iterable[Category]] = None) -> List[Category]:
    """Built-in categories followed by any custom ones."""
    return list(EXPENSE_CATEGORIES) + list(custom_categories or [])


def get_category_by_id(category_id: Optional[str],
                       custom_categories: Optional[Iterable[Category]] = None) -> Category:
    """Resolve a category id, falling back to "Other" for unknown ids.

    Args:
        category_id: Category id stored on an expense (may be None)
        custom_categories: Optional user-defined categories to search after
                           the built-ins

    Returns:
        The matching Category; never raises

    Example:
        >>> get_category_by_id('food').name
        'Food & Dining'
        >>> get_category_by_id('nope').id
        'other'
    """
    if not category_id:
        return OTHER_CATEGORY
    builtin = _CATEGORIES_BY_ID.get(category_id)
    if builtin is not None:
        return builtin
    for category in custom_categories or []:
        if category.id == category_id:
            return category
    return OTHER_CATEGORY


def get_payment_method_label(value: Optional[str]) -> str:
    for method in PAYMENT_METHODS:
        if method['value'] == value:
            return f"{method['icon']} {method['label']}"
    return value or ''


def get_frequency_label(value: Optional[str]) -> str:
    for option in FREQUENCY_OPTIONS:
        if option['value'] == value:
            return option['label']
    return value or ''
