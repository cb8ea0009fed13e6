"""Cost of living catalog - average monthly budgets by city.

The figures are static averages kept in memory. A location string such as
``"New York, NY"`` is normalized (trimmed and lowercased) and matched
exactly against the catalog keys; there is no fuzzy or partial matching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

# Ordered (key, label, icon) rows for the seven budget categories
BUDGET_CATEGORIES = [
    ('housing', 'Housing', '🏠'),
    ('food', 'Food & Groceries', '🍎'),
    ('transportation', 'Transportation', '🚗'),
    ('utilities', 'Utilities', '💡'),
    ('entertainment', 'Entertainment & Leisure', '🎭'),
    ('healthcare', 'Healthcare', '⚕️'),
    ('other', 'Other Expenses', '📦'),
]
BUDGET_CATEGORY_KEYS = tuple(key for key, _, _ in BUDGET_CATEGORIES)


@dataclass(frozen=True)
class BudgetTemplate:
    """Average monthly spend for one city across the budget categories."""
    city: str
    state: str
    country: str
    currency: str
    budget: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the budget mapping so catalog entries can't be mutated
        object.__setattr__(self, 'budget', MappingProxyType(dict(self.budget)))

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state}"

    @property
    def total(self) -> float:
        return sum(self.budget.values())

    def breakdown(self) -> List[Dict[str, Any]]:
        """Return one row per budget category with its share of the total.

        Returns:
            List of dicts with key, label, icon, amount and percentage
        """
        total = self.total
        rows = []
        for key, label, icon in BUDGET_CATEGORIES:
            amount = self.budget.get(key, 0)
            rows.append({
                'key': key,
                'label': label,
                'icon': icon,
                'amount': amount,
                'percentage': (amount / total) * 100 if total > 0 else 0.0,
            })
        return rows

    def to_dict(self) -> Dict[str, Any]:
        """Flat document used by the lookup endpoint."""
        return {
            'city': self.city,
            'state': self.state,
            'country': self.country,
            'currency': self.currency,
            'budget': dict(self.budget),
        }


def _template(city: str, state: str, **budget: float) -> BudgetTemplate:
    return BudgetTemplate(city=city, state=state, country='USA', currency='USD', budget=budget)


COST_OF_LIVING_DATA: Mapping[str, BudgetTemplate] = MappingProxyType({
    'new york, ny': _template(
        'New York', 'NY',
        housing=3000, food=600, transportation=150, utilities=180,
        entertainment=300, healthcare=450, other=320,
    ),
    'los angeles, ca': _template(
        'Los Angeles', 'CA',
        housing=2500, food=550, transportation=200, utilities=160,
        entertainment=280, healthcare=400, other=310,
    ),
    'chicago, il': _template(
        'Chicago', 'IL',
        housing=1800, food=500, transportation=130, utilities=150,
        entertainment=250, healthcare=380, other=290,
    ),
    'austin, tx': _template(
        'Austin', 'TX',
        housing=1600, food=480, transportation=140, utilities=170,
        entertainment=270, healthcare=360, other=280,
    ),
    'miami, fl': _template(
        'Miami', 'FL',
        housing=2200, food=520, transportation=160, utilities=190,
        entertainment=290, healthcare=370, other=300,
    ),
    'seattle, wa': _template(
        'Seattle', 'WA',
        housing=2400, food=580, transportation=140, utilities=170,
        entertainment=300, healthcare=420, other=310,
    ),
    'boston, ma': _template(
        'Boston', 'MA',
        housing=2600, food=590, transportation=120, utilities=180,
        entertainment=290, healthcare=440, other=320,
    ),
    'denver, co': _template(
        'Denver', 'CO',
        housing=1900, food=520, transportation=150, utilities=160,
        entertainment=280, healthcare=390, other=300,
    ),
})


def normalize_location(location: str) -> str:
    return location.strip().lower()


class CostOfLivingCatalog:
    """Read-only lookup over a table of budget templates."""

    def __init__(self, data: Optional[Mapping[str, BudgetTemplate]] = None):
        """Initialize the catalog.

        Args:
            data: Mapping of normalized "city, st" keys to templates.
                  Defaults to the built-in table.
        """
        self._data = COST_OF_LIVING_DATA if data is None else data

    def lookup(self, location: Optional[str]) -> Optional[BudgetTemplate]:
        """Find the template for a location string.

        Args:
            location: Free-form "City, ST" input from the user

        Returns:
            The matching BudgetTemplate, or None when the location is unknown

        Example:
            >>> CostOfLivingCatalog().lookup('  new york, NY ').city
            'New York'
        """
        if not isinstance(location, str):
            return None
        return self._data.get(normalize_location(location))

    def list_known_locations(self) -> List[str]:
        """Return "City, ST" display strings in catalog order."""
        return [template.display_name for template in self._data.values()]

    def __len__(self) -> int:
        return len(self._data)


_default_catalog = CostOfLivingCatalog()


def get_cost_of_living(location: Optional[str]) -> Optional[BudgetTemplate]:
    """Look up a location in the built-in catalog."""
    return _default_catalog.lookup(location)


def get_all_cities() -> List[str]:
    """List every location in the built-in catalog."""
    return _default_catalog.list_known_locations()


def adjust_budget(template: BudgetTemplate, overrides: Mapping[str, Any]) -> Dict[str, float]:
    """Apply user adjustments on top of a suggested budget.

    Unparseable override values count as zero, matching how the budget
    editor treats a cleared input. The template itself is left untouched.

    Args:
        template: Suggested budget to start from
        overrides: Category key -> new amount (any numeric-like value)

    Returns:
        New budget mapping covering every category in the template
    """
    adjusted = {key: float(value) for key, value in template.budget.items()}
    for key, value in overrides.items():
        if key not in adjusted:
            continue
        try:
            adjusted[key] = float(value)
        except (TypeError, ValueError):
            adjusted[key] = 0.0
    return adjusted
