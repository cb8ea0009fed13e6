"""Tests for expense_planner.cost_of_living."""

from __future__ import annotations

import re

import pytest

from expense_planner.cost_of_living import (
    BUDGET_CATEGORY_KEYS,
    COST_OF_LIVING_DATA,
    BudgetTemplate,
    CostOfLivingCatalog,
    adjust_budget,
    get_all_cities,
    get_cost_of_living,
)


def test_lookup_returns_template_for_known_location() -> None:
    data = get_cost_of_living('New York, NY')
    assert data is not None
    assert data.city == 'New York'
    assert data.state == 'NY'
    assert data.budget['housing'] > 0


@pytest.mark.parametrize('display_name', get_all_cities())
def test_lookup_ignores_case_and_whitespace(display_name: str) -> None:
    exact = get_cost_of_living(display_name)
    assert exact is not None
    assert get_cost_of_living(display_name.upper()) == exact
    assert get_cost_of_living(display_name.lower()) == exact
    assert get_cost_of_living(f"   {display_name}\t ") == exact


def test_lookup_unknown_location_returns_none() -> None:
    assert get_cost_of_living('Unknown City, XX') is None
    assert get_cost_of_living('New York') is None  # no partial matching
    assert get_cost_of_living('') is None
    assert get_cost_of_living(None) is None


def test_every_template_has_all_budget_categories() -> None:
    for template in COST_OF_LIVING_DATA.values():
        assert set(template.budget) == set(BUDGET_CATEGORY_KEYS)
        assert all(amount >= 0 for amount in template.budget.values())


def test_new_york_total() -> None:
    template = get_cost_of_living('new york, ny')
    assert template.total == 5000
    assert sum(row['amount'] for row in template.breakdown()) == template.total


def test_breakdown_percentages_sum_to_100() -> None:
    rows = get_cost_of_living('Chicago, IL').breakdown()
    assert [row['key'] for row in rows] == list(BUDGET_CATEGORY_KEYS)
    assert abs(sum(row['percentage'] for row in rows) - 100) < 1e-6


def test_templates_are_immutable() -> None:
    template = get_cost_of_living('Austin, TX')
    with pytest.raises(TypeError):
        template.budget['housing'] = 1
    with pytest.raises(AttributeError):
        template.city = 'Elsewhere'


def test_get_all_cities_format_and_order() -> None:
    cities = get_all_cities()
    assert cities[:3] == ['New York, NY', 'Los Angeles, CA', 'Chicago, IL']
    assert len(cities) == len(COST_OF_LIVING_DATA)
    for city in cities:
        assert re.match(r'^[A-Za-z\s]+,\s[A-Z]{2}$', city)


def test_to_dict_is_flat_document() -> None:
    doc = get_cost_of_living('Miami, FL').to_dict()
    assert doc == {
        'city': 'Miami',
        'state': 'FL',
        'country': 'USA',
        'currency': 'USD',
        'budget': {
            'housing': 2200, 'food': 520, 'transportation': 160, 'utilities': 190,
            'entertainment': 290, 'healthcare': 370, 'other': 300,
        },
    }


def test_custom_catalog() -> None:
    template = BudgetTemplate('Springfield', 'ZZ', 'USA', 'USD', {'housing': 100})
    catalog = CostOfLivingCatalog({'springfield, zz': template})
    assert catalog.lookup('SPRINGFIELD, zz') is template
    assert catalog.list_known_locations() == ['Springfield, ZZ']
    assert len(catalog) == 1


def test_adjust_budget_applies_overrides_without_touching_template() -> None:
    template = get_cost_of_living('Denver, CO')
    adjusted = adjust_budget(template, {'housing': '1500', 'food': 'abc', 'unknown': 5})
    assert adjusted['housing'] == 1500.0
    assert adjusted['food'] == 0.0
    assert 'unknown' not in adjusted
    assert adjusted['other'] == 300.0
    assert template.budget['housing'] == 1900
