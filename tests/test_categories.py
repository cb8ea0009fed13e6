"""Tests for expense_planner.categories."""

from __future__ import annotations

from expense_planner.categories import (
    EXPENSE_CATEGORIES,
    MERCHANT_PATTERNS,
    Category,
    all_categories,
    get_category_by_id,
    get_frequency_label,
    get_payment_method_label,
)


def test_sixteen_builtin_categories_with_unique_ids() -> None:
    ids = [c.id for c in EXPENSE_CATEGORIES]
    assert len(ids) == 16
    assert len(set(ids)) == 16
    assert ids[0] == 'housing'
    assert ids[-1] == 'other'


def test_unknown_category_falls_back_to_other() -> None:
    assert get_category_by_id('food').name == 'Food & Dining'
    assert get_category_by_id('does-not-exist').id == 'other'
    assert get_category_by_id(None).id == 'other'
    assert get_category_by_id('').id == 'other'


def test_custom_categories_are_resolved_after_builtins() -> None:
    custom = [Category('boat', 'Boat', '⛵', '#123456'), Category('food', 'Shadow Food')]
    assert get_category_by_id('boat', custom).name == 'Boat'
    # Built-ins win when ids collide
    assert get_category_by_id('food', custom).name == 'Food & Dining'
    merged = all_categories(custom)
    assert len(merged) == 18
    assert merged[-2].id == 'boat'


def test_category_dict_round_trip() -> None:
    category = Category('boat', 'Boat', '⛵', '#123456', ('Fuel', 'Docking'))
    assert Category.from_dict(category.to_dict()) == category


def test_category_from_partial_dict_uses_defaults() -> None:
    category = Category.from_dict({'id': 'hobby'})
    assert category.name == 'hobby'
    assert category.icon == '📦'


def test_merchant_patterns_reference_builtin_categories() -> None:
    builtin_ids = {c.id for c in EXPENSE_CATEGORIES}
    for category_id, patterns in MERCHANT_PATTERNS:
        assert category_id in builtin_ids
        assert patterns


def test_option_labels() -> None:
    assert get_payment_method_label('debit') == '💳 Debit Card'
    assert get_payment_method_label('barter') == 'barter'
    assert get_frequency_label('biweekly') == 'Bi-weekly'
    assert get_frequency_label(None) == ''
