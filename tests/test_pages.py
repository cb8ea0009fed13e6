import importlib.util
import json
import types
from datetime import date, datetime
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from expense_planner import storage as storage_module
from expense_planner.models import ExpenseRecord
from expense_planner.storage import ExpenseStorage, MemoryBackend

PAGES_DIR = Path(__file__).resolve().parents[1] / 'expense_planner' / 'pages'
BUDGET_PAGE = PAGES_DIR / '1_🧭_Budget_Suggestions.py'
EXPENSES_PAGE = PAGES_DIR / '2_💸_Expenses.py'


def _load_page_module(path, name):
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class SessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __setattr__(self, name, value):
        self[name] = value


class FailingBackend(MemoryBackend):
    def set_item(self, key, value):
        raise OSError('read-only')


@pytest.fixture
def budget_page():
    return _load_page_module(BUDGET_PAGE, 'budget_page_test')


@pytest.fixture
def expenses_page():
    return _load_page_module(EXPENSES_PAGE, 'expenses_page_test')


def _form(**overrides):
    data = {
        'amount': 12.5,
        'merchant': 'Cafe',
        'category': 'food',
        'date': '2024-03-01',
        'notes': '',
        'payment_method': 'cash',
        'is_recurring': False,
        'frequency': 'once',
    }
    data.update(overrides)
    return data


def test_lookup_location_blank(budget_page):
    assert budget_page._lookup_location('') == (None, 'Please enter a location')
    assert budget_page._lookup_location('   ') == (None, 'Please enter a location')


def test_lookup_location_unknown(budget_page):
    template, error = budget_page._lookup_location('Gotham, NJ')
    assert template is None
    assert error == (
        "We don't have cost of living data for this location yet. "
        "Try: New York, NY • Los Angeles, CA • Chicago, IL"
    )


def test_lookup_location_known(budget_page):
    template, error = budget_page._lookup_location('denver, co')
    assert error is None
    assert template.display_name == 'Denver, CO'


def test_budget_state_initialization_and_reset(budget_page, monkeypatch):
    state = SessionState()
    monkeypatch.setattr(budget_page, 'st', types.SimpleNamespace(session_state=state))
    budget_page._ensure_state()
    assert state == {'budget_location': None, 'budget_overrides': {}, 'budget_editing': False}

    state.update(budget_location='Denver, CO', budget_overrides={'food': 1}, budget_editing=True)
    budget_page._ensure_state()
    assert state.budget_location == 'Denver, CO'

    budget_page._reset_location()
    assert state == {'budget_location': None, 'budget_overrides': {}, 'budget_editing': False}


def test_save_new_expense(expenses_page):
    storage = ExpenseStorage(MemoryBackend())
    assert expenses_page._save_expense(storage, _form()) == []
    stored = storage.load_expenses()
    assert len(stored) == 1
    assert stored[0].merchant == 'Cafe'
    assert stored[0].amount == 12.5


def test_save_invalid_expense_reports_errors(expenses_page):
    storage = ExpenseStorage(MemoryBackend())
    errors = expenses_page._save_expense(storage, _form(amount=0, merchant=' '))
    assert errors == ['Amount must be greater than zero', 'Merchant name is required']
    assert storage.load_expenses() == []


def test_save_existing_expense_updates_in_place(expenses_page):
    storage = ExpenseStorage(MemoryBackend())
    existing = ExpenseRecord(id='exp_1', amount=5.0, merchant='Cafe', category='food',
                             date='2024-03-01', created_at='2024-03-01T00:00:00+00:00')
    storage.add_expense(existing)

    assert expenses_page._save_expense(storage, _form(amount=7.25, notes='refill'), existing) == []
    stored = storage.load_expenses()
    assert len(stored) == 1
    assert stored[0].id == 'exp_1'
    assert stored[0].amount == 7.25
    assert stored[0].notes == 'refill'
    assert stored[0].created_at == existing.created_at


def test_save_failure_message(expenses_page):
    storage = ExpenseStorage(FailingBackend())
    assert expenses_page._save_expense(storage, _form()) == ['Failed to save expense. Please try again.']


def test_spending_comparison_uses_last_30_days(budget_page):
    storage = ExpenseStorage(MemoryBackend())
    now = datetime(2024, 3, 10, 12)
    budget = {'food': 500.0, 'other': 100.0}
    assert budget_page._spending_comparison(budget, storage, now=now) is None

    storage.add_expense(ExpenseRecord(id='1', amount=40, merchant='Grocer', category='food', date='2024-03-05'))
    storage.add_expense(ExpenseRecord(id='2', amount=25, merchant='Mall', category='shopping', date='2024-03-06'))
    storage.add_expense(ExpenseRecord(id='3', amount=999, merchant='Old', category='food', date='2023-12-01'))

    rows = budget_page._spending_comparison(budget, storage, now=now).set_index('Category')
    assert rows.loc['food', 'Actual'] == 40.0
    assert rows.loc['food', 'Remaining'] == 460.0
    assert rows.loc['other', 'Actual'] == 25.0


def _fake_streamlit(calls):
    return types.SimpleNamespace(
        session_state=SessionState(),
        rerun=lambda: calls.append('rerun'),
        sidebar=types.SimpleNamespace(error=calls.append),
    )


def test_successful_import_reruns_with_notice(expenses_page, monkeypatch):
    calls = []
    fake_st = _fake_streamlit(calls)
    monkeypatch.setattr(expenses_page, 'st', fake_st)
    storage = ExpenseStorage(MemoryBackend())

    document = json.dumps({'expenses': [{'id': 'exp_1', 'amount': 3, 'merchant': 'Deli'}]})
    expenses_page._apply_import(storage, document)
    assert calls == ['rerun']
    assert fake_st.session_state.expense_notice == 'Successfully imported 1 expenses'
    assert [e.id for e in storage.load_expenses()] == ['exp_1']


def test_failed_import_shows_error_without_rerun(expenses_page, monkeypatch):
    calls = []
    fake_st = _fake_streamlit(calls)
    monkeypatch.setattr(expenses_page, 'st', fake_st)

    expenses_page._apply_import(ExpenseStorage(MemoryBackend()), '{}')
    assert calls == ['Invalid data format: expenses array not found']
    assert 'expense_notice' not in fake_st.session_state


def _by_label(widgets, label):
    return next(widget for widget in widgets if widget.label == label)


def test_duplicate_expense_waits_for_confirmation(monkeypatch):
    storage = ExpenseStorage(MemoryBackend())
    storage.add_expense(ExpenseRecord(id='exp_1', amount=5.0, merchant='Starbucks',
                                      category='food', date=date.today().isoformat()))
    monkeypatch.setattr(storage_module, '_default_storage', storage)

    at = AppTest.from_file(str(EXPENSES_PAGE), default_timeout=30)
    at.run()
    _by_label(at.text_input, 'Merchant / Description').input('Starbucks')
    _by_label(at.number_input, 'Amount').set_value(5.0)
    _by_label(at.button, 'Add Expense').click()
    at.run()

    assert len(storage.load_expenses()) == 1
    assert any('already recorded' in warning.value for warning in at.warning)

    _by_label(at.button, 'Save anyway').click()
    at.run()

    assert len(storage.load_expenses()) == 2
    assert [s.value for s in at.success] == ['Expense saved!']
    assert not any('already recorded' in warning.value for warning in at.warning)


def test_discarding_duplicate_keeps_store_unchanged(monkeypatch):
    storage = ExpenseStorage(MemoryBackend())
    storage.add_expense(ExpenseRecord(id='exp_1', amount=5.0, merchant='Starbucks',
                                      category='food', date=date.today().isoformat()))
    monkeypatch.setattr(storage_module, '_default_storage', storage)

    at = AppTest.from_file(str(EXPENSES_PAGE), default_timeout=30)
    at.run()
    _by_label(at.text_input, 'Merchant / Description').input('Starbucks')
    _by_label(at.number_input, 'Amount').set_value(5.0)
    _by_label(at.button, 'Add Expense').click()
    at.run()
    _by_label(at.button, 'Discard').click()
    at.run()

    assert len(storage.load_expenses()) == 1
    assert not any('already recorded' in warning.value for warning in at.warning)
