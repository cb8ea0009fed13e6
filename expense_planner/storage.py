"""Expense storage - persistence for expenses and custom categories.

Data lives in a key/value store that holds one serialized JSON document per
key, mirroring browser local storage. The store is reached through a
``StorageBackend`` handed to ``ExpenseStorage`` at construction time, so the
same facade runs against files on disk, an in-memory dict for tests, or a
per-session dict in the dashboard.

Every public method on ``ExpenseStorage`` catches backend and parse
failures, logs them, and returns a safe default (an empty list, ``False``,
``None`` or a failure result) instead of raising.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from . import config
from .categories import Category
from .models import ExpensePatch, ExpenseRecord, utc_now_iso

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


class StorageBackend(ABC):
    """Key/value store holding serialized documents."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or None if nothing is stored."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Replace the stored text for ``key``."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""


class MemoryBackend(StorageBackend):
    """Dict-backed store used by tests and per-session dashboard state."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonFileBackend(StorageBackend):
    """Stores each key as ``<key>.json`` inside a directory.

    Writes go to a temporary file next to the target which is then moved
    into place with ``os.replace``, so a reader sees either the old document
    or the new one and never a partial write.
    """

    def __init__(self, directory: Optional[Path] = None):
        """Initialize the backend.

        Args:
            directory: Folder for the documents. Defaults to STORAGE_DIR
                       from config.
        """
        self.directory = Path(directory or config.STORAGE_DIR)

    def get_path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        target = self.get_path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(prefix=f"{key}-", suffix='.tmp', dir=self.directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, target)
        except OSError:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise

    def remove_item(self, key: str) -> None:
        path = self.get_path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob('*.json'))


class ExpenseStorage:
    """Load, save and merge expenses and custom categories."""

    def __init__(self, backend: Optional[StorageBackend] = None,
                 capacity_bytes: Optional[int] = None):
        """Initialize expense storage.

        Args:
            backend: Where documents are kept. Defaults to a JsonFileBackend
                     on STORAGE_DIR from config.
            capacity_bytes: Assumed storage ceiling used by get_storage_info.
                            Informational only; writes are never blocked.
        """
        if backend is None:
            config.ensure_data_directories()
            backend = JsonFileBackend(config.STORAGE_DIR)
        self.backend = backend
        self.capacity_bytes = capacity_bytes or config.STORAGE_CAPACITY_BYTES

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def save_expenses(self, expenses: Iterable[ExpenseRecord]) -> bool:
        """Overwrite the stored collection.

        Returns:
            True on success, False if the backend write failed
        """
        try:
            payload = {
                'version': config.STORAGE_VERSION,
                'expenses': [_record_to_dict(expense) for expense in expenses],
                'lastUpdated': utc_now_iso(),
            }
            self.backend.set_item(config.EXPENSES_KEY, json.dumps(payload, ensure_ascii=False))
            return True
        except Exception:
            logger.exception("Error saving expenses")
            return False

    def load_expenses(self) -> List[ExpenseRecord]:
        """Load the stored collection.

        Returns:
            List of records; empty when nothing is stored or the stored
            document can't be read
        """
        try:
            raw = self.backend.get_item(config.EXPENSES_KEY)
            if not raw:
                return []
            data = json.loads(raw)
            entries = data.get('expenses') if isinstance(data, dict) else None
            if not isinstance(entries, list):
                return []
            return [ExpenseRecord.from_dict(entry) for entry in entries if isinstance(entry, dict)]
        except Exception:
            logger.exception("Error loading expenses")
            return []

    def add_expense(self, expense: ExpenseRecord) -> bool:
        """Append an expense and save the whole collection."""
        try:
            expenses = self.load_expenses()
            expenses.append(expense)
            return self.save_expenses(expenses)
        except Exception:
            logger.exception("Error adding expense")
            return False

    def update_expense(self, expense_id: str,
                       updates: Union[ExpensePatch, ExpenseRecord, Mapping[str, Any]]) -> bool:
        """Merge changes into an existing expense.

        Args:
            expense_id: Id of the expense to change
            updates: An ExpensePatch, a full ExpenseRecord (its mutable
                     fields are applied) or a mapping of field values

        Returns:
            True if the expense was found and saved, False otherwise
        """
        try:
            patch = _as_patch(updates)
            expenses = self.load_expenses()
            for index, expense in enumerate(expenses):
                if expense.id == expense_id:
                    updated = patch.apply(expense)
                    updated.updated_at = utc_now_iso()
                    expenses[index] = updated
                    return self.save_expenses(expenses)
            return False
        except Exception:
            logger.exception("Error updating expense %s", expense_id)
            return False

    def delete_expense(self, expense_id: str) -> bool:
        """Remove an expense. Succeeds even when the id isn't stored."""
        try:
            expenses = [e for e in self.load_expenses() if e.id != expense_id]
            return self.save_expenses(expenses)
        except Exception:
            logger.exception("Error deleting expense %s", expense_id)
            return False

    def get_expense(self, expense_id: str) -> Optional[ExpenseRecord]:
        for expense in self.load_expenses():
            if expense.id == expense_id:
                return expense
        return None

    def clear_all_expenses(self) -> bool:
        try:
            self.backend.remove_item(config.EXPENSES_KEY)
            return True
        except Exception:
            logger.exception("Error clearing expenses")
            return False

    # ------------------------------------------------------------------
    # Custom categories
    # ------------------------------------------------------------------

    def save_custom_categories(self, categories: Iterable[Category]) -> bool:
        try:
            payload = {'customCategories': [_category_to_dict(c) for c in categories]}
            self.backend.set_item(config.CUSTOM_CATEGORIES_KEY, json.dumps(payload, ensure_ascii=False))
            return True
        except Exception:
            logger.exception("Error saving custom categories")
            return False

    def load_custom_categories(self) -> List[Category]:
        try:
            raw = self.backend.get_item(config.CUSTOM_CATEGORIES_KEY)
            if not raw:
                return []
            data = json.loads(raw)
            # Older documents stored the bare list
            entries = data.get('customCategories') if isinstance(data, dict) else data
            if not isinstance(entries, list):
                return []
            return [Category.from_dict(entry) for entry in entries if isinstance(entry, dict)]
        except Exception:
            logger.exception("Error loading custom categories")
            return []

    def add_custom_category(self, name: str, icon: str = '📦',
                            color: str = '#95A5A6') -> Optional[Category]:
        """Create and store a custom category named ``name``.

        The id is a slug of the name. Collisions with built-in ids are not
        checked.

        Returns:
            The new Category, or None if the name is blank or saving failed
        """
        if not name or not name.strip():
            return None
        category = Category(id=_slugify(name), name=name.strip(), icon=icon, color=color)
        categories = self.load_custom_categories()
        categories.append(category)
        return category if self.save_custom_categories(categories) else None

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_to_json(self) -> Optional[str]:
        """Serialize every expense and custom category for download.

        Returns:
            Indented JSON document, or None on failure
        """
        try:
            export_data = {
                'version': config.STORAGE_VERSION,
                'exportDate': utc_now_iso(),
                'expenses': [expense.to_dict() for expense in self.load_expenses()],
                'customCategories': [c.to_dict() for c in self.load_custom_categories()],
            }
            return json.dumps(export_data, indent=2, ensure_ascii=False)
        except Exception:
            logger.exception("Error exporting expenses")
            return None

    def import_from_json(self, document: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, Any]:
        """Merge an exported document into storage.

        Expenses whose id is already stored are skipped, so existing records
        are never overwritten and importing the same export twice is a no-op.
        Custom categories are appended as-is.

        Args:
            document: JSON text/bytes or an already parsed export document

        Returns:
            Dict with 'success', 'message' and 'imported_count'
        """
        try:
            if isinstance(document, bytes):
                document = document.decode('utf-8')
            data = json.loads(document) if isinstance(document, str) else document

            entries = data.get('expenses') if isinstance(data, Mapping) else None
            if not isinstance(entries, list):
                return {
                    'success': False,
                    'message': 'Invalid data format: expenses array not found',
                    'imported_count': 0,
                }
            if not all(isinstance(entry, Mapping) for entry in entries):
                return {
                    'success': False,
                    'message': 'Import failed: every expense must be an object',
                    'imported_count': 0,
                }

            existing = self.load_expenses()
            seen_ids = {expense.id for expense in existing}
            new_expenses = []
            for entry in entries:
                record = ExpenseRecord.from_dict(entry)
                if record.id in seen_ids:
                    continue
                seen_ids.add(record.id)
                new_expenses.append(record)

            if not self.save_expenses(existing + new_expenses):
                return {
                    'success': False,
                    'message': 'Import failed: could not save expenses',
                    'imported_count': 0,
                }

            custom = data.get('customCategories')
            if isinstance(custom, list):
                merged = self.load_custom_categories()
                merged.extend(Category.from_dict(entry) for entry in custom if isinstance(entry, Mapping))
                self.save_custom_categories(merged)

            logger.info("Imported %d expenses", len(new_expenses))
            return {
                'success': True,
                'message': f"Successfully imported {len(new_expenses)} expenses",
                'imported_count': len(new_expenses),
            }
        except Exception as e:
            logger.exception("Error importing expenses")
            return {
                'success': False,
                'message': f"Import failed: {e}",
                'imported_count': 0,
            }

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    def get_storage_info(self) -> Dict[str, Any]:
        """Report how much of the assumed capacity the stored data uses."""
        try:
            expenses_data = self.backend.get_item(config.EXPENSES_KEY) or '[]'
            categories_data = self.backend.get_item(config.CUSTOM_CATEGORIES_KEY) or '[]'
            used = len(expenses_data.encode('utf-8')) + len(categories_data.encode('utf-8'))

            return {
                'bytes_used': used,
                'bytes_remaining': max(0, self.capacity_bytes - used),
                'percent_used': min(100.0, (used / self.capacity_bytes) * 100),
                'record_count': len(self.load_expenses()),
                'custom_category_count': len(self.load_custom_categories()),
            }
        except Exception:
            logger.exception("Error getting storage info")
            return {
                'bytes_used': 0,
                'bytes_remaining': 0,
                'percent_used': 0.0,
                'record_count': 0,
                'custom_category_count': 0,
            }


def _record_to_dict(expense: Union[ExpenseRecord, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(expense, ExpenseRecord):
        return expense.to_dict()
    return ExpenseRecord.from_dict(expense).to_dict()


def _category_to_dict(category: Union[Category, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(category, Category):
        return category.to_dict()
    return Category.from_dict(category).to_dict()


def _as_patch(updates: Union[ExpensePatch, ExpenseRecord, Mapping[str, Any]]) -> ExpensePatch:
    if isinstance(updates, ExpensePatch):
        return updates
    if isinstance(updates, ExpenseRecord):
        return ExpensePatch.from_record(updates)
    return ExpensePatch.from_mapping(updates)


def _slugify(name: str) -> str:
    cleaned = ''.join(c for c in name.lower() if c.isalnum() or c in {' ', '_', '-'})
    cleaned = cleaned.strip().replace(' ', '_')
    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')
    return cleaned.strip('_') or 'custom'


_default_storage: Optional[ExpenseStorage] = None


def get_storage() -> ExpenseStorage:
    """Return the shared file-backed storage, creating it on first use."""
    global _default_storage
    if _default_storage is None:
        _default_storage = ExpenseStorage()
    return _default_storage
