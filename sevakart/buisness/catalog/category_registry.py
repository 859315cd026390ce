"""
Category vocabulary.

Categories form an append-only set. Form input arrives either as an existing
category name or as a request for a new one; it is converted once, at the
boundary, into a CategoryChoice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from sevakart.buisness.core.record_store import RecordStore, get_record_store
from sevakart.buisness.errors import DomainValidationError
from sevakart.data.catalog.category import Category
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.catalog.category_registry")

ALL_CATEGORIES = 'all'

# Select value used by product forms for "add a new category"
ADD_NEW_SENTINEL = '__add_new__'


@dataclass(frozen=True)
class ExistingCategory:
    name: str


@dataclass(frozen=True)
class NewCategory:
    name: str


CategoryChoice = Union[ExistingCategory, NewCategory]


def parse_category_choice(value: Optional[str], new_name: Optional[str] = None) -> CategoryChoice:
    """Convert raw form values into a CategoryChoice."""
    if value == ADD_NEW_SENTINEL:
        return NewCategory((new_name or '').strip())
    return ExistingCategory((value or '').strip())


class CategoryRegistry:
    """Append-only category set backed by the Category table."""

    def __init__(self, store: RecordStore | None = None):
        self.store = store or get_record_store()

    def names(self) -> List[str]:
        """Distinct, trimmed category names in insertion order."""
        seen = []
        for category in self.store.all(Category):
            name = (category.name or '').strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    def vocabulary(self) -> List[str]:
        """Category names with the "all" pseudo-category first."""
        return [ALL_CATEGORIES] + [n for n in self.names() if n != ALL_CATEGORIES]

    def add(self, name: str) -> str:
        """Append a category; adding an existing name is a no-op."""
        name = (name or '').strip()
        if not name:
            raise DomainValidationError("Category name is required")
        if name == ALL_CATEGORIES or name == ADD_NEW_SENTINEL:
            raise DomainValidationError(f"'{name}' is reserved and cannot be used as a category")
        if name in self.names():
            return name
        self.store.create(Category(name=name))
        logger.info(f"Added category '{name}'")
        return name

    def resolve(self, choice: CategoryChoice) -> str:
        """Category name for a choice, appending it when it is new."""
        if isinstance(choice, NewCategory):
            return self.add(choice.name)
        name = choice.name
        if not name:
            raise DomainValidationError("Category is required")
        if name not in self.names():
            raise DomainValidationError(f"Unknown category '{name}'")
        return name
