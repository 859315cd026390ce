"""
Identity of the caller as seen by the business layer.

The business layer never touches Flask-Login directly; routes build an
Identity from `current_user` and pass it down.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask_login import current_user

from sevakart.data.core.user import ROLE_SUPPLIER, ROLE_VENDOR


@dataclass(frozen=True)
class Identity:
    id: str
    role: str
    label: str = ''

    @property
    def is_vendor(self) -> bool:
        return self.role == ROLE_VENDOR

    @property
    def is_supplier(self) -> bool:
        return self.role == ROLE_SUPPLIER

    @classmethod
    def from_user(cls, user) -> Identity:
        return cls(id=user.uid, role=user.role, label=user.label)


def current_identity() -> Identity | None:
    """Identity of the logged-in user, or None when not authenticated."""
    if current_user is None or not current_user.is_authenticated:
        return None
    return Identity.from_user(current_user)
