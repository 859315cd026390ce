"""
Dictionary conversion for SQLAlchemy models.

Records go out through the JSON API with `to_dict` and come in from the debug
data build with `from_dict`.
"""

from datetime import datetime
from sqlalchemy import inspect


AUDIT_FIELDS = ('created_at', 'updated_at')


def _column_keys(model):
    return [column.key for column in inspect(model).columns]


class DataInsertionMixin:

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Build an unsaved instance from the mapped columns found in `data_dict`.
        Unknown keys, `skip_fields` and null audit timestamps are ignored so
        column defaults apply.
        """
        skip = set(skip_fields or ())
        kwargs = {
            key: data_dict[key]
            for key in _column_keys(cls)
            if key in data_dict and key not in skip
            and not (key in AUDIT_FIELDS and data_dict[key] is None)
        }
        return cls(**kwargs)

    def to_dict(self, include_audit_fields=True):
        """Mapped columns as a JSON-ready dict (datetimes in ISO 8601)"""
        data = {}
        for key in _column_keys(type(self)):
            if key in AUDIT_FIELDS and not include_audit_fields:
                continue
            value = getattr(self, key)
            data[key] = value.isoformat() if isinstance(value, datetime) else value
        return data
