"""
RecordStore - persistence and change notification for marketplace records

Wraps the Flask-SQLAlchemy session behind a small collection-style interface
(create / update / conditional update / delete / query-by-equality) and
notifies subscribers with the full current record set after every committed
change to a model.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from flask import current_app
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from sevakart import db
from sevakart.buisness.errors import PersistenceError, RecordConflictError, RecordNotFoundError
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.buisness.core.record_store")

Subscriber = Callable[[List[Any]], None]


class RecordStore:
    """
    Collection-style facade over the SQLAlchemy session.

    Every write commits immediately. Commit failures roll the session back and
    surface as PersistenceError; optimistic-lock failures surface as
    RecordConflictError. Callers decide whether to propagate or log them.
    """

    def __init__(self, session=None):
        self._session = session
        self._subscribers: Dict[type, List[Subscriber]] = {}

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    # ========== Reads ==========

    def get(self, model, record_id):
        if record_id is None:
            return None
        return self.session.get(model, record_id)

    def require(self, model, record_id):
        record = self.get(model, record_id)
        if record is None:
            raise RecordNotFoundError(f"{model.__name__} {record_id} not found")
        return record

    def all(self, model) -> list:
        return self.session.query(model).order_by(model.id).all()

    def query_by(self, model, field: str, value) -> list:
        """Records whose `field` equals `value`, oldest first."""
        column = getattr(model, field)
        return self.session.query(model).filter(column == value).order_by(model.id).all()

    # ========== Writes ==========

    def create(self, record) -> int:
        """Insert a record and return its store-assigned id."""
        self.session.add(record)
        self._commit(type(record), f"create {type(record).__name__}")
        logger.debug(f"Created {type(record).__name__} {record.id}")
        return record.id

    def save(self, record) -> None:
        """Commit pending changes made to an already loaded record."""
        self._commit(type(record), f"save {type(record).__name__} {record.id}")

    def update(self, model, record_id, fields: Dict[str, Any]):
        record = self.require(model, record_id)
        for key, value in fields.items():
            setattr(record, key, value)
        self._commit(model, f"update {model.__name__} {record_id}")
        return record

    def conditional_update(self, model, record_id, expected: Dict[str, Any], fields: Dict[str, Any]) -> bool:
        """
        Compare-and-swap update.

        Applies `fields` only when the row still matches every value in
        `expected`. Versioned models get their version bumped as part of the
        same statement.

        Returns:
            bool: True if the row was updated, False if it no longer matched
        """
        values = dict(fields)
        version_col = inspect(model).version_id_col
        if version_col is not None:
            values[version_col.key] = version_col + 1

        try:
            count = (
                self.session.query(model)
                .filter_by(id=record_id, **expected)
                .update(values, synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Conditional update of {model.__name__} {record_id} failed: {e}")
            raise PersistenceError(f"Could not update {model.__name__} {record_id}") from e

        if count:
            self._notify(model)
        return count == 1

    def delete(self, model, record_id) -> bool:
        record = self.get(model, record_id)
        if record is None:
            return False
        self.session.delete(record)
        self._commit(model, f"delete {model.__name__} {record_id}")
        return True

    def conditional_delete(self, model, record_id, expected: Dict[str, Any]) -> bool:
        """
        Delete a record only while it still matches `expected`.

        Deletes go through the ORM so relationship cascades apply; versioned
        models are additionally guarded by their version column.
        """
        record = self.session.query(model).filter_by(id=record_id, **expected).first()
        if record is None:
            return False
        self.session.delete(record)
        self._commit(model, f"delete {model.__name__} {record_id}")
        return True

    def replace_where(self, model, field: str, value, records: list) -> None:
        """Atomically replace every record whose `field` equals `value` with `records`."""
        try:
            for existing in self.query_by(model, field, value):
                self.session.delete(existing)
            # Flush deletes first so unique keys can be reused by the new rows
            self.session.flush()
            self.session.add_all(records)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Replacing {model.__name__} where {field}={value} failed: {e}")
            raise PersistenceError(f"Could not replace {model.__name__} records") from e
        self._commit(model, f"replace {model.__name__} where {field}={value}")

    # ========== Change notification ==========

    def subscribe(self, model, callback: Subscriber) -> Callable[[], None]:
        """
        Register `callback` for changes to `model`.

        The callback receives the full current record set right away and after
        every committed change. Returns a function that unsubscribes.
        """
        self._subscribers.setdefault(model, []).append(callback)
        self._deliver(model, callback, self.all(model))

        def unsubscribe():
            callbacks = self._subscribers.get(model, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _notify(self, model) -> None:
        callbacks = list(self._subscribers.get(model, ()))
        if not callbacks:
            return
        records = self.all(model)
        for callback in callbacks:
            self._deliver(model, callback, records)

    @staticmethod
    def _deliver(model, callback: Subscriber, records: list) -> None:
        try:
            callback(records)
        except Exception:
            # A broken subscriber must not undo or block a committed write
            logger.exception(f"Subscriber for {model.__name__} raised")

    def _commit(self, model, action: str) -> None:
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            logger.warning(f"Stale write on {action}: {e}")
            raise RecordConflictError(f"{model.__name__} was modified concurrently") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Commit failed on {action}: {e}")
            raise PersistenceError(f"Could not {action}") from e
        self._notify(model)


def get_record_store() -> RecordStore:
    """The application's shared RecordStore."""
    return current_app.extensions['sevakart_record_store']
