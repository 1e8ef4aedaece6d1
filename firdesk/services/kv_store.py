"""Durable key-value stores for client-local state."""

import logging
from typing import Protocol

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from firdesk.database import init_db, make_session_maker
from firdesk.models import KeyValueEntry

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when local state cannot be read or written."""

    pass


class KeyValueStore(Protocol):
    """Minimal string key-value interface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used in tests and as a throwaway fallback."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqlKeyValueStore:
    """
    Key-value store backed by a SQL table (``kv_entries``).

    Every ``set`` commits before returning, so a value written is durable
    once the call completes.
    """

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self._session_maker = make_session_maker(engine)
        if create_tables:
            init_db(engine)

    def get(self, key: str) -> str | None:
        try:
            with self._session_maker() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_maker() as session:
                entry = session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        logger.debug(f"Stored {key!r} ({len(value)} bytes)")
