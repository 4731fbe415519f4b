"""
Storage Module - Service Layer
================================
Persistence adapters: save / load / remove a serialized value under a key.
Every adapter is best-effort: failures are logged and reported through the
return value, never raised to the caller.
"""

import logging
from typing import Callable, Dict, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.helpers import now_utc
from config.database import Base
from modules.storage.models import StorageEntry

logger = logging.getLogger("canvasprint.storage")


class BaseStorage:
    """Abstract key-value storage interface."""

    def save(self, key: str, value: str) -> bool:
        raise NotImplementedError

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def remove(self, key: str) -> bool:
        raise NotImplementedError


class MemoryStorage(BaseStorage):
    """Process-local storage. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def save(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._data


class DatabaseStorage(BaseStorage):
    """Key-value storage in the local SQLite database (one row per key)."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def save(self, key: str, value: str) -> bool:
        db = self.session_factory()
        try:
            entry = db.get(StorageEntry, key)
            if entry:
                entry.value = value
                entry.updated_at = now_utc()
            else:
                db.add(StorageEntry(key=key, value=value, updated_at=now_utc()))
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save '{key}' to storage: {e}")
            return False
        finally:
            db.close()

    def load(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            entry = db.get(StorageEntry, key)
            return entry.value if entry else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load '{key}' from storage: {e}")
            return None
        finally:
            db.close()

    def remove(self, key: str) -> bool:
        db = self.session_factory()
        try:
            db.query(StorageEntry).filter(StorageEntry.key == key).delete()
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to remove '{key}' from storage: {e}")
            return False
        finally:
            db.close()


def open_storage(engine: Engine, session_factory: Callable[[], Session]) -> BaseStorage:
    """
    Create missing tables and return database-backed storage.
    Falls back to MemoryStorage when the database cannot be opened.
    """
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Database unavailable, basket will not survive a restart: {e}")
        return MemoryStorage()
    return DatabaseStorage(session_factory)
