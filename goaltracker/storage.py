"""
Key-value storage used for collection snapshots.

The synchronizer only needs async get/set of string values under a handful of
fixed keys; anything that can do that can back it.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from . import models

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Stored value, or None when the key was never written."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite key. Raises on failure."""


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore(KeyValueStore):
    """Rows in kv_entries. Session work is blocking, so it runs in a worker thread."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def _get(self, key: str) -> Optional[str]:
        db: Session = self.session_factory()
        try:
            row = db.get(models.KVEntry, key)
            return row.value if row else None
        finally:
            db.close()

    def _set(self, key: str, value: str) -> None:
        db: Session = self.session_factory()
        try:
            row = db.get(models.KVEntry, key)
            if row:
                row.value = value
                row.updated_at = datetime.utcnow()
            else:
                db.add(models.KVEntry(key=key, value=value))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)
        logger.debug("Stored %s (%d bytes)", key, len(value))
