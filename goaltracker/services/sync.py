"""
Load-on-start / save-on-change between a GoalStore and a KeyValueStore.

    UNLOADED --load()--> LOADING --all three reads settled--> READY

Saves only happen in READY. Before that the store still holds its empty
initial collections, and writing those out would clobber what is stored.
Once READY, collections that had nothing stored but picked up edits in the
meantime are saved once.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ..entities import ENTITY_TYPES, GoalKind
from ..storage import KeyValueStore
from ..store import GoalStore

logger = logging.getLogger(__name__)

STORAGE_KEYS: dict[GoalKind, str] = {
    GoalKind.HABIT: "goals_habits",
    GoalKind.TASK: "goals_tasks",
    GoalKind.PROGRESS: "goals_progress",
}

_ADAPTERS = {kind: TypeAdapter(tuple[cls, ...]) for kind, cls in ENTITY_TYPES.items()}


def dump_collection(kind: GoalKind, items) -> str:
    """Whole collection as one JSON array, camelCase field names."""
    return _ADAPTERS[kind].dump_json(tuple(items), by_alias=True).decode("utf-8")


def load_collection(kind: GoalKind, raw: str) -> tuple:
    """Inverse of dump_collection. Raises ValueError (pydantic ValidationError) on bad input."""
    return _ADAPTERS[kind].validate_json(raw)


class SyncState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"


class PersistenceSynchronizer:
    def __init__(self, store: GoalStore, kv: KeyValueStore) -> None:
        self.store = store
        self.kv = kv
        self.state = SyncState.UNLOADED
        self._inflight: dict[GoalKind, asyncio.Task] = {}
        self._missing: set[GoalKind] = set()
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def ready(self) -> bool:
        return self.state is SyncState.READY

    async def load(self) -> None:
        if self.state is not SyncState.UNLOADED:
            logger.warning("load() called in state %s; ignoring", self.state.value)
            return
        self.state = SyncState.LOADING
        kinds = list(STORAGE_KEYS)
        results = await asyncio.gather(*(self._read(kind) for kind in kinds))
        for kind, items in zip(kinds, results):
            if items is not None:
                self.store.replace(kind, items)
        self.state = SyncState.READY
        logger.info(
            "Goals loaded: habits=%d tasks=%d progress=%d",
            len(self.store.habits), len(self.store.tasks), len(self.store.progress),
        )
        # nothing stored yet, but edited while loading: persist those edits now
        for kind in kinds:
            items = self.store.collection(kind)
            if kind in self._missing and items:
                self._on_change(kind, items)
        self._missing.clear()

    async def _read(self, kind: GoalKind) -> Optional[tuple]:
        key = STORAGE_KEYS[kind]
        try:
            raw = await self.kv.get(key)
        except Exception as e:
            logger.warning("Reading %s failed, starting fresh: %s", key, e)
            return None
        if not raw:
            logger.info("No saved data under %s, starting fresh", key)
            self._missing.add(kind)
            return None
        try:
            return load_collection(kind, raw)
        except ValidationError as e:
            logger.warning("Snapshot under %s is unreadable, starting fresh: %s", key, e)
            return None

    def _on_change(self, kind: GoalKind, items: tuple) -> None:
        if self.state is not SyncState.READY:
            logger.debug("Not saving %s while %s", kind.value, self.state.value)
            return
        snapshot = dump_collection(kind, items)
        previous = self._inflight.get(kind)
        task = asyncio.get_running_loop().create_task(self._save(kind, snapshot, previous))
        self._inflight[kind] = task
        task.add_done_callback(lambda t, k=kind: self._forget(k, t))

    def _forget(self, kind: GoalKind, task: asyncio.Task) -> None:
        if self._inflight.get(kind) is task:
            del self._inflight[kind]

    async def _save(self, kind: GoalKind, snapshot: str, previous: Optional[asyncio.Task]) -> None:
        # same-key saves land in trigger order, so the newest snapshot is written last
        if previous is not None:
            await previous
        key = STORAGE_KEYS[kind]
        try:
            await self.kv.set(key, snapshot)
        except Exception:
            logger.exception("Saving %s failed; in-memory state is kept", key)

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        pending = [t for t in self._inflight.values() if not t.done()]
        while pending:
            await asyncio.gather(*pending)
            pending = [t for t in self._inflight.values() if not t.done()]

    def close(self) -> None:
        self._unsubscribe()
