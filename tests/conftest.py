"""Shared fixtures and fake key-value stores for the goal tracker tests."""

import asyncio

import pytest

from goaltracker.storage import MemoryKeyValueStore


class RecordingStore(MemoryKeyValueStore):
    """Memory store that remembers every write, in order."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    async def set(self, key, value):
        self.writes.append((key, value))
        await super().set(key, value)


class GatedStore(RecordingStore):
    """Reads block until `gate` is set, to hold the synchronizer in LOADING."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.gate = asyncio.Event()

    async def get(self, key):
        await self.gate.wait()
        return await super().get(key)


class BrokenReadStore(RecordingStore):
    def __init__(self, initial=None, broken_keys=()):
        super().__init__(initial)
        self.broken_keys = set(broken_keys)

    async def get(self, key):
        if key in self.broken_keys:
            raise ConnectionError(f"storage offline for {key}")
        return await super().get(key)


class BrokenWriteStore(MemoryKeyValueStore):
    async def set(self, key, value):
        raise ConnectionError("storage offline")


@pytest.fixture
def recording_store():
    return RecordingStore()
