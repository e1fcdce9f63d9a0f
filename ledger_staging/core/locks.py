import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class BatchLockRegistry:
    """One in-process lock per batch id.

    Serializes ingest/replace/delete/sync against the same batch inside a
    worker process. Cross-process serialization comes from the row lock
    taken on the batch record (SELECT ... FOR UPDATE).

    Entries are reference counted and dropped once the last holder or
    waiter leaves, so the registry only holds keys that are in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _acquire_entry(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.holders += 1
            return entry

    def _release_entry(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        entry = self._acquire_entry(key)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(key, entry)


def tenant_lock_key(user_email: str, company: str) -> str:
    """Lock key guarding a tenant's current-batch pointer"""
    return f"tenant:{user_email}:{company}"


batch_locks = BatchLockRegistry()
