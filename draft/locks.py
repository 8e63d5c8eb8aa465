"""Per-draft locks serialising read-modify-write cycles on a draft.

Usage::

    with DRAFT_LOCKS.hold(draft_id):
        draft = repo.get_draft(draft_id)
        # ... validate ...
        repo.record_pick(...)

Locks only cover this process; the repository's version check covers
writers in other processes. An entry lives only while some thread holds or
waits on it, so the registry stays as small as the number of busy drafts.
"""

import threading
from contextlib import contextmanager
from typing import Dict


class DraftLockRegistry:
    def __init__(self):
        self._registry_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    def _checkout(self, draft_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(draft_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[draft_id] = lock
            self._users[draft_id] = self._users.get(draft_id, 0) + 1
            return lock

    def _checkin(self, draft_id: str):
        with self._registry_lock:
            self._users[draft_id] -= 1
            if self._users[draft_id] == 0:
                del self._users[draft_id]
                del self._locks[draft_id]

    @contextmanager
    def hold(self, draft_id: str):
        lock = self._checkout(draft_id)
        try:
            with lock:
                yield
        finally:
            self._checkin(draft_id)

    def __len__(self) -> int:
        return len(self._locks)


DRAFT_LOCKS = DraftLockRegistry()
