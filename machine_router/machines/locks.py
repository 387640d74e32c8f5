"""Per-machine mutual exclusion."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class MachineLocks:
    """Lock per machine id, kept only while some caller holds or waits on it."""

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, machine_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(machine_id, threading.Lock())
            self._users[machine_id] = self._users.get(machine_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[machine_id] -= 1
                if self._users[machine_id] == 0:
                    del self._users[machine_id]
                    del self._locks[machine_id]
