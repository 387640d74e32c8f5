"""Process-wide machine state cache."""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from machine_router.machines.models import MachineStateDocument


class DataCache(ABC):
    """Key-value accelerator in front of the state table, keyed by machine id."""

    @abstractmethod
    def get(self, machine_id: str) -> Optional[MachineStateDocument]:
        ...

    @abstractmethod
    def put(self, machine_id: str, machine: MachineStateDocument) -> None:
        ...


class InMemoryDataCache(DataCache):
    """Thread-safe dict cache. No eviction or TTL."""

    def __init__(self):
        self._entries: Dict[str, MachineStateDocument] = {}
        self._lock = threading.Lock()

    def get(self, machine_id: str) -> Optional[MachineStateDocument]:
        with self._lock:
            entry = self._entries.get(machine_id)
            return entry.model_copy() if entry else None

    def put(self, machine_id: str, machine: MachineStateDocument) -> None:
        with self._lock:
            self._entries[machine_id] = machine.model_copy()

