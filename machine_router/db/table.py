"""Machine state table: the durable source of truth for machine records."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from machine_router.errors import StoreError
from machine_router.machines.models import MachineStateDocument, MachineStatus

logger = logging.getLogger(__name__)


class MachineStateTable(ABC):
    """Abstract interface for the machine state table (in-memory or Supabase)."""

    @abstractmethod
    def list_machines_at_location(self, location_id: str) -> List[MachineStateDocument]:
        """All machines at a location, in the table's listing order."""
        ...

    @abstractmethod
    def get_machine(self, machine_id: str) -> Optional[MachineStateDocument]:
        ...

    @abstractmethod
    def update_machine_status(self, machine_id: str, status: MachineStatus) -> None:
        ...

    @abstractmethod
    def update_machine_job_id(self, machine_id: str, job_id: str) -> None:
        ...

    @abstractmethod
    def compare_and_set_status(
        self,
        machine_id: str,
        expected: MachineStatus,
        status: MachineStatus,
    ) -> bool:
        """Set status only if it currently equals `expected`. Returns whether it did."""
        ...


class InMemoryMachineStateTable(MachineStateTable):
    """Dict-backed table for local development and tests.

    Listing order is insertion order. Records are copied on the way in and
    out so callers never hold a reference to the stored row.
    """

    def __init__(self, machines: Iterable[MachineStateDocument] = ()):
        self._rows: Dict[str, MachineStateDocument] = {}
        self._lock = threading.Lock()
        for machine in machines:
            self._rows[machine.machine_id] = machine.model_copy()

    @classmethod
    def from_seed_file(cls, path: str) -> "InMemoryMachineStateTable":
        """Load machine records from a JSON list of objects."""
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        machines = [MachineStateDocument.model_validate(row) for row in rows]
        logger.info("Seeded %d machine(s) from %s", len(machines), path)
        return cls(machines)

    def list_machines_at_location(self, location_id: str) -> List[MachineStateDocument]:
        with self._lock:
            return [
                m.model_copy() for m in self._rows.values()
                if m.location_id == location_id
            ]

    def get_machine(self, machine_id: str) -> Optional[MachineStateDocument]:
        with self._lock:
            row = self._rows.get(machine_id)
            return row.model_copy() if row else None

    def update_machine_status(self, machine_id: str, status: MachineStatus) -> None:
        with self._lock:
            row = self._rows.get(machine_id)
            if row is not None:
                row.status = status

    def update_machine_job_id(self, machine_id: str, job_id: str) -> None:
        with self._lock:
            row = self._rows.get(machine_id)
            if row is not None:
                row.current_job_id = job_id

    def compare_and_set_status(
        self,
        machine_id: str,
        expected: MachineStatus,
        status: MachineStatus,
    ) -> bool:
        with self._lock:
            row = self._rows.get(machine_id)
            if row is None or row.status != expected:
                return False
            row.status = status
            return True


class SupabaseMachineStateTable(MachineStateTable):
    """State table backed by a Supabase (PostgREST) table.

    Expected columns: machine_id, location_id, status, current_job_id.
    """

    def __init__(self, client, table_name: str = "machines"):
        self._client = client
        self._table_name = table_name

    def _table(self):
        return self._client.table(self._table_name)

    def list_machines_at_location(self, location_id: str) -> List[MachineStateDocument]:
        response = (
            self._table()
            .select("machine_id, location_id, status, current_job_id")
            .eq("location_id", location_id)
            .order("machine_id")
            .execute()
        )
        return [_to_document(row) for row in (response.data or [])]

    def get_machine(self, machine_id: str) -> Optional[MachineStateDocument]:
        response = (
            self._table()
            .select("machine_id, location_id, status, current_job_id")
            .eq("machine_id", machine_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_document(response.data[0])

    def update_machine_status(self, machine_id: str, status: MachineStatus) -> None:
        self._table().update({"status": status.value}).eq("machine_id", machine_id).execute()

    def update_machine_job_id(self, machine_id: str, job_id: str) -> None:
        self._table().update({"current_job_id": job_id}).eq("machine_id", machine_id).execute()

    def compare_and_set_status(
        self,
        machine_id: str,
        expected: MachineStatus,
        status: MachineStatus,
    ) -> bool:
        # PostgREST returns the updated rows; an empty list means the filter missed
        response = (
            self._table()
            .update({"status": status.value})
            .eq("machine_id", machine_id)
            .eq("status", expected.value)
            .execute()
        )
        return bool(response.data)


def _to_document(row: Dict[str, Any]) -> MachineStateDocument:
    try:
        return MachineStateDocument.model_validate(row)
    except ValidationError as e:
        raise StoreError(f"Malformed machine row {row.get('machine_id')!r}: {e}")
