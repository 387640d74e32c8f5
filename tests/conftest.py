import pytest

from machine_router.db.cache import InMemoryDataCache
from machine_router.db.table import InMemoryMachineStateTable
from machine_router.hardware.smart_machine import SimulatedSmartMachineClient
from machine_router.machines.engine import ReservationEngine
from machine_router.machines.models import MachineStateDocument, MachineStatus


class CountingTable(InMemoryMachineStateTable):
    """In-memory table that counts reads and writes."""

    def __init__(self, machines=()):
        super().__init__(machines)
        self.get_calls = 0
        self.list_calls = 0
        self.writes = 0

    def get_machine(self, machine_id):
        self.get_calls += 1
        return super().get_machine(machine_id)

    def list_machines_at_location(self, location_id):
        self.list_calls += 1
        return super().list_machines_at_location(location_id)

    def update_machine_status(self, machine_id, status):
        self.writes += 1
        super().update_machine_status(machine_id, status)

    def update_machine_job_id(self, machine_id, job_id):
        self.writes += 1
        super().update_machine_job_id(machine_id, job_id)

    def compare_and_set_status(self, machine_id, expected, status):
        self.writes += 1
        return super().compare_and_set_status(machine_id, expected, status)


class BrokenCache(InMemoryDataCache):
    def get(self, machine_id):
        raise ConnectionError("cache down")

    def put(self, machine_id, machine):
        raise ConnectionError("cache down")


def machine(machine_id, location_id="L1", status=MachineStatus.AVAILABLE, job_id=None):
    return MachineStateDocument(
        machine_id=machine_id,
        location_id=location_id,
        status=status,
        current_job_id=job_id,
    )


@pytest.fixture
def table():
    return CountingTable([
        machine("m1"),
        machine("m2"),
        machine("m3", location_id="L2", status=MachineStatus.RUNNING, job_id="old"),
        machine("m4", location_id="L2", status=MachineStatus.AWAITING_DROPOFF, job_id="j4"),
    ])


@pytest.fixture
def cache():
    return InMemoryDataCache()


@pytest.fixture
def hardware():
    return SimulatedSmartMachineClient()


@pytest.fixture
def engine(table, cache, hardware):
    return ReservationEngine(table, cache, hardware)
