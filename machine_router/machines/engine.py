"""Reservation engine: machine selection and lifecycle transitions.

    AVAILABLE --reserve--> AWAITING_DROPOFF --start, hardware ok--> RUNNING
    AWAITING_DROPOFF --start, hardware fails--> AWAITING_DROPOFF

Writes always go to the state table first and the cache second. The cache
is an accelerator only; failing to update it never fails an operation.

A machine left in AWAITING_DROPOFF is never released here. Nothing in this
service expires reservations.
"""

import logging
from typing import Optional

from machine_router.db.cache import DataCache
from machine_router.db.table import MachineStateTable
from machine_router.hardware.smart_machine import SmartMachineClient
from machine_router.machines.locks import MachineLocks
from machine_router.machines.models import (
    HttpResponseCode,
    MachineResponse,
    MachineStateDocument,
    MachineStatus,
)

logger = logging.getLogger(__name__)


class ReservationEngine:
    """Implements reserve / get / start against injected collaborators."""

    def __init__(
        self,
        table: MachineStateTable,
        cache: DataCache,
        hardware: SmartMachineClient,
        locks: Optional[MachineLocks] = None,
    ):
        self._table = table
        self._cache = cache
        self._hardware = hardware
        self._locks = locks or MachineLocks()

    def reserve_machine(self, location_id: str, job_id: str) -> MachineResponse:
        """Bind the first available machine at a location to a job."""
        candidates = [
            m for m in self._table.list_machines_at_location(location_id)
            if m.status == MachineStatus.AVAILABLE
        ]

        for machine in candidates:
            with self._locks.hold(machine.machine_id):
                claimed = self._table.compare_and_set_status(
                    machine.machine_id,
                    MachineStatus.AVAILABLE,
                    MachineStatus.AWAITING_DROPOFF,
                )
                if not claimed:
                    logger.info(
                        "Machine %s taken before it could be reserved, trying next",
                        machine.machine_id,
                    )
                    continue

                try:
                    self._table.update_machine_job_id(machine.machine_id, job_id)
                except Exception:
                    # Status is already AWAITING_DROPOFF; only an operator can release it
                    logger.error(
                        "Machine %s claimed for job %s but job id write failed; "
                        "left AWAITING_DROPOFF without a job",
                        machine.machine_id, job_id,
                    )
                    raise
                machine.status = MachineStatus.AWAITING_DROPOFF
                machine.current_job_id = job_id
                self._cache_put(machine)

            logger.info(
                "Reserved machine %s at %s for job %s",
                machine.machine_id, location_id, job_id,
            )
            return MachineResponse(status_code=HttpResponseCode.OK, machine=machine)

        logger.info("No available machine at location %s", location_id)
        return MachineResponse(
            status_code=HttpResponseCode.NOT_FOUND,
            message=f"No available machine at location {location_id}",
        )

    def get_machine(self, machine_id: str) -> MachineResponse:
        machine = self._lookup(machine_id)
        if machine is None:
            return _not_found(machine_id)
        return MachineResponse(status_code=HttpResponseCode.OK, machine=machine)

    def start_machine(self, machine_id: str) -> MachineResponse:
        """Start the cycle of a machine awaiting drop-off.

        The machine lock is held from the status check until the table and
        cache reflect RUNNING, so nothing else can mutate it mid-transition.
        A hardware failure leaves both table and cache untouched.
        """
        with self._locks.hold(machine_id):
            machine = self._lookup(machine_id)
            if machine is None:
                return _not_found(machine_id)

            if machine.status != MachineStatus.AWAITING_DROPOFF:
                logger.info(
                    "Refusing to start machine %s in status %s",
                    machine_id, machine.status.value,
                )
                return MachineResponse(
                    status_code=HttpResponseCode.BAD_REQUEST,
                    machine=machine,
                    message=f"Machine {machine_id} is {machine.status.value}, "
                            f"expected {MachineStatus.AWAITING_DROPOFF.value}",
                )

            try:
                self._hardware.start_cycle(machine_id)
            except Exception as e:
                logger.warning("Hardware failed to start machine %s: %s", machine_id, e)
                return MachineResponse(
                    status_code=HttpResponseCode.HARDWARE_ERROR,
                    message=f"Hardware error starting machine {machine_id}",
                )

            machine.status = MachineStatus.RUNNING
            self._table.update_machine_status(machine_id, MachineStatus.RUNNING)
            self._cache_put(machine)

        logger.info("Started machine %s (job %s)", machine_id, machine.current_job_id)
        return MachineResponse(status_code=HttpResponseCode.OK, machine=machine)

    # ------------------------------------------------------------------
    # Cache coordination
    # ------------------------------------------------------------------

    def _lookup(self, machine_id: str) -> Optional[MachineStateDocument]:
        """Read-through: cache first, then the table, populating the cache on a hit."""
        machine = self._cache_get(machine_id)
        if machine is not None:
            return machine

        machine = self._table.get_machine(machine_id)
        if machine is not None:
            self._cache_put(machine)
        return machine

    def _cache_get(self, machine_id: str) -> Optional[MachineStateDocument]:
        try:
            return self._cache.get(machine_id)
        except Exception as e:
            logger.warning("Cache read failed for %s, falling back to table: %s", machine_id, e)
            return None

    def _cache_put(self, machine: MachineStateDocument) -> None:
        try:
            self._cache.put(machine.machine_id, machine)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", machine.machine_id, e)


def _not_found(machine_id: str) -> MachineResponse:
    return MachineResponse(
        status_code=HttpResponseCode.NOT_FOUND,
        message=f"Machine {machine_id} not found",
    )
