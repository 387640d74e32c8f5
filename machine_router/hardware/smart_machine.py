"""Smart machine clients: issue start-cycle commands to physical machines."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Iterable, List

from machine_router.errors import HardwareError

logger = logging.getLogger(__name__)


class SmartMachineClient(ABC):
    """Abstract interface for the hardware control plane."""

    @abstractmethod
    def start_cycle(self, machine_id: str) -> None:
        """Start the machine's cycle. Raises on any hardware-side rejection."""
        ...


class SimulatedSmartMachineClient(SmartMachineClient):
    """Local stand-in for the hardware control plane.

    Machines listed in `failing_machines` reject every start command.
    """

    def __init__(self, failing_machines: Iterable[str] = ()):
        self._failing = set(failing_machines)
        self._lock = threading.Lock()
        self.started: List[str] = []

    def fail_machine(self, machine_id: str) -> None:
        with self._lock:
            self._failing.add(machine_id)

    def repair_machine(self, machine_id: str) -> None:
        with self._lock:
            self._failing.discard(machine_id)

    def start_cycle(self, machine_id: str) -> None:
        with self._lock:
            if machine_id in self._failing:
                raise HardwareError(f"Machine {machine_id} rejected start command")
            self.started.append(machine_id)
        logger.debug("Simulated start cycle for %s", machine_id)


class SupabaseSmartMachineClient(SmartMachineClient):
    """Starts cycles by invoking a Supabase Edge Function.

    The function receives {"machine_id": ...} and must answer with a 2xx
    once the device has accepted the command.
    """

    def __init__(self, client, function_name: str = "start-cycle"):
        self._client = client
        self._function_name = function_name

    def start_cycle(self, machine_id: str) -> None:
        try:
            self._client.functions.invoke(
                self._function_name,
                invoke_options={"body": {"machine_id": machine_id}},
            )
        except Exception as e:
            raise HardwareError(
                f"Start cycle failed for {machine_id}: {type(e).__name__}: {e}"
            ) from e
