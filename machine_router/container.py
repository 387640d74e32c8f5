"""Builds the process-wide collaborators from settings."""

import logging
from dataclasses import dataclass

from machine_router.auth.identity import (
    IdentityProviderClient,
    StaticTokenIdentityProviderClient,
    SupabaseIdentityProviderClient,
)
from machine_router.config import Settings
from machine_router.db.cache import DataCache, InMemoryDataCache
from machine_router.db.supabase_client import get_anon_supabase, get_supabase
from machine_router.db.table import (
    InMemoryMachineStateTable,
    MachineStateTable,
    SupabaseMachineStateTable,
)
from machine_router.hardware.smart_machine import (
    SimulatedSmartMachineClient,
    SmartMachineClient,
    SupabaseSmartMachineClient,
)
from machine_router.machines.engine import ReservationEngine
from machine_router.machines.handler import ApiHandler

logger = logging.getLogger(__name__)

_MODES = ("local", "supabase")


@dataclass
class Container:
    """One instance of each collaborator, shared by every request."""
    table: MachineStateTable
    cache: DataCache
    hardware: SmartMachineClient
    identity: IdentityProviderClient
    engine: ReservationEngine
    handler: ApiHandler


def build_container(settings: Settings) -> Container:
    for name in ("store_mode", "identity_mode", "hardware_mode"):
        value = getattr(settings, name)
        if value not in _MODES:
            raise ValueError(f"{name} must be one of {_MODES}, got {value!r}")

    if settings.store_mode == "supabase":
        table = SupabaseMachineStateTable(get_supabase(), settings.machines_table)
    elif settings.machine_seed_file:
        table = InMemoryMachineStateTable.from_seed_file(settings.machine_seed_file)
    else:
        table = InMemoryMachineStateTable()

    if settings.identity_mode == "supabase":
        identity = SupabaseIdentityProviderClient(get_anon_supabase())
    else:
        identity = StaticTokenIdentityProviderClient(settings.token_list())

    if settings.hardware_mode == "supabase":
        hardware = SupabaseSmartMachineClient(get_supabase(), settings.start_cycle_function)
    else:
        hardware = SimulatedSmartMachineClient(settings.failing_machine_list())

    cache = InMemoryDataCache()
    engine = ReservationEngine(table, cache, hardware)
    handler = ApiHandler(engine, identity)

    logger.info(
        "Collaborators: store=%s identity=%s hardware=%s",
        settings.store_mode, settings.identity_mode, settings.hardware_mode,
    )
    return Container(
        table=table,
        cache=cache,
        hardware=hardware,
        identity=identity,
        engine=engine,
        handler=handler,
    )
