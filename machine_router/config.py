"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_anon_key: str = ""

    # Collaborator wiring: "local" or "supabase"
    store_mode: str = "local"
    identity_mode: str = "local"
    hardware_mode: str = "local"

    # State table / hardware function names
    machines_table: str = "machines"
    start_cycle_function: str = "start-cycle"

    # Local mode
    machine_seed_file: Optional[str] = None
    api_tokens: str = ""  # comma-separated
    simulated_failing_machines: str = ""  # comma-separated machine ids

    # Server
    port: int = 8001
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def token_list(self) -> List[str]:
        return _split_csv(self.api_tokens)

    def failing_machine_list(self) -> List[str]:
        return _split_csv(self.simulated_failing_machines)


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


settings = Settings()
