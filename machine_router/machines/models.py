"""Machine record, status enumeration and request/response models."""

from enum import Enum, IntEnum
from typing import Optional
from pydantic import BaseModel


class MachineStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    AWAITING_DROPOFF = "AWAITING_DROPOFF"
    RUNNING = "RUNNING"
    # Reached by processes outside the reservation engine
    COMPLETE = "COMPLETE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class HttpResponseCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    HARDWARE_ERROR = 502


class MachineStateDocument(BaseModel):
    """State of one physical machine as held by the state table and cache."""
    machine_id: str
    location_id: str
    status: MachineStatus = MachineStatus.AVAILABLE
    current_job_id: Optional[str] = None


class MachineResponse(BaseModel):
    status_code: HttpResponseCode
    machine: Optional[MachineStateDocument] = None
    message: Optional[str] = None


class RequestModel(BaseModel):
    """A routed request: method, path and bearer token plus optional body fields."""
    method: str
    path: str
    token: str = ""
    location_id: Optional[str] = None
    job_id: Optional[str] = None


class RequestMachineRequestModel(RequestModel):
    location_id: str
    job_id: str


class GetMachineRequestModel(RequestModel):
    machine_id: str


class StartMachineRequestModel(RequestModel):
    machine_id: str
