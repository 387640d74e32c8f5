"""Routes authenticated requests onto reservation engine operations."""

import logging
import re

from machine_router.auth.identity import IdentityProviderClient
from machine_router.errors import UnauthorizedError
from machine_router.machines.engine import ReservationEngine
from machine_router.machines.models import (
    GetMachineRequestModel,
    HttpResponseCode,
    MachineResponse,
    RequestMachineRequestModel,
    RequestModel,
    StartMachineRequestModel,
)

logger = logging.getLogger(__name__)

_GET_MACHINE_PATH = re.compile(r"/machine/([a-zA-Z0-9-]+)")
_START_MACHINE_PATH = re.compile(r"/machine/([a-zA-Z0-9-]+)/start")


class ApiHandler:
    """Validates the caller's token, then dispatches on method and path."""

    def __init__(self, engine: ReservationEngine, identity: IdentityProviderClient):
        self._engine = engine
        self._identity = identity

    def check_token(self, token: str) -> None:
        if not self._identity.validate_token(token):
            raise UnauthorizedError("Invalid token")

    def handle(self, request: RequestModel) -> MachineResponse:
        try:
            self.check_token(request.token)
        except UnauthorizedError as e:
            logger.info("Unauthorized %s %s", request.method, request.path)
            return MachineResponse(status_code=e.status_code, message=e.message)

        method = request.method.upper()

        if method == "POST" and request.path == "/machine/request":
            if not request.location_id or not request.job_id:
                return MachineResponse(
                    status_code=HttpResponseCode.BAD_REQUEST,
                    message="location_id and job_id are required",
                )
            reserve = RequestMachineRequestModel(**request.model_dump())
            return self._engine.reserve_machine(reserve.location_id, reserve.job_id)

        match = _GET_MACHINE_PATH.fullmatch(request.path)
        if method == "GET" and match:
            get = GetMachineRequestModel(**request.model_dump(), machine_id=match.group(1))
            return self._engine.get_machine(get.machine_id)

        match = _START_MACHINE_PATH.fullmatch(request.path)
        if method == "POST" and match:
            start = StartMachineRequestModel(**request.model_dump(), machine_id=match.group(1))
            return self._engine.start_machine(start.machine_id)

        logger.warning("No route for %s %s", method, request.path)
        return MachineResponse(
            status_code=HttpResponseCode.INTERNAL_SERVER_ERROR,
            message=f"No route for {method} {request.path}",
        )
