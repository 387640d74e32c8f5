"""Typed errors carrying a response status code and a message."""

from typing import Optional

from machine_router.machines.models import HttpResponseCode


class ApiError(Exception):
    """Base error for conditions that map onto a response status code."""

    status_code: HttpResponseCode = HttpResponseCode.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[HttpResponseCode] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthorizedError(ApiError):
    status_code = HttpResponseCode.UNAUTHORIZED

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class HardwareError(ApiError):
    """A smart machine rejected or failed a command."""

    status_code = HttpResponseCode.HARDWARE_ERROR


class StoreError(ApiError):
    """The state table returned something that is not a machine record."""
