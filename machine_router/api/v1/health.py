"""Health check endpoint."""

import platform
import sys

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Service health and collaborator wiring."""
    app_settings = request.app.state.settings
    return {
        "status": "healthy",
        "store_mode": app_settings.store_mode,
        "identity_mode": app_settings.identity_mode,
        "hardware_mode": app_settings.hardware_mode,
        "python_version": sys.version,
        "platform": platform.platform(),
    }
