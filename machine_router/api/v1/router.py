"""Aggregate all v1 API routers."""

from fastapi import APIRouter
from machine_router.api.v1.health import router as health_router
from machine_router.api.v1.machines import router as machines_router

v1_router = APIRouter()
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(machines_router, tags=["machines"])
