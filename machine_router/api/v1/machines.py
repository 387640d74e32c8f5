"""Machine API: forwards HTTP requests to the request handler."""

from typing import Optional

from fastapi import APIRouter, Body, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from machine_router.auth.identity import bearer_token
from machine_router.machines.models import RequestModel

router = APIRouter()

# Set by main.py during lifespan
_handler = None


def set_handler(handler):
    global _handler
    _handler = handler


class MachineRequestBody(BaseModel):
    location_id: Optional[str] = None
    job_id: Optional[str] = None


@router.api_route("/machine/{rest:path}", methods=["GET", "POST"])
def route_machine(
    request: Request,
    rest: str,
    body: Optional[MachineRequestBody] = Body(None),
    authorization: Optional[str] = Header(None),
):
    """Reserve (POST /machine/request), get (GET /machine/{id}) or start
    (POST /machine/{id}/start) a machine.

    The response body is the handler's result; the HTTP status equals its
    status code.
    """
    if _handler is None:
        raise HTTPException(status_code=503, detail="Request handler not initialized")

    routed = RequestModel(
        method=request.method,
        path=f"/machine/{rest}",
        token=bearer_token(authorization),
        location_id=body.location_id if body else None,
        job_id=body.job_id if body else None,
    )
    result = _handler.handle(routed)
    return JSONResponse(
        status_code=int(result.status_code),
        content=result.model_dump(mode="json"),
    )
