from __future__ import annotations

from fastapi import APIRouter, status
from pydantic import BaseModel

from sticktable_exporter import __version__

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str = __version__


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check() -> HealthResponse:
    """Basic health check endpoint. Does not touch the control socket."""
    return HealthResponse(status="healthy")
