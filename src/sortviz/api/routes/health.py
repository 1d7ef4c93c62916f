from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from sortviz.algorithms.registry import ALGORITHM_KEYS
from sortviz.core.config.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """
    Minimal health check response. Side-effect free.
    """

    status: str
    environment: str
    session_status: str
    algorithms: list[str]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
def health(request: Request) -> HealthResponse:
    return HealthResponse(
        status="ok",
        environment=settings.env,
        session_status=request.app.state.session.controller.status,
        algorithms=list(ALGORITHM_KEYS),
    )
