from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field, model_validator

from sortviz.algorithms.registry import AlgorithmKey
from sortviz.core.engine.state import RunState
from sortviz.core.engine.store import SortOrder
from sortviz.core.errors import InvalidInput, InvalidTransition
from sortviz.core.run.assembly import SessionHandle
from sortviz.core.run.registry import RunRecord, RunStatus
from sortviz.core.run.worker import RunWorker
from sortviz.datasets.generator import DatasetSource, Pattern

router = APIRouter(prefix="/session", tags=["session"])


def get_session(request: Request) -> SessionHandle:
    return request.app.state.session


def get_worker(request: Request) -> RunWorker:
    return request.app.state.worker


# =========================
# Schemas
# =========================

class StatisticsResponse(BaseModel):
    comparisons: int
    writes: int
    elapsed_ms: float


class SessionResponse(BaseModel):
    status: RunState
    run_id: str | None
    algorithm: str
    order: SortOrder
    pacing_ms: float
    source: str | None
    statistics: StatisticsResponse
    values: list[int]


class DatasetRequest(BaseModel):
    pattern: Pattern | None = None
    size: int | None = Field(default=None, description="Length of a generated dataset")
    custom: str | None = Field(default=None, description='Comma-separated integers, e.g. "5,3,8"')

    @model_validator(mode="after")
    def _one_source(self) -> "DatasetRequest":
        if (self.custom is None) == (self.pattern is None):
            raise ValueError("provide either pattern (+size) or custom")
        return self


class SettingsRequest(BaseModel):
    algorithm: AlgorithmKey | None = None
    order: SortOrder | None = None
    pacing_ms: float | None = Field(default=None, ge=0)
    speed: int | None = Field(default=None, ge=1, le=10)


class StartResponse(BaseModel):
    accepted: bool
    run_id: str | None = None
    status: RunState


class EventsResponse(BaseModel):
    events: list[dict[str, Any]]
    last_sequence: int


class RunDetailsResponse(BaseModel):
    run_id: str
    algorithm: str
    order: str
    length: int
    status: RunStatus
    started_at_utc: datetime
    updated_at_utc: datetime
    comparisons: int | None = None
    writes: int | None = None
    elapsed_ms: float | None = None
    error_type: str | None = None
    error_message: str | None = None


class RunsListResponse(BaseModel):
    runs: list[RunDetailsResponse]


def _describe(session: SessionHandle) -> SessionResponse:
    c = session.controller
    stats = c.statistics()
    return SessionResponse(
        status=c.status,
        run_id=c.run_id,
        algorithm=c.algorithm,
        order=c.order,
        pacing_ms=c.pacing.delay_ms,
        source=c.source.label if c.source is not None else None,
        statistics=StatisticsResponse(
            comparisons=stats.comparisons,
            writes=stats.writes,
            elapsed_ms=stats.elapsed_ms,
        ),
        values=list(c.snapshot()),
    )


def _details(rec: RunRecord) -> RunDetailsResponse:
    return RunDetailsResponse(
        run_id=rec.run_id,
        algorithm=rec.algorithm,
        order=rec.order,
        length=rec.length,
        status=rec.status,
        started_at_utc=rec.started_at_utc,
        updated_at_utc=rec.updated_at_utc,
        comparisons=rec.comparisons,
        writes=rec.writes,
        elapsed_ms=rec.elapsed_ms,
        error_type=rec.error_type,
        error_message=rec.error_message,
    )


# =========================
# Routes
# =========================

@router.get("", response_model=SessionResponse)
def get_state(session: SessionHandle = Depends(get_session)) -> SessionResponse:
    return _describe(session)


@router.post("/dataset", response_model=SessionResponse)
def load_dataset(payload: DatasetRequest, session: SessionHandle = Depends(get_session)) -> SessionResponse:
    c = session.controller
    try:
        if payload.custom is not None:
            c.load_custom(payload.custom)
        else:
            assert payload.pattern is not None
            size = payload.size if payload.size is not None else len(c.snapshot())
            c.load_dataset(DatasetSource.generated(payload.pattern, size))
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _describe(session)


@router.put("/settings", response_model=SessionResponse)
def update_settings(payload: SettingsRequest, session: SessionHandle = Depends(get_session)) -> SessionResponse:
    c = session.controller
    try:
        if payload.algorithm is not None:
            c.select_algorithm(payload.algorithm)
        if payload.order is not None and payload.order != c.order:
            c.set_order(payload.order)
        if payload.speed is not None:
            c.set_speed(payload.speed)
        if payload.pacing_ms is not None:
            c.set_pacing_ms(payload.pacing_ms)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _describe(session)


@router.post("/start", response_model=StartResponse, status_code=202)
def start_run(
    session: SessionHandle = Depends(get_session),
    worker: RunWorker = Depends(get_worker),
) -> StartResponse:
    try:
        run_id = worker.launch()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return StartResponse(accepted=run_id is not None, run_id=run_id, status=session.controller.status)


@router.post("/pause", response_model=SessionResponse)
def pause_run(session: SessionHandle = Depends(get_session)) -> SessionResponse:
    try:
        session.controller.pause()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _describe(session)


@router.post("/reset", response_model=SessionResponse)
def reset_session(session: SessionHandle = Depends(get_session)) -> SessionResponse:
    try:
        session.controller.reset()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _describe(session)


@router.get("/events", response_model=EventsResponse)
def list_events(
    after: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1),
    session: SessionHandle = Depends(get_session),
) -> EventsResponse:
    events = session.feed.since(after, limit=limit)
    last = events[-1]["sequence"] if events else after
    return EventsResponse(events=events, last_sequence=last)


@router.get("/runs", response_model=RunsListResponse)
def list_runs(session: SessionHandle = Depends(get_session)) -> RunsListResponse:
    return RunsListResponse(runs=[_details(rec) for rec in session.runs.list()])


@router.get("/runs/{run_id}", response_model=RunDetailsResponse)
def get_run(run_id: str, session: SessionHandle = Depends(get_session)) -> RunDetailsResponse:
    rec = session.runs.get(run_id=run_id)
    if rec is None:
        raise HTTPException(status_code=404, detail=f"run {run_id!r} not found")
    return _details(rec)
