"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.schemas import (
    DataMessage,
    EntitySnapshotOut,
    EntityTable,
    ReadingBatch,
    SessionStatusOut,
)
from services.session import (
    MonitorSession,
    SessionInactiveError,
    SessionTable,
    build_default_session,
)

router = APIRouter()


def get_session() -> MonitorSession:
    return build_default_session()


def _table(table: SessionTable) -> EntityTable:
    return EntityTable(
        message_count=table.message_count,
        rows=[EntitySnapshotOut.from_snapshot(snapshot) for snapshot in table.rows],
    )


def _conflict(exc: SessionInactiveError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=str(exc),
    )


@router.post(
    "/session/start",
    response_model=SessionStatusOut,
    summary="Start a monitoring session with empty state.",
)
async def start_session(
    session: MonitorSession = Depends(get_session),
) -> SessionStatusOut:
    return SessionStatusOut.from_status(session.start())


@router.post(
    "/session/stop",
    response_model=SessionStatusOut,
    summary="Stop the monitoring session and discard all entity state.",
)
async def stop_session(
    session: MonitorSession = Depends(get_session),
) -> SessionStatusOut:
    return SessionStatusOut.from_status(session.stop())


@router.get(
    "/session",
    response_model=SessionStatusOut,
    summary="Report session activity and counters.",
)
async def session_status(
    session: MonitorSession = Depends(get_session),
) -> SessionStatusOut:
    return SessionStatusOut.from_status(session.status())


@router.post(
    "/readings",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=EntityTable,
    summary="Apply a batch of per-entity readings in order (409 when no session runs).",
)
async def post_readings(
    batch: ReadingBatch,
    session: MonitorSession = Depends(get_session),
) -> EntityTable:
    try:
        table = session.ingest_batch(
            (item.entity_key, item.reading) for item in batch.readings
        )
    except SessionInactiveError as exc:
        raise _conflict(exc) from exc
    return _table(table)


@router.post(
    "/messages",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=EntityTable,
    summary="Apply one inference data-channel message (409 when no session runs).",
)
async def post_message(
    message: DataMessage = Body(..., description="Serialized workflow output message."),
    session: MonitorSession = Depends(get_session),
) -> EntityTable:
    try:
        table = session.handle_message(message)
    except SessionInactiveError as exc:
        raise _conflict(exc) from exc
    return _table(table)


@router.get(
    "/entities",
    response_model=EntityTable,
    summary="Current estimates for every known entity, sorted by key.",
)
async def list_entities(
    session: MonitorSession = Depends(get_session),
) -> EntityTable:
    return _table(session.table())


@router.get(
    "/entities/{entity_key}",
    response_model=EntitySnapshotOut,
    summary="Current estimate for one entity.",
)
async def get_entity(
    entity_key: str,
    session: MonitorSession = Depends(get_session),
) -> EntitySnapshotOut:
    try:
        snapshot = session.snapshot(entity_key)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entity {entity_key!r} has not been seen.",
        ) from exc
    return EntitySnapshotOut.from_snapshot(snapshot)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
