"""Timer CRUD, playback and import/export endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import Response
from loguru import logger

from looptimer.config.settings import settings
from looptimer.core.auth import get_current_user_id
from looptimer.core.errors import LooptimerError
from looptimer.core.http import to_http_exception
from looptimer.db.session import get_session
from looptimer.timers import service
from looptimer.timers.export import export_filename, export_timer_as_json
from looptimer.timers.flatten import PlaybackScript
from looptimer.timers.schemas import DuplicateTimerRequest, TimerCreate, TimerResponse, TimerSummary, TimerUpdate

router = APIRouter(prefix="/timers", tags=["timers"])


@router.get("", response_model=list[TimerSummary])
def list_timers(user_id: str = Depends(get_current_user_id)):
    """List the current user's timers, most recently updated first."""
    with get_session() as session:
        return [service.to_summary(timer) for timer in service.list_timers(session, user_id)]


@router.post("", response_model=TimerResponse, status_code=status.HTTP_201_CREATED)
def create_timer(payload: TimerCreate, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] POST /timers for user_id={user_id}")
    with get_session() as session:
        return service.to_response(service.create_timer(session, user_id, payload))


@router.post("/import", response_model=TimerResponse, status_code=status.HTTP_201_CREATED)
def import_timer(document: dict[str, Any] = Body(...), user_id: str = Depends(get_current_user_id)):
    """Create a timer from a document produced by the export endpoint.

    Args:
        document: Export document (``version``, ``exportedAt``, ``timer``)
        user_id: Current authenticated user ID (from auth dependency)

    Returns:
        The created timer

    Raises:
        HTTPException: 400 with the first validation problem
    """
    logger.info(f"[API] POST /timers/import for user_id={user_id}")
    try:
        with get_session() as session:
            return service.to_response(service.import_timer(session, user_id, document))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.get("/{timer_id}", response_model=TimerResponse)
def get_timer(timer_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        with get_session() as session:
            return service.to_response(service.get_timer(session, user_id, timer_id))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.put("/{timer_id}", response_model=TimerResponse)
def update_timer(timer_id: str, payload: TimerUpdate, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] PUT /timers/{timer_id} for user_id={user_id}")
    try:
        with get_session() as session:
            return service.to_response(service.update_timer(session, user_id, timer_id, payload))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.delete("/{timer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_timer(timer_id: str, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] DELETE /timers/{timer_id} for user_id={user_id}")
    try:
        with get_session() as session:
            service.delete_timer(session, user_id, timer_id)
    except LooptimerError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{timer_id}/duplicate", response_model=TimerResponse, status_code=status.HTTP_201_CREATED)
def duplicate_timer(
    timer_id: str,
    payload: DuplicateTimerRequest | None = None,
    user_id: str = Depends(get_current_user_id),
):
    """Copy a timer; the copy is named ``"<name> (Copy)"`` unless a name is given."""
    try:
        with get_session() as session:
            name = payload.name if payload else None
            return service.to_response(service.duplicate_timer(session, user_id, timer_id, name))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.get("/{timer_id}/playback", response_model=PlaybackScript)
def get_playback(timer_id: str, user_id: str = Depends(get_current_user_id)):
    """Flattened playback script for a saved timer.

    Raises:
        HTTPException: 404 if the timer is unknown, 422 if the script would
            exceed MAX_PLAYBACK_INTERVALS entries
    """
    try:
        with get_session() as session:
            config = service.load_config(service.get_timer(session, user_id, timer_id).data)
        return service.build_limited_playback(config, settings.max_playback_intervals)
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.get("/{timer_id}/export")
def export_timer(timer_id: str, user_id: str = Depends(get_current_user_id)):
    """Download a timer as a portable JSON document."""
    try:
        with get_session() as session:
            timer = service.get_timer(session, user_id, timer_id)
            name, config = timer.name, service.load_config(timer.data)
    except LooptimerError as e:
        raise to_http_exception(e) from e

    return Response(
        content=export_timer_as_json(name, config),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(name)}"'},
    )
