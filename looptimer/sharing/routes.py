"""Shared timer endpoints. Viewing a share link needs no login."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from loguru import logger

from looptimer.core.auth import get_current_user_id
from looptimer.core.errors import LooptimerError
from looptimer.core.http import to_http_exception
from looptimer.db.session import get_session
from looptimer.sharing import service
from looptimer.sharing.schemas import CloneSharedTimerRequest, SharedTimerCreate, SharedTimerResponse
from looptimer.timers.schemas import TimerResponse
from looptimer.timers.service import to_response

router = APIRouter(prefix="/shared", tags=["shared"])


@router.post("", response_model=SharedTimerResponse, status_code=status.HTTP_201_CREATED)
def create_shared_timer(payload: SharedTimerCreate, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] POST /shared for user_id={user_id}")
    try:
        with get_session() as session:
            return SharedTimerResponse.model_validate(service.create_shared_timer(session, user_id, payload))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.get("/{shared_id}", response_model=SharedTimerResponse)
def get_shared_timer(shared_id: str):
    """Public view of a shared timer; each successful call counts one view.

    Raises:
        HTTPException: 404 if unknown, 410 if the link has expired
    """
    try:
        with get_session() as session:
            return SharedTimerResponse.model_validate(service.view_shared_timer(session, shared_id))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.post("/{shared_id}/clone", response_model=TimerResponse, status_code=status.HTTP_201_CREATED)
def clone_shared_timer(
    shared_id: str,
    payload: CloneSharedTimerRequest | None = None,
    user_id: str = Depends(get_current_user_id),
):
    logger.info(f"[API] POST /shared/{shared_id}/clone for user_id={user_id}")
    try:
        with get_session() as session:
            timer = service.clone_shared_timer(session, shared_id, user_id, payload.name if payload else None)
            return to_response(timer)
    except LooptimerError as e:
        raise to_http_exception(e) from e
