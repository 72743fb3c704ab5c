"""User preference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger

from looptimer.core.auth import get_current_user_id
from looptimer.core.errors import LooptimerError
from looptimer.core.http import to_http_exception
from looptimer.db.session import get_session
from looptimer.preferences import service
from looptimer.preferences.schemas import ApplyPreferencesRequest, PreferencesResponse, PreferencesUpdate
from looptimer.timers.models import AdvancedConfig

router = APIRouter(prefix="/user/preferences", tags=["preferences"])


@router.get("", response_model=PreferencesResponse)
def get_preferences(user_id: str = Depends(get_current_user_id)):
    """Current user's preferences, created with defaults on first access."""
    with get_session() as session:
        return service.get_preferences(session, user_id)


@router.put("", response_model=PreferencesResponse)
@router.post("", response_model=PreferencesResponse)
def update_preferences(payload: PreferencesUpdate, user_id: str = Depends(get_current_user_id)):
    """Partially update preferences.

    Raises:
        HTTPException: 400 if a colour is missing or invalid, or the alarm
            is not a known sound id or ``none``
    """
    logger.info(f"[API] Updating preferences for user_id={user_id}")
    try:
        with get_session() as session:
            return service.update_preferences(session, user_id, payload)
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.post("/apply", response_model=AdvancedConfig)
def apply_preferences(payload: ApplyPreferencesRequest, user_id: str = Depends(get_current_user_id)):
    """Return ``data`` restyled with the current user's preferences."""
    with get_session() as session:
        preferences = service.get_preferences(session, user_id)
    return service.apply_preferences(payload.data, preferences)
