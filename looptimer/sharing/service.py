"""Public read-only timer links."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from looptimer.core.errors import SharedTimerExpiredError, SharedTimerNotFoundError
from looptimer.db.models import SharedTimer, Timer
from looptimer.sharing.schemas import SharedTimerCreate
from looptimer.timers import service as timer_service
from looptimer.timers.models import config_to_dict

IMPORTED_TIMER_NAME = "Imported Timer"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def is_expired(shared: SharedTimer, now: datetime | None = None) -> bool:
    if shared.expires_at is None:
        return False
    return _as_utc(shared.expires_at) < (now or datetime.now(timezone.utc))


def create_shared_timer(session: Session, user_id: str, payload: SharedTimerCreate) -> SharedTimer:
    """Snapshot a timer under a new public id.

    Raises:
        TimerNotFoundError: If ``timer_id`` is not one of the user's timers
    """
    if payload.timer_id is not None:
        source = timer_service.get_timer(session, user_id, payload.timer_id)
        name, data = payload.name or source.name, source.data
    else:
        name, data = payload.name, config_to_dict(payload.data)

    expires_at = None
    if payload.expires_in_days:
        expires_at = datetime.now(timezone.utc) + timedelta(days=payload.expires_in_days)

    shared = SharedTimer(user_id=user_id, name=name, data=data, expires_at=expires_at, view_count=0)
    session.add(shared)
    session.flush()
    logger.info(f"Created shared timer {shared.id} for user_id={user_id} expires_at={expires_at}")
    return shared


def _get_live(session: Session, shared_id: str) -> SharedTimer:
    shared = session.get(SharedTimer, shared_id)
    if shared is None:
        raise SharedTimerNotFoundError(shared_id)
    if is_expired(shared):
        raise SharedTimerExpiredError(shared_id)
    return shared


def view_shared_timer(session: Session, shared_id: str) -> SharedTimer:
    """Fetch a shared timer for display and count the view.

    Raises:
        SharedTimerNotFoundError: Unknown id
        SharedTimerExpiredError: The link has expired
    """
    shared = _get_live(session, shared_id)
    shared.view_count += 1
    session.flush()
    return shared


def clone_shared_timer(session: Session, shared_id: str, user_id: str, name: str | None = None) -> Timer:
    shared = _get_live(session, shared_id)
    config = timer_service.load_config(shared.data)
    timer = timer_service.save_timer(session, user_id, name or shared.name or IMPORTED_TIMER_NAME, config)
    logger.info(f"Cloned shared timer {shared_id} into timer {timer.id}")
    return timer
