"""Timer persistence and playback services.

Functions take an open SQLAlchemy session and the calling user's id. Timers
are owner-scoped: another user's timer is reported as not found.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from looptimer.core.errors import InvalidTimerImportError, PlaybackTooLargeError, TimerNotFoundError
from looptimer.db.models import Timer
from looptimer.timers.constants import COPY_SUFFIX, DEFAULT_CATEGORY, TIMER_NAME_MAX_LENGTH
from looptimer.timers.export import validate_timer_import
from looptimer.timers.flatten import PlaybackScript, build_playback, compute_total_time, count_intervals
from looptimer.timers.models import AdvancedConfig, config_to_dict
from looptimer.timers.schemas import TimerCreate, TimerResponse, TimerSummary, TimerUpdate


def load_config(data: dict[str, Any]) -> AdvancedConfig:
    """Parse a stored timer document into the tree models."""
    return AdvancedConfig.model_validate(data)


def to_response(timer: Timer) -> TimerResponse:
    config = load_config(timer.data)
    return TimerResponse(
        id=timer.id,
        name=timer.name,
        data=config,
        category=timer.category,
        icon=timer.icon,
        color=timer.color,
        description=timer.description,
        total_seconds=compute_total_time(config.items),
        created_at=timer.created_at,
        updated_at=timer.updated_at,
    )


def to_summary(timer: Timer) -> TimerSummary:
    return TimerSummary(
        id=timer.id,
        name=timer.name,
        category=timer.category,
        icon=timer.icon,
        color=timer.color,
        description=timer.description,
        total_seconds=compute_total_time(load_config(timer.data).items),
        updated_at=timer.updated_at,
    )


def list_timers(session: Session, user_id: str) -> list[Timer]:
    """User's timers, most recently updated first."""
    return list(
        session.execute(select(Timer).where(Timer.user_id == user_id).order_by(Timer.updated_at.desc())).scalars()
    )


def get_timer(session: Session, user_id: str, timer_id: str) -> Timer:
    """Fetch one of the user's timers.

    Raises:
        TimerNotFoundError: If the timer does not exist or is not the user's
    """
    timer = session.execute(
        select(Timer).where(Timer.id == timer_id, Timer.user_id == user_id)
    ).scalar_one_or_none()
    if timer is None:
        raise TimerNotFoundError(timer_id)
    return timer


def save_timer(
    session: Session,
    user_id: str,
    name: str,
    config: AdvancedConfig,
    category: str = DEFAULT_CATEGORY,
    icon: str | None = None,
    color: str | None = None,
    description: str | None = None,
) -> Timer:
    """Insert a new timer row; shared by create, duplicate, import and clone flows."""
    timer = Timer(
        user_id=user_id,
        name=name,
        data=config_to_dict(config),
        category=category,
        icon=icon,
        color=color,
        description=description,
    )
    session.add(timer)
    session.flush()
    logger.info(f"Saved timer {timer.id} for user_id={user_id}")
    return timer


def create_timer(session: Session, user_id: str, payload: TimerCreate) -> Timer:
    return save_timer(
        session,
        user_id,
        payload.name,
        payload.data,
        category=payload.category,
        icon=payload.icon,
        color=payload.color,
        description=payload.description,
    )


def update_timer(session: Session, user_id: str, timer_id: str, payload: TimerUpdate) -> Timer:
    """Apply the fields present in the payload."""
    timer = get_timer(session, user_id, timer_id)
    changes = payload.model_dump(exclude_unset=True)
    if "data" in changes and payload.data is not None:
        timer.data = config_to_dict(payload.data)
    for field in ("name", "category", "icon", "color", "description"):
        if field in changes:
            if field in ("name", "category") and changes[field] is None:
                continue
            setattr(timer, field, changes[field])
    session.flush()
    logger.info(f"Updated timer {timer_id} fields={sorted(changes)}")
    return timer


def delete_timer(session: Session, user_id: str, timer_id: str) -> None:
    timer = get_timer(session, user_id, timer_id)
    session.delete(timer)
    logger.info(f"Deleted timer {timer_id} for user_id={user_id}")


def copy_name(name: str) -> str:
    """Name for a duplicate, kept within the name length limit."""
    return name[: TIMER_NAME_MAX_LENGTH - len(COPY_SUFFIX)] + COPY_SUFFIX


def duplicate_timer(session: Session, user_id: str, timer_id: str, name: str | None = None) -> Timer:
    original = get_timer(session, user_id, timer_id)
    return save_timer(
        session,
        user_id,
        name or copy_name(original.name),
        load_config(original.data),
        category=original.category,
        icon=original.icon,
        color=original.color,
        description=original.description,
    )


def import_timer(session: Session, user_id: str, document: Any) -> Timer:
    """Create a timer from an exported document.

    Raises:
        InvalidTimerImportError: If the document is not a valid export
    """
    result = validate_timer_import(document)
    if not result.success or result.data is None:
        raise InvalidTimerImportError(result.error or "Invalid timer format")
    exported = result.data.timer
    return save_timer(session, user_id, exported.name[:TIMER_NAME_MAX_LENGTH], exported.data)


def build_limited_playback(config: AdvancedConfig, limit: int) -> PlaybackScript:
    """Flatten a config unless the script would exceed limit entries.

    Raises:
        PlaybackTooLargeError: If the flattened script is too large
    """
    interval_count = count_intervals(config.items)
    if interval_count > limit:
        logger.warning(f"Refusing playback of {interval_count} intervals (limit {limit})")
        raise PlaybackTooLargeError(interval_count, limit)
    return build_playback(config)
