"""Timer template services.

Public templates are visible to everyone; private ones only to their owner.
Only the owner may change or delete a template.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from looptimer.core.errors import AccessDeniedError, InvalidTemplateError, TemplateNotFoundError
from looptimer.db.models import Timer, TimerTemplate
from looptimer.templates.schemas import TemplateCreate, TemplateUpdate
from looptimer.timers import service as timer_service
from looptimer.timers.constants import TIMER_NAME_MAX_LENGTH, TemplateCategory
from looptimer.timers.models import config_to_dict


def _check_category(category: str) -> str:
    if category not in TemplateCategory.__members__.values():
        raise InvalidTemplateError("Invalid category", [f"category={category}"])
    return category


def _check_name(name: str) -> str:
    if not name or not name.strip():
        raise InvalidTemplateError("Template name is required")
    if len(name) > TIMER_NAME_MAX_LENGTH:
        raise InvalidTemplateError("Template name is too long", [f"max_length={TIMER_NAME_MAX_LENGTH}"])
    return name.strip()


def _clean_description(description: str | None) -> str | None:
    return (description or "").strip() or None


def list_templates(
    session: Session,
    user_id: str | None = None,
    category: str | None = None,
    search: str | None = None,
    include_private: bool = False,
) -> list[TimerTemplate]:
    """Templates visible to the caller, newest first.

    Args:
        session: Database session
        user_id: Caller, or None when anonymous
        category: Restrict to one category
        search: Case-insensitive substring of name or description
        include_private: Also return the caller's private templates

    Returns:
        Matching templates
    """
    query = select(TimerTemplate)

    if include_private and user_id:
        query = query.where(or_(TimerTemplate.is_public.is_(True), TimerTemplate.user_id == user_id))
    else:
        query = query.where(TimerTemplate.is_public.is_(True))

    if category:
        query = query.where(TimerTemplate.category == category)

    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                func.lower(TimerTemplate.name).like(pattern),
                func.lower(func.coalesce(TimerTemplate.description, "")).like(pattern),
            )
        )

    return list(session.execute(query.order_by(TimerTemplate.created_at.desc())).scalars())


def _get(session: Session, template_id: str) -> TimerTemplate:
    template = session.get(TimerTemplate, template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)
    return template


def get_template(session: Session, template_id: str, user_id: str | None = None) -> TimerTemplate:
    """Fetch a template the caller may see.

    Raises:
        TemplateNotFoundError: Unknown id
        AccessDeniedError: Private template of another user
    """
    template = _get(session, template_id)
    if not template.is_public and template.user_id != user_id:
        raise AccessDeniedError(f"template_id={template_id}")
    return template


def _get_owned(session: Session, template_id: str, user_id: str) -> TimerTemplate:
    template = _get(session, template_id)
    if template.user_id != user_id:
        raise AccessDeniedError(f"template_id={template_id}")
    return template


def create_template(session: Session, user_id: str, payload: TemplateCreate) -> TimerTemplate:
    template = TimerTemplate(
        user_id=user_id,
        name=_check_name(payload.name),
        description=_clean_description(payload.description),
        category=_check_category(payload.category),
        icon=payload.icon,
        color=payload.color,
        data=config_to_dict(payload.data),
        is_public=payload.is_public,
        clone_count=0,
    )
    session.add(template)
    session.flush()
    logger.info(f"Created template {template.id} for user_id={user_id} public={template.is_public}")
    return template


def update_template(session: Session, user_id: str, template_id: str, payload: TemplateUpdate) -> TimerTemplate:
    """Apply the fields present in the payload.

    Raises:
        TemplateNotFoundError: Unknown id
        AccessDeniedError: Caller does not own the template
        InvalidTemplateError: Rejected name or category
    """
    template = _get_owned(session, template_id, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if "name" in changes:
        template.name = _check_name(payload.name or "")
    if "category" in changes and payload.category is not None:
        template.category = _check_category(payload.category)
    if "description" in changes:
        template.description = _clean_description(payload.description)
    if "data" in changes and payload.data is not None:
        template.data = config_to_dict(payload.data)
    if "is_public" in changes and payload.is_public is not None:
        template.is_public = payload.is_public

    session.flush()
    logger.info(f"Updated template {template_id} fields={sorted(changes)}")
    return template


def delete_template(session: Session, user_id: str, template_id: str) -> None:
    template = _get_owned(session, template_id, user_id)
    session.delete(template)
    logger.info(f"Deleted template {template_id} for user_id={user_id}")


def clone_template(session: Session, template_id: str, user_id: str) -> Timer:
    """Copy a template into the caller's timers and count the clone."""
    template = get_template(session, template_id, user_id)
    timer = timer_service.save_timer(
        session,
        user_id,
        template.name,
        timer_service.load_config(template.data),
        category=template.category,
        icon=template.icon,
        color=template.color,
        description=template.description,
    )
    template.clone_count += 1
    session.flush()
    logger.info(f"Cloned template {template_id} into timer {timer.id} (clone_count={template.clone_count})")
    return timer
