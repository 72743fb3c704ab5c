"""Timer template endpoints. Browsing public templates needs no login."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from loguru import logger

from looptimer.core.auth import get_current_user_id, get_optional_user_id
from looptimer.core.errors import LooptimerError
from looptimer.core.http import to_http_exception
from looptimer.db.session import get_session
from looptimer.templates import service
from looptimer.templates.schemas import TemplateCreate, TemplateResponse, TemplateUpdate
from looptimer.timers.schemas import TimerResponse
from looptimer.timers.service import to_response

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[TemplateResponse])
def list_templates(
    category: str | None = None,
    search: str | None = None,
    include_private: bool = Query(default=False, alias="includePrivate"),
    user_id: str | None = Depends(get_optional_user_id),
):
    """List visible templates.

    Args:
        category: Only templates in this category
        search: Case-insensitive match on name or description
        include_private: Add the caller's own private templates
        user_id: Caller, if authenticated

    Returns:
        Templates, newest first
    """
    logger.debug(f"[API] GET /templates category={category} search={search!r} include_private={include_private}")
    with get_session() as session:
        templates = service.list_templates(session, user_id, category, search, include_private)
        return [TemplateResponse.model_validate(t) for t in templates]


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreate, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] POST /templates for user_id={user_id}")
    try:
        with get_session() as session:
            return TemplateResponse.model_validate(service.create_template(session, user_id, payload))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.get("/{template_id}", response_model=TemplateResponse)
def get_template(template_id: str, user_id: str | None = Depends(get_optional_user_id)):
    try:
        with get_session() as session:
            return TemplateResponse.model_validate(service.get_template(session, template_id, user_id))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.patch("/{template_id}", response_model=TemplateResponse)
def update_template(template_id: str, payload: TemplateUpdate, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] PATCH /templates/{template_id} for user_id={user_id}")
    try:
        with get_session() as session:
            return TemplateResponse.model_validate(service.update_template(session, user_id, template_id, payload))
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, user_id: str = Depends(get_current_user_id)):
    logger.info(f"[API] DELETE /templates/{template_id} for user_id={user_id}")
    try:
        with get_session() as session:
            service.delete_template(session, user_id, template_id)
    except LooptimerError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/clone", response_model=TimerResponse, status_code=status.HTTP_201_CREATED)
def clone_template(template_id: str, user_id: str = Depends(get_current_user_id)):
    """Create a timer from a template the caller can see.

    Raises:
        HTTPException: 404 if unknown, 403 if private and not owned
    """
    logger.info(f"[API] POST /templates/{template_id}/clone for user_id={user_id}")
    try:
        with get_session() as session:
            return to_response(service.clone_template(session, template_id, user_id))
    except LooptimerError as e:
        raise to_http_exception(e) from e
