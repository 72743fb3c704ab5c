"""Stateless editor endpoints: playback preview, drag-and-drop and edit actions."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status
from loguru import logger

from looptimer.config.settings import settings
from looptimer.core.errors import LooptimerError
from looptimer.core.http import to_http_exception
from looptimer.editor.operations import apply_action, id_generator
from looptimer.editor.schemas import DropRequest, EditorResponse, OperationRequest, ParseTimeResponse
from looptimer.timers.drag_drop import apply_drop
from looptimer.timers.flatten import PlaybackScript, compute_total_time
from looptimer.timers.models import AdvancedConfig
from looptimer.timers.service import build_limited_playback
from looptimer.timers.time_format import format_time, parse_time_input

router = APIRouter(prefix="/editor", tags=["editor"])


def _response(before: AdvancedConfig, after: AdvancedConfig, next_id: int) -> EditorResponse:
    return EditorResponse(
        config=after,
        next_id=next_id,
        changed=after != before,
        total_seconds=compute_total_time(after.items),
    )


@router.post("/playback", response_model=PlaybackScript)
def preview_playback(config: AdvancedConfig):
    """Flatten an unsaved config into its playback script."""
    try:
        return build_limited_playback(config, settings.max_playback_intervals)
    except LooptimerError as e:
        raise to_http_exception(e) from e


@router.post("/drop", response_model=EditorResponse)
def drop_item(request: DropRequest):
    """Apply a drag-and-drop gesture. Invalid drops leave the config unchanged."""
    items = apply_drop(request.config.items, request.active_id, request.over_id)
    after = request.config.model_copy(update={"items": items})
    return _response(request.config, after, id_generator(request.config, request.next_id).peek())


@router.post("/operations", response_model=EditorResponse)
def run_operation(request: OperationRequest):
    """Apply one edit action and return the new config and id counter.

    Raises:
        HTTPException: 400 if the action is missing its item id or field, or
            the new field value is invalid
    """
    generate_id = id_generator(request.config, request.next_id)
    try:
        after = apply_action(
            request.config,
            request.action,
            generate_id,
            item_id=request.item_id,
            field=request.field,
            value=request.value,
            interval_type=request.interval_type,
        )
    except ValueError as e:
        logger.info(f"[API] Rejected editor action {request.action}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return _response(request.config, after, generate_id.peek())


@router.get("/parse-time", response_model=ParseTimeResponse)
def parse_time(value: str = Query(default="")):
    seconds = parse_time_input(value)
    return ParseTimeResponse(seconds=seconds, formatted=format_time(seconds))
