"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from looptimer.core.errors import LooptimerError

STATUS_BY_CODE: dict[str, int] = {
    "TIMER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SHARED_TIMER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SHARED_TIMER_EXPIRED": status.HTTP_410_GONE,
    "TEMPLATE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCESS_DENIED": status.HTTP_403_FORBIDDEN,
    "INVALID_TEMPLATE": status.HTTP_400_BAD_REQUEST,
    "INVALID_PREFERENCES": status.HTTP_400_BAD_REQUEST,
    "INVALID_IMPORT": status.HTTP_400_BAD_REQUEST,
    "PLAYBACK_TOO_LARGE": 422,
    "INVALID_PROMPT": status.HTTP_400_BAD_REQUEST,
    "NOT_EXERCISE_RELATED": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "AI_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "AI_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: LooptimerError) -> HTTPException:
    """HTTPException whose detail carries the error code, message and details."""
    detail: dict[str, object] = {"error": error.message, "code": error.code}
    if error.details:
        detail["details"] = error.details
    invalid_json = getattr(error, "invalid_json", None)
    if invalid_json:
        detail["invalidJson"] = invalid_json
    return HTTPException(status_code=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST), detail=detail)
