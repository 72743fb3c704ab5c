"""Domain error types.

Services raise these; routes translate them into HTTP responses. Each error
carries a stable ``code`` and a list of human-readable ``details``.

Error codes:
- TIMER_NOT_FOUND: Timer does not exist or belongs to another user
- SHARED_TIMER_NOT_FOUND / SHARED_TIMER_EXPIRED: Public share link problems
- TEMPLATE_NOT_FOUND / ACCESS_DENIED / INVALID_TEMPLATE: Template operations
- INVALID_PREFERENCES: Rejected preference update
- PLAYBACK_TOO_LARGE: Flattened script would exceed the configured size
- INVALID_PROMPT / NOT_EXERCISE_RELATED / VALIDATION_FAILED / AI_UNAVAILABLE:
  AI workout generation
"""


class LooptimerError(RuntimeError):
    """Base class for domain errors.

    Attributes:
        code: Error code (e.g., "TIMER_NOT_FOUND", "ACCESS_DENIED")
        details: List of error detail strings
    """

    code = "LOOPTIMER_ERROR"

    def __init__(self, message: str, details: list[str] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(message)


class TimerNotFoundError(LooptimerError):
    code = "TIMER_NOT_FOUND"

    def __init__(self, timer_id: str):
        super().__init__("Timer not found", [f"timer_id={timer_id}"])


class SharedTimerNotFoundError(LooptimerError):
    code = "SHARED_TIMER_NOT_FOUND"

    def __init__(self, shared_id: str):
        super().__init__("Shared timer not found", [f"shared_id={shared_id}"])


class SharedTimerExpiredError(LooptimerError):
    code = "SHARED_TIMER_EXPIRED"

    def __init__(self, shared_id: str):
        super().__init__("Shared timer has expired", [f"shared_id={shared_id}"])


class TemplateNotFoundError(LooptimerError):
    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: str):
        super().__init__("Template not found", [f"template_id={template_id}"])


class AccessDeniedError(LooptimerError):
    code = "ACCESS_DENIED"

    def __init__(self, resource: str):
        super().__init__("Access denied", [resource])


class InvalidTemplateError(LooptimerError):
    code = "INVALID_TEMPLATE"


class InvalidPreferencesError(LooptimerError):
    code = "INVALID_PREFERENCES"


class PlaybackTooLargeError(LooptimerError):
    code = "PLAYBACK_TOO_LARGE"

    def __init__(self, interval_count: int, limit: int):
        self.interval_count = interval_count
        self.limit = limit
        super().__init__(
            f"Workout expands to {interval_count} intervals (limit {limit})",
            [f"interval_count={interval_count}", f"limit={limit}"],
        )


class WorkoutGenerationError(LooptimerError):
    """Raised when the AI could not produce a usable workout.

    Attributes:
        code: One of INVALID_PROMPT, NOT_EXERCISE_RELATED, VALIDATION_FAILED,
            AI_UNAVAILABLE
        invalid_json: Last raw model output, when there was one
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[str] | None = None,
        invalid_json: str | None = None,
    ):
        self.code = code
        self.invalid_json = invalid_json
        super().__init__(message, details)


class InvalidTimerImportError(LooptimerError):
    code = "INVALID_IMPORT"
