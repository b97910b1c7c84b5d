"""Error taxonomy for the form structure engine.

Every error raised by the engine derives from ``FormEngineError`` and carries
the HTTP status an API layer should surface.

Usage:
    from form_drafts.errors import NotFoundError, InvalidStateError, StoreError

    try:
        await builder.delete_step(form_id, step_id)
    except InvalidStateError as e:
        return {"error": str(e)}, e.http_status
"""


class FormEngineError(Exception):
    """Base class for all engine errors."""

    http_status: int = 500


class NotFoundError(FormEngineError):
    """Raised when a referenced form, step, field, or slug does not exist.

    Not retryable -- the caller referenced something that is gone.
    """

    http_status = 404

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class InvalidStateError(FormEngineError):
    """Raised when a request would violate a structural guard.

    The caller must change the request; retrying it as-is fails again.
    """

    http_status = 400


class StoreError(FormEngineError):
    """Raised when a Structure Store call fails (network, driver, constraint).

    Prior successful store calls are not rolled back.  ``publish`` is safe to
    re-invoke after this error.
    """

    http_status = 503
