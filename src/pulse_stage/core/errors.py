"""Error taxonomy shared by the service layer and the HTTP surface.

Services raise these exceptions; the application converts them into a
structured ``{"detail": ..., "error": ...}`` response (see ``pulse_stage.main``).
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for failures reported to API clients."""

    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Malformed input such as an invalid URL or a missing identifier."""

    code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    """A referenced post, user, preview or system account does not exist."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    """The caller may not perform the action (self-vote, self-tip, foreign edit)."""

    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class UpstreamError(ServiceError):
    """The metadata-extraction service reported a failure or timed out."""

    code = "upstream_error"

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        if upstream_status is not None and 400 <= upstream_status < 600:  # noqa: PLR2004
            self.status_code = upstream_status
        else:
            self.status_code = status.HTTP_502_BAD_GATEWAY


class InternalError(ServiceError):
    """Unexpected persistence failure."""

    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
