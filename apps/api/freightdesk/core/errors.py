"""Request-level error types.

Errors raised here end the request; the API layer renders them as
``{"error": message}`` with the carried status code. Failures inside the
tool loop never use these: the executor turns them into observations.
"""

from fastapi import status


class FreightDeskError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthorizedError(FreightDeskError):
    """Caller did not identify a user."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PlannerError(FreightDeskError):
    """The language model call failed or returned something unusable."""


class ExtractionError(FreightDeskError):
    """Document extraction produced no parseable record."""


class MissingDocumentError(FreightDeskError):
    """Extraction request carried neither text nor an image."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FreightDeskError):
    """Requested record does not exist for this owner."""

    status_code = status.HTTP_404_NOT_FOUND
