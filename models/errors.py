"""Error taxonomy raised by the domain services."""

from __future__ import annotations


class ServiceError(Exception):
    """Failure that maps onto a client-visible ``{error, message}`` payload."""

    status_code = 500
    error = "ServerError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400
    error = "ValidationError"


class NoData(ServiceError):
    status_code = 404
    error = "NoData"
