"""Error types raised by the scheduling engine and service layer."""


class SchedulingError(Exception):
    """Base class for all shiftguard errors."""


class ValidationError(SchedulingError, ValueError):
    """Raised when an input is malformed and no decision can be produced.

    Subclasses ``ValueError`` so that pydantic field validators report it
    as an ordinary field error.
    """


class NotFoundError(SchedulingError):
    """Raised when a guard, site or shift id is not in its directory."""


# Mapping of custom exceptions to HTTP status codes
HTTP_STATUS = {
    ValidationError: 422,
    NotFoundError: 404,
}
