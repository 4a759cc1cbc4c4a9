"""
Error model for PlanetScale API operations.

Every failure the runtime raises derives from ``PlanetScaleError`` and carries
its semantic categories (see ``categories``), so callers and retry policies
can classify failures without naming every concrete variant:

- ApiErrorVariant subclasses: remote errors matched by their wire ``code``
- ApiError: remote errors no declared variant matched (ServerError)
- ParseError: a success body that does not match the output shape
- NetworkError: transport failures (connection, timeout)
- ConfigError: missing or invalid credentials/configuration
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from .categories import Category, categories_of, with_categories


class PlanetScaleError(Exception):
    """Base error for everything raised by the client runtime.

    Attributes:
        message: Human-readable message.
        cause: Optional underlying exception.
        debug_id: Short identifier for log correlation.
    """

    def __init__(
        self,
        message: str = "",
        cause: BaseException | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    @property
    def categories(self) -> frozenset[Category]:
        """Categories attached to this error's type."""
        return categories_of(self)

    def __str__(self) -> str:
        return f"[{type(self).__name__}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, debug_id={self.debug_id!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary safe for logs and API responses."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "categories": sorted(c.value for c in self.categories),
            "debug_id": self.debug_id,
        }


@with_categories(Category.CONFIGURATION)
class ConfigError(PlanetScaleError):
    """Missing or invalid configuration, detected before any request."""


@with_categories(Category.NETWORK)
class NetworkError(PlanetScaleError):
    """The request never produced an HTTP response."""


@with_categories(Category.SERVER)
class ApiError(PlanetScaleError):
    """An error response no declared variant of the operation matched.

    Attributes:
        status: HTTP status code of the response.
        body: Parsed JSON body, or the raw text when it is not JSON.
    """

    def __init__(self, status: int, body: Any, message: str | None = None):
        super().__init__(message or f"API request failed with status {status}")
        self.status = status
        self.body = body
        self.retry_after: float | None = None

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, body={self.body!r}, debug_id={self.debug_id!r})"


@with_categories(Category.PARSE)
class ParseError(PlanetScaleError):
    """A success response whose body does not match the operation's output shape.

    Attributes:
        body: Parsed JSON body, or the raw text when it is not JSON.
        cause: The underlying decode/validation error.
    """

    def __init__(self, body: Any, cause: BaseException):
        super().__init__(f"Failed to decode response body: {cause}", cause=cause)
        self.body = body


class ApiErrorVariant(PlanetScaleError):
    """Base class for errors declared by an operation.

    Subclasses list the input fields they receive in ``fields``; the
    dispatcher copies those from the original input when it builds the error.

    Example:
        class GetDatabaseNotFound(NotFound):
            fields = ("organization", "database")
    """

    fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, message: str = "", **values: Any):
        unknown = set(values) - set(self.fields)
        if unknown:
            raise TypeError(f"{type(self).__name__} got unexpected fields: {sorted(unknown)}")
        super().__init__(message)
        self.values = values
        self.retry_after: float | None = None
        for name, value in values.items():
            setattr(self, name, value)

    @classmethod
    def from_input(cls, input_fields: Mapping[str, Any], message: str) -> "ApiErrorVariant":
        """Build the error from the original input and the body's message."""
        values = {name: input_fields[name] for name in cls.fields if name in input_fields}
        return cls(message, **values)

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in self.values.items())
        prefix = f"{values}, " if values else ""
        return f"{type(self).__name__}({prefix}message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.message == other.message and self.values == other.values

    __hash__ = PlanetScaleError.__hash__


@dataclass(frozen=True)
class ErrorVariant:
    """Pairs a wire-level error ``code`` with the error type it maps to."""

    code: str
    error_type: type[ApiErrorVariant]

    def build(self, input_fields: Mapping[str, Any], message: str) -> ApiErrorVariant:
        return self.error_type.from_input(input_fields, message)


# Shared API errors


@with_categories(Category.AUTH)
class Unauthorized(ApiErrorVariant):
    """The API token is missing, invalid, or expired (401)."""


@with_categories(Category.AUTH)
class Forbidden(ApiErrorVariant):
    """The token lacks permission for this operation (403)."""


@with_categories(Category.NOT_FOUND)
class NotFound(ApiErrorVariant):
    """The organization, database, branch, etc. does not exist (404)."""


@with_categories(Category.CONFLICT)
class Conflict(ApiErrorVariant):
    """The operation conflicts with the current state of the resource (409)."""


@with_categories(Category.BAD_REQUEST)
class BadRequest(ApiErrorVariant):
    """The request was malformed (400)."""


@with_categories(Category.BAD_REQUEST)
class UnprocessableEntity(ApiErrorVariant):
    """The request was well-formed but semantically invalid (422)."""


@with_categories(Category.THROTTLING)
class TooManyRequests(ApiErrorVariant):
    """Rate limited (429)."""


@with_categories(Category.SERVER)
class InternalServerError(ApiErrorVariant):
    """Unexpected server-side failure (500)."""


@with_categories(Category.SERVER)
class ServiceUnavailable(ApiErrorVariant):
    """The service is temporarily unavailable (503)."""


class ErrorCode:
    """Wire-level ``code`` values of PlanetScale error bodies."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    UNPROCESSABLE_ENTITY = "unprocessable_entity"
    TOO_MANY_REQUESTS = "too_many_requests"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"


COMMON_ERROR_VARIANTS: tuple[ErrorVariant, ...] = (
    ErrorVariant(ErrorCode.UNAUTHORIZED, Unauthorized),
    ErrorVariant(ErrorCode.FORBIDDEN, Forbidden),
    ErrorVariant(ErrorCode.NOT_FOUND, NotFound),
    ErrorVariant(ErrorCode.CONFLICT, Conflict),
    ErrorVariant(ErrorCode.BAD_REQUEST, BadRequest),
    ErrorVariant(ErrorCode.UNPROCESSABLE_ENTITY, UnprocessableEntity),
    ErrorVariant(ErrorCode.TOO_MANY_REQUESTS, TooManyRequests),
    ErrorVariant(ErrorCode.INTERNAL_SERVER_ERROR, InternalServerError),
    ErrorVariant(ErrorCode.SERVICE_UNAVAILABLE, ServiceUnavailable),
)
