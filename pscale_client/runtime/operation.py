"""
Operation descriptors and the request/response dispatcher.

An ``Operation`` describes one remote endpoint: HTTP method, path template,
optional input model, output shape and the error variants it declares.
Calling it performs exactly one HTTP request and returns the decoded output,
or raises:

- the first declared ``ErrorVariant`` whose code matches an error body,
- ``ApiError`` when no variant matches or the body carries no code,
- ``ParseError`` when a success body does not match the output shape,
- ``NetworkError`` (from the transport) when no response was received.

Retries and pagination are layered on top (see ``retry`` and ``pagination``);
nothing here retries or swallows a failure.

Example:
    get_database = Operation(
        method="GET",
        path="/organizations/{organization}/databases/{database}",
        output=Database,
        errors=(ErrorVariant("not_found", GetDatabaseNotFound),),
    )
    db = await get_database(
        {"organization": "acme", "database": "main"},
        transport=transport,
        credentials=credentials,
    )
"""

from __future__ import annotations

import functools
import json
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Mapping
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from .errors import ApiError, ApiErrorVariant, ErrorVariant, ParseError, PlanetScaleError
from .pagination import DEFAULT_PAGINATION_TRAIT, PaginationTrait, paginate_items, paginate_pages
from .sensitive import unwrap
from .transport import Transport, TransportResponse

if TYPE_CHECKING:
    from pscale_client.credentials import Credentials

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
# Non-path fields of these methods go in the query string, all others in the body
QUERY_METHODS = frozenset({"GET"})

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

OperationInput = Mapping[str, Any] | BaseModel | None


class MissingPathParameterError(ValueError):
    """A path placeholder had no value in the input."""


@dataclass(frozen=True)
class Operation:
    """Immutable description of one API endpoint.

    Attributes:
        method: HTTP method.
        path: Path template with ``{field}`` placeholders.
        output: Output shape (anything ``TypeAdapter`` accepts), or None
            when the endpoint returns no body worth decoding.
        input_model: Optional pydantic model validating mapping inputs.
        errors: Declared error variants, matched in order.
        path_params: Input fields substituted into the path; derived from
            the template when omitted.
        name: Name used in logs.
    """

    method: str
    path: str
    output: Any = None
    input_model: type[BaseModel] | None = None
    errors: tuple[ErrorVariant, ...] = ()
    path_params: frozenset[str] = field(default=None)  # type: ignore[assignment]
    name: str = ""

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "errors", tuple(self.errors))

        placeholders = frozenset(_PLACEHOLDER.findall(self.path))
        if self.path_params is None:
            object.__setattr__(self, "path_params", placeholders)
        else:
            declared = frozenset(self.path_params)
            if declared != placeholders:
                raise ValueError(
                    f"path_params {sorted(declared)} do not match placeholders "
                    f"{sorted(placeholders)} of {self.path}"
                )
            object.__setattr__(self, "path_params", declared)

        if not self.name:
            object.__setattr__(self, "name", f"{method} {self.path}")

    @functools.cached_property
    def _output_adapter(self) -> TypeAdapter:
        return TypeAdapter(self.output)

    # Request construction

    def input_fields(self, input: OperationInput) -> dict[str, Any]:
        """Normalise an input into a dict of the fields the caller set."""
        if input is None:
            input = {}
        if isinstance(input, BaseModel):
            return input.model_dump(exclude_unset=True, by_alias=True)
        if self.input_model is not None:
            model = self.input_model.model_validate(dict(input))
            return model.model_dump(exclude_unset=True, by_alias=True)
        return dict(input)

    def build_path(self, wire_fields: Mapping[str, Any]) -> str:
        """Substitute path placeholders with URL-quoted input values.

        Raises:
            MissingPathParameterError: If a placeholder has no value.
        """

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            value = wire_fields.get(name)
            if value is None:
                raise MissingPathParameterError(f"Missing path parameter: {name}")
            return quote(str(value), safe="")

        return _PLACEHOLDER.sub(substitute, self.path)

    def build_request(
        self, fields: Mapping[str, Any], base_url: str
    ) -> tuple[str, bytes | None]:
        """Return the full URL and the JSON body (if any) for the input fields."""
        wire = to_jsonable_python(dict(fields), fallback=unwrap)
        url = base_url.rstrip("/") + self.build_path(wire)
        rest = {k: v for k, v in wire.items() if k not in self.path_params}

        if self.method in QUERY_METHODS:
            params = {k: v for k, v in rest.items() if v is not None}
            if params:
                url = str(httpx.URL(url, params=params))
            return url, None

        if not rest:
            return url, None
        return url, json.dumps(rest).encode()

    # Dispatch

    async def __call__(
        self,
        input: OperationInput = None,
        *,
        transport: Transport,
        credentials: "Credentials",
    ) -> Any:
        """Perform the call and return the decoded output.

        Raises:
            ApiErrorVariant: A declared error variant matched the error body.
            ApiError: An error response matched no declared variant.
            ParseError: The success body did not match the output shape.
            NetworkError: The transport received no response.
            MissingPathParameterError: A path placeholder had no value.
        """
        fields = self.input_fields(input)
        url, body = self.build_request(fields, credentials.base_url)

        logger.debug(f"{self.name}: {self.method} {url}")
        response = await transport.execute(self.method, url, credentials.get_headers(), body)

        if response.status_code >= 400:
            raise self.match_error(fields, response)
        return self.decode(response)

    def match_error(self, fields: Mapping[str, Any], response: TransportResponse) -> PlanetScaleError:
        """Map an error response to the first declared variant with its code."""
        body = _parse_body(response.content)
        code = body.get("code") if isinstance(body, dict) else None

        error: PlanetScaleError | None = None
        if isinstance(code, str):
            for variant in self.errors:
                if variant.code == code:
                    message = body.get("message")
                    error = variant.build(fields, message if isinstance(message, str) else "")
                    break

        if error is None:
            message = body.get("message") if isinstance(body, dict) else None
            error = ApiError(
                response.status_code,
                body,
                message=message if isinstance(message, str) and message else None,
            )

        if isinstance(error, (ApiError, ApiErrorVariant)):
            error.retry_after = _retry_after(response.headers)

        logger.debug(
            f"{self.name}: status={response.status_code} code={code!r} -> {type(error).__name__}"
        )
        return error

    def decode(self, response: TransportResponse) -> Any:
        """Decode a success body against the output shape.

        Raises:
            ParseError: If the body is not JSON or does not match the shape.
        """
        if self.output is None:
            return None

        try:
            data = json.loads(response.content)
        except ValueError as e:
            raise ParseError(body=_text(response.content), cause=e) from e

        try:
            return self._output_adapter.validate_python(data)
        except ValidationError as e:
            raise ParseError(body=data, cause=e) from e


@dataclass(frozen=True)
class PaginatedOperation(Operation):
    """An operation whose output is one page of a paginated listing."""

    pagination: PaginationTrait = DEFAULT_PAGINATION_TRAIT

    def pages(
        self,
        input: OperationInput = None,
        *,
        transport: Transport,
        credentials: "Credentials",
        page_size: int | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over every page, without retries."""
        call = functools.partial(self, transport=transport, credentials=credentials)
        return paginate_pages(call, input, self.pagination, page_size)

    def items(
        self,
        input: OperationInput = None,
        *,
        transport: Transport,
        credentials: "Credentials",
        page_size: int | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over the items of every page, without retries."""
        call = functools.partial(self, transport=transport, credentials=credentials)
        return paginate_items(call, input, self.pagination, page_size)


def _text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def _parse_body(content: bytes) -> Any:
    try:
        return json.loads(content)
    except ValueError:
        return _text(content)


def _retry_after(headers: Mapping[str, str]) -> float | None:
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
