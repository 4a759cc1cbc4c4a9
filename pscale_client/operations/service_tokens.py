"""Service token operations.

The token secret is only present in the creation response and decodes as a
``Redacted`` value.
"""

from __future__ import annotations

from pydantic import BaseModel

from pscale_client.runtime.errors import (
    ErrorCode,
    ErrorVariant,
    Forbidden,
    NotFound,
    Unauthorized,
)
from pscale_client.runtime.operation import Operation, PaginatedOperation
from pscale_client.runtime.pagination import Page

from .models import ServiceToken


class CreateServiceTokenInput(BaseModel):
    organization: str
    name: str | None = None


class CreateServiceTokenUnauthorized(Unauthorized):
    fields = ("organization",)


class CreateServiceTokenForbidden(Forbidden):
    fields = ("organization",)


class CreateServiceTokenNotFound(NotFound):
    fields = ("organization",)


create_service_token = Operation(
    name="create_service_token",
    method="POST",
    path="/organizations/{organization}/service-tokens",
    input_model=CreateServiceTokenInput,
    output=ServiceToken,
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, CreateServiceTokenUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, CreateServiceTokenForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, CreateServiceTokenNotFound),
    ),
)


class ListServiceTokensInput(BaseModel):
    organization: str
    page: int | None = None
    per_page: int | None = None


class ListServiceTokensUnauthorized(Unauthorized):
    fields = ("organization",)


class ListServiceTokensForbidden(Forbidden):
    fields = ("organization",)


class ListServiceTokensNotFound(NotFound):
    fields = ("organization",)


list_service_tokens = PaginatedOperation(
    name="list_service_tokens",
    method="GET",
    path="/organizations/{organization}/service-tokens",
    input_model=ListServiceTokensInput,
    output=Page[ServiceToken],
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, ListServiceTokensUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, ListServiceTokensForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, ListServiceTokensNotFound),
    ),
)
