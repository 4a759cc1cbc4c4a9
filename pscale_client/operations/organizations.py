"""Organization operations."""

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

from .models import Organization


class GetOrganizationInput(BaseModel):
    organization: str


class GetOrganizationUnauthorized(Unauthorized):
    fields = ("organization",)


class GetOrganizationForbidden(Forbidden):
    fields = ("organization",)


class GetOrganizationNotFound(NotFound):
    fields = ("organization",)


get_organization = Operation(
    name="get_organization",
    method="GET",
    path="/organizations/{organization}",
    input_model=GetOrganizationInput,
    output=Organization,
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, GetOrganizationUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, GetOrganizationForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, GetOrganizationNotFound),
    ),
)


class ListOrganizationsInput(BaseModel):
    page: int | None = None
    per_page: int | None = None


class ListOrganizationsUnauthorized(Unauthorized):
    pass


list_organizations = PaginatedOperation(
    name="list_organizations",
    method="GET",
    path="/organizations",
    input_model=ListOrganizationsInput,
    output=Page[Organization],
    errors=(ErrorVariant(ErrorCode.UNAUTHORIZED, ListOrganizationsUnauthorized),),
)
