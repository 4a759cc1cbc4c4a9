"""Database operations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from pscale_client.runtime.errors import (
    Conflict,
    ErrorCode,
    ErrorVariant,
    Forbidden,
    NotFound,
    Unauthorized,
    UnprocessableEntity,
)
from pscale_client.runtime.operation import Operation, PaginatedOperation
from pscale_client.runtime.pagination import Page

from .models import Database


class ListDatabasesInput(BaseModel):
    organization: str
    q: str | None = None
    page: int | None = None
    per_page: int | None = None


class ListDatabasesUnauthorized(Unauthorized):
    fields = ("organization",)


class ListDatabasesForbidden(Forbidden):
    fields = ("organization",)


class ListDatabasesNotFound(NotFound):
    fields = ("organization",)


list_databases = PaginatedOperation(
    name="list_databases",
    method="GET",
    path="/organizations/{organization}/databases",
    input_model=ListDatabasesInput,
    output=Page[Database],
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, ListDatabasesUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, ListDatabasesForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, ListDatabasesNotFound),
    ),
)


class GetDatabaseInput(BaseModel):
    organization: str
    database: str


class GetDatabaseUnauthorized(Unauthorized):
    fields = ("organization", "database")


class GetDatabaseForbidden(Forbidden):
    fields = ("organization", "database")


class GetDatabaseNotFound(NotFound):
    fields = ("organization", "database")


get_database = Operation(
    name="get_database",
    method="GET",
    path="/organizations/{organization}/databases/{database}",
    input_model=GetDatabaseInput,
    output=Database,
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, GetDatabaseUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, GetDatabaseForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, GetDatabaseNotFound),
    ),
)


class CreateDatabaseInput(BaseModel):
    organization: str
    name: str
    cluster_size: str
    region: str | None = None
    replicas: int | None = None
    kind: Literal["mysql", "postgresql"] | None = None
    major_version: str | None = None


class CreateDatabaseUnauthorized(Unauthorized):
    fields = ("organization",)


class CreateDatabaseForbidden(Forbidden):
    fields = ("organization",)


class CreateDatabaseNotFound(NotFound):
    fields = ("organization",)


class CreateDatabaseConflict(Conflict):
    fields = ("organization", "name")


class CreateDatabaseUnprocessable(UnprocessableEntity):
    fields = ("organization", "name")


create_database = Operation(
    name="create_database",
    method="POST",
    path="/organizations/{organization}/databases",
    input_model=CreateDatabaseInput,
    output=Database,
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, CreateDatabaseUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, CreateDatabaseForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, CreateDatabaseNotFound),
        ErrorVariant(ErrorCode.CONFLICT, CreateDatabaseConflict),
        ErrorVariant(ErrorCode.UNPROCESSABLE_ENTITY, CreateDatabaseUnprocessable),
    ),
)


class DeleteDatabaseInput(BaseModel):
    organization: str
    database: str


class DeleteDatabaseUnauthorized(Unauthorized):
    fields = ("organization", "database")


class DeleteDatabaseForbidden(Forbidden):
    fields = ("organization", "database")


class DeleteDatabaseNotFound(NotFound):
    fields = ("organization", "database")


# Responds 204 with no body
delete_database = Operation(
    name="delete_database",
    method="DELETE",
    path="/organizations/{organization}/databases/{database}",
    input_model=DeleteDatabaseInput,
    errors=(
        ErrorVariant(ErrorCode.UNAUTHORIZED, DeleteDatabaseUnauthorized),
        ErrorVariant(ErrorCode.FORBIDDEN, DeleteDatabaseForbidden),
        ErrorVariant(ErrorCode.NOT_FOUND, DeleteDatabaseNotFound),
    ),
)
