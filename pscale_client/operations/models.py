"""Response shapes shared by several operations. Wire format is snake_case."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from pscale_client.runtime.sensitive import SensitiveStr


class ApiModel(BaseModel):
    """Base model for API payloads; unknown fields are ignored."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class Region(ApiModel):
    id: str
    provider: str
    enabled: bool
    public_ip_addresses: list[str] = []
    display_name: str
    location: str
    slug: str
    current_default: bool = False


class Organization(ApiModel):
    id: str
    name: str
    billing_email: str | None = None
    created_at: str
    updated_at: str
    plan: str
    valid_billing_info: bool = False
    sso: bool = False
    single_tenancy: bool = False
    managed_tenancy: bool = False
    has_past_due_invoices: bool | None = None
    database_count: int = 0
    sso_portal_url: str | None = None
    keyspace_shard_limit: int | None = None


class Database(ApiModel):
    id: str
    name: str
    url: str
    branches_url: str
    html_url: str
    ready: bool
    state: Literal[
        "pending",
        "importing",
        "sleep_in_progress",
        "sleeping",
        "awakening",
        "import_ready",
        "ready",
    ]
    kind: Literal["mysql", "postgresql"]
    region: Region
    branches_count: int | None = None
    default_branch: str | None = None
    plan: str | None = None
    sharded: bool | None = None
    created_at: str
    updated_at: str


class ServiceTokenAccess(ApiModel):
    id: str
    access: str
    description: str | None = None
    resource_name: str | None = None
    resource_id: str | None = None
    resource_type: str | None = None


class ServiceToken(ApiModel):
    """A service token; the secret is only returned on creation."""

    id: str
    name: str | None = None
    display_name: str | None = None
    token: SensitiveStr | None = None
    created_at: str
    updated_at: str | None = None
    expires_at: str | None = None
    last_used_at: str | None = None
    service_token_accesses: list[ServiceTokenAccess] = []
