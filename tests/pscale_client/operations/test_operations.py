"""Tests for the PlanetScale operation descriptors."""

import pytest

from pscale_client.operations import (
    Database,
    ServiceToken,
    create_database,
    create_service_token,
    delete_database,
    get_database,
    get_organization,
    list_databases,
    list_organizations,
)
from pscale_client.operations.databases import (
    CreateDatabaseConflict,
    GetDatabaseNotFound,
    ListDatabasesUnauthorized,
)
from pscale_client.operations.organizations import GetOrganizationForbidden
from pscale_client.runtime.categories import is_auth_error, is_conflict_error, is_not_found_error
from pscale_client.runtime.errors import ParseError
from pscale_client.runtime.sensitive import Redacted
from pscale_client.runtime.transport import TransportResponse
from tests.pscale_client.fakes import FakeTransport, json_response, make_credentials

REGION = {
    "id": "us-east",
    "provider": "AWS",
    "enabled": True,
    "display_name": "AWS us-east-1",
    "location": "Ashburn, Virginia",
    "slug": "us-east",
}

ORGANIZATION = {
    "id": "org1",
    "name": "acme",
    "created_at": "2024-01-01T00:00:00.000Z",
    "updated_at": "2024-01-01T00:00:00.000Z",
    "plan": "scaler_pro",
    "database_count": 2,
}


def database(name, **overrides):
    values = {
        "id": f"db-{name}",
        "name": name,
        "url": f"https://app.planetscale.com/acme/{name}",
        "branches_url": f"https://api.planetscale.com/v1/organizations/acme/databases/{name}/branches",
        "html_url": f"https://app.planetscale.com/acme/{name}",
        "ready": True,
        "state": "ready",
        "kind": "mysql",
        "region": REGION,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-02T00:00:00.000Z",
    }
    values.update(overrides)
    return values


@pytest.fixture
def credentials():
    return make_credentials()


class TestOrganizations:
    @pytest.mark.asyncio
    async def test_get_organization(self, credentials):
        transport = FakeTransport(json_response(200, ORGANIZATION))

        org = await get_organization(
            {"organization": "acme"}, transport=transport, credentials=credentials
        )

        assert org.name == "acme"
        assert org.database_count == 2
        assert transport.requests[0].url == "https://api.test/v1/organizations/acme"

    @pytest.mark.asyncio
    async def test_get_organization_forbidden(self, credentials):
        transport = FakeTransport(
            json_response(403, {"code": "forbidden", "message": "Not allowed"})
        )

        with pytest.raises(GetOrganizationForbidden) as exc_info:
            await get_organization(
                {"organization": "acme"}, transport=transport, credentials=credentials
            )

        assert exc_info.value.organization == "acme"
        assert is_auth_error(exc_info.value)

    @pytest.mark.asyncio
    async def test_list_organizations(self, credentials):
        transport = FakeTransport(
            json_response(200, {"current_page": 1, "next_page": None, "data": [ORGANIZATION]})
        )

        orgs = [
            org
            async for org in list_organizations.items(
                transport=transport, credentials=credentials
            )
        ]

        assert [o.name for o in orgs] == ["acme"]
        assert transport.requests[0].url == "https://api.test/v1/organizations?page=1"


class TestDatabases:
    @pytest.mark.asyncio
    async def test_get_database(self, credentials):
        transport = FakeTransport(json_response(200, database("main", branches_count=3)))

        db = await get_database(
            {"organization": "acme", "database": "main"},
            transport=transport,
            credentials=credentials,
        )

        assert isinstance(db, Database)
        assert db.region.slug == "us-east"
        assert db.branches_count == 3

    @pytest.mark.asyncio
    async def test_get_database_not_found(self, credentials):
        """The not-found variant carries the organization and database."""
        transport = FakeTransport(
            json_response(404, {"code": "not_found", "message": "Not Found"})
        )

        with pytest.raises(GetDatabaseNotFound) as exc_info:
            await get_database(
                {"organization": "acme", "database": "missing"},
                transport=transport,
                credentials=credentials,
            )

        error = exc_info.value
        assert error.organization == "acme"
        assert error.database == "missing"
        assert error.message == "Not Found"
        assert is_not_found_error(error)

    @pytest.mark.asyncio
    async def test_unknown_state_is_a_parse_error(self, credentials):
        transport = FakeTransport(json_response(200, database("main", state="exploded")))

        with pytest.raises(ParseError):
            await get_database(
                {"organization": "acme", "database": "main"},
                transport=transport,
                credentials=credentials,
            )

    @pytest.mark.asyncio
    async def test_list_databases_walks_every_page(self, credentials):
        transport = FakeTransport(
            json_response(
                200,
                {"current_page": 1, "next_page": 2, "data": [database("a"), database("b")]},
            ),
            json_response(200, {"current_page": 2, "next_page": None, "data": [database("c")]}),
        )

        names = [
            db.name
            async for db in list_databases.items(
                {"organization": "acme", "q": "prod"},
                transport=transport,
                credentials=credentials,
                page_size=2,
            )
        ]

        assert names == ["a", "b", "c"]
        assert len(transport.requests) == 2
        assert transport.requests[1].url == (
            "https://api.test/v1/organizations/acme/databases?q=prod&page=2&per_page=2"
        )

    @pytest.mark.asyncio
    async def test_list_databases_unauthorized(self, credentials):
        transport = FakeTransport(json_response(401, {"code": "unauthorized"}))

        with pytest.raises(ListDatabasesUnauthorized):
            async for _ in list_databases.pages(
                {"organization": "acme"}, transport=transport, credentials=credentials
            ):
                pass

    @pytest.mark.asyncio
    async def test_create_database_body(self, credentials):
        """Only the fields the caller set are sent in the body."""
        transport = FakeTransport(json_response(201, database("main", state="pending", ready=False)))

        db = await create_database(
            {"organization": "acme", "name": "main", "cluster_size": "PS_10"},
            transport=transport,
            credentials=credentials,
        )

        assert db.state == "pending"
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url == "https://api.test/v1/organizations/acme/databases"
        assert request.json() == {"name": "main", "cluster_size": "PS_10"}

    @pytest.mark.asyncio
    async def test_create_database_conflict(self, credentials):
        transport = FakeTransport(
            json_response(409, {"code": "conflict", "message": "Name already taken"})
        )

        with pytest.raises(CreateDatabaseConflict) as exc_info:
            await create_database(
                {"organization": "acme", "name": "main", "cluster_size": "PS_10"},
                transport=transport,
                credentials=credentials,
            )

        assert exc_info.value.name == "main"
        assert is_conflict_error(exc_info.value)

    @pytest.mark.asyncio
    async def test_delete_database(self, credentials):
        transport = FakeTransport(TransportResponse(204, b""))

        result = await delete_database(
            {"organization": "acme", "database": "main"},
            transport=transport,
            credentials=credentials,
        )

        assert result is None
        assert transport.requests[0].method == "DELETE"


class TestServiceTokens:
    @pytest.mark.asyncio
    async def test_created_token_is_redacted(self, credentials):
        transport = FakeTransport(
            json_response(
                201,
                {
                    "id": "tok1",
                    "name": "ci",
                    "token": "pscale_tkn_secret",
                    "created_at": "2024-01-01T00:00:00.000Z",
                },
            )
        )

        token = await create_service_token(
            {"organization": "acme", "name": "ci"},
            transport=transport,
            credentials=credentials,
        )

        assert isinstance(token, ServiceToken)
        assert token.token == Redacted("pscale_tkn_secret")
        assert "pscale_tkn_secret" not in repr(token)
        assert token.model_dump(mode="json")["token"] == "pscale_tkn_secret"
        assert transport.requests[0].json() == {"name": "ci"}
