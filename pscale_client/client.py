"""
PlanetScale API client.

Binds credentials, a pooled transport and a default retry policy to the
operation descriptors in ``pscale_client.operations`` (or any other
``Operation``). The retry policy is applied here, at the outermost call
boundary, and can be overridden per call.
"""

from __future__ import annotations

import functools
from typing import Any, AsyncIterator

from loguru import logger

from pscale_client.config import settings
from pscale_client.credentials import Credentials, CredentialsSource, resolve_credentials
from pscale_client.runtime.operation import Operation, OperationInput
from pscale_client.runtime.pagination import (
    DEFAULT_PAGINATION_TRAIT,
    PaginationTrait,
    paginate_items,
    paginate_pages,
)
from pscale_client.runtime.retry import DEFAULT_RETRY_POLICY, RetryPolicy, retry_call
from pscale_client.runtime.transport import HttpxTransport, Transport


class PlanetScaleClient:
    """Async client for the PlanetScale API.

    Example:
        async with PlanetScaleClient() as client:
            org = await client.call(get_organization, {"organization": "acme"})
            async for db in client.items(list_databases, {"organization": "acme"}):
                print(db.name)
    """

    def __init__(
        self,
        credentials: CredentialsSource | None = None,
        transport: Transport | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        """Initialize the client.

        Args:
            credentials: Credentials or a zero-argument provider returning
                them. Read from settings when omitted.
            transport: Transport to use. A pooled HttpxTransport configured
                from settings is created (and owned) when omitted.
            retry_policy: Policy for calls that do not pass one.

        Raises:
            ConfigError: If credentials are omitted and settings lack them.
        """
        self._credentials = credentials if credentials is not None else Credentials.from_settings()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(
            timeout=settings.HTTP_TIMEOUT,
            max_connections=settings.HTTP_MAX_CONNECTIONS,
            max_keepalive=settings.HTTP_MAX_KEEPALIVE,
        )
        self.retry_policy = retry_policy or DEFAULT_RETRY_POLICY

    @property
    def credentials(self) -> Credentials:
        """Credentials for the next call."""
        return resolve_credentials(self._credentials)

    async def close(self) -> None:
        """Close the transport if the client created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.close()

    async def __aenter__(self) -> "PlanetScaleClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def call(
        self,
        operation: Operation,
        input: OperationInput = None,
        *,
        retry_policy: RetryPolicy | None = None,
    ) -> Any:
        """Call an operation, retrying according to the policy.

        Args:
            operation: The operation descriptor.
            input: Input model instance or mapping.
            retry_policy: Overrides the client's policy for this call;
                pass NO_RETRY_POLICY to disable retries.

        Returns:
            The decoded output of the operation.
        """
        policy = retry_policy or self.retry_policy

        async def attempt() -> Any:
            return await operation(
                input,
                transport=self._transport,
                credentials=self.credentials,
            )

        attempt.__name__ = operation.name

        logger.debug(f"Calling {operation.name}")
        return await retry_call(attempt, policy)

    def pages(
        self,
        operation: Operation,
        input: OperationInput = None,
        *,
        page_size: int | None = None,
        pagination: PaginationTrait | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over every page of a paginated operation.

        Each page is fetched through ``call``, so it is retried on its own
        according to the policy; a page that still fails ends the iteration.
        """
        call = functools.partial(self.call, operation, retry_policy=retry_policy)
        return paginate_pages(call, input, self._pagination(operation, pagination), page_size)

    def items(
        self,
        operation: Operation,
        input: OperationInput = None,
        *,
        page_size: int | None = None,
        pagination: PaginationTrait | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> AsyncIterator[Any]:
        """Iterate over the items of every page of a paginated operation."""
        call = functools.partial(self.call, operation, retry_policy=retry_policy)
        return paginate_items(call, input, self._pagination(operation, pagination), page_size)

    @staticmethod
    def _pagination(operation: Operation, override: PaginationTrait | None) -> PaginationTrait:
        if override is not None:
            return override
        return getattr(operation, "pagination", DEFAULT_PAGINATION_TRAIT)
