"""Unit tests for logging setup."""

import io
import logging
from unittest.mock import AsyncMock

import pytest
from loguru import logger

from pscale_client.logging import InterceptHandler, disable_logging, setup_logging
from pscale_client.runtime.pagination import paginate_pages

client_logger = logger.bind(source="pscale_client.client")


async def fetch_one_page():
    operation = AsyncMock(return_value={"next_page": None, "data": []})
    return [page async for page in paginate_pages(operation)]


@pytest.fixture
def sink():
    stream = io.StringIO()
    yield stream
    disable_logging()


class TestDefaults:
    @pytest.mark.asyncio
    async def test_package_is_silent_until_enabled(self, sink):
        """Records from the package do not reach sinks the application added itself."""
        handler_id = logger.add(sink, level="DEBUG")
        try:
            await fetch_one_page()
        finally:
            logger.remove(handler_id)

        assert "Fetching page 1" not in sink.getvalue()

    @pytest.mark.asyncio
    async def test_setup_enables_package_records(self, sink):
        setup_logging(level="DEBUG", sink=sink)

        await fetch_one_page()

        assert "Fetching page 1" in sink.getvalue()


class TestSetupLogging:
    def test_writes_to_sink_at_level(self, sink):
        setup_logging(level="WARNING", sink=sink)

        client_logger.info("quiet")
        client_logger.warning("loud")

        output = sink.getvalue()
        assert "quiet" not in output
        assert "loud" in output
        assert "pscale_client.client" in output

    def test_ignores_unrelated_records(self, sink):
        """The sink only carries the package and the HTTP stack."""
        setup_logging(level="DEBUG", sink=sink)

        logger.bind(source="myapp.views").info("application message")

        assert "application message" not in sink.getvalue()

    def test_intercepts_http_stack(self, sink):
        """Standard logging from httpx is routed through loguru."""
        setup_logging(level="DEBUG", sink=sink)

        logging.getLogger("httpx").info("HTTP Request: GET https://api.test/v1")

        assert "HTTP Request: GET https://api.test/v1" in sink.getvalue()
        assert "httpx" in sink.getvalue()
        assert isinstance(logging.getLogger("httpx").handlers[0], InterceptHandler)
        assert logging.getLogger("httpx").propagate is False

    def test_http_capture_is_optional(self, sink):
        setup_logging(level="DEBUG", sink=sink, capture_http=False)

        assert not any(
            isinstance(h, InterceptHandler) for h in logging.getLogger("httpx").handlers
        )

    def test_second_setup_replaces_sink(self, sink):
        """Reconfiguring never duplicates output."""
        first = io.StringIO()
        setup_logging(level="INFO", sink=first)
        setup_logging(level="INFO", sink=sink)

        client_logger.info("once")

        assert "once" not in first.getvalue()
        assert sink.getvalue().count("once") == 1

    def test_announces_level(self, sink):
        setup_logging(level="info", sink=sink)

        assert "pscale-client logging enabled at INFO." in sink.getvalue()


class TestDisableLogging:
    def test_restores_http_loggers(self, sink):
        setup_logging(level="DEBUG", sink=sink)

        disable_logging()
        client_logger.warning("after")

        httpx_logger = logging.getLogger("httpx")
        assert not any(isinstance(h, InterceptHandler) for h in httpx_logger.handlers)
        assert httpx_logger.propagate is True
        assert "after" not in sink.getvalue()
