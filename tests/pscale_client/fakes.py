"""
Fake transport and helpers for runtime tests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from pscale_client.credentials import Credentials
from pscale_client.runtime.transport import TransportResponse


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None

    def json(self) -> Any:
        return json.loads(self.body) if self.body is not None else None


def json_response(status: int, payload: Any, headers: Mapping[str, str] | None = None) -> TransportResponse:
    """Build a TransportResponse with a JSON body."""
    return TransportResponse(status, json.dumps(payload).encode(), dict(headers or {}))


class FakeTransport:
    """Transport returning queued responses (or raising queued errors) in order."""

    def __init__(self, *responses: TransportResponse | BaseException):
        self.responses = list(responses)
        self.requests: list[RecordedRequest] = []

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> TransportResponse:
        self.requests.append(RecordedRequest(method, url, dict(headers), body))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


def make_credentials(**overrides: Any) -> Credentials:
    values = {
        "token": "svc-id:svc-secret",
        "organization": "acme",
        "base_url": "https://api.test/v1",
    }
    values.update(overrides)
    return Credentials(**values)
