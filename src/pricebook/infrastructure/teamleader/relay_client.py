"""Client side of the relay contract.

Talks to a remote relay over HTTP when one is configured, or calls the
relay in-process. Either way, an ``error`` in the answer becomes a
``TransportError`` carrying the upstream status.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import httpx

from pricebook.domain.exceptions import TransportError
from pricebook.infrastructure.teamleader.relay import TeamleaderRelay

logger = logging.getLogger(__name__)


def _parse_lenient(text: str) -> Any:
    """Parse JSON, tolerating noise printed around the object."""
    try:
        return json.loads(text)
    except ValueError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end == -1:
            raise
        return json.loads(text[start:end + 1])


def error_message(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        if isinstance(error.get("errors"), list) and error["errors"]:
            first = error["errors"][0]
            if isinstance(first, dict) and first.get("title"):
                return str(first["title"])
        for key in ("error", "message"):
            if isinstance(error.get(key), str):
                return error[key]
    return json.dumps(error)


class RelayClient:

    def __init__(self, send: Callable[[dict[str, Any]], Any]) -> None:
        self._send = send

    @classmethod
    def remote(cls, relay_url: str, http_client: httpx.Client) -> RelayClient:
        def send(payload: dict[str, Any]) -> Any:
            try:
                response = http_client.post(
                    relay_url, json=payload, headers={"Accept": "application/json"}
                )
            except httpx.HTTPError as exc:
                raise TransportError(f"Relay unreachable: {exc}") from exc
            try:
                return _parse_lenient(response.text)
            except ValueError as exc:
                raise TransportError(
                    "Relay returned invalid JSON", response.status_code
                ) from exc

        return cls(send)

    @classmethod
    def local(cls, relay: TeamleaderRelay) -> RelayClient:
        return cls(relay.handle)

    def call(self, payload: dict[str, Any]) -> Any:
        logger.debug("Relay action %s", payload.get("action"))
        data = self._send(payload)
        if isinstance(data, dict):
            status = data.get("upstreamStatus")
            if data.get("error") or (isinstance(status, int) and status >= 400):
                message = error_message(data.get("error")) if data.get("error") else ""
                raise TransportError(message or f"Upstream Error {status}", status)
        return data
