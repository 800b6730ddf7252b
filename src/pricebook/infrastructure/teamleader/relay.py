"""Relay for the Teamleader OAuth token exchange and API calls.

The token exchange needs the confidential client secret, so a browser
client cannot do it directly; it posts an action to this relay instead.
The relay speaks a small JSON contract:

    {"action": "exchange", "client_id", "client_secret", "code", "redirect_uri"}
    {"action": "refresh", "client_id", "client_secret", "refresh_token"}
    {"action": "request", "url", "method", "headers", "body"}

and answers with the upstream JSON, or ``{"error", "upstreamStatus"}``
when the upstream call fails. Only ``teamleader.eu`` URLs are forwarded.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

ALLOWED_HOST_SUFFIX = "teamleader.eu"


class TeamleaderRelay:

    def __init__(self, http_client: httpx.Client, auth_url: str) -> None:
        self._http = http_client
        self._token_url = f"{auth_url.rstrip('/')}/oauth2/access_token"

    def handle(self, payload: Any) -> Any:
        if not isinstance(payload, dict):
            return {"error": "Invalid JSON body"}

        action = payload.get("action") or "request"
        if action == "exchange":
            return self._token_grant(
                {
                    "client_id": payload.get("client_id"),
                    "client_secret": payload.get("client_secret"),
                    "code": payload.get("code"),
                    "grant_type": "authorization_code",
                    "redirect_uri": payload.get("redirect_uri"),
                }
            )
        if action == "refresh":
            return self._token_grant(
                {
                    "client_id": payload.get("client_id"),
                    "client_secret": payload.get("client_secret"),
                    "refresh_token": payload.get("refresh_token"),
                    "grant_type": "refresh_token",
                }
            )
        if action == "request":
            return self._forward(payload)
        return {"error": "Invalid Action"}

    # --- Internal helpers -----------------------------------------------------

    def _token_grant(self, form: dict[str, Any]) -> Any:
        logger.debug("Relaying %s grant", form["grant_type"])
        return self._send("POST", self._token_url, data=form)

    def _forward(self, payload: dict[str, Any]) -> Any:
        url = payload.get("url") or ""
        try:
            host = httpx.URL(url).host
        except httpx.InvalidURL:
            host = ""
        if host != ALLOWED_HOST_SUFFIX and not host.endswith("." + ALLOWED_HOST_SUFFIX):
            return {"error": "Only Teamleader URLs allowed", "upstreamStatus": 403}
        return self._send(
            payload.get("method") or "GET",
            url,
            headers=payload.get("headers") or {},
            content=payload.get("body"),
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s %s failed: %s", method, url, exc)
            return {"error": f"Transport error: {exc}", "upstreamStatus": 500}

        if not response.content:
            data: Any = {}
        else:
            try:
                data = response.json()
            except ValueError:
                data = response.text

        if response.status_code >= 400:
            return {"error": data, "upstreamStatus": response.status_code}
        return data
