"""Teamleader Focus client: OAuth connection and product sync.

Tokens and client credentials are kept in the ``teamleader``
integration settings. Every call goes through the relay. An expired
access token (HTTP 401) triggers exactly one refresh and retry; a
refresh token the server rejects is cleared so the user is asked to
reconnect instead of looping.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

from pricebook.domain.exceptions import (
    NotConnectedError,
    SessionExpiredError,
    TransportError,
    ValidationError,
)
from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import PriceList
from pricebook.domain.repository.catalog_sync_gateway import CatalogSyncGateway
from pricebook.domain.repository.settings_repository import SettingsRepository
from pricebook.infrastructure.config import Config
from pricebook.infrastructure.teamleader.relay_client import RelayClient

logger = logging.getLogger(__name__)

SERVICE = "teamleader"


class TeamleaderClient(CatalogSyncGateway):

    def __init__(
        self,
        settings_repo: SettingsRepository,
        relay: RelayClient,
        config: Config,
    ) -> None:
        self._settings_repo = settings_repo
        self._relay = relay
        self._config = config

    # --- Connection -----------------------------------------------------------

    def configure(self, client_id: str, client_secret: str, redirect_uri: str) -> None:
        """Store the OAuth client credentials, keeping existing tokens."""
        existing = self._settings_repo.get_integration_settings(SERVICE) or {}
        self._settings_repo.save_integration_settings(
            SERVICE,
            {
                **existing,
                "client_id": client_id.strip(),
                "client_secret": client_secret.strip(),
                "redirect_uri": redirect_uri.strip().rstrip("/"),
            },
        )

    def authorize_url(self) -> str:
        """URL the user opens to grant access; it redirects back with a code."""
        settings = self._credentials()
        query = urlencode(
            {
                "client_id": settings["client_id"],
                "response_type": "code",
                "redirect_uri": settings["redirect_uri"],
            }
        )
        return f"{self._config.TEAMLEADER_AUTH_URL.rstrip('/')}/oauth2/authorize?{query}"

    def exchange_code(self, code: str, redirect_uri: str | None = None) -> dict[str, Any]:
        """Trade an authorization code for tokens and store them.

        *redirect_uri* must be the one used to obtain the code.
        """
        settings = self._credentials()
        uri = (redirect_uri or settings.get("redirect_uri") or "").strip().rstrip("/")
        if not uri:
            raise ValidationError("Missing Redirect URI.")

        tokens = self._relay.call(
            {
                "action": "exchange",
                "client_id": settings["client_id"],
                "client_secret": settings["client_secret"],
                "code": code,
                "redirect_uri": uri,
            }
        )
        if not isinstance(tokens, dict) or not tokens.get("access_token"):
            raise TransportError("Token exchange returned no access token")

        updated = {**settings, "redirect_uri": uri, **self._token_fields(tokens)}
        self._settings_repo.save_integration_settings(SERVICE, updated)
        logger.info("Teamleader connected")
        return updated

    def refresh_access_token(self, settings: dict[str, Any]) -> dict[str, Any] | None:
        """Refresh and store the tokens; None if that was not possible."""
        if not settings.get("refresh_token"):
            return None
        try:
            tokens = self._relay.call(
                {
                    "action": "refresh",
                    "client_id": settings.get("client_id"),
                    "client_secret": settings.get("client_secret"),
                    "refresh_token": settings["refresh_token"],
                }
            )
        except TransportError as exc:
            logger.warning("Token refresh failed: %s", exc)
            message = str(exc)
            if (
                exc.upstream_status == 400
                or "invalid_grant" in message
                or "invalid_request" in message
            ):
                logger.warning("Refresh token rejected, clearing stored tokens")
                self._settings_repo.save_integration_settings(
                    SERVICE, {**settings, "access_token": None, "refresh_token": None}
                )
            return None

        if not isinstance(tokens, dict) or not tokens.get("access_token"):
            logger.error("Refresh response missing access_token")
            return None

        # Teamleader rotates refresh tokens on every refresh.
        updated = {**settings, **self._token_fields(tokens)}
        self._settings_repo.save_integration_settings(SERVICE, updated)
        return updated

    def current_user(self, access_token: str | None = None) -> dict[str, Any]:
        """Return the connected Teamleader user (``users.me``)."""
        if access_token is not None:
            data = self._relay.call(
                self._request_payload("users.me", "GET", None, access_token)
            )
        else:
            data = self.request("users.me", "GET")
        return data.get("data", {}) if isinstance(data, dict) else {}

    # --- API calls ------------------------------------------------------------

    def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Any:
        settings = self._settings_repo.get_integration_settings(SERVICE)
        if not settings or not settings.get("access_token"):
            raise NotConnectedError("Teamleader not connected.")

        try:
            return self._relay.call(
                self._request_payload(endpoint, method, body, settings["access_token"])
            )
        except TransportError as exc:
            if exc.upstream_status != 401:
                raise
            logger.info("Teamleader returned 401, refreshing token")
            refreshed = self.refresh_access_token(settings)
            if not refreshed or not refreshed.get("access_token"):
                raise SessionExpiredError(
                    "Session expired. Please reconnect Teamleader in Settings.", 401
                ) from exc
            return self._relay.call(
                self._request_payload(endpoint, method, body, refreshed["access_token"])
            )

    def push_product(self, product: Product, description: str) -> str:
        payload = self.product_payload(product, description)
        endpoint = "products.update" if product.external_ref else "products.add"
        data = self.request(endpoint, "POST", payload)

        ref = None
        if isinstance(data, dict):
            ref = (data.get("data") or {}).get("id") or data.get("id")
        # products.update answers 204 without a body; the id is unchanged.
        ref = ref or product.external_ref
        if not ref:
            raise TransportError(f"Teamleader returned no id for {product.sku}")
        return ref

    def product_payload(self, product: Product, description: str) -> dict[str, Any]:
        currency = self._config.CURRENCY
        b2b = product.price_for(PriceList.B2B)
        consumer = product.price_for(PriceList.CONSUMER)
        payload: dict[str, Any] = {
            "name": product.name,
            "code": product.sku,
            "description": description,
            "selling_price": {
                "amount": float(consumer.final_price) if consumer else 0,
                "currency": currency,
            },
            "purchase_price": {"amount": float(product.purchase_cost), "currency": currency},
            "price_list_prices": [
                {
                    "price_list_id": self._config.TEAMLEADER_B2B_PRICE_LIST_ID,
                    "price": {
                        "amount": float(b2b.final_price) if b2b else 0,
                        "currency": currency,
                    },
                }
            ],
        }
        if product.external_ref:
            payload["id"] = product.external_ref
        return payload

    # --- Internal helpers -----------------------------------------------------

    def _credentials(self) -> dict[str, Any]:
        settings = self._settings_repo.get_integration_settings(SERVICE)
        if not settings or not settings.get("client_id") or not settings.get("client_secret"):
            raise ValidationError("Missing Client ID/Secret in Teamleader settings.")
        return settings

    def _request_payload(
        self, endpoint: str, method: str, body: Any, access_token: str
    ) -> dict[str, Any]:
        return {
            "action": "request",
            "url": f"{self._config.TEAMLEADER_API_URL.rstrip('/')}/{endpoint.lstrip('/')}",
            "method": method,
            "body": json.dumps(body) if body is not None else None,
            "headers": {
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
        }

    @staticmethod
    def _token_fields(tokens: dict[str, Any]) -> dict[str, Any]:
        return {
            "access_token": tokens.get("access_token"),
            "refresh_token": tokens.get("refresh_token"),
            "expires_in": tokens.get("expires_in"),
            "token_updated_at": datetime.now(timezone.utc).isoformat(),
        }
