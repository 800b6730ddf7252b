"""Wiring of the JSON stores, the Teamleader client and the use-case handlers.

Only this module imports from every layer; the rest depend on the
repository interfaces.
"""

from __future__ import annotations

import logging
from functools import lru_cache

import httpx

from pricebook.application.save_product import SaveProductHandler
from pricebook.infrastructure.config import Config, load_config
from pricebook.infrastructure.persistence.json_activity_log import JsonActivityLog
from pricebook.infrastructure.persistence.json_margin_memory import JsonMarginMemory
from pricebook.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from pricebook.infrastructure.persistence.json_settings_repository import (
    JsonSettingsRepository,
)
from pricebook.infrastructure.teamleader.client import TeamleaderClient
from pricebook.infrastructure.teamleader.relay import TeamleaderRelay
from pricebook.infrastructure.teamleader.relay_client import RelayClient


@lru_cache(maxsize=1)
def config() -> Config:
    return load_config()


def configure_logging() -> None:
    logging.basicConfig(
        level=config().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def product_repository() -> JsonProductRepository:
    data_dir = config().DATA_DIR
    return JsonProductRepository(data_dir / "products.json", data_dir / "bom_entries.json")


@lru_cache(maxsize=1)
def settings_repository() -> JsonSettingsRepository:
    # Cached so application settings are read once per session.
    return JsonSettingsRepository(config().DATA_DIR / "integrations.json")


def activity_log() -> JsonActivityLog:
    return JsonActivityLog(config().DATA_DIR / "app_logs.json")


def margin_memory() -> JsonMarginMemory:
    return JsonMarginMemory(config().DATA_DIR / "margins.json")


def save_product_handler() -> SaveProductHandler:
    return SaveProductHandler(
        product_repo=product_repository(),
        settings_repo=settings_repository(),
        activity_log=activity_log(),
        margin_memory=margin_memory(),
    )


def teamleader_client() -> TeamleaderClient:
    cfg = config()
    http_client = httpx.Client(timeout=cfg.HTTP_TIMEOUT)
    if cfg.RELAY_URL:
        relay = RelayClient.remote(cfg.RELAY_URL, http_client)
    else:
        relay = RelayClient.local(TeamleaderRelay(http_client, cfg.TEAMLEADER_AUTH_URL))
    return TeamleaderClient(settings_repository(), relay, cfg)
