"""Process configuration from the environment (``PRICEBOOK_*``) or ``.env``.

Price formulas and the UI language are catalog data and live in the
settings store, not here.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PRICEBOOK_", env_file=".env", extra="ignore")

    DATA_DIR: Path = _DEFAULT_DATA_DIR
    LOG_LEVEL: str = "WARNING"

    # Relay for the OAuth token exchange and API calls. Empty means the
    # relay runs in-process (the client secret is then read locally).
    RELAY_URL: str = ""
    HTTP_TIMEOUT: float = 15.0

    TEAMLEADER_API_URL: str = "https://api.focus.teamleader.eu"
    TEAMLEADER_AUTH_URL: str = "https://focus.teamleader.eu"
    # Teamleader price list that receives the B2B price
    TEAMLEADER_B2B_PRICE_LIST_ID: str = "c78a8211-8aea-0025-b951-788b54f26e92"
    CURRENCY: str = "EUR"

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper()


def load_config() -> Config:
    return Config()
