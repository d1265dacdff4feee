"""
Configuration management for paywallet.
"""

from decimal import Decimal
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYWALLET_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    node_url: str = "http://127.0.0.1:8080"
    request_timeout: float = Field(default=30.0, gt=0)

    # Fiat per ether, display only
    exchange_rate: Decimal = Field(default=Decimal("0"), ge=0)
    fiat_currency: str = "USD"

    state_file: Path = Path.home() / ".paywallet" / "state.json"

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
