from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    NETWORTH_SEED_PATH: str = "data/seed.json"
    NETWORTH_CURRENCY: str = "AED"
    # Opt-in ceiling of 24 months basic salary on the EOSB accrual.
    NETWORTH_EOSB_CAP: bool = False
    NETWORTH_LOG_LEVEL: str = "INFO"
    ALPHAVANTAGE_API_KEY: str | None = None
    ALPHAVANTAGE_TIMEOUT: float = Field(default=10.0, gt=0)

    @property
    def seed_path(self) -> str:
        return self.NETWORTH_SEED_PATH

    @property
    def currency(self) -> str:
        return (self.NETWORTH_CURRENCY or "AED").strip().upper()

    @property
    def eosb_cap(self) -> bool:
        return self.NETWORTH_EOSB_CAP

    @property
    def log_level(self) -> str:
        return self.NETWORTH_LOG_LEVEL

    @property
    def alphavantage_api_key(self) -> str | None:
        return self.ALPHAVANTAGE_API_KEY

    @property
    def alphavantage_timeout(self) -> float:
        return self.ALPHAVANTAGE_TIMEOUT


def load_settings() -> Settings:
    return Settings()
