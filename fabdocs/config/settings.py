"""Application settings module.

Provides centralized configuration using environment variables with sane defaults.
Issuing-entity defaults are used whenever a render request carries branding with
missing textual fields (company GSTIN, email, bank details).
"""
from __future__ import annotations

from functools import lru_cache
import os

from pydantic import BaseModel


class Settings(BaseModel):
    LOG_LEVEL: str = "INFO"

    # Branding asset fetch (seconds, per image)
    ASSET_FETCH_TIMEOUT_S: float = 10.0

    # Issuing entity defaults
    DEFAULT_ENTITY_NAME: str = "Revira NexGen Structures Pvt. Ltd"
    DEFAULT_COMPANY_GSTIN: str = "07AAPCR3026H1ZA"
    DEFAULT_EMAIL: str = "sales@reviranexgen.com"
    DEFAULT_HEAD_OFFICE_ADDRESS: str = "28, E2 Block, Shivram Park Nangloi Delhi - 110041"
    BANK_ACCOUNT_NUMBER: str = "73361900002657"
    BANK_IFSC: str = "YESB0000733"

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment with type coercion and defaults."""
        def _get_float(name: str, default: float) -> float:
            raw = os.getenv(name)
            if raw is None:
                return default
            try:
                return float(raw)
            except ValueError:
                return default

        def _get_str(name: str, default: str) -> str:
            raw = os.getenv(name)
            return raw if raw else default

        return cls(
            LOG_LEVEL=_get_str("LOG_LEVEL", "INFO").upper(),
            ASSET_FETCH_TIMEOUT_S=_get_float("ASSET_FETCH_TIMEOUT_S", 10.0),
            DEFAULT_ENTITY_NAME=_get_str("DEFAULT_ENTITY_NAME", cls.model_fields["DEFAULT_ENTITY_NAME"].default),
            DEFAULT_COMPANY_GSTIN=_get_str("DEFAULT_COMPANY_GSTIN", cls.model_fields["DEFAULT_COMPANY_GSTIN"].default),
            DEFAULT_EMAIL=_get_str("DEFAULT_EMAIL", cls.model_fields["DEFAULT_EMAIL"].default),
            DEFAULT_HEAD_OFFICE_ADDRESS=_get_str(
                "DEFAULT_HEAD_OFFICE_ADDRESS", cls.model_fields["DEFAULT_HEAD_OFFICE_ADDRESS"].default),
            BANK_ACCOUNT_NUMBER=_get_str("BANK_ACCOUNT_NUMBER", cls.model_fields["BANK_ACCOUNT_NUMBER"].default),
            BANK_IFSC=_get_str("BANK_IFSC", cls.model_fields["BANK_IFSC"].default),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings.load()


__all__ = ["Settings", "get_settings"]
