"""
Configuration for customer_resolution.

Uses pydantic-settings so every threshold and policy can be changed through
environment variables (prefix ``CUSTOMER_RESOLUTION_``) or a ``.env`` file
without touching code. Nested rule thresholds use ``__`` as delimiter, e.g.
``CUSTOMER_RESOLUTION_THRESHOLDS__RULE_04_FN=0.9``.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from customer_resolution.errors import ConfigurationError

_UNIT = {"ge": 0.0, "le": 1.0}


class ZipPolicy(StrEnum):
    """How the postal code candidate is derived from a raw address."""

    DIGITS = "digits"  # rightmost 6 digits found anywhere in the address
    RAW_SUFFIX = "raw_suffix"  # rightmost 6 characters of the trimmed address


class RuleThresholds(BaseModel):
    """Exclusive similarity floors for each match rule."""

    rule_01_fn: float = Field(default=0.80, **_UNIT)
    rule_02_fn: float = Field(default=0.70, **_UNIT)
    rule_04_fn: float = Field(default=0.80, **_UNIT)
    rule_04_ln: float = Field(default=0.80, **_UNIT)
    rule_05_fn: float = Field(default=0.80, **_UNIT)
    rule_05_ln: float = Field(default=0.80, **_UNIT)
    rule_06_addr: float = Field(default=0.75, **_UNIT)
    rule_06_fn: float = Field(default=0.80, **_UNIT)
    rule_06_ln: float = Field(default=0.80, **_UNIT)
    rule_07_ln: float = Field(default=0.70, **_UNIT)
    rule_08_fn: float = Field(default=0.80, **_UNIT)
    rule_08_ln: float = Field(default=0.80, **_UNIT)
    rule_09_fn: float = Field(default=0.80, **_UNIT)
    rule_09_ln: float = Field(default=0.80, **_UNIT)
    rule_16_fn: float = Field(default=0.75, **_UNIT)
    rule_16_ln: float = Field(default=0.75, **_UNIT)
    rule_16_year_tolerance: int = Field(default=1, ge=0, description="Inclusive birth-year drift")
    rule_17_fn: float = Field(default=0.85, **_UNIT)
    rule_17_ln: float = Field(default=0.85, **_UNIT)
    rule_18_avg: float = Field(default=0.80, **_UNIT)


class Settings(BaseSettings):
    """
    Resolution settings loaded from environment variables.

    All settings are validated when loaded so a bad value fails the run
    before any record is read.
    """

    model_config = SettingsConfigDict(
        env_prefix="CUSTOMER_RESOLUTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    zip_policy: ZipPolicy = Field(default=ZipPolicy.DIGITS, description="Postal code extraction policy")
    ngram_size: int = Field(default=3, ge=2, description="Window size for string similarity")
    review_limit: int = Field(default=100, ge=1, description="Max clusters listed for stewardship review")
    max_workers: int = Field(default=1, ge=1, description="Thread pool size for the parallel stages")
    chunk_size: int = Field(default=5000, ge=1, description="Items per parallel work unit")
    block_size_warning: int = Field(default=1000, ge=2, description="Log blocks at least this large")
    thresholds: RuleThresholds = Field(default_factory=RuleThresholds)


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh Settings instance; explicit overrides win over the environment."""
    clean = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**clean)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return load_settings()
