"""Runtime configuration read from ``RELATIVE_DATES_*`` environment variables.

Settings are validated by pydantic-settings:
 - RELATIVE_DATES_FORMAT is one of standard/short/med/long (case-insensitive).
 - RELATIVE_DATES_NOT_AFTER is a finite, non-negative number of seconds.
 - RELATIVE_DATES_REFRESH_INTERVAL is a finite number of seconds above zero.
 - RELATIVE_DATES_TIMEZONE is an IANA zone name; unset means the system local zone.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import tzinfo
import logging
import math
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import FormatLevel, FormatOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "RELATIVE_DATES_"

DEFAULT_REFRESH_INTERVAL = 60.0


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _blank(value: object) -> bool:
    return isinstance(value, str) and not value.strip()


class SyncConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    format: FormatLevel = FormatLevel.STANDARD
    not_after: Optional[float] = None
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    timezone: Optional[tzinfo] = None  # None means the system local zone

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v):
        if _blank(v):
            return FormatLevel.STANDARD
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("not_after", mode="before")
    @classmethod
    def _blank_cutoff(cls, v):
        return None if _blank(v) else v

    @field_validator("not_after")
    @classmethod
    def _check_cutoff(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and (not math.isfinite(v) or v < 0):
            raise ValueError(f"must be a finite, non-negative number of seconds, got {v}")
        return v

    @field_validator("refresh_interval", mode="before")
    @classmethod
    def _blank_interval(cls, v):
        return DEFAULT_REFRESH_INTERVAL if _blank(v) else v

    @field_validator("refresh_interval")
    @classmethod
    def _check_interval(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"must be a finite number of seconds greater than zero, got {v}")
        if v < 1:
            logger.warning("Refreshing timestamps every %.2fs; text changes at most once per second", v)
        return v

    @field_validator("timezone", mode="before")
    @classmethod
    def _load_zone(cls, v):
        if _blank(v):
            return None
        if isinstance(v, str):
            try:
                return ZoneInfo(v.strip())
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"not a known timezone: {v!r}") from exc
        return v

    def options(self) -> FormatOptions:
        return FormatOptions(format=self.format, not_after=self.not_after)


def _config_error(exc: ValidationError) -> ConfigError:
    problems = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        problems.append(f"{ENV_PREFIX}{field.upper()}: {error['msg']}")
    return ConfigError("; ".join(problems))


def load_config(environ: Mapping[str, str] | None = None) -> SyncConfig:
    """Build a SyncConfig from the process environment, or from ``environ`` when given.

    Unset or empty variables keep their defaults.

    Raises:
        ConfigError: if a variable is set to an invalid value.
    """
    try:
        if environ is None:
            return SyncConfig()
        # Only the supplied mapping is consulted, never os.environ
        values = {
            key[len(ENV_PREFIX):].lower(): value
            for key, value in environ.items()
            if key.upper().startswith(ENV_PREFIX)
        }
        return SyncConfig.model_validate(values)
    except ValidationError as exc:
        raise _config_error(exc) from exc


__all__ = ["ConfigError", "SyncConfig", "load_config"]
