"""Environment-driven settings."""

import codecs
import logging
import os

from pydantic import BaseModel, Field

from tradepnl.exceptions import ConfigError

_ENV_PREFIX = "TRADEPNL_"


class Settings(BaseModel):
    legacy_encoding: str = "cp932"
    fallback_encoding: str = "utf-8"
    log_level: str = "WARNING"
    distribution_buckets: int = Field(default=20, gt=0)


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{_ENV_PREFIX}{name}", default).strip() or default


def get_settings() -> Settings:
    """Build settings from TRADEPNL_* environment variables."""
    defaults = Settings()

    fallback = _env("FALLBACK_ENCODING", defaults.fallback_encoding)
    try:
        codecs.lookup(fallback)
    except LookupError as exc:
        raise ConfigError("TRADEPNL_FALLBACK_ENCODING", fallback, "unknown codec") from exc

    log_level = _env("LOG_LEVEL", defaults.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError("TRADEPNL_LOG_LEVEL", log_level, "unknown log level")

    raw_buckets = _env("DISTRIBUTION_BUCKETS", str(defaults.distribution_buckets))
    try:
        buckets = int(raw_buckets)
    except ValueError as exc:
        raise ConfigError("TRADEPNL_DISTRIBUTION_BUCKETS", raw_buckets, "not an integer") from exc
    if buckets <= 0:
        raise ConfigError("TRADEPNL_DISTRIBUTION_BUCKETS", raw_buckets, "must be > 0")

    # The legacy codec is not checked here; the decoder falls back on its own.
    return Settings(
        legacy_encoding=_env("LEGACY_ENCODING", defaults.legacy_encoding),
        fallback_encoding=fallback,
        log_level=log_level,
        distribution_buckets=buckets,
    )
