"""
Environment-backed settings for the stickers bot
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from .errors import ConfigurationError
from .models import is_absolute_uri

logger = structlog.get_logger(__name__)


def _string_value(
    environ: Mapping[str, str], name: str, optional: bool = False
) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        if not optional:
            logger.error("Config parameter not provided", setting=name)
            raise ConfigurationError(f"Config parameter '{name}' is required.", name)
        logger.info("Config parameter not provided", setting=name)
        return None
    return value.strip()


def _int_value(
    environ: Mapping[str, str], name: str, optional: bool = False, default: int = 0
) -> int:
    value = environ.get(name)
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        if not optional:
            logger.error(
                "Config parameter not provided or cannot be parsed as int",
                setting=name,
            )
            raise ConfigurationError(
                f"Config parameter '{name}' is required and must be parsable as int.",
                name,
            )
        logger.info(
            "Config parameter not provided or cannot be parsed as int, using default",
            setting=name,
            default=default,
        )
        return default


def _uri_value(
    environ: Mapping[str, str], name: str, optional: bool = False
) -> Optional[str]:
    value = environ.get(name)
    if not is_absolute_uri(value):
        if not optional:
            logger.error(
                "Config parameter not provided or is not a valid absolute URI",
                setting=name,
            )
            raise ConfigurationError(
                f"Config parameter '{name}' is required and must be a valid absolute URI.",
                name,
            )
        logger.info(
            "Config parameter not provided or is not a valid absolute URI",
            setting=name,
        )
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    """Resolved bot settings"""

    microsoft_app_id: str
    config_uri: Optional[str]
    cached_sticker_set_ttl_mins: int
    host: str = "0.0.0.0"
    port: int = 3978

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Load settings, raising ConfigurationError for bad required values"""
        if environ is None:
            environ = os.environ

        return cls(
            microsoft_app_id=_string_value(environ, "MICROSOFT_APP_ID"),
            config_uri=_uri_value(environ, "CONFIG_URI", optional=True),
            cached_sticker_set_ttl_mins=_int_value(
                environ, "CACHED_STICKER_SET_TTL_MINS"
            ),
            host=_string_value(environ, "HOST", optional=True) or "0.0.0.0",
            port=_int_value(environ, "PORT", optional=True, default=3978),
        )
