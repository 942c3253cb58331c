"""
Error types for the stickers bot
"""

from typing import Optional


class StickerBotError(Exception):
    """Base stickers bot error"""
    pass


class ConfigurationError(StickerBotError):
    """Required setting missing or unparsable"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message)
        self.setting = setting


class CatalogError(StickerBotError):
    """Sticker catalog could not be loaded"""

    def __init__(
        self,
        message: str,
        config_uri: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.config_uri = config_uri
        self.status_code = status_code


class CatalogTransportError(CatalogError):
    """Request failed or returned a non-success status"""
    pass


class CatalogParseError(CatalogError):
    """Response body is not a valid sticker catalog"""
    pass
