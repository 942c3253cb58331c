"""
Card templates for sticker results in the messaging extension picker
"""

from typing import Any, Dict

from .models import Sticker

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
THUMBNAIL_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.thumbnail"


class StickerCardTemplates:
    """Factory class for sticker card attachments"""

    @staticmethod
    def sticker_card(sticker: Sticker) -> Dict[str, Any]:
        """Adaptive card that renders the sticker image on its own"""
        return {
            "type": "AdaptiveCard",
            "version": "1.0",
            "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
            "body": [
                {
                    "type": "Image",
                    "url": sticker.image_uri,
                    "altText": sticker.name,
                    "size": "auto",
                }
            ],
        }

    @staticmethod
    def sticker_preview(sticker: Sticker) -> Dict[str, Any]:
        """Thumbnail shown in the picker grid"""
        return {
            "contentType": THUMBNAIL_CARD_CONTENT_TYPE,
            "content": {
                "title": sticker.name,
                "images": [{"url": sticker.image_uri, "alt": sticker.name}],
            },
        }

    @classmethod
    def sticker_attachment(cls, sticker: Sticker) -> Dict[str, Any]:
        """Messaging extension attachment: card plus picker preview"""
        return {
            "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
            "content": cls.sticker_card(sticker),
            "preview": cls.sticker_preview(sticker),
        }
