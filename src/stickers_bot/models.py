"""
Sticker data model and remote catalog schema
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_QUERY_COUNT = 25


def is_absolute_uri(value: Optional[str]) -> bool:
    """Check that a value is an absolute URI with scheme and host"""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


@dataclass(frozen=True)
class Sticker:
    """A single selectable image with its search keywords"""

    name: str
    image_uri: str
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StickerSet:
    """Immutable snapshot of a sticker catalog, in catalog order"""

    name: str
    stickers: Tuple[Sticker, ...] = ()

    @property
    def is_default(self) -> bool:
        return self is DEFAULT_STICKER_SET


DEFAULT_STICKER_SET = StickerSet("default", ())
FETCHED_STICKER_SET_NAME = "Stickers"


@dataclass(frozen=True)
class StickerQuery:
    """Search text plus pagination window for one request"""

    text: str = ""
    skip: int = 0
    count: int = DEFAULT_QUERY_COUNT
    initial_run: bool = field(default=False, compare=False)

    def __post_init__(self):
        # Negative pagination values are clamped rather than rejected
        object.__setattr__(self, "skip", max(0, int(self.skip)))
        object.__setattr__(self, "count", max(0, int(self.count)))
        object.__setattr__(self, "text", self.text or "")


class CatalogImage(BaseModel):
    """One image entry in the remote catalog document"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    image_uri: str = Field(alias="imageUri")
    keywords: List[str]

    @field_validator("image_uri")
    @classmethod
    def validate_image_uri(cls, value: str) -> str:
        if not is_absolute_uri(value):
            raise ValueError(f"imageUri must be an absolute URI: {value!r}")
        return value.strip()

    def to_sticker(self) -> Sticker:
        return Sticker(self.name, self.image_uri, tuple(self.keywords))


class CatalogDocument(BaseModel):
    """Remote sticker catalog: {"images": [...]}"""

    images: List[CatalogImage]

    def to_sticker_set(self, name: str = FETCHED_STICKER_SET_NAME) -> StickerSet:
        return StickerSet(name, tuple(image.to_sticker() for image in self.images))
