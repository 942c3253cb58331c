"""
Keyword index over a sticker set
"""

from typing import List, Optional, Tuple

import structlog

from .models import Sticker, StickerSet

logger = structlog.get_logger(__name__)


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().casefold()


def _search_terms(sticker: Sticker) -> Tuple[str, ...]:
    return (_normalize(sticker.name),) + tuple(
        _normalize(keyword) for keyword in sticker.keywords
    )


def _paginate(matches: List[Sticker], skip: int, count: int) -> List[Sticker]:
    skip = max(0, skip)
    count = max(0, count)
    if count == 0:
        return []
    return matches[skip:skip + count]


class StickerSetIndexer:
    """
    Case-insensitive substring search over sticker names and keywords
    Results keep catalog order
    """

    def __init__(self):
        self._sticker_set: Optional[StickerSet] = None
        self._entries: List[Tuple[Sticker, Tuple[str, ...]]] = []

    @property
    def sticker_set(self) -> Optional[StickerSet]:
        return self._sticker_set

    def index_sticker_set(self, sticker_set: StickerSet) -> None:
        """Build the index, skipping the work if this set is already indexed"""
        if sticker_set is self._sticker_set:
            return

        self._entries = [
            (sticker, _search_terms(sticker)) for sticker in sticker_set.stickers
        ]
        self._sticker_set = sticker_set
        logger.debug(
            "Indexed sticker set",
            name=sticker_set.name,
            sticker_count=len(self._entries),
        )

    def find_stickers_by_query(
        self, query: str, skip: int = 0, count: int = 25
    ) -> List[Sticker]:
        """Return the window [skip, skip + count) of stickers matching query"""
        needle = _normalize(query)
        if needle:
            matches = [
                sticker
                for sticker, terms in self._entries
                if any(needle in term for term in terms)
            ]
        else:
            matches = [sticker for sticker, _ in self._entries]

        return _paginate(matches, skip, count)


def search(
    sticker_set: StickerSet, query: str, skip: int = 0, count: int = 25
) -> List[Sticker]:
    """Stateless one-shot search of a sticker set"""
    indexer = StickerSetIndexer()
    indexer.index_sticker_set(sticker_set)
    return indexer.find_stickers_by_query(query, skip, count)
