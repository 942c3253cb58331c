"""
Messaging extension query parsing and response formatting
"""

from typing import Any, Dict, Iterable, Optional

from botbuilder.schema import Activity, ActivityTypes

from .cards import StickerCardTemplates
from .models import DEFAULT_QUERY_COUNT, Sticker, StickerQuery

COMPOSE_EXTENSION_QUERY = "composeExtension/query"
INITIAL_RUN_PARAMETER = "initialRun"


def is_compose_extension_query(activity: Activity) -> bool:
    """Check for a messaging extension query invoke"""
    return (
        activity is not None
        and activity.type == ActivityTypes.invoke
        and activity.name == COMPOSE_EXTENSION_QUERY
    )


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def parse_query(value: Optional[Dict[str, Any]]) -> StickerQuery:
    """
    Extract the search text and paging options from an invoke value

    Exactly one parameter is expected, so the first one is used regardless
    of its name. The initialRun parameter is sent when the picker opens and
    means "show everything".
    """
    if not isinstance(value, dict):
        return StickerQuery()

    text = ""
    initial_run = False
    parameters = value.get("parameters") or []
    if isinstance(parameters, list) and parameters:
        first = parameters[0] if isinstance(parameters[0], dict) else {}
        if first.get("name") == INITIAL_RUN_PARAMETER:
            initial_run = str(first.get("value", "")).lower() == "true"
        else:
            raw = first.get("value")
            text = raw if isinstance(raw, str) else ""

    skip, count = 0, DEFAULT_QUERY_COUNT
    options = value.get("queryOptions")
    if isinstance(options, dict):
        skip = _to_int(options.get("skip"), 0)
        count = _to_int(options.get("count"), DEFAULT_QUERY_COUNT)

    return StickerQuery(text=text, skip=skip, count=count, initial_run=initial_run)


def build_response(stickers: Iterable[Sticker]) -> Dict[str, Any]:
    """Compose extension result with one grid attachment per sticker"""
    attachments = [StickerCardTemplates.sticker_attachment(s) for s in stickers]
    return {
        "composeExtension": {
            "type": "result",
            "attachmentLayout": "grid",
            "attachments": attachments,
        }
    }
