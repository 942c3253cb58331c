"""
Tests for messaging extension query parsing and sticker cards
"""

import pytest
from botbuilder.schema import Activity, ActivityTypes

from stickers_bot.cards import (
    ADAPTIVE_CARD_CONTENT_TYPE,
    THUMBNAIL_CARD_CONTENT_TYPE,
    StickerCardTemplates,
)
from stickers_bot.compose_extension import (
    build_response,
    is_compose_extension_query,
    parse_query,
)
from stickers_bot.models import Sticker, StickerQuery


class TestIsComposeExtensionQuery:
    """Test suite for activity type detection"""

    def test_query_invoke(self):
        activity = Activity(type=ActivityTypes.invoke, name="composeExtension/query")
        assert is_compose_extension_query(activity) is True

    def test_other_invoke(self):
        activity = Activity(type=ActivityTypes.invoke, name="composeExtension/submitAction")
        assert is_compose_extension_query(activity) is False

    def test_message_activity(self):
        activity = Activity(type=ActivityTypes.message, text="hello")
        assert is_compose_extension_query(activity) is False

    def test_none(self):
        assert is_compose_extension_query(None) is False


class TestParseQuery:
    """Test suite for compose extension value parsing"""

    def test_keyword_with_options(self):
        value = {
            "commandId": "searchQuery",
            "parameters": [{"name": "keyword", "value": "feline"}],
            "queryOptions": {"skip": 5, "count": 10},
        }

        query = parse_query(value)

        assert query == StickerQuery("feline", 5, 10)
        assert query.initial_run is False

    def test_first_parameter_wins_regardless_of_name(self):
        value = {
            "parameters": [
                {"name": "searchText", "value": "party"},
                {"name": "keyword", "value": "cat"},
            ]
        }

        assert parse_query(value).text == "party"

    def test_initial_run(self):
        value = {
            "parameters": [{"name": "initialRun", "value": "true"}],
            "queryOptions": {"skip": 0, "count": 25},
        }

        query = parse_query(value)

        assert query.text == ""
        assert query.initial_run is True

    @pytest.mark.parametrize("value", [None, "oops", {}, {"parameters": []}])
    def test_defaults(self, value):
        query = parse_query(value)

        assert query.text == ""
        assert query.skip == 0
        assert query.count == 25

    @pytest.mark.parametrize(
        "skip,count",
        [
            ("later", None),
            (float("inf"), float("-inf")),
            (float("nan"), {"n": 1}),
        ],
    )
    def test_malformed_options_use_defaults(self, skip, count):
        value = {
            "parameters": [{"name": "keyword", "value": 42}],
            "queryOptions": {"skip": skip, "count": count},
        }

        assert parse_query(value) == StickerQuery("", 0, 25)

    def test_negative_options_are_clamped(self):
        value = {
            "parameters": [{"name": "keyword", "value": "cat"}],
            "queryOptions": {"skip": -4, "count": -1},
        }

        assert parse_query(value) == StickerQuery("cat", 0, 0)


class TestBuildResponse:
    """Test suite for compose extension responses"""

    @pytest.fixture
    def sticker(self):
        return Sticker("cat", "https://x/cat.png", ("cat", "feline"))

    def test_result_envelope(self, sticker):
        response = build_response([sticker])

        result = response["composeExtension"]
        assert result["type"] == "result"
        assert result["attachmentLayout"] == "grid"
        assert len(result["attachments"]) == 1

    def test_empty_result(self):
        assert build_response([])["composeExtension"]["attachments"] == []

    def test_sticker_attachment(self, sticker):
        attachment = StickerCardTemplates.sticker_attachment(sticker)

        assert attachment["contentType"] == ADAPTIVE_CARD_CONTENT_TYPE
        image = attachment["content"]["body"][0]
        assert image["type"] == "Image"
        assert image["url"] == "https://x/cat.png"
        assert image["altText"] == "cat"

        preview = attachment["preview"]
        assert preview["contentType"] == THUMBNAIL_CARD_CONTENT_TYPE
        assert preview["content"]["title"] == "cat"
        assert preview["content"]["images"][0]["url"] == "https://x/cat.png"

    def test_attachments_keep_sticker_order(self):
        stickers = [
            Sticker("b", "https://x/b.png", ()),
            Sticker("a", "https://x/a.png", ()),
        ]

        attachments = build_response(stickers)["composeExtension"]["attachments"]

        assert [a["preview"]["content"]["title"] for a in attachments] == ["b", "a"]
