"""Tests for payload validation, sanitization and model parsing.

Run with: uv run pytest nihongopedia/services/tests/unit/test_content_validation.py -v
"""

import pytest

from nihongopedia.services.content import (
    ContentBundle,
    SchemaError,
    sanitize_payload,
    sanitize_value,
    validate_category_payload,
)
from nihongopedia.services.content.validation import parse_bundle, parse_categories
from nihongopedia.services.tests.fakes import make_categories_payload, make_greetings_payload


class TestValidateCategoryPayload:
    """Tests for the validation gate."""

    @pytest.mark.unit
    def test_valid_payload_passes(self):
        validate_category_payload(make_greetings_payload())

    @pytest.mark.unit
    def test_empty_items_is_valid(self):
        validate_category_payload(make_greetings_payload(items=[]))

    @pytest.mark.unit
    @pytest.mark.parametrize("field", ["category", "content_version", "items"])
    def test_missing_bundle_field(self, field):
        payload = make_greetings_payload()
        del payload[field]

        with pytest.raises(SchemaError) as exc_info:
            validate_category_payload(payload)

        assert exc_info.value.field == field
        assert exc_info.value.index is None
        assert field in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.parametrize("field", ["id", "expression", "reading", "meaning_id"])
    def test_missing_item_field_names_index(self, field):
        payload = make_greetings_payload()
        second = dict(payload["items"][0], id="g2")
        del second[field]
        payload["items"].append(second)

        with pytest.raises(SchemaError) as exc_info:
            validate_category_payload(payload)

        assert exc_info.value.field == field
        assert exc_info.value.index == 1
        assert str(exc_info.value) == f"Item 1: Missing required field: {field}"

    @pytest.mark.unit
    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(SchemaError):
            validate_category_payload(payload)

    @pytest.mark.unit
    def test_items_must_be_array(self):
        with pytest.raises(SchemaError) as exc_info:
            validate_category_payload(make_greetings_payload(items={"id": "g1"}))
        assert exc_info.value.field == "items"

    @pytest.mark.unit
    def test_item_must_be_object(self):
        with pytest.raises(SchemaError) as exc_info:
            validate_category_payload(make_greetings_payload(items=["g1"]))
        assert exc_info.value.index == 0


class TestSanitize:
    """Tests for HTML escaping of untrusted strings."""

    @pytest.mark.unit
    def test_script_tag_is_escaped(self):
        assert sanitize_value("<script>alert(1)</script>") == "&lt;script&gt;alert(1)&lt;/script&gt;"

    @pytest.mark.unit
    def test_ampersands_escaped_quotes_kept(self):
        assert sanitize_value('Tom & "Jerry" don\'t') == 'Tom &amp; "Jerry" don\'t'

    @pytest.mark.unit
    def test_non_strings_untouched(self):
        assert sanitize_value(3) == 3
        assert sanitize_value(None) is None
        assert sanitize_value(True) is True

    @pytest.mark.unit
    def test_nested_examples_are_sanitized(self):
        payload = make_greetings_payload()
        payload["items"][0]["examples"] = [
            {"japanese": "<b>こんにちは</b>", "romaji": "konnichiwa", "translation": "Hi & hello"},
        ]
        payload["items"][0]["tags"] = ["<i>", {"deep": ["<img src=x onerror=alert(1)>"]}]

        item = sanitize_payload(payload)["items"][0]

        assert item["examples"][0]["japanese"] == "&lt;b&gt;こんにちは&lt;/b&gt;"
        assert item["examples"][0]["translation"] == "Hi &amp; hello"
        assert item["tags"][0] == "&lt;i&gt;"
        assert item["tags"][1]["deep"][0] == "&lt;img src=x onerror=alert(1)&gt;"

    @pytest.mark.unit
    def test_sanitize_returns_copy(self):
        payload = make_greetings_payload()
        payload["items"][0]["expression"] = "<b>"

        sanitize_payload(payload)

        assert payload["items"][0]["expression"] == "<b>"

    @pytest.mark.unit
    def test_japanese_text_unchanged(self):
        payload = make_greetings_payload()
        assert sanitize_payload(payload) == payload


class TestParsing:
    """Tests for building models from payloads."""

    @pytest.mark.unit
    def test_bundle_aliases(self):
        bundle = parse_bundle(make_greetings_payload())

        assert isinstance(bundle, ContentBundle)
        assert bundle.category_slug == "greetings"
        assert bundle.content_version == "1.0"
        assert bundle.items[0].meaning == "Hello"
        assert bundle.items[0].examples is None
        assert bundle.items[0].example_list == []

    @pytest.mark.unit
    def test_bundle_round_trips_to_wire_format(self):
        payload = make_greetings_payload()
        payload["items"][0]["politeness"] = "casual"
        payload["items"][0]["extra_note"] = "kept"
        payload["source"] = "kept too"

        assert parse_bundle(payload).to_payload() == payload

    @pytest.mark.unit
    def test_unexpected_field_types_are_kept(self):
        payload = make_greetings_payload(content_version=None)
        payload["items"][0]["reading"] = ["not", "a", "string"]
        payload["items"][0]["audio"] = 5

        bundle = parse_bundle(payload)

        assert bundle.content_version is None
        assert bundle.items[0].reading == ["not", "a", "string"]
        assert bundle.to_payload() == payload

    @pytest.mark.unit
    def test_mixed_examples(self):
        payload = make_greetings_payload()
        payload["items"][0]["examples"] = [
            {"japanese": "こんにちは", "romaji": "konnichiwa"},
            "こんにちは (konnichiwa)",
        ]

        item = parse_bundle(payload).items[0]

        assert item.example_list[0].romaji == "konnichiwa"
        assert item.example_list[1] == "こんにちは (konnichiwa)"
        assert parse_bundle(payload).to_payload() == payload

    @pytest.mark.unit
    def test_missing_field_is_schema_error(self):
        payload = make_greetings_payload()
        del payload["items"][0]["reading"]

        with pytest.raises(SchemaError) as exc_info:
            parse_bundle(payload)

        assert exc_info.value.index == 0
        assert exc_info.value.field == "reading"

    @pytest.mark.unit
    def test_categories_parse(self):
        categories = parse_categories(make_categories_payload())

        assert [c.slug for c in categories] == ["greetings", "numbers"]
        assert categories[0].item_count == 1
        assert categories[1].level is None

    @pytest.mark.unit
    def test_categories_must_be_array(self):
        with pytest.raises(SchemaError):
            parse_categories({"slug": "greetings"})

    @pytest.mark.unit
    def test_unusable_category_entries_are_skipped(self):
        payload = [{"title": "No slug"}, "greetings", *make_categories_payload()]

        categories = parse_categories(payload)

        assert [c.slug for c in categories] == ["greetings", "numbers"]
