"""Unit tests for the content validator."""

import pytest

from app.core.config import settings
from app.core.errors import ValidationAppError
from app.services.content_validator import ContentConstraints, FieldRule, validate_fields
from app.services.submission_service import comment_submission_config, note_submission_config


@pytest.fixture
def note_rules() -> ContentConstraints:
    return note_submission_config(settings).constraints


@pytest.fixture
def comment_rules() -> ContentConstraints:
    return comment_submission_config(settings).constraints


class TestTrimmingAndDefaults:
    def test_trims_all_fields(self, note_rules: ContentConstraints) -> None:
        result = validate_fields(
            {"name": "  Ava ", "message": "\tHi there\n", "emoji": " ✨ ", "color": " lilac "},
            note_rules,
        )

        assert result == {"name": "Ava", "message": "Hi there", "emoji": "✨", "color": "lilac"}

    def test_missing_optional_fields_get_defaults(self, note_rules: ContentConstraints) -> None:
        result = validate_fields({"name": "Ava", "message": "Hi"}, note_rules)

        assert result["emoji"] == "\U0001F497"
        assert result["color"] == "rose"

    def test_blank_optional_fields_get_defaults(self, note_rules: ContentConstraints) -> None:
        result = validate_fields(
            {"name": "Ava", "message": "Hi", "emoji": "   ", "color": ""},
            note_rules,
        )

        assert result["emoji"] == "\U0001F497"
        assert result["color"] == "rose"

    def test_unknown_keys_are_dropped(self, comment_rules: ContentConstraints) -> None:
        result = validate_fields(
            {"name": "Ava", "comment": "Lovely", "note_id": "spoofed", "id": 1},
            comment_rules,
        )

        assert result == {"name": "Ava", "comment": "Lovely"}

    def test_optional_fields_have_no_length_limit(self, note_rules: ContentConstraints) -> None:
        result = validate_fields(
            {"name": "Ava", "message": "Hi", "color": "x" * 500},
            note_rules,
        )

        assert len(result["color"]) == 500


class TestRequiredFields:
    @pytest.mark.parametrize(
        "payload",
        [
            {"message": "Hi"},
            {"name": "Ava"},
            {"name": "   ", "message": "Hi"},
            {"name": "Ava", "message": "\n\t "},
            {"name": 42, "message": "Hi"},
            {"name": "Ava", "message": None},
        ],
    )
    def test_rejects_missing_or_blank(self, note_rules: ContentConstraints, payload: dict) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_fields(payload, note_rules)

        assert exc_info.value.code == "missing_required_fields"
        assert exc_info.value.message == "Name and message are required."

    def test_comment_missing_message(self, comment_rules: ContentConstraints) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_fields({"name": "Ava", "comment": "  "}, comment_rules)

        assert exc_info.value.message == "Name and comment are required."

    def test_missing_is_reported_before_too_long(self, note_rules: ContentConstraints) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_fields({"name": "x" * 37, "message": ""}, note_rules)

        assert exc_info.value.code == "missing_required_fields"


class TestLengthLimits:
    @pytest.mark.parametrize(
        ("field", "limit"),
        [("name", 36), ("message", 240)],
    )
    def test_note_accepts_exact_limit(
        self, note_rules: ContentConstraints, field: str, limit: int
    ) -> None:
        payload = {"name": "Ava", "message": "Hi", field: "a" * limit}

        assert len(validate_fields(payload, note_rules)[field]) == limit

    @pytest.mark.parametrize(
        ("field", "limit"),
        [("name", 36), ("message", 240)],
    )
    def test_note_rejects_one_over(
        self, note_rules: ContentConstraints, field: str, limit: int
    ) -> None:
        payload = {"name": "Ava", "message": "Hi", field: "a" * (limit + 1)}

        with pytest.raises(ValidationAppError) as exc_info:
            validate_fields(payload, note_rules)

        assert exc_info.value.code == "content_too_long"
        assert exc_info.value.message == "Message is too long."
        assert exc_info.value.details["field"] == field
        assert exc_info.value.details["max_length"] == limit

    @pytest.mark.parametrize(
        ("field", "limit"),
        [("name", 36), ("comment", 200)],
    )
    def test_comment_limits(
        self, comment_rules: ContentConstraints, field: str, limit: int
    ) -> None:
        at_limit = {"name": "Ava", "comment": "Hi", field: "b" * limit}
        assert validate_fields(at_limit, comment_rules)[field] == "b" * limit

        over = {"name": "Ava", "comment": "Hi", field: "b" * (limit + 1)}
        with pytest.raises(ValidationAppError) as exc_info:
            validate_fields(over, comment_rules)
        assert exc_info.value.message == "Comment is too long."

    def test_length_is_measured_after_trimming(self, comment_rules: ContentConstraints) -> None:
        result = validate_fields(
            {"name": "Ava", "comment": "   " + "c" * 200 + "   "},
            comment_rules,
        )

        assert len(result["comment"]) == 200

    def test_length_counts_characters_not_bytes(self) -> None:
        rules = ContentConstraints(fields=(FieldRule("name", max_length=3),))

        assert validate_fields({"name": "💗💗💗"}, rules) == {"name": "💗💗💗"}
