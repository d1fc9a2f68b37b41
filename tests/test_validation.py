# tests/test_validation.py
"""Tests for comment input validation."""

import pytest

from newsdesk.services.validation import InputValidationService, contains_dangerous_content


@pytest.fixture()
def validator() -> InputValidationService:
    return InputValidationService(min_length=2, max_length=50)


@pytest.mark.parametrize("content", [None, "", "   \n\t"])
def test_empty_comment_is_rejected(validator: InputValidationService, content) -> None:
    result = validator.validate_comment(content)

    assert not result.is_valid
    assert result.errors == ["Comment cannot be empty"]


def test_length_bounds(validator: InputValidationService) -> None:
    assert validator.validate_comment("a").errors == [
        "Comment is too short (minimum 2 characters)"
    ]
    assert validator.validate_comment("x" * 51).errors == [
        "Comment is too long (maximum 50 characters)"
    ]
    assert validator.validate_comment("ok").is_valid
    assert validator.validate_comment("x" * 50).is_valid


@pytest.mark.parametrize(
    "content",
    [
        "<script>alert(1)</script>",
        '<img src="x" onerror="boom()">',
        "javascript:alert(1)",
        "<?php echo 1; ?>",
        "eval(payload)",
    ],
)
def test_dangerous_markup_is_rejected(validator: InputValidationService, content: str) -> None:
    result = validator.validate_comment(content)

    assert "Comment contains potentially dangerous content" in result.errors


def test_errors_accumulate(validator: InputValidationService) -> None:
    result = validator.validate_comment("<script>" + "x" * 60 + "</script>")

    assert len(result.errors) == 2
    assert "; " in result.error_string()


def test_ordinary_text_is_not_dangerous() -> None:
    assert not contains_dangerous_content("The council meets on Monday at 7pm.")
    assert not contains_dangerous_content(None)
