"""Validation of user-submitted notes and comments.

Pure functions only: no store access, no side effects. Rules are applied in
order: trim every field, then check required fields, then check lengths,
then substitute defaults for empty optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from app.core.errors import ValidationAppError


@dataclass(frozen=True)
class FieldRule:
    """Constraint for one payload field.

    Attributes:
        name: Payload key.
        required: Must be non-empty after trimming.
        max_length: Maximum length in characters after trimming (None: unbounded).
        default: Value used when an optional field is absent or blank.
    """

    name: str
    required: bool = True
    max_length: int | None = None
    default: str | None = None


@dataclass(frozen=True)
class ContentConstraints:
    """Field rules plus the client-facing messages for each failure kind."""

    fields: tuple[FieldRule, ...]
    missing_message: str = "Required fields are missing."
    too_long_message: str = "Content is too long."


def _trimmed(value: Any) -> str:
    # Non-string values count as absent
    return value.strip() if isinstance(value, str) else ""


def validate_fields(payload: Mapping[str, Any], constraints: ContentConstraints) -> dict[str, str]:
    """Trim, check and default the fields named in ``constraints``.

    Keys of ``payload`` that no rule names are dropped.

    Args:
        payload: Parsed request body.
        constraints: Rules for this content type.

    Returns:
        Mapping of field name to cleaned value.

    Raises:
        ValidationAppError: ``missing_required_fields`` when a required field
            is blank, ``content_too_long`` when a field exceeds its limit.

    Examples:
        >>> rules = ContentConstraints(fields=(FieldRule("name", max_length=5),))
        >>> validate_fields({"name": "  Ava "}, rules)
        {'name': 'Ava'}
    """
    cleaned = {rule.name: _trimmed(payload.get(rule.name)) for rule in constraints.fields}

    missing = [rule.name for rule in constraints.fields if rule.required and not cleaned[rule.name]]
    if missing:
        raise ValidationAppError(
            code="missing_required_fields",
            message=constraints.missing_message,
            details={"context": {"fields": missing}},
        )

    for rule in constraints.fields:
        if rule.max_length is not None and len(cleaned[rule.name]) > rule.max_length:
            raise ValidationAppError(
                code="content_too_long",
                message=constraints.too_long_message,
                details={
                    "field": rule.name,
                    "max_length": rule.max_length,
                    "actual_length": len(cleaned[rule.name]),
                },
            )

    for rule in constraints.fields:
        if not cleaned[rule.name] and rule.default is not None:
            cleaned[rule.name] = rule.default

    return cleaned
