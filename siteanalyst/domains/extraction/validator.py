"""
Section Validator - Field-level shape checks driven by the schema registry.

Walks every rule of a section and accumulates all violations so the caller can
report every problem in one pass. Shape problems never raise; only an
unregistered section does.
"""

from __future__ import annotations

import logging
from typing import Any

from .models import FieldError, SectionId, ValidationResult
from .schemas import (
    DEFAULT_REGISTRY,
    ArrayRule,
    ChoiceRule,
    FieldRule,
    LeafRule,
    ObjectRule,
    SchemaRegistry,
)

logger = logging.getLogger(__name__)

__all__ = ["SectionValidator"]


class SectionValidator:
    """
    Validate parsed section payloads against their declared rules.

    Example:
        >>> validator = SectionValidator()
        >>> result = validator.validate("submarket", {"submarket": "Pearl District"})
        >>> result.is_valid
        True
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._registry = registry or DEFAULT_REGISTRY

    def validate(self, section: str | SectionId, data: Any) -> ValidationResult:
        """
        Validate a parsed payload for one section.

        Args:
            section: Section identifier
            data: Parsed JSON value

        Returns:
            ValidationResult with every field error found

        Raises:
            UnknownSectionError: section is not registered
        """
        descriptor = self._registry.lookup(section)
        payload = descriptor.prepare(data)

        errors: list[FieldError] = []
        _check_object(_as_object(payload), descriptor.rules, "", errors)

        if errors:
            logger.debug(
                "Section %s failed validation with %d error(s)",
                descriptor.section.value,
                len(errors),
            )
        return ValidationResult(errors=errors)


def _as_object(value: Any) -> dict[str, Any]:
    # Non-object containers are checked as empty so each required field is reported.
    return value if isinstance(value, dict) else {}


def _path(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _check_object(
    obj: dict[str, Any],
    rules: tuple[FieldRule, ...],
    prefix: str,
    errors: list[FieldError],
) -> None:
    for rule in rules:
        path = _path(prefix, rule.key)
        value = obj.get(rule.key)

        if isinstance(rule, LeafRule):
            if not rule.kind.accepts(value):
                errors.append(FieldError(field=path, message=rule.message))

        elif isinstance(rule, ChoiceRule):
            if not (isinstance(value, str) and value.strip().lower() in rule.choices):
                errors.append(FieldError(field=path, message=rule.message))

        elif isinstance(rule, ObjectRule):
            if not isinstance(value, dict):
                errors.append(FieldError(field=path, message=rule.message))
            else:
                _check_object(value, rule.fields, path, errors)

        elif isinstance(rule, ArrayRule):
            if not isinstance(value, list):
                errors.append(FieldError(field=path, message=rule.message))
                continue
            for index, item in enumerate(value):
                item_path = f"{path}[{index}]"
                if rule.item_kind is not None:
                    if not rule.item_kind.accepts(item):
                        errors.append(FieldError(field=item_path, message=rule.item_message))
                else:
                    _check_object(_as_object(item), rule.fields, item_path, errors)
