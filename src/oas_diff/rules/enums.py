"""Rules for enumerated values on schemas and their properties."""

from collections.abc import Iterator

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document, Schema
from oas_diff.rules.base import Rule, iter_common_properties, iter_common_schemas, schema_location


def _enum_pairs(old: Document, new: Document) -> Iterator[tuple[str, Schema, Schema]]:
    """(location, old, new) for every schema and property declaring an enum on both sides."""
    for name, old_schema, new_schema in iter_common_schemas(old, new):
        if old_schema.enum is not None and new_schema.enum is not None:
            yield schema_location(name), old_schema, new_schema
    for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
        if old_prop.enum is not None and new_prop.enum is not None:
            yield schema_location(name, prop), old_prop, new_prop


def _contains(values: list, value) -> bool:
    """Membership that tells ``1`` from ``true`` and ``0`` from ``false``."""
    return any(type(candidate) is type(value) and candidate == value for candidate in values)


class EnumValueRemovedRule(Rule):
    name = "Enum Value Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for location, old_schema, new_schema in _enum_pairs(old, new):
            for value in old_schema.enum:
                if _contains(new_schema.enum, value):
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.ENUM_VALUE_REMOVED,
                        severity=ChangeSeverity.MAJOR,
                        location=location,
                        description=f"Enum value '{value}' was removed",
                        old_value=str(value),
                        is_breaking=True,
                    )
                )
        return changes


class EnumValueAddedRule(Rule):
    name = "Enum Value Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for location, old_schema, new_schema in _enum_pairs(old, new):
            for value in new_schema.enum:
                if _contains(old_schema.enum, value):
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.ENUM_VALUE_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=location,
                        description=f"Enum value '{value}' was added",
                        new_value=str(value),
                    )
                )
        return changes
