"""Rules for properties of reusable schemas under ``components.schemas``."""

import json
from typing import Any

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document, Schema
from oas_diff.rules.base import Rule, iter_common_properties, iter_common_schemas, schema_location


def _type_of(schema: Schema) -> str:
    """Reference or primitive type, format excluded (the format rule owns it)."""
    return schema.ref or schema.type or "unknown"


def render_value(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


class PropertyRemovedRule(Rule):
    name = "Property Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_schema, new_schema in iter_common_schemas(old, new):
            if not old_schema.properties:
                continue
            new_properties = new_schema.properties or {}
            for prop in old_schema.properties:
                if prop in new_properties:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PROPERTY_REMOVED,
                        severity=ChangeSeverity.MAJOR,
                        location=schema_location(name, prop),
                        description=f"Property '{prop}' was removed from schema '{name}'",
                        old_value=prop,
                        is_breaking=True,
                    )
                )
        return changes


class PropertyAddedRule(Rule):
    name = "Property Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_schema, new_schema in iter_common_schemas(old, new, from_new=True):
            if not new_schema.properties:
                continue
            old_properties = old_schema.properties or {}
            required = new_schema.required or []
            for prop in new_schema.properties:
                if prop in old_properties or prop in required:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PROPERTY_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=schema_location(name, prop),
                        description=f"Optional property '{prop}' was added to schema '{name}'",
                        new_value=prop,
                    )
                )
        return changes


class PropertyRequiredRule(Rule):
    """A property joining the ``required`` list.

    MAJOR when the property already existed as optional, CRITICAL when it is
    brand new.
    """

    name = "Property Required Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_schema, new_schema in iter_common_schemas(old, new, from_new=True):
            if new_schema.properties is None or not new_schema.required:
                continue
            old_required = old_schema.required or []
            old_properties = old_schema.properties or {}
            for prop in new_schema.required:
                if prop in old_required:
                    continue
                existed = prop in old_properties
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PROPERTY_REQUIRED_ADDED,
                        severity=ChangeSeverity.MAJOR if existed else ChangeSeverity.CRITICAL,
                        location=schema_location(name, prop),
                        description=(
                            f"Property '{prop}' of schema '{name}' became required"
                            if existed
                            else f"Required property '{prop}' was added to schema '{name}'"
                        ),
                        old_value="optional" if existed else None,
                        new_value="required",
                        is_breaking=True,
                    )
                )
        return changes


class PropertyTypeChangedRule(Rule):
    name = "Property Type Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            old_type, new_type = _type_of(old_prop), _type_of(new_prop)
            if old_type == new_type:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.PROPERTY_TYPE_CHANGED,
                    severity=ChangeSeverity.MAJOR,
                    location=schema_location(name, prop),
                    description=f"Type of property '{prop}' changed",
                    old_value=old_type,
                    new_value=new_type,
                    is_breaking=True,
                )
            )
        return changes


class PropertyFormatChangedRule(Rule):
    name = "Property Format Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if old_prop.format is None or old_prop.format == new_prop.format:
                continue
            if _type_of(old_prop) != _type_of(new_prop):
                continue
            if new_prop.format is None:
                description = f"Format '{old_prop.format}' of property '{prop}' was removed"
            else:
                description = f"Format of property '{prop}' changed"
            changes.append(
                ApiChange(
                    change_type=ChangeType.PROPERTY_FORMAT_CHANGED,
                    severity=ChangeSeverity.MAJOR,
                    location=schema_location(name, prop),
                    description=description,
                    old_value=old_prop.format,
                    new_value=new_prop.format,
                    is_breaking=True,
                )
            )
        return changes


class PropertyReadOnlyChangedRule(Rule):
    name = "Property Read Only Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            was, now = bool(old_prop.read_only), bool(new_prop.read_only)
            if was == now:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.PROPERTY_READ_ONLY_CHANGED,
                    severity=ChangeSeverity.MINOR,
                    location=schema_location(name, prop),
                    description=f"readOnly of property '{prop}' changed",
                    old_value=str(was).lower(),
                    new_value=str(now).lower(),
                    is_breaking=True,
                )
            )
        return changes


class PropertyWriteOnlyChangedRule(Rule):
    name = "Property Write Only Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            was, now = bool(old_prop.write_only), bool(new_prop.write_only)
            if was == now:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.PROPERTY_WRITE_ONLY_CHANGED,
                    severity=ChangeSeverity.MINOR,
                    location=schema_location(name, prop),
                    description=f"writeOnly of property '{prop}' changed",
                    old_value=str(was).lower(),
                    new_value=str(now).lower(),
                    is_breaking=True,
                )
            )
        return changes


class DefaultValueChangedRule(Rule):
    name = "Default Value Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if old_prop.default is None or new_prop.default is None:
                continue
            if old_prop.default == new_prop.default:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.DEFAULT_VALUE_CHANGED,
                    severity=ChangeSeverity.MAJOR,
                    location=schema_location(name, prop),
                    description=f"Default value of property '{prop}' changed",
                    old_value=render_value(old_prop.default),
                    new_value=render_value(new_prop.default),
                    is_breaking=True,
                )
            )
        return changes


class DefaultValueRemovedRule(Rule):
    name = "Default Value Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if old_prop.default is None or new_prop.default is not None:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.DEFAULT_VALUE_REMOVED,
                    severity=ChangeSeverity.MINOR,
                    location=schema_location(name, prop),
                    description=f"Default value of property '{prop}' was removed",
                    old_value=render_value(old_prop.default),
                    is_breaking=True,
                )
            )
        return changes


class SchemaDeprecatedRule(Rule):
    name = "Schema Deprecated Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_schema, new_schema in iter_common_schemas(old, new):
            if not old_schema.deprecated and new_schema.deprecated:
                changes.append(self._deprecated(schema_location(name), f"Schema '{name}'"))
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not old_prop.deprecated and new_prop.deprecated:
                changes.append(self._deprecated(schema_location(name, prop), f"Property '{prop}'"))
        return changes

    def _deprecated(self, location: str, subject: str) -> ApiChange:
        return ApiChange(
            change_type=ChangeType.SCHEMA_DEPRECATED_ADDED,
            severity=ChangeSeverity.WARNING,
            location=location,
            description=f"{subject} was marked as deprecated",
            old_value="false",
            new_value="true",
        )
