"""Rules for oneOf, discriminators and additionalProperties."""

from collections.abc import Iterator

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document, Schema
from oas_diff.rules.base import (
    Rule,
    iter_common_properties,
    iter_common_schemas,
    schema_identity,
    schema_location,
)


def _schema_pairs(old: Document, new: Document) -> Iterator[tuple[str, Schema, Schema]]:
    """(location, old, new) for every component schema and each of its properties."""
    for name, old_schema, new_schema in iter_common_schemas(old, new):
        yield schema_location(name), old_schema, new_schema
    for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
        yield schema_location(name, prop), old_prop, new_prop


class OneOfOptionRemovedRule(Rule):
    """Options are compared by reference identity.

    Dropping every option is CRITICAL. Otherwise each missing identity is
    MAJOR, and a shrinking option count with no identifiable removal is
    reported once as a reduction.
    """

    name = "OneOf Option Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for location, old_schema, new_schema in _schema_pairs(old, new):
            if not old_schema.one_of:
                continue
            old_ids = [schema_identity(option) for option in old_schema.one_of]
            if not new_schema.one_of:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.ONE_OF_OPTION_REMOVED,
                        severity=ChangeSeverity.CRITICAL,
                        location=location,
                        description="All oneOf options were removed",
                        old_value=", ".join(old_ids),
                        is_breaking=True,
                    )
                )
                continue
            new_ids = [schema_identity(option) for option in new_schema.one_of]
            removed = [identity for identity in old_ids if identity not in new_ids]
            for identity in removed:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.ONE_OF_OPTION_REMOVED,
                        severity=ChangeSeverity.MAJOR,
                        location=location,
                        description=f"oneOf option '{identity}' was removed",
                        old_value=identity,
                        is_breaking=True,
                    )
                )
            if not removed and len(new_ids) < len(old_ids):
                changes.append(
                    ApiChange(
                        change_type=ChangeType.ONE_OF_OPTION_REMOVED,
                        severity=ChangeSeverity.MAJOR,
                        location=location,
                        description="Number of oneOf options was reduced",
                        old_value=str(len(old_ids)),
                        new_value=str(len(new_ids)),
                        is_breaking=True,
                    )
                )
        return changes


class DiscriminatorChangedRule(Rule):
    name = "Discriminator Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_schema, new_schema in iter_common_schemas(old, new):
            old_prop = old_schema.discriminator.property_name if old_schema.discriminator else None
            new_prop = new_schema.discriminator.property_name if new_schema.discriminator else None
            if old_schema.discriminator is None and new_schema.discriminator is not None:
                severity = ChangeSeverity.MAJOR
                description = f"Discriminator was added to schema '{name}'"
            elif old_schema.discriminator is not None and new_schema.discriminator is None:
                severity = ChangeSeverity.MAJOR
                description = f"Discriminator was removed from schema '{name}'"
            elif old_prop != new_prop:
                severity = ChangeSeverity.CRITICAL
                description = f"Discriminator property of schema '{name}' changed"
            else:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.DISCRIMINATOR_CHANGED,
                    severity=severity,
                    location=schema_location(name),
                    description=description,
                    old_value=old_prop,
                    new_value=new_prop,
                    is_breaking=True,
                )
            )
        return changes


class AdditionalPropertiesForbiddenRule(Rule):
    """Absent ``additionalProperties`` means allowed; only an explicit false forbids."""

    name = "Additional Properties Forbidden Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for location, old_schema, new_schema in _schema_pairs(old, new):
            if old_schema.additional_properties is False:
                continue
            if new_schema.additional_properties is not False:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.ADDITIONAL_PROPERTIES_FORBIDDEN,
                    severity=ChangeSeverity.MAJOR,
                    location=location,
                    description="Additional properties are no longer allowed",
                    old_value="allowed",
                    new_value="forbidden",
                    is_breaking=True,
                )
            )
        return changes


class AdditionalPropertiesTypeChangedRule(Rule):
    name = "Additional Properties Type Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for location, old_schema, new_schema in _schema_pairs(old, new):
            old_extra, new_extra = old_schema.additional_properties, new_schema.additional_properties
            if not isinstance(old_extra, Schema) or not isinstance(new_extra, Schema):
                continue
            old_identity, new_identity = schema_identity(old_extra), schema_identity(new_extra)
            if old_identity == new_identity:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.ADDITIONAL_PROPERTIES_TYPE_CHANGED,
                    severity=ChangeSeverity.MAJOR,
                    location=location,
                    description="Type of additional properties changed",
                    old_value=old_identity,
                    new_value=new_identity,
                    is_breaking=True,
                )
            )
        return changes
