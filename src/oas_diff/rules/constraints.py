"""Rules for tightened validation constraints on schema properties.

Only the tightening direction is reported. ``minLength`` and ``minItems``
default to 0 when absent; every other bound is unbounded when absent and
is compared only when both sides declare it.
"""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule, iter_common_properties, schema_location


def _tightened(change_type: ChangeType, schema: str, prop: str, description: str, old, new) -> ApiChange:
    return ApiChange(
        change_type=change_type,
        severity=ChangeSeverity.MAJOR,
        location=schema_location(schema, prop),
        description=description,
        old_value=None if old is None else str(old),
        new_value=None if new is None else str(new),
        is_breaking=True,
    )


class MinLengthIncreasedRule(Rule):
    name = "Min Length Increased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_string or new_prop.min_length is None:
                continue
            old_min = old_prop.min_length or 0
            if new_prop.min_length > old_min:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_MIN_LENGTH_INCREASED, name, prop,
                        f"minLength of property '{prop}' increased",
                        old_min, new_prop.min_length,
                    )
                )
        return changes


class MaxLengthDecreasedRule(Rule):
    name = "Max Length Decreased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_string:
                continue
            if old_prop.max_length is None or new_prop.max_length is None:
                continue
            if new_prop.max_length < old_prop.max_length:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_MAX_LENGTH_DECREASED, name, prop,
                        f"maxLength of property '{prop}' decreased",
                        old_prop.max_length, new_prop.max_length,
                    )
                )
        return changes


class PatternAddedRule(Rule):
    name = "Pattern Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if new_prop.is_string and old_prop.pattern is None and new_prop.pattern is not None:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_PATTERN_ADDED, name, prop,
                        f"Pattern was added to property '{prop}'",
                        None, new_prop.pattern,
                    )
                )
        return changes


class PatternChangedRule(Rule):
    name = "Pattern Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if old_prop.pattern is None or new_prop.pattern is None:
                continue
            if old_prop.pattern != new_prop.pattern:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_PATTERN_CHANGED, name, prop,
                        f"Pattern of property '{prop}' changed",
                        old_prop.pattern, new_prop.pattern,
                    )
                )
        return changes


class MinimumIncreasedRule(Rule):
    name = "Minimum Increased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_numeric:
                continue
            if old_prop.minimum is None or new_prop.minimum is None:
                continue
            if new_prop.minimum > old_prop.minimum:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_MINIMUM_INCREASED, name, prop,
                        f"Minimum of property '{prop}' increased",
                        old_prop.minimum, new_prop.minimum,
                    )
                )
        return changes


class MaximumDecreasedRule(Rule):
    name = "Maximum Decreased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_numeric:
                continue
            if old_prop.maximum is None or new_prop.maximum is None:
                continue
            if new_prop.maximum < old_prop.maximum:
                changes.append(
                    _tightened(
                        ChangeType.PROPERTY_MAXIMUM_DECREASED, name, prop,
                        f"Maximum of property '{prop}' decreased",
                        old_prop.maximum, new_prop.maximum,
                    )
                )
        return changes


class MinItemsIncreasedRule(Rule):
    name = "Min Items Increased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_array or new_prop.min_items is None:
                continue
            old_min = old_prop.min_items or 0
            if new_prop.min_items > old_min:
                changes.append(
                    _tightened(
                        ChangeType.ARRAY_MIN_ITEMS_INCREASED, name, prop,
                        f"minItems of array property '{prop}' increased",
                        old_min, new_prop.min_items,
                    )
                )
        return changes


class MaxItemsDecreasedRule(Rule):
    name = "Max Items Decreased Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if not new_prop.is_array:
                continue
            if old_prop.max_items is None or new_prop.max_items is None:
                continue
            if new_prop.max_items < old_prop.max_items:
                changes.append(
                    _tightened(
                        ChangeType.ARRAY_MAX_ITEMS_DECREASED, name, prop,
                        f"maxItems of array property '{prop}' decreased",
                        old_prop.max_items, new_prop.max_items,
                    )
                )
        return changes


class UniqueItemsAddedRule(Rule):
    name = "Unique Items Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, prop, _, _, old_prop, new_prop in iter_common_properties(old, new):
            if new_prop.is_array and not old_prop.unique_items and new_prop.unique_items:
                changes.append(
                    _tightened(
                        ChangeType.ARRAY_UNIQUE_ITEMS_ADDED, name, prop,
                        f"uniqueItems was required on array property '{prop}'",
                        "false", "true",
                    )
                )
        return changes
