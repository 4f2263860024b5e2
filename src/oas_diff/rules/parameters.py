"""Rules for operation parameters.

Parameters are matched by (name, in). A parameter that leaves one location
and reappears under the same name at a location the old operation did not
use is a move, reported only by the location rule.
"""

from collections.abc import Iterator

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document, Operation, Parameter
from oas_diff.rules.base import (
    Rule,
    find_parameter,
    iter_common_operations,
    operation_location,
    schema_identity,
)


def _matched_parameters(old_op: Operation, new_op: Operation) -> Iterator[tuple[Parameter, Parameter]]:
    for old_param in old_op.parameters or []:
        new_param = find_parameter(new_op.parameters, old_param.name, old_param.location)
        if new_param is not None:
            yield old_param, new_param


def _moved_parameters(old_op: Operation, new_op: Operation) -> list[tuple[Parameter, Parameter]]:
    """(old, new) pairs for parameters that changed location.

    The target location must be new to the operation; each new parameter
    is claimed by at most one move.
    """
    moves = []
    claimed: set[int] = set()
    for old_param in old_op.parameters or []:
        if old_param.location is None:
            continue
        if find_parameter(new_op.parameters, old_param.name, old_param.location) is not None:
            continue
        for index, candidate in enumerate(new_op.parameters or []):
            if index in claimed or candidate.name != old_param.name or not candidate.location:
                continue
            if find_parameter(old_op.parameters, candidate.name, candidate.location) is not None:
                continue
            claimed.add(index)
            moves.append((old_param, candidate))
            break
    return moves


def _new_parameters(old_op: Operation, new_op: Operation) -> Iterator[Parameter]:
    """Parameters with no (name, in) match in the old operation, moves excluded."""
    moved = {id(new_param) for _, new_param in _moved_parameters(old_op, new_op)}
    for param in new_op.parameters or []:
        if id(param) in moved:
            continue
        if find_parameter(old_op.parameters, param.name, param.location) is None:
            yield param


def _removed_parameters(old_op: Operation, new_op: Operation) -> Iterator[Parameter]:
    moved = {id(old_param) for old_param, _ in _moved_parameters(old_op, new_op)}
    for param in old_op.parameters or []:
        if id(param) in moved:
            continue
        if find_parameter(new_op.parameters, param.name, param.location) is None:
            yield param


def _param_label(param: Parameter, capital: bool = False) -> str:
    location = param.location or "unknown"
    if capital:
        location = location.capitalize()
    return f"{location} parameter '{param.name}'"


class ParameterAddedRule(Rule):
    name = "Parameter Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for param in _new_parameters(old_op, new_op):
                if param.required:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"Optional {_param_label(param)} was added",
                        new_value=param.name,
                    )
                )
        return changes


class RequiredParameterAddedRule(Rule):
    """A new required parameter, or an existing one that became required."""

    name = "Required Parameter Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            location = operation_location(path, method)
            for param in _new_parameters(old_op, new_op):
                if param.required:
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.PARAMETER_REQUIRED_ADDED,
                            severity=ChangeSeverity.CRITICAL,
                            location=location,
                            description=f"Required {_param_label(param)} was added",
                            new_value=param.name,
                            is_breaking=True,
                        )
                    )
            for old_param, new_param in _matched_parameters(old_op, new_op):
                if not old_param.required and new_param.required:
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.PARAMETER_REQUIRED_ADDED,
                            severity=ChangeSeverity.MAJOR,
                            location=location,
                            description=f"{_param_label(new_param, capital=True)} became required",
                            old_value="optional",
                            new_value="required",
                            is_breaking=True,
                        )
                    )
        return changes


class ParameterRemovedRule(Rule):
    name = "Parameter Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for param in _removed_parameters(old_op, new_op):
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_REMOVED,
                        severity=ChangeSeverity.MAJOR,
                        location=operation_location(path, method),
                        description=f"{_param_label(param, capital=True)} was removed",
                        old_value=param.name,
                        is_breaking=True,
                    )
                )
        return changes


class ParameterLocationChangedRule(Rule):
    name = "Parameter Location Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for old_param, moved in _moved_parameters(old_op, new_op):
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_LOCATION_CHANGED,
                        severity=ChangeSeverity.CRITICAL,
                        location=operation_location(path, method),
                        description=(
                            f"Parameter '{old_param.name}' moved from "
                            f"{old_param.location} to {moved.location}"
                        ),
                        old_value=old_param.location,
                        new_value=moved.location,
                        is_breaking=True,
                    )
                )
        return changes


class ParameterTypeChangedRule(Rule):
    name = "Parameter Type Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for old_param, new_param in _matched_parameters(old_op, new_op):
                old_type = schema_identity(old_param.schema_)
                new_type = schema_identity(new_param.schema_)
                if old_type == new_type:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_TYPE_CHANGED,
                        severity=ChangeSeverity.MAJOR,
                        location=operation_location(path, method),
                        description=f"Type of {_param_label(old_param)} changed",
                        old_value=old_type,
                        new_value=new_type,
                        is_breaking=True,
                    )
                )
        return changes


class ParameterStyleChangedRule(Rule):
    name = "Parameter Style Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for old_param, new_param in _matched_parameters(old_op, new_op):
                if old_param.style is None or new_param.style is None:
                    continue
                if old_param.style == new_param.style:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_STYLE_CHANGED,
                        severity=ChangeSeverity.MAJOR,
                        location=operation_location(path, method),
                        description=f"Serialization style of {_param_label(old_param)} changed",
                        old_value=old_param.style,
                        new_value=new_param.style,
                        is_breaking=True,
                    )
                )
        return changes


class ParameterExplodeChangedRule(Rule):
    """Compares ``explode`` with the OpenAPI default filled in for absent values."""

    name = "Parameter Explode Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for old_param, new_param in _matched_parameters(old_op, new_op):
                if old_param.effective_explode == new_param.effective_explode:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_EXPLODE_CHANGED,
                        severity=ChangeSeverity.MAJOR,
                        location=operation_location(path, method),
                        description=f"Explode setting of {_param_label(old_param)} changed",
                        old_value=str(old_param.effective_explode).lower(),
                        new_value=str(new_param.effective_explode).lower(),
                        is_breaking=True,
                    )
                )
        return changes


class ParameterDeprecatedRule(Rule):
    name = "Parameter Deprecated Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for old_param, new_param in _matched_parameters(old_op, new_op):
                if old_param.deprecated or not new_param.deprecated:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.PARAMETER_DEPRECATED_ADDED,
                        severity=ChangeSeverity.WARNING,
                        location=operation_location(path, method),
                        description=f"{_param_label(old_param, capital=True)} was marked as deprecated",
                        old_value="false",
                        new_value="true",
                    )
                )
        return changes
