"""Rules for paths, methods and operation deprecation."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule, iter_common_operations, iter_common_paths, operation_location


class EndpointRemovedRule(Rule):
    name = "Endpoint Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        if old.paths is None or new.paths is None:
            return []
        return [
            ApiChange(
                change_type=ChangeType.ENDPOINT_REMOVED,
                severity=ChangeSeverity.CRITICAL,
                location=path,
                description=f"Endpoint '{path}' was removed",
                old_value=path,
                is_breaking=True,
            )
            for path in old.paths
            if path not in new.paths
        ]


class EndpointAddedRule(Rule):
    name = "Endpoint Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        if old.paths is None or new.paths is None:
            return []
        return [
            ApiChange(
                change_type=ChangeType.ENDPOINT_ADDED,
                severity=ChangeSeverity.INFO,
                location=path,
                description=f"Endpoint '{path}' was added",
                new_value=path,
            )
            for path in new.paths
            if path not in old.paths
        ]


class MethodRemovedRule(Rule):
    name = "Method Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, old_item, new_item in iter_common_paths(old, new):
            new_operations = new_item.operations()
            for method in old_item.operations():
                if method in new_operations:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.METHOD_REMOVED,
                        severity=ChangeSeverity.CRITICAL,
                        location=operation_location(path, method),
                        description=f"HTTP method {method} was removed from '{path}'",
                        old_value=method,
                        is_breaking=True,
                    )
                )
        return changes


class MethodAddedRule(Rule):
    name = "Method Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, old_item, new_item in iter_common_paths(old, new, from_new=True):
            old_operations = old_item.operations()
            for method in new_item.operations():
                if method in old_operations:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.METHOD_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"HTTP method {method} was added to '{path}'",
                        new_value=method,
                    )
                )
        return changes


class OperationDeprecatedRule(Rule):
    name = "Operation Deprecated Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if not old_op.deprecated and new_op.deprecated:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.OPERATION_DEPRECATED_ADDED,
                        severity=ChangeSeverity.WARNING,
                        location=operation_location(path, method),
                        description=f"Operation {method} '{path}' was marked as deprecated",
                        old_value="false",
                        new_value="true",
                    )
                )
        return changes
