"""Rules for operation callbacks."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule, iter_common_operations, join_keys, operation_location


class CallbackRemovedRule(Rule):
    name = "Callback Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if not old_op.callbacks:
                continue
            new_callbacks = new_op.callbacks or {}
            for callback in old_op.callbacks:
                if callback in new_callbacks:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.CALLBACK_REMOVED,
                        severity=ChangeSeverity.MINOR,
                        location=operation_location(path, method),
                        description=f"Callback '{callback}' was removed",
                        old_value=callback,
                        is_breaking=True,
                    )
                )
        return changes


class CallbackAddedRule(Rule):
    name = "Callback Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if not new_op.callbacks:
                continue
            old_callbacks = old_op.callbacks or {}
            for callback in new_op.callbacks:
                if callback in old_callbacks:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.CALLBACK_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"Callback '{callback}' was added",
                        new_value=callback,
                    )
                )
        return changes


class CallbackUrlChangedRule(Rule):
    """Compares the URL expressions registered under each callback name."""

    name = "Callback URL Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.callbacks is None or new_op.callbacks is None:
                continue
            for callback, old_urls in old_op.callbacks.items():
                new_urls = new_op.callbacks.get(callback)
                if new_urls is None:
                    continue
                old_joined, new_joined = join_keys(old_urls), join_keys(new_urls)
                if old_joined == new_joined:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.CALLBACK_URL_CHANGED,
                        severity=ChangeSeverity.MINOR,
                        location=operation_location(path, method),
                        description=f"URL of callback '{callback}' changed",
                        old_value=old_joined,
                        new_value=new_joined,
                        is_breaking=True,
                    )
                )
        return changes
