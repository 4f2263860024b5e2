"""Rules for response links."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule, iter_common_operations, iter_common_responses, response_location


class LinkRemovedRule(Rule):
    name = "Link Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if not old_resp.links:
                    continue
                new_links = new_resp.links or {}
                for link in old_resp.links:
                    if link in new_links:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.LINK_REMOVED,
                            severity=ChangeSeverity.MINOR,
                            location=response_location(path, method, code),
                            description=f"Link '{link}' was removed",
                            old_value=link,
                            is_breaking=True,
                        )
                    )
        return changes


class LinkAddedRule(Rule):
    name = "Link Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if not new_resp.links:
                    continue
                old_links = old_resp.links or {}
                for link in new_resp.links:
                    if link in old_links:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.LINK_ADDED,
                            severity=ChangeSeverity.INFO,
                            location=response_location(path, method, code),
                            description=f"Link '{link}' was added",
                            new_value=link,
                        )
                    )
        return changes
