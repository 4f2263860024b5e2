"""Rules for request bodies and their content types."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule, iter_common_operations, join_keys, operation_location, schema_identity


class RequestBodyRemovedRule(Rule):
    name = "Request Body Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.request_body is not None and new_op.request_body is None:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.REQUEST_BODY_REMOVED,
                        severity=ChangeSeverity.CRITICAL,
                        location=operation_location(path, method),
                        description=f"Request body was removed from {method} '{path}'",
                        old_value=join_keys(old_op.request_body.content) or "request body",
                        is_breaking=True,
                    )
                )
        return changes


class RequestBodyAddedRule(Rule):
    """An optional request body appearing is additive; required ones are handled separately."""

    name = "Request Body Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            body = new_op.request_body
            if old_op.request_body is None and body is not None and not body.required:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.REQUEST_BODY_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"Optional request body was added to {method} '{path}'",
                        new_value=join_keys(body.content) or "request body",
                    )
                )
        return changes


class RequestBodyRequiredRule(Rule):
    name = "Request Body Required Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            old_body, new_body = old_op.request_body, new_op.request_body
            if new_body is None or not new_body.required:
                continue
            if old_body is None:
                severity = ChangeSeverity.CRITICAL
                description = f"Required request body was added to {method} '{path}'"
                old_value = "none"
            elif not old_body.required:
                severity = ChangeSeverity.MAJOR
                description = f"Request body of {method} '{path}' became required"
                old_value = "optional"
            else:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.REQUEST_BODY_REQUIRED_ADDED,
                    severity=severity,
                    location=operation_location(path, method),
                    description=description,
                    old_value=old_value,
                    new_value="required",
                    is_breaking=True,
                )
            )
        return changes


class RequestContentTypeRemovedRule(Rule):
    name = "Request Content Type Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.request_body is None or new_op.request_body is None:
                continue
            old_content = old_op.request_body.content or {}
            new_content = new_op.request_body.content or {}
            for media_type in old_content:
                if media_type in new_content:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.REQUEST_CONTENT_TYPE_REMOVED,
                        severity=ChangeSeverity.CRITICAL,
                        location=operation_location(path, method),
                        description=f"Request content type '{media_type}' is no longer accepted",
                        old_value=media_type,
                        new_value=join_keys(new_content) or None,
                        is_breaking=True,
                    )
                )
        return changes


class RequestContentTypeAddedRule(Rule):
    name = "Request Content Type Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.request_body is None or new_op.request_body is None:
                continue
            old_content = old_op.request_body.content or {}
            new_content = new_op.request_body.content or {}
            for media_type in new_content:
                if media_type in old_content:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.REQUEST_CONTENT_TYPE_ADDED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"Request content type '{media_type}' is now accepted",
                        old_value=join_keys(old_content) or None,
                        new_value=media_type,
                    )
                )
        return changes


class RequestSchemaChangedRule(Rule):
    name = "Request Schema Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.request_body is None or new_op.request_body is None:
                continue
            new_content = new_op.request_body.content or {}
            for media_type, old_media in (old_op.request_body.content or {}).items():
                new_media = new_content.get(media_type)
                if new_media is None or old_media.schema_ is None or new_media.schema_ is None:
                    continue
                old_identity = schema_identity(old_media.schema_)
                new_identity = schema_identity(new_media.schema_)
                if old_identity == new_identity:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.REQUEST_SCHEMA_CHANGED,
                        severity=ChangeSeverity.MAJOR,
                        location=operation_location(path, method),
                        description=f"Request schema for '{media_type}' changed",
                        old_value=old_identity,
                        new_value=new_identity,
                        is_breaking=True,
                    )
                )
        return changes
