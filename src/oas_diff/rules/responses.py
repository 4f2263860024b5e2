"""Rules for response status codes, content types, schemas and headers."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.base import (
    Rule,
    first_success_code,
    is_success_code,
    iter_common_operations,
    iter_common_responses,
    join_keys,
    operation_location,
    response_location,
    schema_identity,
)


class ResponseCodeRemovedRule(Rule):
    """Removing a 2xx code breaks clients; error codes going away does not."""

    name = "Response Code Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            if old_op.responses is None or new_op.responses is None:
                continue
            for code in old_op.responses:
                if code in new_op.responses:
                    continue
                success = is_success_code(code)
                changes.append(
                    ApiChange(
                        change_type=ChangeType.RESPONSE_CODE_REMOVED,
                        severity=ChangeSeverity.CRITICAL if success else ChangeSeverity.MINOR,
                        location=operation_location(path, method),
                        description=f"Response status code {code} was removed",
                        old_value=code,
                        is_breaking=success,
                    )
                )
        return changes


class ResponseCodeChangedRule(Rule):
    name = "Response Code Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            old_code = first_success_code(old_op)
            new_code = first_success_code(new_op)
            if old_code is None or new_code is None or old_code == new_code:
                continue
            changes.append(
                ApiChange(
                    change_type=ChangeType.RESPONSE_CODE_CHANGED,
                    severity=ChangeSeverity.MAJOR,
                    location=operation_location(path, method),
                    description=f"Success status code changed from {old_code} to {new_code}",
                    old_value=old_code,
                    new_value=new_code,
                    is_breaking=True,
                )
            )
        return changes


class ResponseContentTypeRemovedRule(Rule):
    name = "Response Content Type Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if not is_success_code(code):
                    continue
                if old_resp.content is None or new_resp.content is None:
                    continue
                for media_type in old_resp.content:
                    if media_type in new_resp.content:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_CONTENT_TYPE_REMOVED,
                            severity=ChangeSeverity.CRITICAL,
                            location=response_location(path, method, code),
                            description=f"Response content type '{media_type}' was removed",
                            old_value=media_type,
                            new_value=join_keys(new_resp.content) or None,
                            is_breaking=True,
                        )
                    )
        return changes


class ResponseContentTypeAddedRule(Rule):
    name = "Response Content Type Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if old_resp.content is None or new_resp.content is None:
                    continue
                for media_type in new_resp.content:
                    if media_type in old_resp.content:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_CONTENT_TYPE_ADDED,
                            severity=ChangeSeverity.INFO,
                            location=response_location(path, method, code),
                            description=f"Response content type '{media_type}' was added",
                            old_value=join_keys(old_resp.content) or None,
                            new_value=media_type,
                        )
                    )
        return changes


class ResponseSchemaChangedRule(Rule):
    name = "Response Schema Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if old_resp.content is None or new_resp.content is None:
                    continue
                for media_type, old_media in old_resp.content.items():
                    new_media = new_resp.content.get(media_type)
                    if new_media is None or old_media.schema_ is None or new_media.schema_ is None:
                        continue
                    old_identity = schema_identity(old_media.schema_)
                    new_identity = schema_identity(new_media.schema_)
                    if old_identity == new_identity:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_SCHEMA_CHANGED,
                            severity=ChangeSeverity.MAJOR,
                            location=response_location(path, method, code),
                            description=f"Response schema for '{media_type}' changed",
                            old_value=old_identity,
                            new_value=new_identity,
                            is_breaking=True,
                        )
                    )
        return changes


class ResponseHeaderRemovedRule(Rule):
    name = "Response Header Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if not old_resp.headers:
                    continue
                new_headers = new_resp.headers or {}
                for header in old_resp.headers:
                    if header in new_headers:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_HEADER_REMOVED,
                            severity=ChangeSeverity.MINOR,
                            location=response_location(path, method, code),
                            description=f"Response header '{header}' was removed",
                            old_value=header,
                            is_breaking=True,
                        )
                    )
        return changes


class ResponseHeaderAddedRule(Rule):
    name = "Response Header Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if not new_resp.headers:
                    continue
                old_headers = old_resp.headers or {}
                for header in new_resp.headers:
                    if header in old_headers:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_HEADER_ADDED,
                            severity=ChangeSeverity.INFO,
                            location=response_location(path, method, code),
                            description=f"Response header '{header}' was added",
                            new_value=header,
                        )
                    )
        return changes


class ResponseHeaderRequiredRule(Rule):
    name = "Response Header Required Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            for code, old_resp, new_resp in iter_common_responses(old_op, new_op):
                if old_resp.headers is None or new_resp.headers is None:
                    continue
                for header, old_header in old_resp.headers.items():
                    new_header = new_resp.headers.get(header)
                    if new_header is None or old_header.required or not new_header.required:
                        continue
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.RESPONSE_HEADER_REQUIRED_ADDED,
                            severity=ChangeSeverity.MAJOR,
                            location=response_location(path, method, code),
                            description=f"Response header '{header}' became required",
                            old_value="optional",
                            new_value="required",
                            is_breaking=True,
                        )
                    )
        return changes
