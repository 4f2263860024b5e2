"""Rules for document metadata: API version and base server URL."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.diff.version import classify_version_change
from oas_diff.parser.base import Document
from oas_diff.rules.base import Rule


class ApiVersionChangedRule(Rule):
    name = "API Version Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        old_version = old.info.version if old.info else None
        new_version = new.info.version if new.info else None
        if old_version is None or new_version is None or old_version == new_version:
            return []
        severity, breaking = classify_version_change(old_version, new_version)
        return [
            ApiChange(
                change_type=ChangeType.API_VERSION_CHANGED,
                severity=severity,
                location="Info",
                description=f"API version changed from {old_version} to {new_version}",
                old_value=old_version,
                new_value=new_version,
                is_breaking=breaking,
            )
        ]


class BasePathChangedRule(Rule):
    """Compares the primary (first) server URL."""

    name = "Base Path Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        if not old.servers or not new.servers:
            return []
        old_url, new_url = old.servers[0].url, new.servers[0].url
        if old_url is None or new_url is None or old_url == new_url:
            return []
        return [
            ApiChange(
                change_type=ChangeType.BASE_PATH_CHANGED,
                severity=ChangeSeverity.CRITICAL,
                location="Server",
                description=f"Base server URL changed from {old_url} to {new_url}",
                old_value=old_url,
                new_value=new_url,
                is_breaking=True,
            )
        ]
