"""Coarse severity heuristic for API version string changes."""

from oas_diff.diff.changes import ChangeSeverity


def _segments(version: str) -> list[int]:
    parts = version.strip().split(".")
    if not all(part.isdigit() for part in parts):
        raise ValueError(f"not a dotted numeric version: {version!r}")
    return [int(part) for part in parts]


def classify_version_change(old: str, new: str) -> tuple[ChangeSeverity, bool]:
    """Classify a version bump as (severity, is_breaking).

    A different first segment is CRITICAL and breaking, a different second
    segment is MINOR, anything else is INFO. Versions that do not parse as
    dotted numbers are treated as CRITICAL and breaking.
    """
    try:
        old_parts = _segments(old)
        new_parts = _segments(new)
    except ValueError:
        return ChangeSeverity.CRITICAL, True

    if old_parts[0] != new_parts[0]:
        return ChangeSeverity.CRITICAL, True
    if len(old_parts) > 1 and len(new_parts) > 1 and old_parts[1] != new_parts[1]:
        return ChangeSeverity.MINOR, False
    return ChangeSeverity.INFO, False
