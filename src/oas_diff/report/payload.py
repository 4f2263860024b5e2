"""Transport payload for comparison results."""

import json

from oas_diff.diff.changes import ComparisonResult


def to_payload(result: ComparisonResult) -> dict:
    """Plain JSON-compatible dict with the derived counts filled in."""
    data = result.model_dump(mode="json")
    data.update(
        total_changes=result.total_changes_count,
        breaking_changes=result.breaking_changes_count,
        non_breaking_changes=result.non_breaking_changes_count,
        has_breaking_changes=result.has_breaking_changes,
        by_severity={s.value: n for s, n in result.count_by_severity().items()},
        by_type={t.value: n for t, n in result.count_by_type().items()},
    )
    return data


def to_json(result: ComparisonResult, indent: int | None = 2) -> str:
    return json.dumps(to_payload(result), indent=indent, ensure_ascii=False)
