"""Human-readable rendering of comparison results."""

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ComparisonResult

RULE = "=" * 64
THIN_RULE = "-" * 64


class TextReportGenerator:
    """Renders a ComparisonResult as a plain-text report.

    One section per severity, CRITICAL first; detection order within a section.
    """

    def generate(self, result: ComparisonResult) -> str:
        lines = [
            RULE,
            "  OPENAPI COMPARISON REPORT",
            RULE,
            "",
            f"Old version:  {result.old_version}",
            f"New version:  {result.new_version}",
            f"Created at:   {result.created_at.isoformat(timespec='seconds')}",
            "",
            THIN_RULE,
            "  SUMMARY",
            THIN_RULE,
            f"Total changes:          {result.total_changes_count}",
            f"Breaking changes:       {result.breaking_changes_count}",
            f"Non-breaking changes:   {result.non_breaking_changes_count}",
            "",
        ]
        if result.has_breaking_changes:
            lines.append("WARNING: this version contains BREAKING CHANGES.")
        else:
            lines.append("This version is backward compatible (no breaking changes).")
        lines.append("")

        for severity in ChangeSeverity:
            lines += self._section(severity, [c for c in result.changes if c.severity is severity])

        lines += [RULE, "  END OF REPORT", RULE]
        return "\n".join(lines) + "\n"

    def _section(self, severity: ChangeSeverity, changes: list[ApiChange]) -> list[str]:
        if not changes:
            return []
        lines = [RULE, f"  {severity.value} ({len(changes)})", RULE, ""]
        for number, change in enumerate(changes, start=1):
            lines += self._format_change(number, change)
        return lines

    def _format_change(self, number: int, change: ApiChange) -> list[str]:
        marker = "BREAKING" if change.is_breaking else "non-breaking"
        lines = [
            f"{number}. [{marker}] {change.location}",
            f"   {change.change_type.label}: {change.description}",
        ]
        values = []
        if change.old_value is not None:
            values.append(f"old: {change.old_value}")
        if change.new_value is not None:
            values.append(f"new: {change.new_value}")
        if values:
            lines.append("   " + " -> ".join(values))
        lines.append("")
        return lines


def summary(result: ComparisonResult) -> str:
    """One-line verdict, e.g. for CI logs."""
    verdict = "BREAKING" if result.has_breaking_changes else "compatible"
    return f"[{verdict}] {result.summary()}"
