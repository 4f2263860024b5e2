import pytest
from pydantic import ValidationError

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType, ComparisonResult


def _change(change_type=ChangeType.ENDPOINT_REMOVED, severity=ChangeSeverity.CRITICAL, breaking=True):
    return ApiChange(
        change_type=change_type,
        severity=severity,
        location="/users",
        description="test",
        is_breaking=breaking,
    )


class TestChangeSeverity:
    def test_ordering(self):
        assert ChangeSeverity.CRITICAL > ChangeSeverity.MAJOR > ChangeSeverity.MINOR
        assert ChangeSeverity.MINOR > ChangeSeverity.WARNING > ChangeSeverity.INFO
        assert max(ChangeSeverity) is ChangeSeverity.CRITICAL

    def test_rank(self):
        assert ChangeSeverity.CRITICAL.rank == 0
        assert ChangeSeverity.INFO.rank == 4


class TestApiChange:
    def test_create_change(self):
        change = _change()
        assert change.old_value is None
        assert change.new_value is None
        assert change.change_type.label == "Endpoint removed"

    @pytest.mark.parametrize("missing", ["change_type", "severity", "location"])
    def test_rejects_missing_required_field(self, missing):
        fields = {
            "change_type": ChangeType.METHOD_REMOVED,
            "severity": ChangeSeverity.CRITICAL,
            "location": "/users [DELETE]",
        }
        del fields[missing]
        with pytest.raises(ValidationError):
            ApiChange(**fields)

    def test_rejects_empty_location(self):
        with pytest.raises(ValidationError):
            ApiChange(change_type=ChangeType.METHOD_REMOVED, severity=ChangeSeverity.CRITICAL, location="")

    def test_rejects_none_severity(self):
        with pytest.raises(ValidationError):
            ApiChange(change_type=ChangeType.METHOD_REMOVED, severity=None, location="/users")

    def test_is_immutable(self):
        change = _change()
        with pytest.raises(ValidationError):
            change.is_breaking = False


class TestComparisonResult:
    def test_derived_counts(self):
        result = ComparisonResult(
            old_version="1.0.0",
            new_version="2.0.0",
            changes=(
                _change(),
                _change(ChangeType.ENDPOINT_ADDED, ChangeSeverity.INFO, breaking=False),
                _change(ChangeType.OPERATION_DEPRECATED_ADDED, ChangeSeverity.WARNING, breaking=False),
            ),
        )
        assert result.total_changes_count == 3
        assert result.breaking_changes_count == 1
        assert result.non_breaking_changes_count == 2
        assert result.has_breaking_changes is True

    def test_breaking_flag_consistent_with_changes(self):
        for changes in [(), (_change(breaking=False),), (_change(), _change(breaking=False))]:
            result = ComparisonResult(old_version="a", new_version="b", changes=changes)
            assert result.has_breaking_changes == (result.breaking_changes_count > 0)
            assert result.has_breaking_changes == any(c.is_breaking for c in result.changes)

    def test_count_by_severity_lists_every_level(self):
        result = ComparisonResult(old_version="a", new_version="b", changes=(_change(),))
        counts = result.count_by_severity()
        assert list(counts) == list(ChangeSeverity)
        assert counts[ChangeSeverity.CRITICAL] == 1
        assert counts[ChangeSeverity.INFO] == 0

    def test_changes_by_severity_is_stable(self):
        info = _change(ChangeType.ENDPOINT_ADDED, ChangeSeverity.INFO, breaking=False)
        first = _change(ChangeType.ENDPOINT_REMOVED)
        second = _change(ChangeType.METHOD_REMOVED)
        result = ComparisonResult(old_version="a", new_version="b", changes=(info, first, second))
        assert result.changes_by_severity() == [first, second, info]
        assert result.count_by_type()[ChangeType.ENDPOINT_REMOVED] == 1

    def test_summary(self):
        result = ComparisonResult(old_version="1.0", new_version="1.1", changes=(_change(),))
        assert result.summary() == "1.0 -> 1.1: 1 changes (1 breaking, 0 non-breaking)"
        assert result.created_at.tzinfo is not None
