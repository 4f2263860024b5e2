from oas_diff.diff.changes import ChangeSeverity, ChangeType
from oas_diff.diff.engine import compare
from oas_diff.parser.base import Document
from oas_diff.rules.parameters import (
    ParameterAddedRule,
    ParameterDeprecatedRule,
    ParameterExplodeChangedRule,
    ParameterLocationChangedRule,
    ParameterRemovedRule,
    ParameterStyleChangedRule,
    ParameterTypeChangedRule,
    RequiredParameterAddedRule,
)


def _param(name, location="query", **extra):
    return {"name": name, "in": location, "schema": {"type": "string"}, **extra}


def _doc(*params) -> Document:
    operation = {"parameters": list(params), "responses": {"200": {"description": "ok"}}}
    return Document.model_validate({
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": {"/users": {"get": operation}},
    })


class TestParameterAddedRule:
    def test_optional_parameter_added(self):
        changes = ParameterAddedRule().evaluate(_doc(), _doc(_param("limit")))
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.PARAMETER_ADDED
        assert changes[0].severity == ChangeSeverity.INFO
        assert not changes[0].is_breaking
        assert changes[0].location == "/users [GET]"

    def test_required_parameter_is_not_reported_here(self):
        assert ParameterAddedRule().evaluate(_doc(), _doc(_param("limit", required=True))) == []

    def test_relocated_parameter_is_not_reported_here(self):
        assert ParameterAddedRule().evaluate(_doc(_param("limit")), _doc(_param("limit", "header"))) == []


class TestRequiredParameterAddedRule:
    def test_new_required_parameter_is_critical(self):
        changes = RequiredParameterAddedRule().evaluate(_doc(), _doc(_param("tenant", required=True)))
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.PARAMETER_REQUIRED_ADDED
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert changes[0].is_breaking

    def test_optional_to_required_is_major(self):
        changes = RequiredParameterAddedRule().evaluate(
            _doc(_param("tenant")), _doc(_param("tenant", required=True))
        )
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MAJOR
        assert changes[0].old_value == "optional"

    def test_already_required(self):
        same = _doc(_param("tenant", required=True))
        assert RequiredParameterAddedRule().evaluate(same, same) == []

    def test_required_parameter_sharing_name_at_new_location(self):
        old = _doc(_param("id"))
        new = _doc(_param("id"), _param("id", "header", required=True))
        changes = compare(old, new).changes
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.PARAMETER_REQUIRED_ADDED
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert "header parameter 'id'" in changes[0].description


class TestParameterRemovedRule:
    def test_removed_parameter(self):
        changes = ParameterRemovedRule().evaluate(_doc(_param("limit")), _doc())
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MAJOR
        assert changes[0].is_breaking
        assert "Query parameter 'limit'" in changes[0].description

    def test_relocated_parameter_is_not_removed(self):
        assert ParameterRemovedRule().evaluate(_doc(_param("limit")), _doc(_param("limit", "header"))) == []

    def test_dropped_duplicate_name_is_removed_not_moved(self):
        old = _doc(_param("id", "path", required=True), _param("id"))
        new = _doc(_param("id", "path", required=True))
        changes = compare(old, new).changes
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.PARAMETER_REMOVED
        assert "Query parameter 'id'" in changes[0].description


class TestParameterLocationChangedRule:
    def test_moved_from_query_to_header(self):
        changes = ParameterLocationChangedRule().evaluate(
            _doc(_param("token")), _doc(_param("token", "header"))
        )
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert (changes[0].old_value, changes[0].new_value) == ("query", "header")

    def test_same_name_kept_in_previous_location(self):
        old = _doc(_param("token"))
        new = _doc(_param("token"), _param("token", "header"))
        assert ParameterLocationChangedRule().evaluate(old, new) == []

    def test_move_targets_a_location_new_to_the_operation(self):
        old = _doc(_param("id", "path", required=True), _param("id"))
        new = _doc(_param("id", "path", required=True), _param("id", "header", required=True))
        changes = compare(old, new).changes
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.PARAMETER_LOCATION_CHANGED
        assert (changes[0].old_value, changes[0].new_value) == ("query", "header")


class TestParameterTypeChangedRule:
    def test_type_changed(self):
        old = _doc(_param("limit"))
        new = _doc({"name": "limit", "in": "query", "schema": {"type": "integer", "format": "int32"}})
        changes = ParameterTypeChangedRule().evaluate(old, new)
        assert len(changes) == 1
        assert (changes[0].old_value, changes[0].new_value) == ("string", "integer(int32)")

    def test_missing_schema_is_unknown(self):
        old = _doc({"name": "limit", "in": "query"})
        changes = ParameterTypeChangedRule().evaluate(old, _doc(_param("limit")))
        assert changes[0].old_value == "unknown"


class TestParameterStyleChangedRule:
    def test_style_changed(self):
        old = _doc(_param("ids", style="form"))
        new = _doc(_param("ids", style="pipeDelimited"))
        changes = ParameterStyleChangedRule().evaluate(old, new)
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MAJOR

    def test_style_declared_on_one_side_only(self):
        assert ParameterStyleChangedRule().evaluate(_doc(_param("ids")), _doc(_param("ids", style="form"))) == []


class TestParameterExplodeChangedRule:
    def test_explicit_false_against_form_default(self):
        changes = ParameterExplodeChangedRule().evaluate(_doc(_param("ids")), _doc(_param("ids", explode=False)))
        assert len(changes) == 1
        assert (changes[0].old_value, changes[0].new_value) == ("true", "false")

    def test_explicit_default_is_not_a_change(self):
        old = _doc(_param("id", "path", required=True))
        new = _doc(_param("id", "path", required=True, explode=False))
        assert ParameterExplodeChangedRule().evaluate(old, new) == []


class TestParameterDeprecatedRule:
    def test_deprecated(self):
        changes = ParameterDeprecatedRule().evaluate(_doc(_param("q")), _doc(_param("q", deprecated=True)))
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.WARNING
        assert not changes[0].is_breaking
