from oas_diff.diff.changes import ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.request_body import (
    RequestBodyAddedRule,
    RequestBodyRemovedRule,
    RequestBodyRequiredRule,
    RequestContentTypeAddedRule,
    RequestContentTypeRemovedRule,
    RequestSchemaChangedRule,
)

PET = {"$ref": "#/components/schemas/Pet"}


def _doc(body=None) -> Document:
    operation = {"responses": {"201": {"description": "created"}}}
    if body is not None:
        operation["requestBody"] = body
    return Document.model_validate({
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": {"/pets": {"post": operation}},
    })


def _body(required=False, **content):
    return {"required": required, "content": {k.replace("_", "/"): {"schema": v} for k, v in content.items()}}


class TestRequestBodyRemovedRule:
    def test_removed(self):
        changes = RequestBodyRemovedRule().evaluate(_doc(_body(application_json=PET)), _doc())
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert changes[0].is_breaking
        assert changes[0].location == "/pets [POST]"


class TestRequestBodyAddedRule:
    def test_optional_body_added(self):
        changes = RequestBodyAddedRule().evaluate(_doc(), _doc(_body(application_json=PET)))
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.INFO
        assert not changes[0].is_breaking

    def test_required_body_is_left_to_required_rule(self):
        assert RequestBodyAddedRule().evaluate(_doc(), _doc(_body(True, application_json=PET))) == []


class TestRequestBodyRequiredRule:
    def test_new_required_body_is_critical(self):
        changes = RequestBodyRequiredRule().evaluate(_doc(), _doc(_body(True, application_json=PET)))
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.REQUEST_BODY_REQUIRED_ADDED
        assert changes[0].severity == ChangeSeverity.CRITICAL

    def test_optional_to_required_is_major(self):
        changes = RequestBodyRequiredRule().evaluate(
            _doc(_body(application_json=PET)), _doc(_body(True, application_json=PET))
        )
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MAJOR
        assert changes[0].is_breaking

    def test_required_to_optional_is_not_reported(self):
        assert RequestBodyRequiredRule().evaluate(
            _doc(_body(True, application_json=PET)), _doc(_body(application_json=PET))
        ) == []


class TestRequestContentTypeRules:
    def test_content_type_removed(self):
        old = _doc(_body(application_json=PET, application_xml=PET))
        new = _doc(_body(application_json=PET))
        changes = RequestContentTypeRemovedRule().evaluate(old, new)
        assert len(changes) == 1
        assert changes[0].old_value == "application/xml"
        assert changes[0].severity == ChangeSeverity.CRITICAL

    def test_content_type_added(self):
        old = _doc(_body(application_json=PET))
        new = _doc(_body(application_json=PET, application_xml=PET))
        changes = RequestContentTypeAddedRule().evaluate(old, new)
        assert len(changes) == 1
        assert changes[0].old_value == "application/json"
        assert changes[0].new_value == "application/xml"
        assert not changes[0].is_breaking


class TestRequestSchemaChangedRule:
    def test_reference_changed(self):
        old = _doc(_body(application_json=PET))
        new = _doc(_body(application_json={"$ref": "#/components/schemas/NewPet"}))
        changes = RequestSchemaChangedRule().evaluate(old, new)
        assert len(changes) == 1
        assert changes[0].new_value == "#/components/schemas/NewPet"

    def test_same_reference(self):
        same = _doc(_body(application_json=PET))
        assert RequestSchemaChangedRule().evaluate(same, same) == []
