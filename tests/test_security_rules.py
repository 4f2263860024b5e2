from oas_diff.diff.changes import ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.security import (
    OAuthFlowChangedRule,
    OAuthScopeAddedRule,
    OAuthScopeRemovedRule,
    SecurityRequirementAddedRule,
    SecurityRequirementRemovedRule,
    SecuritySchemeChangedRule,
)


def _doc(operation_security=None, schemes=None, security=None) -> Document:
    operation = {"responses": {"200": {"description": "ok"}}}
    if operation_security is not None:
        operation["security"] = operation_security
    raw = {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": {"/orders": {"get": operation}},
    }
    if schemes is not None:
        raw["components"] = {"securitySchemes": schemes}
    if security is not None:
        raw["security"] = security
    return Document.model_validate(raw)


def _oauth(**flows):
    return {"oauth": {"type": "oauth2", "flows": flows}}


def _code_flow(scopes, token_url="https://auth.example.com/token"):
    return {
        "authorizationUrl": "https://auth.example.com/authorize",
        "tokenUrl": token_url,
        "scopes": scopes,
    }


class TestSecurityRequirementAddedRule:
    def test_none_to_required_is_critical(self):
        changes = SecurityRequirementAddedRule().evaluate(_doc(), _doc([{"apiKey": []}]))
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert changes[0].is_breaking

    def test_document_level_security_applies(self):
        changes = SecurityRequirementAddedRule().evaluate(_doc(), _doc(security=[{"apiKey": []}]))
        assert len(changes) == 1

    def test_new_requirement_is_major(self):
        changes = SecurityRequirementAddedRule().evaluate(
            _doc([{"apiKey": []}]), _doc([{"apiKey": []}, {"bearer": []}])
        )
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MAJOR
        assert changes[0].new_value == "bearer"

    def test_explicit_empty_overrides_document_level(self):
        changes = SecurityRequirementAddedRule().evaluate(
            _doc([], security=[{"apiKey": []}]), _doc([{"apiKey": []}])
        )
        assert changes[0].severity == ChangeSeverity.CRITICAL


class TestSecurityRequirementRemovedRule:
    def test_all_security_removed_is_info(self):
        changes = SecurityRequirementRemovedRule().evaluate(_doc([{"apiKey": []}]), _doc([]))
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.INFO
        assert not changes[0].is_breaking

    def test_partial_removal_is_not_reported(self):
        assert SecurityRequirementRemovedRule().evaluate(
            _doc([{"apiKey": []}, {"bearer": []}]), _doc([{"apiKey": []}])
        ) == []


class TestSecuritySchemeChangedRule:
    def test_type_changed(self):
        changes = SecuritySchemeChangedRule().evaluate(
            _doc(schemes={"auth": {"type": "apiKey", "in": "header", "name": "X-Key"}}),
            _doc(schemes={"auth": {"type": "http", "scheme": "bearer"}}),
        )
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.CRITICAL
        assert changes[0].location == "Security Scheme: auth"

    def test_api_key_location_and_name_changed(self):
        changes = SecuritySchemeChangedRule().evaluate(
            _doc(schemes={"auth": {"type": "apiKey", "in": "header", "name": "X-Key"}}),
            _doc(schemes={"auth": {"type": "apiKey", "in": "query", "name": "key"}}),
        )
        assert [(c.old_value, c.new_value) for c in changes] == [("header", "query"), ("X-Key", "key")]

    def test_http_scheme_case_insensitive(self):
        assert SecuritySchemeChangedRule().evaluate(
            _doc(schemes={"auth": {"type": "http", "scheme": "Bearer"}}),
            _doc(schemes={"auth": {"type": "http", "scheme": "bearer"}}),
        ) == []


class TestOAuthRules:
    def test_flow_removed(self):
        changes = OAuthFlowChangedRule().evaluate(
            _doc(schemes=_oauth(authorizationCode=_code_flow({}), implicit=_code_flow({}))),
            _doc(schemes=_oauth(authorizationCode=_code_flow({}))),
        )
        assert len(changes) == 1
        assert changes[0].location == "Security Scheme: oauth (implicit)"
        assert changes[0].severity == ChangeSeverity.CRITICAL

    def test_token_url_changed(self):
        changes = OAuthFlowChangedRule().evaluate(
            _doc(schemes=_oauth(authorizationCode=_code_flow({}))),
            _doc(schemes=_oauth(authorizationCode=_code_flow({}, token_url="https://new.example.com/token"))),
        )
        assert len(changes) == 1
        assert changes[0].new_value == "https://new.example.com/token"

    def test_scope_removed(self):
        changes = OAuthScopeRemovedRule().evaluate(
            _doc(schemes=_oauth(authorizationCode=_code_flow({"read": "Read", "write": "Write"}))),
            _doc(schemes=_oauth(authorizationCode=_code_flow({"read": "Read"}))),
        )
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.OAUTH_SCOPE_REMOVED
        assert changes[0].old_value == "write"

    def test_scope_description_change_is_not_reported(self):
        assert OAuthScopeRemovedRule().evaluate(
            _doc(schemes=_oauth(authorizationCode=_code_flow({"read": "Read"}))),
            _doc(schemes=_oauth(authorizationCode=_code_flow({"read": "Read all data"}))),
        ) == []

    def test_operation_scope_added(self):
        changes = OAuthScopeAddedRule().evaluate(
            _doc([{"oauth": ["read"]}]), _doc([{"oauth": ["read", "admin"]}])
        )
        assert len(changes) == 1
        assert changes[0].new_value == "admin"
        assert changes[0].severity == ChangeSeverity.MAJOR
        assert changes[0].is_breaking
