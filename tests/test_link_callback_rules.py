from oas_diff.diff.changes import ChangeSeverity, ChangeType
from oas_diff.parser.base import Document
from oas_diff.rules.callbacks import CallbackAddedRule, CallbackRemovedRule, CallbackUrlChangedRule
from oas_diff.rules.links import LinkAddedRule, LinkRemovedRule

HOOK = {"post": {"responses": {"200": {"description": "ok"}}}}


def _doc(links=None, callbacks=None) -> Document:
    response = {"description": "created"}
    if links is not None:
        response["links"] = links
    operation = {"responses": {"201": response}}
    if callbacks is not None:
        operation["callbacks"] = callbacks
    return Document.model_validate({
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": {"/subscriptions": {"post": operation}},
    })


class TestLinkRules:
    def test_link_removed(self):
        changes = LinkRemovedRule().evaluate(_doc(links={"GetSub": {"operationId": "getSub"}}), _doc())
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MINOR
        assert changes[0].is_breaking
        assert changes[0].location == "/subscriptions [POST] Response: 201"

    def test_link_added(self):
        changes = LinkAddedRule().evaluate(_doc(), _doc(links={"GetSub": {"operationId": "getSub"}}))
        assert len(changes) == 1
        assert changes[0].change_type == ChangeType.LINK_ADDED
        assert not changes[0].is_breaking


class TestCallbackRules:
    def test_callback_removed(self):
        changes = CallbackRemovedRule().evaluate(_doc(callbacks={"onEvent": {"{$request.body#/url}": HOOK}}), _doc())
        assert len(changes) == 1
        assert changes[0].severity == ChangeSeverity.MINOR
        assert changes[0].is_breaking

    def test_callback_added(self):
        changes = CallbackAddedRule().evaluate(_doc(), _doc(callbacks={"onEvent": {"{$request.body#/url}": HOOK}}))
        assert len(changes) == 1
        assert not changes[0].is_breaking

    def test_callback_url_changed(self):
        changes = CallbackUrlChangedRule().evaluate(
            _doc(callbacks={"onEvent": {"{$request.body#/url}": HOOK}}),
            _doc(callbacks={"onEvent": {"{$request.body#/callbackUrl}": HOOK}}),
        )
        assert len(changes) == 1
        assert changes[0].old_value == "{$request.body#/url}"
        assert changes[0].new_value == "{$request.body#/callbackUrl}"
