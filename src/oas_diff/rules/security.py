"""Rules for security requirements, security schemes and OAuth2 flows."""

from collections.abc import Iterator

from oas_diff.diff.changes import ApiChange, ChangeSeverity, ChangeType
from oas_diff.parser.base import Document, OAuthFlow, Operation, SecurityScheme
from oas_diff.rules.base import Rule, iter_common_operations, operation_location

SecurityRequirements = list[dict[str, list[str]]]


def effective_security(document: Document, operation: Operation) -> SecurityRequirements:
    """Operation-level security, falling back to the document-level default."""
    if operation.security is not None:
        return operation.security
    return document.security or []


def _scheme_location(name: str, flow: str | None = None) -> str:
    if flow is None:
        return f"Security Scheme: {name}"
    return f"Security Scheme: {name} ({flow})"


def _iter_common_schemes(old: Document, new: Document) -> Iterator[tuple[str, SecurityScheme, SecurityScheme]]:
    old_schemes, new_schemes = old.security_schemes, new.security_schemes
    if old_schemes is None or new_schemes is None:
        return
    for name, old_scheme in old_schemes.items():
        new_scheme = new_schemes.get(name)
        if new_scheme is not None:
            yield name, old_scheme, new_scheme


def _iter_common_flows(
    old: Document, new: Document
) -> Iterator[tuple[str, str, OAuthFlow, OAuthFlow]]:
    for name, old_scheme, new_scheme in _iter_common_schemes(old, new):
        if old_scheme.flows is None or new_scheme.flows is None:
            continue
        new_flows = new_scheme.flows.declared()
        for flow_name, old_flow in old_scheme.flows.declared().items():
            new_flow = new_flows.get(flow_name)
            if new_flow is not None:
                yield name, flow_name, old_flow, new_flow


def _describe(requirement: dict[str, list[str]]) -> str:
    return " + ".join(requirement) or "anonymous"


class SecurityRequirementAddedRule(Rule):
    name = "Security Requirement Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            old_security = effective_security(old, old_op)
            new_security = effective_security(new, new_op)
            if not new_security:
                continue
            location = operation_location(path, method)
            if not old_security:
                changes.append(
                    ApiChange(
                        change_type=ChangeType.SECURITY_REQUIREMENT_ADDED,
                        severity=ChangeSeverity.CRITICAL,
                        location=location,
                        description=f"Authentication is now required for {method} '{path}'",
                        old_value="none",
                        new_value=", ".join(_describe(r) for r in new_security),
                        is_breaking=True,
                    )
                )
                continue
            old_key_sets = [set(requirement) for requirement in old_security]
            for requirement in new_security:
                if set(requirement) in old_key_sets:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.SECURITY_REQUIREMENT_ADDED,
                        severity=ChangeSeverity.MAJOR,
                        location=location,
                        description=f"Security requirement '{_describe(requirement)}' was added",
                        new_value=_describe(requirement),
                        is_breaking=True,
                    )
                )
        return changes


class SecurityRequirementRemovedRule(Rule):
    """Dropping every requirement opens the operation up; reported for information."""

    name = "Security Requirement Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            old_security = effective_security(old, old_op)
            if old_security and not effective_security(new, new_op):
                changes.append(
                    ApiChange(
                        change_type=ChangeType.SECURITY_REQUIREMENT_REMOVED,
                        severity=ChangeSeverity.INFO,
                        location=operation_location(path, method),
                        description=f"Authentication is no longer required for {method} '{path}'",
                        old_value=", ".join(_describe(r) for r in old_security),
                        new_value="none",
                    )
                )
        return changes


class SecuritySchemeChangedRule(Rule):
    name = "Security Scheme Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_scheme, new_scheme in _iter_common_schemes(old, new):
            if old_scheme.type != new_scheme.type:
                changes.append(self._changed(name, "type", old_scheme.type, new_scheme.type))
                continue
            if old_scheme.type == "apiKey":
                if old_scheme.location != new_scheme.location:
                    changes.append(
                        self._changed(name, "location", old_scheme.location, new_scheme.location)
                    )
                if old_scheme.name != new_scheme.name:
                    changes.append(self._changed(name, "parameter name", old_scheme.name, new_scheme.name))
            elif old_scheme.type == "http":
                old_http = (old_scheme.scheme or "").lower()
                new_http = (new_scheme.scheme or "").lower()
                if old_http != new_http:
                    changes.append(self._changed(name, "HTTP scheme", old_scheme.scheme, new_scheme.scheme))
        return changes

    def _changed(self, scheme: str, aspect: str, old_value: str | None, new_value: str | None) -> ApiChange:
        return ApiChange(
            change_type=ChangeType.SECURITY_SCHEME_CHANGED,
            severity=ChangeSeverity.CRITICAL,
            location=_scheme_location(scheme),
            description=f"Security scheme '{scheme}' {aspect} changed",
            old_value=old_value,
            new_value=new_value,
            is_breaking=True,
        )


class OAuthFlowChangedRule(Rule):
    """Removed flows, then authorization/token URL changes on flows kept on both sides."""

    name = "OAuth Flow Changed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, old_scheme, new_scheme in _iter_common_schemes(old, new):
            if old_scheme.flows is None or new_scheme.flows is None:
                continue
            new_flows = new_scheme.flows.declared()
            for flow_name in old_scheme.flows.declared():
                if flow_name not in new_flows:
                    changes.append(
                        ApiChange(
                            change_type=ChangeType.OAUTH_FLOW_CHANGED,
                            severity=ChangeSeverity.CRITICAL,
                            location=_scheme_location(name, flow_name),
                            description=f"OAuth2 flow '{flow_name}' was removed",
                            old_value=flow_name,
                            is_breaking=True,
                        )
                    )
        for name, flow_name, old_flow, new_flow in _iter_common_flows(old, new):
            for label, old_url, new_url in (
                ("authorizationUrl", old_flow.authorization_url, new_flow.authorization_url),
                ("tokenUrl", old_flow.token_url, new_flow.token_url),
            ):
                if old_url is None or old_url == new_url:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.OAUTH_FLOW_CHANGED,
                        severity=ChangeSeverity.CRITICAL,
                        location=_scheme_location(name, flow_name),
                        description=f"OAuth2 {label} changed",
                        old_value=old_url,
                        new_value=new_url,
                        is_breaking=True,
                    )
                )
        return changes


class OAuthScopeRemovedRule(Rule):
    """Scopes missing from a flow. Changed scope descriptions are not reported."""

    name = "OAuth Scope Removed Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for name, flow_name, old_flow, new_flow in _iter_common_flows(old, new):
            new_scopes = new_flow.scopes or {}
            for scope in old_flow.scopes or {}:
                if scope in new_scopes:
                    continue
                changes.append(
                    ApiChange(
                        change_type=ChangeType.OAUTH_SCOPE_REMOVED,
                        severity=ChangeSeverity.CRITICAL,
                        location=_scheme_location(name, flow_name),
                        description=f"OAuth2 scope '{scope}' was removed",
                        old_value=scope,
                        is_breaking=True,
                    )
                )
        return changes


class OAuthScopeAddedRule(Rule):
    """An operation demanding additional scopes from a scheme it already used."""

    name = "OAuth Scope Added Rule"

    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        changes = []
        for path, method, old_op, new_op in iter_common_operations(old, new):
            old_scopes: dict[str, set[str]] = {}
            for requirement in effective_security(old, old_op):
                for scheme, scopes in requirement.items():
                    old_scopes.setdefault(scheme, set()).update(scopes)
            reported = set()
            for requirement in effective_security(new, new_op):
                for scheme, scopes in requirement.items():
                    if scheme not in old_scopes:
                        continue
                    for scope in scopes:
                        if scope in old_scopes[scheme] or (scheme, scope) in reported:
                            continue
                        reported.add((scheme, scope))
                        changes.append(
                            ApiChange(
                                change_type=ChangeType.OAUTH_SCOPE_ADDED,
                                severity=ChangeSeverity.MAJOR,
                                location=operation_location(path, method),
                                description=f"Scope '{scope}' of '{scheme}' is now required",
                                new_value=scope,
                                is_breaking=True,
                            )
                        )
        return changes
