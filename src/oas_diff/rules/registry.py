"""The built-in rule catalogue."""

from oas_diff.rules import (
    callbacks,
    composition,
    constraints,
    endpoints,
    enums,
    links,
    metadata,
    parameters,
    request_body,
    responses,
    schemas,
    security,
)
from oas_diff.rules.base import Rule


def default_rules() -> tuple[Rule, ...]:
    """Fresh instances of every built-in rule, in evaluation order."""
    return (
        # endpoints
        endpoints.EndpointRemovedRule(),
        endpoints.EndpointAddedRule(),
        endpoints.MethodRemovedRule(),
        endpoints.MethodAddedRule(),
        endpoints.OperationDeprecatedRule(),
        # parameters
        parameters.ParameterAddedRule(),
        parameters.RequiredParameterAddedRule(),
        parameters.ParameterRemovedRule(),
        parameters.ParameterLocationChangedRule(),
        parameters.ParameterTypeChangedRule(),
        parameters.ParameterStyleChangedRule(),
        parameters.ParameterExplodeChangedRule(),
        parameters.ParameterDeprecatedRule(),
        # request bodies
        request_body.RequestBodyRemovedRule(),
        request_body.RequestBodyAddedRule(),
        request_body.RequestBodyRequiredRule(),
        request_body.RequestContentTypeRemovedRule(),
        request_body.RequestContentTypeAddedRule(),
        request_body.RequestSchemaChangedRule(),
        # responses
        responses.ResponseCodeRemovedRule(),
        responses.ResponseCodeChangedRule(),
        responses.ResponseContentTypeRemovedRule(),
        responses.ResponseContentTypeAddedRule(),
        responses.ResponseSchemaChangedRule(),
        responses.ResponseHeaderRemovedRule(),
        responses.ResponseHeaderAddedRule(),
        responses.ResponseHeaderRequiredRule(),
        # schema properties
        schemas.PropertyRemovedRule(),
        schemas.PropertyAddedRule(),
        schemas.PropertyRequiredRule(),
        schemas.PropertyTypeChangedRule(),
        schemas.PropertyFormatChangedRule(),
        schemas.PropertyReadOnlyChangedRule(),
        schemas.PropertyWriteOnlyChangedRule(),
        schemas.DefaultValueChangedRule(),
        schemas.DefaultValueRemovedRule(),
        schemas.SchemaDeprecatedRule(),
        # constraints
        constraints.MinLengthIncreasedRule(),
        constraints.MaxLengthDecreasedRule(),
        constraints.PatternAddedRule(),
        constraints.PatternChangedRule(),
        constraints.MinimumIncreasedRule(),
        constraints.MaximumDecreasedRule(),
        constraints.MinItemsIncreasedRule(),
        constraints.MaxItemsDecreasedRule(),
        constraints.UniqueItemsAddedRule(),
        # enums and composition
        enums.EnumValueRemovedRule(),
        enums.EnumValueAddedRule(),
        composition.OneOfOptionRemovedRule(),
        composition.DiscriminatorChangedRule(),
        composition.AdditionalPropertiesForbiddenRule(),
        composition.AdditionalPropertiesTypeChangedRule(),
        # security
        security.SecurityRequirementAddedRule(),
        security.SecurityRequirementRemovedRule(),
        security.SecuritySchemeChangedRule(),
        security.OAuthFlowChangedRule(),
        security.OAuthScopeRemovedRule(),
        security.OAuthScopeAddedRule(),
        # metadata, links and callbacks
        metadata.ApiVersionChangedRule(),
        metadata.BasePathChangedRule(),
        links.LinkRemovedRule(),
        links.LinkAddedRule(),
        callbacks.CallbackRemovedRule(),
        callbacks.CallbackAddedRule(),
        callbacks.CallbackUrlChangedRule(),
    )
