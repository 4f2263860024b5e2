"""Document model for a resolved OpenAPI 3.x description.

The loader converts raw YAML/JSON into these models; rules only ever read
them. Every optional section is ``None`` when the source omits it, and all
models are frozen.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options")


class SpecModel(BaseModel):
    """Base for document nodes: camelCase aliases, read-only, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Discriminator(SpecModel):
    property_name: str | None = None
    mapping: dict[str, str] | None = None


class Schema(SpecModel):
    """A schema definition. ``ref`` holds an unresolved ``$ref`` identity."""

    ref: str | None = Field(None, alias="$ref")
    type: str | None = None  # "a|b" when the source lists several types
    format: str | None = None
    properties: dict[str, "Schema"] | None = None
    required: list[str] | None = None
    items: "Schema | None" = None
    enum: list[Any] | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    pattern: str | None = None
    additional_properties: "bool | Schema | None" = None
    discriminator: Discriminator | None = None
    one_of: list["Schema"] | None = None
    any_of: list["Schema"] | None = None
    all_of: list["Schema"] | None = None
    default: Any = None
    read_only: bool | None = None
    write_only: bool | None = None
    deprecated: bool | None = None
    nullable: bool | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _join_type_list(cls, value):
        if isinstance(value, list):
            return "|".join(str(v) for v in value)
        return value

    def has_type(self, name: str) -> bool:
        return self.type is not None and name in self.type.split("|")

    @property
    def is_string(self) -> bool:
        return self.has_type("string")

    @property
    def is_numeric(self) -> bool:
        return self.has_type("number") or self.has_type("integer")

    @property
    def is_array(self) -> bool:
        return self.has_type("array")


class MediaType(SpecModel):
    schema_: Schema | None = Field(None, alias="schema")


class Parameter(SpecModel):
    name: str
    location: str | None = Field(None, alias="in")  # query / path / header / cookie
    required: bool | None = None
    deprecated: bool | None = None
    style: str | None = None
    explode: bool | None = None
    schema_: Schema | None = Field(None, alias="schema")

    @property
    def effective_style(self) -> str:
        """The declared style, or the OpenAPI default for the location."""
        if self.style:
            return self.style
        return "simple" if self.location in ("path", "header") else "form"

    @property
    def effective_explode(self) -> bool:
        if self.explode is not None:
            return self.explode
        return self.effective_style == "form"


class RequestBody(SpecModel):
    required: bool | None = None
    content: dict[str, MediaType] | None = None


class Header(SpecModel):
    required: bool | None = None
    deprecated: bool | None = None
    schema_: Schema | None = Field(None, alias="schema")


class Link(SpecModel):
    operation_id: str | None = None
    operation_ref: str | None = None
    parameters: dict[str, Any] | None = None


class Response(SpecModel):
    description: str | None = None
    headers: dict[str, Header] | None = None
    content: dict[str, MediaType] | None = None
    links: dict[str, Link] | None = None


class Operation(SpecModel):
    operation_id: str | None = None
    summary: str | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = None
    responses: dict[str, Response] | None = None
    callbacks: dict[str, dict[str, Any]] | None = None  # name -> {url expression: path item}
    security: list[dict[str, list[str]]] | None = None
    deprecated: bool | None = None

    @field_validator("responses", mode="before")
    @classmethod
    def _status_codes_as_strings(cls, value):
        # YAML reads bare 200 as an int key
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value


class PathItem(SpecModel):
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    patch: Operation | None = None
    head: Operation | None = None
    options: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """Declared operations keyed by upper-case method, in a fixed order."""
        result = {}
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                result[method.upper()] = operation
        return result

    def operation(self, method: str) -> Operation | None:
        return getattr(self, method.lower(), None)


class OAuthFlow(SpecModel):
    authorization_url: str | None = None
    token_url: str | None = None
    refresh_url: str | None = None
    scopes: dict[str, str] | None = None


class OAuthFlows(SpecModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = None
    authorization_code: OAuthFlow | None = None

    def declared(self) -> dict[str, OAuthFlow]:
        """Declared flows keyed by their OpenAPI name."""
        names = {
            "authorizationCode": self.authorization_code,
            "implicit": self.implicit,
            "password": self.password,
            "clientCredentials": self.client_credentials,
        }
        return {name: flow for name, flow in names.items() if flow is not None}


class SecurityScheme(SpecModel):
    type: str | None = None  # apiKey / http / oauth2 / openIdConnect / mutualTLS
    location: str | None = Field(None, alias="in")
    name: str | None = None
    scheme: str | None = None
    bearer_format: str | None = None
    flows: OAuthFlows | None = None
    open_id_connect_url: str | None = None


class Components(SpecModel):
    schemas: dict[str, Schema] | None = None
    security_schemes: dict[str, SecurityScheme] | None = None


class Info(SpecModel):
    title: str | None = None
    version: str | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_string(cls, value):
        # YAML reads 1.0 as a float and 2024-01-01 as a date
        if value is not None and not isinstance(value, str):
            return str(value)
        return value


class Server(SpecModel):
    url: str | None = None
    description: str | None = None


class Document(SpecModel):
    """One resolved OpenAPI 3.x document."""

    openapi: str | None = None
    info: Info | None = None
    servers: list[Server] | None = None
    paths: dict[str, PathItem] | None = None
    components: Components | None = None
    security: list[dict[str, list[str]]] | None = None

    @property
    def version_label(self) -> str:
        if self.info is not None and self.info.version:
            return self.info.version
        return "unknown"

    @property
    def schemas(self) -> dict[str, Schema] | None:
        return self.components.schemas if self.components else None

    @property
    def security_schemes(self) -> dict[str, SecurityScheme] | None:
        return self.components.security_schemes if self.components else None
