"""Rule interface and the traversal helpers shared by all rule families.

Traversal helpers only yield anchors present on both sides; an anchor that
exists on one side only is the concern of the dedicated added/removed rule.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from oas_diff.diff.changes import ApiChange
from oas_diff.parser.base import Document, Operation, Parameter, PathItem, Response, Schema


class Rule(ABC):
    """One independent check over an (old, new) document pair."""

    name: str = ""

    @abstractmethod
    def evaluate(self, old: Document, new: Document) -> list[ApiChange]:
        """Return the changes this rule finds, in a stable order."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


def operation_location(path: str, method: str) -> str:
    return f"{path} [{method}]"


def response_location(path: str, method: str, code: str) -> str:
    return f"{path} [{method}] Response: {code}"


def schema_location(schema_name: str, prop: str | None = None) -> str:
    if prop is None:
        return f"Schema: {schema_name}"
    return f"Schema: {schema_name}.{prop}"


def schema_identity(schema: Schema | None) -> str:
    """Reference identity of a schema: its ``$ref``, else ``type(format)``."""
    if schema is None:
        return "unknown"
    if schema.ref:
        return schema.ref
    if schema.type is None:
        return "unknown"
    if schema.format:
        return f"{schema.type}({schema.format})"
    return schema.type


def is_success_code(code: str) -> bool:
    return len(code) == 3 and code.isdigit() and code.startswith("2")


def first_success_code(operation: Operation) -> str | None:
    for code in operation.responses or {}:
        if is_success_code(code):
            return code
    return None


def iter_common_paths(
    old: Document, new: Document, from_new: bool = False
) -> Iterator[tuple[str, PathItem, PathItem]]:
    """Yield (path, old_item, new_item) for paths declared on both sides.

    Iterates the old document's order unless ``from_new`` is set.
    """
    if old.paths is None or new.paths is None:
        return
    primary, other = (new.paths, old.paths) if from_new else (old.paths, new.paths)
    for path, item in primary.items():
        counterpart = other.get(path)
        if counterpart is None:
            continue
        if from_new:
            yield path, counterpart, item
        else:
            yield path, item, counterpart


def iter_common_operations(
    old: Document, new: Document, from_new: bool = False
) -> Iterator[tuple[str, str, Operation, Operation]]:
    """Yield (path, METHOD, old_op, new_op) for operations on both sides."""
    for path, old_item, new_item in iter_common_paths(old, new, from_new):
        new_operations = new_item.operations()
        for method, old_op in old_item.operations().items():
            new_op = new_operations.get(method)
            if new_op is not None:
                yield path, method, old_op, new_op


def iter_common_responses(
    old_op: Operation, new_op: Operation, from_new: bool = False
) -> Iterator[tuple[str, Response, Response]]:
    if old_op.responses is None or new_op.responses is None:
        return
    primary, other = (
        (new_op.responses, old_op.responses) if from_new else (old_op.responses, new_op.responses)
    )
    for code, response in primary.items():
        counterpart = other.get(code)
        if counterpart is None:
            continue
        yield (code, counterpart, response) if from_new else (code, response, counterpart)


def iter_common_schemas(
    old: Document, new: Document, from_new: bool = False
) -> Iterator[tuple[str, Schema, Schema]]:
    """Yield (name, old_schema, new_schema) for components.schemas on both sides."""
    if old.schemas is None or new.schemas is None:
        return
    primary, other = (new.schemas, old.schemas) if from_new else (old.schemas, new.schemas)
    for name, schema in primary.items():
        counterpart = other.get(name)
        if counterpart is None:
            continue
        yield (name, counterpart, schema) if from_new else (name, schema, counterpart)


def iter_common_properties(
    old: Document, new: Document, from_new: bool = False
) -> Iterator[tuple[str, str, Schema, Schema, Schema, Schema]]:
    """Yield (schema_name, prop, old_schema, new_schema, old_prop, new_prop)."""
    for name, old_schema, new_schema in iter_common_schemas(old, new, from_new):
        if old_schema.properties is None or new_schema.properties is None:
            continue
        primary, other = (
            (new_schema.properties, old_schema.properties)
            if from_new
            else (old_schema.properties, new_schema.properties)
        )
        for prop, prop_schema in primary.items():
            counterpart = other.get(prop)
            if counterpart is None:
                continue
            if from_new:
                yield name, prop, old_schema, new_schema, counterpart, prop_schema
            else:
                yield name, prop, old_schema, new_schema, prop_schema, counterpart


def find_parameter(
    parameters: list[Parameter] | None, name: str, location: str | None
) -> Parameter | None:
    """Find a parameter by (name, in)."""
    for param in parameters or []:
        if param.name == name and param.location == location:
            return param
    return None


def join_keys(mapping: dict | None) -> str:
    return ", ".join(mapping) if mapping else ""
