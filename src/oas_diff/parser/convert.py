"""Conversion between the YAML and JSON forms of an OpenAPI document."""

import json
import logging
import re
from typing import Any

import yaml

from oas_diff.errors import SpecParseError
from oas_diff.parser.detect import SpecFormat

logger = logging.getLogger(__name__)

_BOOL_TAG = "tag:yaml.org,2002:bool"


class SpecLoader(yaml.SafeLoader):
    """SafeLoader that only reads ``true`` and ``false`` as booleans.

    Plain YAML 1.1 also turns ``on``, ``off``, ``yes``, ``no``, ``y`` and
    ``n`` into booleans, which breaks property and parameter names.
    """


SpecLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
SpecLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=SpecLoader)


def parse_content(text: str, fmt: SpecFormat, source: str = "<string>") -> Any:
    """Deserialize ``text`` as ``fmt``."""
    if fmt is SpecFormat.JSON:
        try:
            return json.loads(text)
        except ValueError as e:
            raise SpecParseError(source, f"invalid JSON: {e}") from e
    if fmt is SpecFormat.YAML:
        try:
            return load_yaml(text)
        except yaml.YAMLError as e:
            raise SpecParseError(source, f"invalid YAML: {e}") from e
    raise SpecParseError(source, f"unknown format: {fmt.value}")


def dump(data: Any, fmt: SpecFormat) -> str:
    if fmt is SpecFormat.JSON:
        # YAML timestamps have no JSON form; they are written as strings
        return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"
    if fmt is SpecFormat.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    raise ValueError(f"cannot write format {fmt.value}")


def convert(text: str, source_format: SpecFormat, target_format: SpecFormat, source: str = "<string>") -> str:
    """Re-serialize document content from one format into another."""
    if target_format is SpecFormat.UNKNOWN:
        raise SpecParseError(source, "unknown target format")
    logger.debug("Converting %s from %s to %s", source, source_format.value, target_format.value)
    return dump(parse_content(text, source_format, source), target_format)


def yaml_to_json(text: str, source: str = "<string>") -> str:
    return convert(text, SpecFormat.YAML, SpecFormat.JSON, source)


def json_to_yaml(text: str, source: str = "<string>") -> str:
    return convert(text, SpecFormat.JSON, SpecFormat.YAML, source)


def normalize_to_json(text: str, fmt: SpecFormat, source: str = "<string>") -> str:
    """JSON form of ``text``; JSON input is returned unchanged."""
    if not text or not text.strip():
        raise SpecParseError(source, "content is empty")
    if fmt is SpecFormat.JSON:
        return text
    if fmt is SpecFormat.YAML:
        return yaml_to_json(text, source)
    raise SpecParseError(source, f"unknown format: {fmt.value}")
