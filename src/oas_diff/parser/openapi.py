"""OpenAPI 3.x document loader.

Reads a document from a file or an http(s) URL, resolves local references
and normalizes it into a :class:`Document`. References to
``#/components/schemas/*`` are kept as ``$ref`` so schemas can be compared
by reference identity.
"""

import logging
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import requests
from pydantic import ValidationError

from oas_diff.errors import SpecLoadError, SpecNotFoundError, SpecParseError
from oas_diff.parser.base import HTTP_METHODS, Document
from oas_diff.parser.convert import parse_content
from oas_diff.parser.detect import SpecFormat, detect_format, detect_format_from_location

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
SCHEMA_REF_PREFIX = "#/components/schemas/"


def load_document(location: str | Path, timeout: float = DEFAULT_TIMEOUT) -> Document:
    """Load and normalize the document at a file path or http(s) URL."""
    source = str(location)
    text = read_source(source, timeout)
    fmt = detect_format_from_location(source)
    if fmt is SpecFormat.UNKNOWN:
        fmt = detect_format(text)
    logger.info("Loading %s (format: %s)", source, fmt.value)
    return parse_document(text, source=source, fmt=fmt)


def parse_document(text: str, source: str = "<string>", fmt: SpecFormat | None = None) -> Document:
    """Parse document text into a normalized :class:`Document`."""
    raw = _deserialize(text, source, fmt)
    _check_openapi_version(raw, source)
    raw = _resolve(raw, raw, source, ())
    _merge_path_parameters(raw)
    _apply_global_security(raw)
    try:
        document = Document.model_validate(raw)
    except ValidationError as e:
        raise SpecParseError(source, f"not a valid OpenAPI document ({e.error_count()} errors)\n{e}") from e
    logger.debug("Loaded %s: %d paths", source, len(document.paths or {}))
    return document


def read_source(source: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Raw text of a local file or http(s) URL."""
    if source.startswith(("http://", "https://")):
        return _fetch(source, timeout)
    path = Path(source)
    if not path.is_file():
        raise SpecNotFoundError(source, "file not found")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoadError(source, f"cannot read file: {e}") from e


def _fetch(url: str, timeout: float) -> str:
    logger.debug("GET %s (timeout %ss)", url, timeout)
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise SpecLoadError(url, f"request failed: {e}") from e
    if resp.status_code == 404:
        raise SpecNotFoundError(url, "HTTP 404")
    try:
        resp.raise_for_status()
    except requests.HTTPError as e:
        raise SpecLoadError(url, str(e)) from e
    return resp.text


def _deserialize(text: str, source: str, fmt: SpecFormat | None) -> dict:
    if fmt is not SpecFormat.JSON:
        fmt = SpecFormat.YAML
    data = parse_content(text, fmt, source)
    if not isinstance(data, dict):
        raise SpecParseError(source, "document root must be a mapping")
    return data


def _check_openapi_version(raw: dict, source: str) -> None:
    version = raw.get("openapi")
    if version is None:
        if "swagger" in raw:
            raise SpecParseError(source, "Swagger 2.0 documents are not supported, convert to OpenAPI 3.x")
        raise SpecParseError(source, "missing 'openapi' version field")
    version = str(version)
    if not version.startswith("3."):
        raise SpecParseError(source, f"unsupported OpenAPI version {version}")
    raw["openapi"] = version


def _resolve(node: Any, root: dict, source: str, seen: tuple[str, ...]) -> Any:
    """Return a copy of ``node`` with local non-schema references inlined."""
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref.startswith(SCHEMA_REF_PREFIX) or not ref.startswith("#/"):
                return dict(node)
            if ref in seen:
                raise SpecParseError(source, f"circular reference {ref}")
            return _resolve(_lookup(root, ref, source), root, source, seen + (ref,))
        return {key: _resolve(value, root, source, seen) for key, value in node.items()}
    if isinstance(node, list):
        return [_resolve(item, root, source, seen) for item in node]
    return node


def _lookup(root: dict, ref: str, source: str) -> Any:
    node: Any = root
    for token in ref[2:].split("/"):
        token = unquote(token).replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise SpecParseError(source, f"unresolvable reference {ref}")
    return node


def _merge_path_parameters(raw: dict) -> None:
    """Copy path-level parameters into each operation unless it overrides them."""
    for item in (raw.get("paths") or {}).values():
        if not isinstance(item, dict) or not item.get("parameters"):
            continue
        shared = item.pop("parameters")
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            own = operation.get("parameters") or []
            overridden = {(p.get("name"), p.get("in")) for p in own if isinstance(p, dict)}
            inherited = [p for p in shared if (p.get("name"), p.get("in")) not in overridden]
            operation["parameters"] = inherited + own


def _apply_global_security(raw: dict) -> None:
    """Give operations without their own ``security`` the document default."""
    default = raw.get("security")
    if default is None:
        return
    for item in (raw.get("paths") or {}).values():
        if not isinstance(item, dict):
            continue
        for method in HTTP_METHODS:
            operation = item.get(method)
            if isinstance(operation, dict) and "security" not in operation:
                operation["security"] = default
