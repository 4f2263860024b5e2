"""Detect the serialization format of an OpenAPI document."""

import json
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

import yaml


class SpecFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    UNKNOWN = "unknown"


_EXTENSIONS = {
    ".json": SpecFormat.JSON,
    ".yaml": SpecFormat.YAML,
    ".yml": SpecFormat.YAML,
}


def detect_format_from_location(location: str | Path) -> SpecFormat:
    """Guess the format from a file extension; URLs are judged by their path."""
    text = str(location)
    if text.startswith(("http://", "https://")):
        text = urlparse(text).path
    return _EXTENSIONS.get(Path(text).suffix.lower(), SpecFormat.UNKNOWN)


def detect_format(text: str) -> SpecFormat:
    """Detect the format of document content.

    Returns SpecFormat.JSON, SpecFormat.YAML, or SpecFormat.UNKNOWN.
    """
    stripped = text.lstrip()
    if not stripped:
        return SpecFormat.UNKNOWN

    if stripped[0] in "{[":
        try:
            json.loads(stripped)
            return SpecFormat.JSON
        except ValueError:
            pass

    try:
        data = yaml.safe_load(stripped)
        if isinstance(data, (dict, list)):
            return SpecFormat.YAML
    except yaml.YAMLError:
        pass

    return SpecFormat.UNKNOWN
