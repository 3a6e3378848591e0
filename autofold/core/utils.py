"""Small shared helpers."""

from __future__ import annotations

from pathlib import PurePath
from typing import Any
from urllib.parse import unquote, urlparse


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dicts. Override values take precedence.

    Merge rules:
    - Dicts are recursively merged
    - Lists are REPLACED (override wins completely)
    - Other values are overwritten

    Returns:
        New merged dictionary (original dicts not modified).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def file_name_from_uri(uri: str) -> str:
    """Basename of a document URI or path, falling back to the URI itself."""
    parsed = urlparse(uri)
    path = unquote(parsed.path) if parsed.scheme else uri
    name = PurePath(path).name
    return name or uri
