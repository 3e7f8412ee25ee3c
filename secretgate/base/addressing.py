"""
Secret addressing helpers.

A secret reference has the form ``name#json.key.path``: the part before the
first ``#`` names the stored secret, the part after it selects a nested value
inside a JSON-object secret.  Names written through the handler are
qualified with a configured path prefix via :func:`full_path`.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from secretgate.base.config import DEFAULT_BASE_PATH, PATH_SEPARATOR
from secretgate.base.exceptions import SecretDecodeError
from secretgate.base.logger import sg_logger


def extract_secret_info(path: str) -> tuple[str, str]:
    """Split a reference into ``(secret_name, json_key_path)``.

    Args:
        path: Secret reference, e.g. ``"db-creds#primary.password"``.

    Returns:
        The secret name and the key path; the key path is empty when the
        reference has no ``#``.
    """
    name, _, key = path.partition("#")
    return name, key


def is_valid_json(value: str) -> bool:
    try:
        json.loads(value)
    except (TypeError, ValueError):
        return False
    return True


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def _stringify(value: Any) -> str:
    """Render a JSON leaf the way it should appear as a bare secret value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return _dump(value)


def get_value_from_json(value: str, key_path: str) -> str:
    """Select the value at a dotted key path inside a JSON object.

    Args:
        value: Secret text, expected to be a JSON object.
        key_path: Dot-separated keys, e.g. ``"k1.k2"``. Empty selects the
            whole object.

    Returns:
        The selected value as text. A missing key yields ``""``; a scalar or
        array met before the path is exhausted is returned stringified; an
        object is returned as compact JSON. Text that is not a JSON object
        is returned unchanged.
    """
    try:
        current = json.loads(value)
    except (TypeError, ValueError):
        return value
    if not isinstance(current, dict):
        return value

    if not key_path:
        return _dump(current)

    for part in key_path.split("."):
        if part not in current:
            return ""
        child = current[part]
        if not isinstance(child, dict):
            return _stringify(child)
        current = child

    return _dump(current)


def decode(value: str, should_decode: bool, name: str) -> str:
    """Base64-decode *value* when *should_decode* is set.

    Raises:
        SecretDecodeError: If the value is not valid base64 or not UTF-8 text.
    """
    if not should_decode:
        return value
    sg_logger.info(f"Decoding secret {name}", secret=name)
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise SecretDecodeError(
            f"error occurred when decoding base64 secret: {name}. Failed with error {e}"
        ) from e


def full_path(prefix: str | None, name: str) -> str:
    """Qualify *name* with *prefix*.

    A blank prefix falls back to ``DEFAULT_BASE_PATH``. Separators are
    stripped from both ends of the prefix before joining.
    """
    prefix = (prefix or "").strip()
    if not prefix:
        return f"{DEFAULT_BASE_PATH}{PATH_SEPARATOR}{name}"
    return f"{prefix.strip(PATH_SEPARATOR)}{PATH_SEPARATOR}{name}"
