from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
    "\b": "\\b",
}
_ESCAPE_TABLE = str.maketrans(_ESCAPES)
_UNESCAPES = {escaped[1]: raw for raw, escaped in _ESCAPES.items()}
_UNESCAPE_RE = re.compile(r'\\([\\"nrtfb])')


def escape_text(text: str) -> str:
    return text.translate(_ESCAPE_TABLE)


def unescape_text(text: str) -> str:
    return _UNESCAPE_RE.sub(lambda match: _UNESCAPES[match.group(1)], text)


def sanitize(value: Any) -> Any:
    """Escape backslashes, quotes and control characters in every string leaf.

    Structure is preserved: mappings keep their keys, sequences keep their
    order and type. Apply once, at the point of serialization; a second pass
    escapes the escapes.
    """
    if isinstance(value, str):
        return escape_text(value)
    if isinstance(value, BaseModel):
        return sanitize(value.model_dump())
    if isinstance(value, dict):
        return {key: sanitize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize(item) for item in value]
    if isinstance(value, tuple):
        return tuple(sanitize(item) for item in value)
    return value


def desanitize(value: Any) -> Any:
    if isinstance(value, str):
        return unescape_text(value)
    if isinstance(value, dict):
        return {key: desanitize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [desanitize(item) for item in value]
    if isinstance(value, tuple):
        return tuple(desanitize(item) for item in value)
    return value
