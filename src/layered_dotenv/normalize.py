from __future__ import annotations

import json
import math
import re
from typing import Any

TRIPLE_QUOTE = '"""'

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"[+-]?\d+")


def unescape(value: str) -> str:
    """Replace escaped double quotes with plain ones."""
    return value.replace('\\"', '"')


def normalize_value(raw: str) -> str:
    """Strip a quote wrapper from a raw single-line value.

    - \"\"\"...\"\"\" and "..." wrappers are removed and \\" is unescaped
    - anything else is trimmed of surrounding whitespace

    Whitespace outside a wrapper is ignored; whitespace inside it is kept.
    """
    text = raw.strip()
    if len(text) >= 6 and text.startswith(TRIPLE_QUOTE) and text.endswith(TRIPLE_QUOTE):
        return unescape(text[3:-3])
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return unescape(text[1:-1])
    return text


def _parse_number(text: str) -> int | float | None:
    if not _NUMBER_RE.fullmatch(text):
        return None
    if _INT_RE.fullmatch(text):
        return int(text)
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def coerce_value(value: str) -> Any:
    """Sniff a normalized string into a richer type.

    Order: JSON object/array, boolean, null, finite number. Anything that
    matches none of those comes back unchanged.
    """
    trimmed = value.strip()

    if trimmed.startswith(("{", "[")):
        try:
            return json.loads(trimmed)
        except ValueError:
            pass

    lowered = trimmed.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None

    number = _parse_number(trimmed)
    if number is not None:
        return number

    return value


def to_env_string(value: Any) -> str:
    """Render a (possibly coerced) value the way it is written to the environment."""
    if isinstance(value, str):
        return value
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
