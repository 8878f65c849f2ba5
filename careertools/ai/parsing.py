"""
parsing.py — Pulling structured data out of raw Gemini replies.

Gemini often wraps JSON in markdown fences or adds a sentence before it,
even when told not to. These helpers strip that noise.
"""

import json
import re
from typing import Any, Optional

_FENCE = re.compile(r"```(?:json)?\s*")
_OBJECT = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(raw: str) -> str:
    return _FENCE.sub("", raw).strip()


def parse_json_object(raw: str) -> Optional[dict[str, Any]]:
    """Return the first {...} block of *raw* as a dict, or None."""
    m = _OBJECT.search(strip_code_fences(raw))
    if not m:
        return None
    try:
        data = json.loads(m.group())
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None
