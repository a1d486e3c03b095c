"""
Text processing utilities for facility responses
"""

import math
import re
from typing import Any, List, Optional


LEADING_FENCE = re.compile(r'^```[A-Za-z0-9_+-]*')
TRAILING_FENCE = '```'


def strip_code_fences(text: str) -> str:
    """
    Remove one leading and one trailing markdown fence from model output

    Args:
        text: Raw response text, e.g. "```json\\n{...}\\n```"

    Returns:
        The trimmed text between the fences; unfenced text is only trimmed
    """
    cleaned = text.strip()
    match = LEADING_FENCE.match(cleaned)
    if match:
        cleaned = cleaned[match.end():]
    if cleaned.endswith(TRAILING_FENCE):
        cleaned = cleaned[:-len(TRAILING_FENCE)]
    return cleaned.strip()


def coerce_str(value: Any, default: str = "") -> str:
    """Stringify scalars; None and containers fall back to default"""
    if value is None or isinstance(value, (dict, list)):
        return default
    if isinstance(value, str):
        return value
    return str(value)


def coerce_str_list(value: Any) -> List[str]:
    """
    Coerce a JSON value into a list of strings

    A bare string becomes a one-element list, None and non-list values become [].
    Items that are not strings are stringified; null items are dropped.
    """
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        items.append(item if isinstance(item, str) else str(item))
    return items


def coerce_number(value: Any) -> Optional[float]:
    """Parse ints, floats and numeric strings; anything else, NaN and infinities are None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def match_choice(value: Any, choices: List[str]) -> Optional[str]:
    """Case-insensitive lookup of value among choices, returning the canonical spelling"""
    if not isinstance(value, str):
        return None
    needle = value.strip().lower()
    for choice in choices:
        if choice.lower() == needle:
            return choice
    return None
