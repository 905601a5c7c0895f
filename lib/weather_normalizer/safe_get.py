"""
Defensive accessors over semi-structured provider payloads.

Only meant for the normalizer boundary, where any nested field of an
upstream document may be missing or of the wrong type.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, Optional


def safeGet(document: Any, path: str, default: Any = None) -> Any:
    """
    Get nested value by dotted path, returning default instead of raising.

    Path components address mapping keys or, for sequences, integer indexes.

    Args:
        document: Parsed JSON document (dicts, lists, scalars)
        path: Dotted path, e.g. "wind.speed" or "skycon.0.value"
        default: Value returned when any step is missing or the leaf is None

    Returns:
        Found value or default

    Example:
        >>> safeGet({"wind": {"speed": 5}}, "wind.speed", 0)
        5
        >>> safeGet({"skycon": [{"value": "CLOUDY"}]}, "skycon.0.value")
        'CLOUDY'
        >>> safeGet({"skycon": []}, "skycon.0.value", "CLEAR_DAY")
        'CLEAR_DAY'
    """
    current = document
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                index = int(key)
            except ValueError:
                return default
            if index < 0 or index >= len(current):
                return default
            current = current[index]
        else:
            return default

    return default if current is None else current


def safeNumber(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """
    Parse value as finite float.

    Ints, floats and numeric strings are accepted. Booleans, NaN, infinities
    and anything unparsable or beyond float range resolve to default.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # int beyond float range
            return default
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    return number


def roundHalfUp(value: float) -> int:
    """Round to nearest int, halves away from -inf (2.5 -> 3, -2.5 -> -2)"""
    return int(math.floor(value + 0.5))


def safeRound(value: Any, default: int = 0) -> int:
    """Parse value defensively and round it half-up to int"""
    number = safeNumber(value, None)
    if number is None:
        return default
    return roundHalfUp(number)
