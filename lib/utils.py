"""
Common utilities for Weathervane.
"""

import dataclasses
import json
import logging
import os
import re
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

DELAY_UNIT_RE = re.compile(r"^(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")
DELAY_CLOCK_RE = re.compile(r"^(\d+):(\d+)(?::(\d+))?$")


def parseDelay(delayStr: str) -> int:
    """
    Parse delay string to seconds.

    Args:
        delayStr: String in one of formats:
            1. `DDdHHhMMmSSs` (e.g., "1d2h30m15s", "5m") - each section is optional but at least one must be present
            2. `HH:MM[:SS]` (e.g., "2:30" or "2:30:15")

    Returns:
        Total delay in seconds as integer.

    Raises:
        ValueError: If the string doesn't match any supported format.
    """
    delayStr = delayStr.strip()

    match = DELAY_UNIT_RE.match(delayStr)
    if delayStr and match is not None:
        days, hours, minutes, seconds = (int(part or 0) for part in match.groups())
        return ((days * 24 + hours) * 60 + minutes) * 60 + seconds

    match = DELAY_CLOCK_RE.match(delayStr)
    if match is not None:
        hours, minutes, seconds = (int(part or 0) for part in match.groups())
        if minutes < 60 and seconds < 60:
            return (hours * 60 + minutes) * 60 + seconds

    raise ValueError(f"Invalid delay format: {delayStr}. Expected formats: '[DDd][HHh][MMm][SSs]' or 'HH:MM[:SS]'")


def parseDuration(value: Union[int, float, str, None], default: float) -> float:
    """
    Parse duration config value: number of seconds or parseDelay() string.

    None returns default.

    Raises:
        ValueError: If value is a bool or an unparsable string.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return value
    value = value.strip()
    try:
        return float(value)
    except ValueError:
        return parseDelay(value)


def toJsonable(data: Any) -> Any:
    """Convert dataclasses (recursively), read-only mappings, tuples and sets into JSON friendly structures"""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {field.name: toJsonable(getattr(data, field.name)) for field in dataclasses.fields(data)}
    if isinstance(data, Mapping):
        return {key: toJsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [toJsonable(item) for item in data]
    return data


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # Pretty-print when indent is passed
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(toJsonable(data), **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.

    Reads KEY=VALUE lines, skipping blanks and # comments. Missing file is not
    an error. Variables already present in the environment win over the file.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate os.environ (default True)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        logger.debug(f"No dotenv file at {path}")
        return ret

    with open(path, "rt", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            ret[key] = value.strip().strip('"').strip("'")

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    return ret
