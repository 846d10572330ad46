"""
JSON serialization helpers for hydraulics-mcp.

Tool results mix plain dicts, pydantic models and numpy scalars, and may contain
inf or nan (e.g. an unbounded Reynolds number), which are not valid JSON per
RFC 7159. Everything is reduced to JSON-safe builtins before dumping.
"""

import json
import math
from typing import Any

import numpy as np
from pydantic import BaseModel


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize an object for JSON serialization.

    inf and nan become None; pydantic models are dumped to dicts; numpy scalars
    and arrays become Python numbers and lists.

    Examples:
        >>> sanitize_for_json({'value': float('inf')})
        {'value': None}
        >>> sanitize_for_json([1.0, float('nan'), 3.0])
        [1.0, None, 3.0]
    """
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj

    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj

    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return sanitize_for_json(float(obj))
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())

    if isinstance(obj, BaseModel):
        return sanitize_for_json(obj.model_dump())

    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]

    return str(obj)


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """
    Serialize ``obj`` to a JSON string after sanitization.

    Examples:
        >>> safe_json_dumps({'value': float('inf')})
        '{"value": null}'
    """
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(sanitize_for_json(obj), **kwargs)


def round_floats(obj: Any, digits: int = 8) -> Any:
    """Round every float in a nested structure to ``digits`` significant figures."""
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return obj
        return float(f"{obj:.{digits}g}")
    if isinstance(obj, dict):
        return {k: round_floats(v, digits) for k, v in obj.items()}
    if isinstance(obj, list):
        return [round_floats(v, digits) for v in obj]
    return obj
