from __future__ import annotations

from dataclasses import is_dataclass
from enum import Enum
from pathlib import PurePath


def to_jsonable(obj):
    """Convert result objects to JSON-serializable structures.

    Handles:
    - Basic types (str, int, float, bool, None)
    - Enums (by value) and paths (as strings)
    - Collections (list, tuple, set, frozenset, dict)
    - Dataclasses, including their ``ok`` property when present
    - Pydantic models
    """
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, PurePath):
        return str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return obj.hex()
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if is_dataclass(obj) and not isinstance(obj, type):
        data = {f: getattr(obj, f) for f in obj.__dataclass_fields__}
        ok = getattr(type(obj), "ok", None)
        if isinstance(ok, property):
            data["ok"] = obj.ok
        return to_jsonable(data)
    if hasattr(obj, "model_dump"):
        return to_jsonable(obj.model_dump())
    return str(obj)
