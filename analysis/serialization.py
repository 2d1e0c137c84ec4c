"""
JSON-ready conversion for analytics artifacts.
Dataclasses become dicts, enums their values, timestamps ISO strings.
"""

import dataclasses
import pandas as pd
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Recursively convert an artifact into plain JSON-compatible values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, 'to_dict'):
            return value.to_dict()
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, pd.Timestamp):
        return value.isoformat()

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}

    if isinstance(value, (set, frozenset)):
        return sorted(to_jsonable(v) for v in value)

    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]

    return value


def dataclass_to_dict(obj: Any) -> dict:
    """Field-by-field conversion used by the artifacts' to_dict methods."""
    return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
