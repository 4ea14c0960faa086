from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
import math
from typing import Any

import numpy as np


def unwrap_scalar(value: Any) -> Any:
    """Turn numpy scalars and Decimals into plain Python values."""
    if isinstance(value, np.datetime64):
        return value
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Decimal):
        return float(value)
    return value


def to_number(value: Any, *, temporal: bool = False) -> float | None:
    """Coerce a row value to a finite float, or None when it has no numeric reading.

    With ``temporal=True`` ISO-8601 strings are accepted as well. Dates and
    datetimes always convert to epoch milliseconds; naive datetimes are UTC.
    """
    value = unwrap_scalar(value)
    if value is None:
        return None
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return float(value.astype("datetime64[ms]").astype(np.int64))
    if isinstance(value, datetime):
        return _epoch_ms(value)
    if isinstance(value, date):
        return _epoch_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            out = float(text)
        except ValueError:
            return _parse_iso_ms(text) if temporal else None
    else:
        return None
    if not math.isfinite(out):
        return None
    return out


def to_category(value: Any) -> str:
    """Stable string form of a categorical value; None becomes ''."""
    value = unwrap_scalar(value)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _epoch_ms(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000.0


def _parse_iso_ms(text: str) -> float | None:
    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return _epoch_ms(parsed)
