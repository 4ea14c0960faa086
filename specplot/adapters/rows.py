from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
import math
from typing import Any

import numpy as np

from specplot.errors import ChartDataError
from specplot.values import unwrap_scalar


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


LOGGER = logging.getLogger(__name__)

Row = dict[str, Any]


def normalize_rows(data: Any) -> tuple[Row, ...]:
    """Turn a row sequence, a DataFrame or a column mapping into plain dict rows."""
    if data is None:
        return ()

    if pd is not None and isinstance(data, pd.DataFrame):
        return _rows_from_frame(data)

    if isinstance(data, Mapping):
        return _rows_from_columns(data)

    if isinstance(data, np.ndarray) or (torch is not None and isinstance(data, torch.Tensor)):
        raise ChartDataError("bare arrays have no field names; pass a column mapping instead")

    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        rows: list[Row] = []
        skipped = 0
        for item in data:
            if not isinstance(item, Mapping):
                skipped += 1
                continue
            rows.append({str(k): unwrap_scalar(v) for k, v in item.items()})
        if skipped:
            LOGGER.debug("skipped %s non-mapping rows", skipped)
        return tuple(rows)

    raise ChartDataError(f"unsupported row input type: {type(data)!r}")


def _rows_from_frame(frame: Any) -> tuple[Row, ...]:
    columns = [str(c) for c in frame.columns]
    if len(set(columns)) != len(columns):
        raise ChartDataError("DataFrame column names must be unique")
    records = frame.to_dict(orient="records")
    return tuple({str(k): _clean_cell(v) for k, v in record.items()} for record in records)


def _rows_from_columns(columns: Mapping[Any, Any]) -> tuple[Row, ...]:
    arrays: dict[str, list[Any]] = {}
    for key, column in columns.items():
        arrays[str(key)] = _column_values(column, label=str(key))
    lengths = {len(v) for v in arrays.values()}
    if len(lengths) > 1:
        detail = ", ".join(f"{k}={len(v)}" for k, v in arrays.items())
        raise ChartDataError(f"column length mismatch: {detail}")
    n = lengths.pop() if lengths else 0
    return tuple({key: values[i] for key, values in arrays.items()} for i in range(n))


def _column_values(value: Any, *, label: str) -> list[Any]:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ChartDataError(f"column {label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return [unwrap_scalar(v) for v in tensor.numpy().tolist()]

    if pd is not None and isinstance(value, pd.Series):
        return [_clean_cell(v) for v in value.tolist()]

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError(f"column {label} must be 1-D")
        if value.dtype.kind == "M":
            # tolist() turns ns datetimes into ints; keep datetime64 scalars.
            return [None if np.isnat(v) else v for v in value]
        return [_clean_cell(v) for v in value.tolist()]

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [unwrap_scalar(v) for v in value]

    raise ChartDataError(f"unsupported column {label} type: {type(value)!r}")


def _clean_cell(value: Any) -> Any:
    value = unwrap_scalar(value)
    if pd is not None:
        if value is pd.NaT:
            return None
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value
