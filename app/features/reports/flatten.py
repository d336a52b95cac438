"""Flatten nested metrics into metric/value report rows.

Rules:
- Pydantic models are dumped to mappings first.
- Nested mappings are descended, keys joined with ``_``.
- Lists and tuples become a compact JSON string.
- Dates and datetimes become ISO-8601, ``None`` becomes ``""``.
- Booleans become ``true``/``false``, other scalars use ``str()``.

Rows keep insertion order, depth first.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_json

from app.features.reports.schemas import ReportRow


def format_value(value: Any) -> str:
    """Stringify a leaf value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list | tuple):
        return to_json(value).decode()
    return str(value)


def _flatten(data: Mapping[str, Any], prefix: str) -> list[ReportRow]:
    rows: list[ReportRow] = []
    for key, value in data.items():
        path = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, BaseModel):
            value = value.model_dump()
        if isinstance(value, Mapping):
            rows.extend(_flatten(value, path))
        else:
            rows.append(ReportRow(metric=path, value=format_value(value)))
    return rows


def flatten_metrics(obj: BaseModel | Mapping[str, Any], prefix: str = "") -> list[ReportRow]:
    """Flatten a metrics object into report rows.

    Example:
        >>> flatten_metrics({"calls": {"total": 3}, "period": "weekly"})
        [ReportRow(metric='calls_total', value='3'), ReportRow(metric='period', value='weekly')]
    """
    data = obj.model_dump() if isinstance(obj, BaseModel) else obj
    return _flatten(data, prefix)
