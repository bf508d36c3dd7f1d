"""Validation helpers for driver tables.

All helpers raise ValueError with a message that names:
- the table (if provided)
- the offending columns
- how many rows fail
- up to five failing row indices
"""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd


def _format_error(
    dataset: str | None,
    rule: str,
    detail: str,
    failing_indices: list[Any] | None = None,
    count: int | None = None,
) -> str:
    parts = []
    if dataset:
        parts.append(f"[{dataset}]")
    parts.append(rule)
    parts.append(f": {detail}")
    if count is not None:
        parts.append(f" ({count} rows)")
    if failing_indices:
        parts.append(f" | sample indices: {failing_indices[:5]}")
    return "".join(parts)


def require_columns(
    df_columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if any of `required` is absent from `df_columns`."""
    missing = set(required) - set(df_columns)
    if missing:
        raise ValueError(
            _format_error(dataset, "Missing columns", f"{sorted(missing)}")
        )


def require_no_nulls(
    df: pd.DataFrame,
    cols: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if any of `cols` holds a null value.

    Columns absent from `df` are ignored; pair with require_columns.
    """
    for col in cols:
        if col not in df.columns:
            continue

        null_mask = df[col].isna()
        null_count = int(null_mask.sum())
        if null_count > 0:
            raise ValueError(
                _format_error(
                    dataset,
                    "Null values",
                    f"column '{col}' has nulls",
                    df.index[null_mask].tolist(),
                    null_count,
                )
            )


def require_unique(
    df: pd.DataFrame,
    key_cols: list[str],
    dataset: str | None = None,
) -> None:
    """Raise ValueError if `key_cols` do not identify rows uniquely.

    Args:
        df: Table to check
        key_cols: Columns forming the primary key (e.g. ["sitename", "date"])
        dataset: Optional table name for error messages

    Raises:
        ValueError: If any key combination occurs more than once
    """
    if df.empty or any(col not in df.columns for col in key_cols):
        return

    dup_mask = df.duplicated(subset=key_cols, keep=False)
    dup_count = int(dup_mask.sum())
    if dup_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Duplicate keys",
                f"columns {key_cols} have duplicates",
                df.index[dup_mask].tolist(),
                dup_count,
            )
        )


def require_range(
    df: pd.DataFrame,
    col: str,
    lo: float,
    hi: float,
    allow_null: bool = False,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if values of `col` fall outside [lo, hi]."""
    if col not in df.columns or df.empty:
        return

    series = df[col]
    if allow_null:
        series = series.dropna()

    out_of_range = (series < lo) | (series > hi)
    bad_count = int(out_of_range.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Out of range",
                f"column '{col}' must be in [{lo}, {hi}]",
                series.index[out_of_range].tolist(),
                bad_count,
            )
        )


def require_date_no_time(
    df: pd.DataFrame,
    col: str,
    dataset: str | None = None,
) -> None:
    """Raise ValueError if a datetime column carries a time of day.

    Daily rows are keyed by calendar date, stored as midnight timestamps.
    """
    if col not in df.columns or df.empty:
        return

    series = df[col].dropna()
    if not pd.api.types.is_datetime64_any_dtype(series):
        return

    has_time = series != series.dt.normalize()
    bad_count = int(has_time.sum())
    if bad_count > 0:
        raise ValueError(
            _format_error(
                dataset,
                "Time component found",
                f"column '{col}' should be midnight-only dates",
                series.index[has_time].tolist(),
                bad_count,
            )
        )
