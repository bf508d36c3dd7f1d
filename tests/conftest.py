"""Pytest configuration and fixtures."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def make_siteinfo():
    """Factory fixture for creating site tables."""

    def _make(
        sitenames: list[str] | None = None,
        elv: list[float] | None = None,
        year_start: int = 2001,
        year_end: int = 2001,
    ) -> pd.DataFrame:
        if sitenames is None:
            sitenames = ["CH-Lae"]
        if elv is None:
            elv = [689.0] * len(sitenames)

        n = len(sitenames)
        return pd.DataFrame(
            {
                "sitename": sitenames,
                "lon": [8.365 + i for i in range(n)],
                "lat": [47.478 - i for i in range(n)],
                "elv": elv,
                "year_start": year_start,
                "year_end": year_end,
            }
        )

    return _make


@pytest.fixture
def make_daily_drivers():
    """Factory fixture for creating daily driver tables.

    Values vary by day of month so monthly means are not trivially equal
    to every daily value.
    """

    def _make(
        sitename: str = "CH-Lae",
        start: str = "2001-01-01",
        end: str = "2001-12-31",
        temp_base: float = 10.0,
        prec_base: float = 2.0e-5,
        patm_base: float = 95000.0,
    ) -> pd.DataFrame:
        dates = pd.date_range(start=start, end=end, freq="D")
        wiggle = (dates.day.to_numpy() % 5) - 2.0  # mean zero over 5-day cycles

        prec = prec_base * (1.0 + 0.25 * wiggle)
        return pd.DataFrame(
            {
                "sitename": sitename,
                "date": dates,
                "temp": temp_base + wiggle,
                "prec": prec,
                "rain": 0.75 * prec,
                "snow": 0.25 * prec,
                "patm": patm_base + 100.0 * wiggle,
                "qair": 0.006 + 0.0005 * wiggle,
                "wind": 3.0 + 0.5 * wiggle,
                "ppfd": 4.0e-4 * (1.0 + 0.1 * wiggle),
            }
        )

    return _make


@pytest.fixture
def make_worldclim():
    """Factory fixture for WorldClim-style reference tables.

    Each layer gets the same value in every month unless a list of twelve
    monthly values is given.
    """

    def _make(
        sitenames: list[str] | None = None,
        **layers: float | list[float],
    ) -> pd.DataFrame:
        if sitenames is None:
            sitenames = ["CH-Lae"]

        data: dict[str, object] = {"sitename": sitenames}
        for layer, value in layers.items():
            monthly = value if isinstance(value, list) else [value] * 12
            for month, v in enumerate(monthly, start=1):
                data[f"{layer}_{month:02d}"] = v
        return pd.DataFrame(data)

    return _make


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)
