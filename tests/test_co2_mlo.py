"""Tests for the Mauna Loa CO2 reader (no network access)."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from ingestr.fetch.co2_mlo import (
    annual_co2,
    co2_mlo_adapter,
    download_csv,
    fetch_co2_mlo,
    parse_co2_mm_mlo,
)
from ingestr.ingest.adapters import AdapterRequest

SAMPLE_CSV = """\
# --------------------------------------------------------------------
# USE OF NOAA GML DATA
# Monthly mean CO2 mole fraction, Mauna Loa Observatory
# --------------------------------------------------------------------
year,month,decimal date,average,deseasonalized,ndays,sdev,unc
2000,1,2000.0417,369.25,369.07,26,0.54,0.20
2000,2,2000.1250,369.50,369.00,19,0.40,0.18
2000,3,2000.2083,-99.99,369.10,-1,-9.99,-0.99
2001,1,2001.0417,370.75,370.60,28,0.31,0.11
2001,2,2001.1250,371.25,370.80,24,0.43,0.17
"""


@pytest.fixture
def cached_csv(tmp_path: Path) -> Path:
    path = tmp_path / "co2_mm_mlo.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


class TestParse:
    """Tests for parse_co2_mm_mlo."""

    def test_columns_and_rows(self) -> None:
        df = parse_co2_mm_mlo(SAMPLE_CSV)
        assert list(df.columns) == ["year", "month", "co2"]
        assert len(df) == 5

    def test_fill_values_are_nan(self) -> None:
        df = parse_co2_mm_mlo(SAMPLE_CSV)
        assert np.isnan(df.loc[2, "co2"])
        assert df["co2"].notna().sum() == 4


class TestAnnualMeans:
    """Tests for annual_co2."""

    def test_means_skip_missing(self) -> None:
        df = annual_co2(parse_co2_mm_mlo(SAMPLE_CSV))

        assert df["year"].tolist() == [2000, 2001]
        assert df["co2_avg"].tolist() == pytest.approx([369.375, 371.0])


class TestFetch:
    """Tests for fetch_co2_mlo with a pre-populated cache."""

    def test_reads_cache_without_download(self, cached_csv: Path, monkeypatch) -> None:
        def _no_network(*args, **kwargs):
            raise AssertionError("network access attempted")

        monkeypatch.setattr("ingestr.fetch.co2_mlo.requests.get", _no_network)

        df = fetch_co2_mlo(cache_path=cached_csv)
        assert df["co2_avg"].tolist() == pytest.approx([369.375, 371.0])

    def test_adapter_uses_data_dir(self, cached_csv: Path, make_siteinfo, monkeypatch) -> None:
        monkeypatch.setattr(
            "ingestr.fetch.co2_mlo.requests.get",
            lambda *args, **kwargs: pytest.fail("network access attempted"),
        )

        df = co2_mlo_adapter(make_siteinfo(), AdapterRequest(data_dir=cached_csv.parent))
        assert list(df.columns) == ["year", "co2_avg"]


class _FakeResponse:
    def __init__(self, chunks: list[bytes], fail_after: int | None = None) -> None:
        self._chunks = chunks
        self._fail_after = fail_after

    def raise_for_status(self) -> None:
        pass

    def iter_content(self, chunk_size: int = 1):
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i >= self._fail_after:
                raise ConnectionError("connection reset")
            yield chunk


class TestDownloadCsv:
    """Tests for download_csv cache replacement."""

    def test_force_replaces_existing_cache(self, cached_csv: Path, monkeypatch) -> None:
        """A forced download overwrites the cache and leaves no temp file."""
        new_text = SAMPLE_CSV.replace("370.75", "380.75")
        monkeypatch.setattr(
            "ingestr.fetch.co2_mlo.requests.get",
            lambda *args, **kwargs: _FakeResponse([new_text.encode("utf-8")]),
        )

        df = fetch_co2_mlo(cache_path=cached_csv, force=True)

        assert df["co2_avg"].tolist() == pytest.approx([369.375, 376.0])
        assert list(cached_csv.parent.iterdir()) == [cached_csv]

    def test_failed_download_keeps_cache(self, cached_csv: Path, monkeypatch) -> None:
        """An interrupted download leaves the old cache and no temp file."""
        monkeypatch.setattr(
            "ingestr.fetch.co2_mlo.requests.get",
            lambda *args, **kwargs: _FakeResponse([b"year,month\n", b"2000,1\n"], fail_after=1),
        )

        with pytest.raises(ConnectionError, match="connection reset"):
            download_csv("https://example.invalid/co2.csv", cached_csv, force=True)

        assert cached_csv.read_text(encoding="utf-8") == SAMPLE_CSV
        assert list(cached_csv.parent.iterdir()) == [cached_csv]
