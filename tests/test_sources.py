"""Tests for the source vocabulary, settings and execution strategies."""

from __future__ import annotations

from pathlib import Path
import threading

import pytest

from ingestr.errors import ExecutionConfigError, SettingsError, UnknownSourceError
from ingestr.ingest.execution import Sequential, WorkerPool, execution_from_flags
from ingestr.ingest.sources import (
    BiasCorrectionMode,
    FluxnetSettings,
    GlobalFieldSettings,
    GsdeSettings,
    NoSettings,
    Source,
    SourceKind,
    WiseSettings,
    resolve_settings,
    settings_from_dict,
    settings_to_dict,
)


class TestSourceParse:
    """Tests for source identification."""

    @pytest.mark.parametrize("value", ["watch_wfdei", "WATCH_WFDEI", " watch_wfdei "])
    def test_case_and_whitespace(self, value: str) -> None:
        assert Source.parse(value) is Source.WATCH_WFDEI

    def test_enum_passthrough(self) -> None:
        assert Source.parse(Source.GSDE) is Source.GSDE

    def test_unknown_source(self) -> None:
        with pytest.raises(UnknownSourceError, match="could not be identified, got 'era5'"):
            Source.parse("era5")

    def test_unknown_source_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Source.parse("")

    def test_every_source_has_kind(self) -> None:
        for source in Source:
            assert isinstance(source.kind, SourceKind)

    def test_static_sources(self) -> None:
        static = {s.value for s in Source if s.kind is SourceKind.STATIC}
        assert static == {"etopo1", "hwsd", "wwf", "soilgrids", "wise", "gsde", "worldclim"}
        assert not any(Source(v).needs_dates for v in static)

    def test_time_series_sources_need_dates(self) -> None:
        for value in ["fluxnet", "cru", "watch_wfdei", "ndep", "gee", "modis", "co2_mlo", "fapar_unity"]:
            assert Source(value).needs_dates


class TestSettingsFromDict:
    """Tests for building settings from plain mappings."""

    def test_defaults(self) -> None:
        settings = settings_from_dict("fluxnet", {})
        assert settings == FluxnetSettings()

    def test_none_is_empty(self) -> None:
        assert settings_from_dict("co2_mlo", None) == NoSettings()

    def test_paths_converted(self) -> None:
        settings = settings_from_dict(
            "watch_wfdei", {"correct_bias": "worldclim", "dir_bias": "/data/worldclim"}
        )
        assert settings.correct_bias is BiasCorrectionMode.WORLDCLIM
        assert settings.dir_bias == Path("/data/worldclim")

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(SettingsError, match="Unknown settings for source 'fluxnet'"):
            settings_from_dict("fluxnet", {"threshold_gpp": 0.5, "getvars": ["gpp"]})

    def test_key_of_another_source_rejected(self) -> None:
        with pytest.raises(SettingsError, match="dir_bias"):
            settings_from_dict("gsde", {"varnam": ["T_SAND"], "dir_bias": "/x"})

    def test_missing_required_key(self) -> None:
        with pytest.raises(SettingsError, match="Invalid settings for source 'hwsd'"):
            settings_from_dict("hwsd", {})

    def test_round_trip(self) -> None:
        d = {"correct_bias": "worldclim", "dir_bias": "/data/worldclim"}
        settings = settings_from_dict("cru", d)
        assert settings_to_dict(settings) == d


class TestSettingsValidation:
    """Tests for __post_init__ checks."""

    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(SettingsError, match="threshold_gpp must be in"):
            FluxnetSettings(threshold_gpp=1.5)

    def test_unknown_bias_mode(self) -> None:
        with pytest.raises(SettingsError, match="correct_bias must be one of"):
            GlobalFieldSettings(correct_bias="cru_ts", dir_bias=Path("/x"))

    def test_bias_needs_directory(self) -> None:
        with pytest.raises(SettingsError, match="dir_bias is required"):
            GlobalFieldSettings(correct_bias="worldclim")

    def test_errors_collected(self) -> None:
        with pytest.raises(SettingsError) as exc_info:
            GsdeSettings(varnam=[], layer=[0, 9])
        message = str(exc_info.value)
        assert "varnam must not be empty" in message
        assert "layer must be in 1..8" in message

    def test_scalar_varnam_wrapped(self) -> None:
        assert WiseSettings(varnam="CNrt").varnam == ["CNrt"]

    def test_gsde_default_layers(self) -> None:
        assert GsdeSettings(varnam=["T_SAND"]).layer == [1, 2, 3, 4]


class TestResolveSettings:
    """Tests for matching settings objects to sources."""

    def test_object_passthrough(self) -> None:
        settings = FluxnetSettings(getswc=False)
        assert resolve_settings(Source.FLUXNET, settings) is settings

    def test_mapping_converted(self) -> None:
        settings = resolve_settings(Source.WISE, {"varnam": ["CNrt"]})
        assert isinstance(settings, WiseSettings)

    def test_wrong_class_rejected(self) -> None:
        with pytest.raises(SettingsError, match="expects GsdeSettings, got WiseSettings"):
            resolve_settings(Source.GSDE, WiseSettings(varnam=["CNrt"]))


class TestExecution:
    """Tests for execution strategies."""

    def test_sequential_order(self) -> None:
        assert Sequential().map(lambda x: x * 2, [3, 1, 2]) == [6, 2, 4]

    def test_pool_preserves_order(self) -> None:
        assert WorkerPool(n_workers=3).map(lambda x: x * 2, list(range(20))) == [
            2 * x for x in range(20)
        ]

    def test_pool_uses_threads(self) -> None:
        seen = WorkerPool(n_workers=2).map(lambda _: threading.current_thread().name, [0, 1, 2])
        assert all(name != "MainThread" for name in seen)

    def test_pool_propagates_error(self) -> None:
        def _fail(x: int) -> int:
            if x == 2:
                raise RuntimeError("site 2 failed")
            return x

        with pytest.raises(RuntimeError, match="site 2 failed"):
            WorkerPool(n_workers=2).map(_fail, [0, 1, 2, 3])

    @pytest.mark.parametrize("n_workers", [0, -1])
    def test_pool_size_must_be_positive(self, n_workers: int) -> None:
        with pytest.raises(ExecutionConfigError, match="n_workers must be positive"):
            WorkerPool(n_workers=n_workers)

    def test_pool_size_required(self) -> None:
        with pytest.raises(ExecutionConfigError):
            WorkerPool(n_workers=None)

    def test_flags_sequential(self) -> None:
        assert execution_from_flags() == Sequential()

    def test_flags_parallel(self) -> None:
        assert execution_from_flags(parallel=True, ncores=4) == WorkerPool(n_workers=4)

    def test_flags_parallel_without_cores(self) -> None:
        with pytest.raises(ExecutionConfigError, match="provide number of cores"):
            execution_from_flags(parallel=True)
