"""Source vocabulary and per-source settings.

Every recognized data source is a member of the closed Source enum. Its
`kind` decides how the dispatcher retrieves it:

    PER_SITE       one adapter call per site row (station, remote sensing)
    GLOBAL_FIELDS  one adapter call for the whole site table (gridded climate)
    COMPUTED       built from the date scaffold, no site data needed
    STATIC         time-invariant site attributes (elevation, soil, ecoregion)

Each source consults its own settings class, listing only the options that
source reads. Settings given as a plain mapping are checked by
settings_from_dict, which rejects keys the source does not know about.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Union

from ingestr.errors import SettingsError, UnknownSourceError


class SourceKind(Enum):
    PER_SITE = "per_site"
    GLOBAL_FIELDS = "global_fields"
    COMPUTED = "computed"
    STATIC = "static"


class Source(Enum):
    """Recognized data sources."""

    FLUXNET = "fluxnet"
    CRU = "cru"
    WATCH_WFDEI = "watch_wfdei"
    NDEP = "ndep"
    GEE = "gee"
    MODIS = "modis"
    CO2_MLO = "co2_mlo"
    FAPAR_UNITY = "fapar_unity"
    ETOPO1 = "etopo1"
    HWSD = "hwsd"
    WWF = "wwf"
    SOILGRIDS = "soilgrids"
    WISE = "wise"
    GSDE = "gsde"
    WORLDCLIM = "worldclim"

    @classmethod
    def parse(cls, value: str | Source) -> Source:
        """Resolve a source identifier, raising UnknownSourceError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            recognized = ", ".join(f"'{s.value}'" for s in cls)
            raise UnknownSourceError(
                f"ingest(): Argument 'source' could not be identified, got '{value}'. "
                f"Use one of {recognized}."
            ) from None

    @property
    def kind(self) -> SourceKind:
        return _SOURCE_KINDS[self]

    @property
    def needs_dates(self) -> bool:
        """Whether the source produces a time series (and needs site dates)."""
        return self.kind is not SourceKind.STATIC


_SOURCE_KINDS = {
    Source.FLUXNET: SourceKind.PER_SITE,
    Source.GEE: SourceKind.PER_SITE,
    Source.MODIS: SourceKind.PER_SITE,
    Source.CRU: SourceKind.GLOBAL_FIELDS,
    Source.WATCH_WFDEI: SourceKind.GLOBAL_FIELDS,
    Source.NDEP: SourceKind.GLOBAL_FIELDS,
    Source.CO2_MLO: SourceKind.COMPUTED,
    Source.FAPAR_UNITY: SourceKind.COMPUTED,
    Source.ETOPO1: SourceKind.STATIC,
    Source.HWSD: SourceKind.STATIC,
    Source.WWF: SourceKind.STATIC,
    Source.SOILGRIDS: SourceKind.STATIC,
    Source.WISE: SourceKind.STATIC,
    Source.GSDE: SourceKind.STATIC,
    Source.WORLDCLIM: SourceKind.STATIC,
}


class BiasCorrectionMode(Enum):
    """Supported reference climatologies for bias correction."""

    WORLDCLIM = "worldclim"


def _raise_if_errors(name: str, errors: list[str]) -> None:
    if errors:
        raise SettingsError(f"{name} validation failed:\n  - " + "\n  - ".join(errors))


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [value]
    return list(value)


@dataclass(frozen=True)
class NoSettings:
    """For sources that read no options (co2_mlo, fapar_unity, etopo1)."""


@dataclass(frozen=True)
class FluxnetSettings:
    """Options for reading FLUXNET site files.

    Attributes:
        dir_hh: Directory with half-hourly files, if daily data is derived
        getswc: Also read soil water content
        threshold_gpp: Minimum fraction of good-quality half-hours for GPP
        remove_neg: Set negative GPP to missing
    """

    dir_hh: Path | None = None
    getswc: bool = True
    threshold_gpp: float = 0.0
    remove_neg: bool = False

    def __post_init__(self) -> None:
        errors = []
        if not 0.0 <= self.threshold_gpp <= 1.0:
            errors.append(f"threshold_gpp must be in [0, 1], got {self.threshold_gpp}")
        _raise_if_errors("FluxnetSettings", errors)


@dataclass(frozen=True)
class GlobalFieldSettings:
    """Options for gridded climate fields (cru, watch_wfdei, ndep).

    Attributes:
        correct_bias: Reference climatology used for bias correction, or
            None for no correction
        dir_bias: Directory holding the reference climatology
    """

    correct_bias: BiasCorrectionMode | None = None
    dir_bias: Path | None = None

    def __post_init__(self) -> None:
        errors = []
        if self.correct_bias is not None and not isinstance(
            self.correct_bias, BiasCorrectionMode
        ):
            try:
                object.__setattr__(
                    self, "correct_bias", BiasCorrectionMode(str(self.correct_bias))
                )
            except ValueError:
                supported = [m.value for m in BiasCorrectionMode]
                errors.append(
                    f"correct_bias must be one of {supported}, got '{self.correct_bias}'"
                )
        if self.correct_bias is not None and self.dir_bias is None:
            errors.append("dir_bias is required when correct_bias is set")
        _raise_if_errors("GlobalFieldSettings", errors)


@dataclass(frozen=True)
class GeeSettings:
    """Options for Google Earth Engine point extraction."""

    prod: str
    band_var: str
    band_qc: str | None = None
    prod_suffix: str | None = None
    varnam: str | None = None
    productnam: str | None = None
    scale_factor: float = 1.0
    period: int = 8
    python_path: Path | None = None
    gee_path: Path | None = None
    data_path: Path | None = None
    method_interpol: str = "linear"
    keep: bool = False
    overwrite_raw: bool = False
    overwrite_interpol: bool = False


@dataclass(frozen=True)
class ModisSettings:
    """Options for MODIS subset retrieval."""

    prod: str
    band_var: str
    band_qc: str | None = None
    varnam: str | None = None
    network: str | None = None
    data_path: Path | None = None
    method_interpol: str = "loess"
    keep: bool = False
    overwrite_raw: bool = False
    overwrite_interpol: bool = False


@dataclass(frozen=True)
class HwsdSettings:
    """Options for the Harmonized World Soil Database.

    Attributes:
        fil: Path to the HWSD raster (.bil)
    """

    fil: Path


@dataclass(frozen=True)
class WwfSettings:
    """Options for WWF ecoregions; `layer` selects the attribute layer."""

    layer: str | None = None


@dataclass(frozen=True)
class SoilgridsSettings:
    """Options for SoilGrids point queries."""

    varnam: list[str] = field(default_factory=list)
    layer: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "varnam", _as_list(self.varnam))
        object.__setattr__(self, "layer", _as_list(self.layer))
        errors = []
        if not self.varnam:
            errors.append("varnam must not be empty")
        _raise_if_errors("SoilgridsSettings", errors)


@dataclass(frozen=True)
class WiseSettings:
    """Options for WISE30sec soil properties.

    Attributes:
        varnam: Soil property names, one retrieval each
        layer: Soil layer(s) to read
    """

    varnam: list[str] = field(default_factory=list)
    layer: list[int] = field(default_factory=lambda: [1])

    def __post_init__(self) -> None:
        object.__setattr__(self, "varnam", _as_list(self.varnam))
        object.__setattr__(self, "layer", _as_list(self.layer))
        errors = []
        if not self.varnam:
            errors.append("varnam must not be empty")
        _raise_if_errors("WiseSettings", errors)


@dataclass(frozen=True)
class GsdeSettings:
    """Options for GSDE soil properties.

    Attributes:
        varnam: Soil property names, one retrieval each
        layer: Layers (1-8) averaged with depth weights
    """

    varnam: list[str] = field(default_factory=list)
    layer: list[int] = field(default_factory=lambda: [1, 2, 3, 4])

    def __post_init__(self) -> None:
        object.__setattr__(self, "varnam", _as_list(self.varnam))
        object.__setattr__(self, "layer", [int(x) for x in _as_list(self.layer)])
        errors = []
        if not self.varnam:
            errors.append("varnam must not be empty")
        bad_layers = [x for x in self.layer if not 1 <= x <= 8]
        if not self.layer:
            errors.append("layer must not be empty")
        elif bad_layers:
            errors.append(f"layer must be in 1..8, got {bad_layers}")
        _raise_if_errors("GsdeSettings", errors)


@dataclass(frozen=True)
class WorldclimSettings:
    """Options for WorldClim monthly climatologies.

    Attributes:
        varnam: Layer names (e.g. ["tavg", "prec"])
    """

    varnam: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "varnam", _as_list(self.varnam))


SourceSettings = Union[
    NoSettings,
    FluxnetSettings,
    GlobalFieldSettings,
    GeeSettings,
    ModisSettings,
    HwsdSettings,
    WwfSettings,
    SoilgridsSettings,
    WiseSettings,
    GsdeSettings,
    WorldclimSettings,
]

SETTINGS_CLASSES: dict[Source, type] = {
    Source.FLUXNET: FluxnetSettings,
    Source.CRU: GlobalFieldSettings,
    Source.WATCH_WFDEI: GlobalFieldSettings,
    Source.NDEP: GlobalFieldSettings,
    Source.GEE: GeeSettings,
    Source.MODIS: ModisSettings,
    Source.CO2_MLO: NoSettings,
    Source.FAPAR_UNITY: NoSettings,
    Source.ETOPO1: NoSettings,
    Source.HWSD: HwsdSettings,
    Source.WWF: WwfSettings,
    Source.SOILGRIDS: SoilgridsSettings,
    Source.WISE: WiseSettings,
    Source.GSDE: GsdeSettings,
    Source.WORLDCLIM: WorldclimSettings,
}

_PATH_FIELDS = {"dir_hh", "dir_bias", "python_path", "gee_path", "data_path", "fil"}


def settings_from_dict(source: str | Source, d: Mapping[str, Any] | None) -> SourceSettings:
    """Build the settings object for `source` from a plain mapping.

    Raises:
        SettingsError: If the mapping has keys the source does not read,
            lacks required keys, or holds invalid values
    """
    source = Source.parse(source)
    cls = SETTINGS_CLASSES[source]
    d = dict(d or {})

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise SettingsError(
            f"Unknown settings for source '{source.value}': {unknown}. "
            f"Recognized: {sorted(known)}"
        )

    for key in _PATH_FIELDS & set(d):
        if d[key] is not None:
            d[key] = Path(d[key])

    try:
        return cls(**d)
    except TypeError as exc:
        raise SettingsError(f"Invalid settings for source '{source.value}': {exc}") from exc


def settings_to_dict(settings: SourceSettings) -> dict[str, Any]:
    """Convert settings to a plain mapping (paths and enums as strings)."""
    d = asdict(settings)
    for key, value in d.items():
        if isinstance(value, Path):
            d[key] = str(value)
        elif isinstance(value, Enum):
            d[key] = value.value
    return d


def resolve_settings(
    source: Source,
    settings: SourceSettings | Mapping[str, Any] | None,
) -> SourceSettings:
    """Return settings of the class `source` reads, converting mappings.

    Raises:
        SettingsError: If a settings object of another source's class is given
    """
    if settings is None or isinstance(settings, Mapping):
        return settings_from_dict(source, settings)

    expected = SETTINGS_CLASSES[source]
    if not isinstance(settings, expected):
        raise SettingsError(
            f"Source '{source.value}' expects {expected.__name__}, "
            f"got {type(settings).__name__}"
        )
    return settings
