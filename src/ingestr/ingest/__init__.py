"""Source dispatch: site normalization, adapters, execution and ingest()."""

from ingestr.ingest.adapters import (
    BUILTIN_ADAPTERS,
    Adapter,
    AdapterRegistry,
    AdapterRequest,
)
from ingestr.ingest.dispatch import ingest, ingest_bysite, ingest_globalfields
from ingestr.ingest.execution import (
    Execution,
    Sequential,
    WorkerPool,
    execution_from_flags,
)
from ingestr.ingest.siteinfo import normalize_siteinfo
from ingestr.ingest.sources import (
    BiasCorrectionMode,
    FluxnetSettings,
    GeeSettings,
    GlobalFieldSettings,
    GsdeSettings,
    HwsdSettings,
    ModisSettings,
    NoSettings,
    SoilgridsSettings,
    Source,
    SourceKind,
    WiseSettings,
    WorldclimSettings,
    WwfSettings,
    resolve_settings,
    settings_from_dict,
    settings_to_dict,
)

__all__ = [
    "ingest",
    "ingest_bysite",
    "ingest_globalfields",
    "normalize_siteinfo",
    # Adapters
    "Adapter",
    "AdapterRegistry",
    "AdapterRequest",
    "BUILTIN_ADAPTERS",
    # Execution
    "Execution",
    "Sequential",
    "WorkerPool",
    "execution_from_flags",
    # Sources and settings
    "Source",
    "SourceKind",
    "BiasCorrectionMode",
    "NoSettings",
    "FluxnetSettings",
    "GlobalFieldSettings",
    "GeeSettings",
    "ModisSettings",
    "HwsdSettings",
    "WwfSettings",
    "SoilgridsSettings",
    "WiseSettings",
    "GsdeSettings",
    "WorldclimSettings",
    "resolve_settings",
    "settings_from_dict",
    "settings_to_dict",
]
