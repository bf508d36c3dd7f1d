"""Adapter contract between the dispatcher and per-source readers.

An adapter turns one source's raw data into the standard table format:

    adapter(sites, request) -> DataFrame

`sites` is a one-row site table for per-site sources and the whole site
table for gridded and static sources. The returned table has a sitename
column, a date column for time series sources, and variables named by
the standard vocabulary (see ingestr.schemas.daily_drivers).

Static sources with several properties (wise, gsde) are called once per
property, with `getvars` holding just that property.

Readers for remote services and raster files live outside this package
and are registered by passing a mapping Source -> adapter to ingest().
Adapter errors are not caught.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Protocol, runtime_checkable

import pandas as pd

from ingestr.errors import AdapterNotFoundError
from ingestr.fetch.co2_mlo import co2_mlo_adapter
from ingestr.ingest.sources import NoSettings, Source, SourceSettings


@dataclass(frozen=True)
class AdapterRequest:
    """Everything an adapter may consult besides the site table.

    Attributes:
        getvars: Standard variable name -> name in the source
        data_dir: Directory holding the source data
        settings: Source-specific settings
        timescale: Time scale(s) to read, e.g. "d"
        year_start: First year requested (None for static sources)
        year_end: Last year requested (None for static sources)
        layer: Layer or variable selection for raster sources
    """

    getvars: Mapping[str, str] = field(default_factory=dict)
    data_dir: Path | None = None
    settings: SourceSettings = field(default_factory=NoSettings)
    timescale: str | list[str] | None = "d"
    year_start: int | None = None
    year_end: int | None = None
    layer: Any = None

    def with_years(self, year_start: int, year_end: int) -> AdapterRequest:
        return replace(self, year_start=int(year_start), year_end=int(year_end))

    def with_layer(self, layer: Any) -> AdapterRequest:
        return replace(self, layer=layer)


@runtime_checkable
class Adapter(Protocol):
    """Callable reading one source for a set of sites."""

    def __call__(self, sites: pd.DataFrame, request: AdapterRequest) -> pd.DataFrame:
        ...


# Adapters that ship with the package
BUILTIN_ADAPTERS: dict[Source, Adapter] = {
    Source.CO2_MLO: co2_mlo_adapter,
}


class AdapterRegistry:
    """Lookup of adapters by source, built-ins overridable by the caller."""

    def __init__(self, adapters: Mapping[Source | str, Adapter] | None = None) -> None:
        self._adapters: dict[Source, Adapter] = dict(BUILTIN_ADAPTERS)
        for source, adapter in (adapters or {}).items():
            self._adapters[Source.parse(source)] = adapter

    def __contains__(self, source: Source) -> bool:
        return source in self._adapters

    def get(self, source: Source) -> Adapter:
        """Return the adapter for `source`.

        Raises:
            AdapterNotFoundError: If none is registered
        """
        if source not in self._adapters:
            registered = sorted(s.value for s in self._adapters)
            raise AdapterNotFoundError(
                f"No adapter registered for source '{source.value}'. "
                f"Registered: {registered}"
            )
        return self._adapters[source]
