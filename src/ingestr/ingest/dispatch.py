"""Source dispatch: the ingest() entry point.

Pipeline flow:
    normalize siteinfo -> adapter(s) for the source
        -> [patm correction] -> [climatology bias correction]
        -> group rows by site

How a source is retrieved depends on its kind (see ingestr.ingest.sources):
per-site sources call their adapter once per site row and concatenate,
gridded sources call it once for all sites, computed sources are built
from the date scaffold, and static sources return one row of attributes
per site.
"""

from __future__ import annotations

from functools import reduce
from pathlib import Path
from typing import Any, Callable, Mapping

import pandas as pd

from ingestr.aggregate.collect import bind_rows, collect_sites
from ingestr.aggregate.soil_layers import aggregate_layers
from ingestr.bias.pressure import correct_patm_bias
from ingestr.bias.worldclim import correct_bias_worldclim, worldclim_layers
from ingestr.errors import UnknownSourceError
from ingestr.expand.dates import expand_co2_bysite, expand_constant_bysite
from ingestr.ingest.adapters import Adapter, AdapterRegistry, AdapterRequest
from ingestr.ingest.execution import Execution, Sequential
from ingestr.ingest.siteinfo import normalize_siteinfo
from ingestr.ingest.sources import (
    BiasCorrectionMode,
    Source,
    SourceSettings,
    WorldclimSettings,
    resolve_settings,
)
from ingestr.schemas.site_info import validate_siteinfo
from ingestr.schemas.validate import require_columns

GLOBAL_FIELD_SOURCES = (Source.CRU, Source.WATCH_WFDEI, Source.NDEP)


def _checked(df: pd.DataFrame, source: Source) -> pd.DataFrame:
    """Check adapter output has a sitename and a datetime date if any."""
    require_columns(df.columns, ["sitename"], dataset=f"{source.value} adapter output")
    if "date" in df.columns and not pd.api.types.is_datetime64_any_dtype(df["date"]):
        df = df.copy()
        df["date"] = pd.to_datetime(df["date"])
    return df


def _site_rows(siteinfo: pd.DataFrame) -> list[pd.DataFrame]:
    return [siteinfo.iloc[[i]] for i in range(len(siteinfo))]


def ingest_bysite(
    source: Source,
    siteinfo: pd.DataFrame,
    adapter: Adapter,
    request_for: Callable[[pd.Series], AdapterRequest],
    execution: Execution,
) -> pd.DataFrame:
    """Call `adapter` once per site row and concatenate the results.

    Args:
        source: Source being read (for error messages)
        siteinfo: Site table
        adapter: Per-site adapter
        request_for: Builds the request for one site row
        execution: Sequential() or WorkerPool(n)

    Returns:
        Flat table with rows of all sites, in site order
    """

    def _call(site: pd.DataFrame) -> pd.DataFrame:
        return _checked(adapter(site, request_for(site.iloc[0])), source)

    return bind_rows(execution.map(_call, _site_rows(siteinfo)))


def ingest_globalfields(
    source: Source,
    siteinfo: pd.DataFrame,
    request: AdapterRequest,
    registry: AdapterRegistry,
    verbose: bool = False,
) -> pd.DataFrame:
    """Read a gridded source for all sites at once and correct biases.

    Pressure is rescaled to the elevation-implied mean whenever patm is
    requested. If the settings ask for it, the requested variables are then
    corrected against the WorldClim monthly climatology.
    """
    years = request.with_years(siteinfo["year_start"].min(), siteinfo["year_end"].max())
    ddf = _checked(registry.get(source)(siteinfo, years), source)

    if "patm" in request.getvars:
        if verbose:
            print("[ingest] correcting patm bias against elevation")
        ddf = correct_patm_bias(ddf, siteinfo, verbose=verbose)

    settings = request.settings
    if getattr(settings, "correct_bias", None) is BiasCorrectionMode.WORLDCLIM:
        layers = worldclim_layers(request.getvars)
        if layers:
            if verbose:
                print(f"[ingest] bias correction with WorldClim layers {layers}")
            fine_request = AdapterRequest(
                data_dir=settings.dir_bias,
                settings=WorldclimSettings(varnam=layers),
                timescale=None,
                layer=layers,
            )
            df_fine = _checked(registry.get(Source.WORLDCLIM)(siteinfo, fine_request), Source.WORLDCLIM)
            ddf = correct_bias_worldclim(
                ddf, df_fine, request.getvars, siteinfo=siteinfo, verbose=verbose
            )

    return ddf


def _ingest_co2(siteinfo: pd.DataFrame, request: AdapterRequest, registry: AdapterRegistry) -> pd.DataFrame:
    df_co2 = registry.get(Source.CO2_MLO)(siteinfo, request)
    require_columns(df_co2.columns, ["year", "co2_avg"], dataset="co2_mlo adapter output")
    df_co2 = df_co2.groupby("year", as_index=False)["co2_avg"].mean()

    return bind_rows(
        expand_co2_bysite(df_co2, row.sitename, row.year_start, row.year_end)
        for row in siteinfo.itertuples(index=False)
    )


def _ingest_fapar_unity(siteinfo: pd.DataFrame) -> pd.DataFrame:
    return bind_rows(
        expand_constant_bysite(row.sitename, row.year_start, row.year_end, fapar=1.0)
        for row in siteinfo.itertuples(index=False)
    )


def _ingest_wise(siteinfo: pd.DataFrame, request: AdapterRequest, registry: AdapterRegistry) -> pd.DataFrame:
    """Read each WISE property and join it back to sites by coordinates."""
    require_columns(siteinfo.columns, ["sitename", "lon", "lat"], dataset="siteinfo")
    adapter = registry.get(Source.WISE)
    settings = request.settings

    ddf = siteinfo[["sitename", "lon", "lat"]]
    for varnam in settings.varnam:
        df_var = adapter(siteinfo, _single_var(request, varnam, settings.layer))
        require_columns(df_var.columns, ["lon", "lat", varnam], dataset="wise adapter output")
        df_var = df_var[["lon", "lat", varnam]].drop_duplicates(subset=["lon", "lat"])
        ddf = ddf.merge(df_var, on=["lon", "lat"], how="left")

    return ddf.drop(columns=["lon", "lat"])


def _ingest_gsde(siteinfo: pd.DataFrame, request: AdapterRequest, registry: AdapterRegistry) -> pd.DataFrame:
    """Read each GSDE property by layer and aggregate over the chosen layers."""
    adapter = registry.get(Source.GSDE)
    settings = request.settings

    per_var = [
        aggregate_layers(
            _checked(adapter(siteinfo, _single_var(request, varnam, settings.layer)), Source.GSDE),
            varnam,
            settings.layer,
        )
        for varnam in settings.varnam
    ]
    return reduce(
        lambda left, right: left.merge(right, on="sitename", how="left"),
        per_var,
        siteinfo[["sitename"]],
    )


def _single_var(request: AdapterRequest, varnam: str, layer: Any) -> AdapterRequest:
    return AdapterRequest(
        getvars={varnam: varnam},
        data_dir=request.data_dir,
        settings=request.settings,
        timescale=None,
        layer=layer,
    )


def _dispatch(
    source: Source,
    siteinfo: pd.DataFrame,
    request: AdapterRequest,
    registry: AdapterRegistry,
    execution: Execution,
    verbose: bool,
) -> pd.DataFrame:
    if source is Source.FLUXNET or source is Source.MODIS:
        return ingest_bysite(
            source,
            siteinfo,
            registry.get(source),
            lambda site: request.with_years(site["year_start"], site["year_end"]),
            execution,
        )

    if source is Source.GEE:
        # All sites share the union of their year ranges
        shared = request.with_years(siteinfo["year_start"].min(), siteinfo["year_end"].max())
        return ingest_bysite(source, siteinfo, registry.get(source), lambda site: shared, execution)

    if source in GLOBAL_FIELD_SOURCES:
        return ingest_globalfields(source, siteinfo, request, registry, verbose=verbose)

    if source is Source.CO2_MLO:
        return _ingest_co2(siteinfo, request, registry)

    if source is Source.FAPAR_UNITY:
        return _ingest_fapar_unity(siteinfo)

    if source is Source.ETOPO1:
        return _checked(registry.get(source)(siteinfo, request), source)

    if source is Source.WWF:
        return _checked(registry.get(source)(siteinfo, request.with_layer(request.settings.layer)), source)

    if source is Source.WORLDCLIM:
        return _checked(registry.get(source)(siteinfo, request.with_layer(request.settings.varnam)), source)

    if source is Source.HWSD:
        require_columns(siteinfo.columns, ["sitename", "lon", "lat"], dataset="siteinfo")
        return _checked(registry.get(source)(siteinfo[["sitename", "lon", "lat"]], request), source)

    if source is Source.SOILGRIDS:
        return ingest_bysite(
            source,
            siteinfo,
            registry.get(source),
            lambda site: request.with_layer(request.settings.layer),
            execution,
        )

    if source is Source.WISE:
        return _ingest_wise(siteinfo, request, registry)

    if source is Source.GSDE:
        return _ingest_gsde(siteinfo, request, registry)

    raise UnknownSourceError(f"ingest(): no dispatch rule for source '{source.value}'")


def ingest(
    siteinfo: pd.DataFrame,
    source: str | Source,
    getvars: Mapping[str, str] | None = None,
    data_dir: Path | str | None = None,
    settings: SourceSettings | Mapping[str, Any] | None = None,
    timescale: str | list[str] = "d",
    execution: Execution | None = None,
    adapters: AdapterRegistry | Mapping[Source | str, Adapter] | None = None,
    verbose: bool = False,
) -> dict[str, pd.DataFrame]:
    """Ingest one data source for a set of sites.

    Args:
        siteinfo: Site table (sitename, lon, lat, elv and dates or years)
        source: Source identifier, e.g. "watch_wfdei" or Source.WATCH_WFDEI
        getvars: Standard variable name -> variable name in the source
        data_dir: Directory where the source data is located
        settings: Settings object for the source, or a mapping of its options
        timescale: Time scale(s) of the source data to read (default daily)
        execution: Sequential() (default) or WorkerPool(n) for per-site sources;
            execution_from_flags(parallel, ncores) builds one from a parallel
            flag and a core count
        adapters: Source readers, as a registry or a mapping Source -> adapter
        verbose: Print progress

    Returns:
        Dict sitename -> DataFrame. Time series sources give one row per
        date, ordered by date; static sources give one row of attributes.

    Raises:
        UnknownSourceError: If `source` is not recognized
        SiteInfoError: If a time series source lacks site dates and years
        SettingsError: If `settings` do not fit the source
        AdapterNotFoundError: If the source needs an unregistered adapter
        ValueError: If the result has duplicate (sitename, date) rows
    """
    source = Source.parse(source)
    settings = resolve_settings(source, settings)
    execution = execution if execution is not None else Sequential()
    registry = adapters if isinstance(adapters, AdapterRegistry) else AdapterRegistry(adapters)

    if source.needs_dates:
        siteinfo = normalize_siteinfo(siteinfo)
    else:
        validate_siteinfo(siteinfo)
        siteinfo = siteinfo.copy()

    request = AdapterRequest(
        getvars=dict(getvars or {}),
        data_dir=Path(data_dir) if data_dir is not None else None,
        settings=settings,
        timescale=timescale,
    )

    if verbose:
        print(f"[ingest] source={source.value} ({source.kind.value}), {len(siteinfo)} sites")

    ddf = _dispatch(source, siteinfo, request, registry, execution, verbose)
    sites = collect_sites(ddf)

    if verbose:
        print(f"[ingest] collected {len(sites)} sites, {len(ddf)} rows")
    return sites
