"""Schema definitions for the ingest pipeline.

This package is the contract layer: what a valid site table and a valid
daily driver table look like. Nothing here does work beyond checking.

Schemas:
- site_info: Site metadata (one row per site)
- daily_drivers: Daily forcing rows keyed by (sitename, date)
- validate: Validation helpers
"""

from ingestr.schemas.daily_drivers import (
    DAILY_DRIVER_FIELDS,
    DRIVER_VARIABLES,
    KEY_COLUMNS as DAILY_DRIVER_KEY_COLUMNS,
    DailyDriver,
    validate_daily_drivers,
)
from ingestr.schemas.site_info import (
    REQUIRED_COLUMNS as SITEINFO_REQUIRED_COLUMNS,
    SITEINFO_FIELDS,
    SiteInfo,
    validate_siteinfo,
)
from ingestr.schemas.validate import (
    require_columns,
    require_date_no_time,
    require_no_nulls,
    require_range,
    require_unique,
)

__all__ = [
    # Site metadata
    "SiteInfo",
    "SITEINFO_FIELDS",
    "SITEINFO_REQUIRED_COLUMNS",
    "validate_siteinfo",
    # Daily drivers
    "DailyDriver",
    "DAILY_DRIVER_FIELDS",
    "DAILY_DRIVER_KEY_COLUMNS",
    "DRIVER_VARIABLES",
    "validate_daily_drivers",
    # Validation helpers
    "require_columns",
    "require_no_nulls",
    "require_unique",
    "require_range",
    "require_date_no_time",
]
