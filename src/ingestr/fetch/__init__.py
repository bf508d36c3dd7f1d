"""Built-in readers for sources that need no site-specific retrieval."""

from ingestr.fetch.co2_mlo import (
    annual_co2,
    co2_mlo_adapter,
    fetch_co2_mlo,
    parse_co2_mm_mlo,
)

__all__ = [
    "annual_co2",
    "co2_mlo_adapter",
    "fetch_co2_mlo",
    "parse_co2_mm_mlo",
]
