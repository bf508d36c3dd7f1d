"""Site-scale ingestion of climate and ecosystem driver data.

Turns heterogeneous sources (flux towers, gridded reanalysis fields,
remote-sensing products, soil databases, CO2 records) into one daily
time series per site, ready for vegetation models.

Entry point:
    from ingestr import ingest

    drivers = ingest(siteinfo, "fapar_unity")
    drivers["CH-Lae"]  # daily DataFrame for one site
"""

from ingestr.ingest.dispatch import ingest
from ingestr.ingest.execution import Sequential, WorkerPool, execution_from_flags
from ingestr.ingest.sources import Source

__all__ = [
    "ingest",
    "Source",
    "Sequential",
    "WorkerPool",
    "execution_from_flags",
]
