"""Top-level package for HydroReport."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from hydroreport import exceptions, helpers
from hydroreport.helpers import PARAMETERS, STATISTICS, Parameter, get_parameter
from hydroreport.nwis import NWIS, DailyValuesSource
from hydroreport.plot import hydrograph
from hydroreport.report import Report, ReportConfig, build_report
from hydroreport.timeseries import DailySeries, Observation, TimeSeriesFetcher

try:
    __version__ = version("hydroreport")
except PackageNotFoundError:
    __version__ = "999"

__all__ = [
    "NWIS",
    "PARAMETERS",
    "STATISTICS",
    "DailySeries",
    "DailyValuesSource",
    "Observation",
    "Parameter",
    "Report",
    "ReportConfig",
    "TimeSeriesFetcher",
    "__version__",
    "build_report",
    "exceptions",
    "get_parameter",
    "helpers",
    "hydrograph",
]
