"""Some helper function for HydroReport."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Union

import pandas as pd

from hydroreport.exceptions import (
    InputRangeError,
    InputTypeError,
    InvalidParameterError,
)

DateLike = Union[str, datetime.date, pd.Timestamp]
T_FMT = "%Y-%m-%d"
STAT_MEAN = "00003"
__all__ = ["PARAMETERS", "STATISTICS", "Parameter", "get_parameter"]


@dataclass(frozen=True)
class Parameter:
    """A physical quantity measured at USGS sites.

    Parameters
    ----------
    name : str
        Short name used throughout the package, e.g., ``discharge``.
    code : str
        USGS five-digit parameter code.
    units : str
        Units of the daily values as reported by USGS.
    long_name : str
        Human readable description used for labels.
    """

    name: str
    code: str
    units: str
    long_name: str


PARAMETERS = {
    "discharge": Parameter("discharge", "00060", "ft^3/s", "Discharge"),
    "temperature": Parameter("temperature", "00010", "degC", "Water temperature"),
}

STATISTICS = {
    "00001": "maximum",
    "00002": "minimum",
    "00003": "mean",
}


def get_parameter(parameter_code: str | Parameter) -> Parameter:
    """Look up a supported parameter by its name or USGS code.

    Parameters
    ----------
    parameter_code : str or Parameter
        Name (case-insensitive) or five-digit USGS code of the parameter.

    Returns
    -------
    Parameter
        The matching parameter.

    Examples
    --------
    >>> from hydroreport.helpers import get_parameter
    >>> get_parameter("00060").name
    'discharge'
    >>> get_parameter("Temperature").units
    'degC'
    """
    if isinstance(parameter_code, Parameter):
        parameter_code = parameter_code.name
    if isinstance(parameter_code, str):
        key = parameter_code.strip().lower()
        if key in PARAMETERS:
            return PARAMETERS[key]
        by_code = {p.code: p for p in PARAMETERS.values()}
        if key in by_code:
            return by_code[key]
    valid = [f"{p.name} ({p.code})" for p in PARAMETERS.values()]
    raise InvalidParameterError("parameter_code", valid, str(parameter_code))


def check_stat_code(stat_code: str) -> str:
    """Validate a USGS statistic code."""
    if stat_code not in STATISTICS:
        valid = [f"{c} ({n})" for c, n in STATISTICS.items()]
        raise InvalidParameterError("stat_code", valid, str(stat_code))
    return stat_code


def check_site_id(site_id: str) -> str:
    """Validate a USGS site number and strip the ``USGS-`` prefix, if any."""
    if not isinstance(site_id, str):
        raise InputTypeError("site_id", "str", "05340500")
    sid = re.fullmatch(r"(?:usgs-)?(\d+)", site_id.strip().lower(), flags=re.ASCII)
    if sid is None:
        raise InputTypeError("site_id", "non-empty str of only digits", "05340500")
    return sid.group(1).zfill(8)


def check_dates(start_date: DateLike, end_date: DateLike) -> tuple[datetime.date, datetime.date]:
    """Convert start and end dates to calendar dates and check their order."""
    dates = []
    for name, dt in (("start_date", start_date), ("end_date", end_date)):
        if not isinstance(dt, (str, datetime.date)):
            raise InputTypeError(name, "date, datetime, or str", "2022-10-01")
        try:
            ts = pd.Timestamp(dt)
        except (TypeError, ValueError) as ex:
            raise InputTypeError(name, "date, datetime, or str", "2022-10-01") from ex
        if pd.isna(ts):
            raise InputTypeError(name, "date, datetime, or str", "2022-10-01")
        dates.append(ts.date())
    start, end = dates
    if start > end:
        raise InputRangeError("start_date", f"dates on or before end_date ({end:{T_FMT}})")
    return start, end
