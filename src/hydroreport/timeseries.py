"""Retrieve and normalize daily time series of USGS sites."""

from __future__ import annotations

import datetime
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

import numpy as np
import pandas as pd
from loguru import logger

from hydroreport.exceptions import RetrievalError, ServiceError
from hydroreport.helpers import (
    STAT_MEAN,
    T_FMT,
    Parameter,
    check_dates,
    check_site_id,
    check_stat_code,
    get_parameter,
)
from hydroreport.nwis import NWIS

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hydroreport.helpers import DateLike
    from hydroreport.nwis import DailyValuesSource

NO_DATA_VALUE = -999999.0
# Column suffixes used by clients that label statistics instead of coding them
STAT_LABELS = {"00001": "Max", "00002": "Min", "00003": "Mean"}
__all__ = ["DailySeries", "Observation", "TimeSeriesFetcher"]


@dataclass(frozen=True)
class Observation:
    """A single daily value of a parameter at a site."""

    site_id: str
    date: datetime.date
    value: float | None
    quality_code: str


@dataclass(frozen=True)
class DailySeries(Sequence):
    """Immutable daily time series of one parameter at one site.

    Parameters
    ----------
    site_id : str
        USGS site number.
    parameter : Parameter
        The measured quantity.
    stat_code : str
        USGS statistic code of the daily values.
    start : datetime.date
        First day of the requested window.
    end : datetime.date
        Last day of the requested window.
    observations : tuple of Observation
        Daily values in ascending date order, empty if the site has no data
        for the requested window.
    """

    site_id: str
    parameter: Parameter
    stat_code: str
    start: datetime.date
    end: datetime.date
    observations: tuple[Observation, ...] = ()

    @overload
    def __getitem__(self, index: int) -> Observation: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Observation, ...]: ...

    def __getitem__(self, index: int | slice) -> Observation | tuple[Observation, ...]:
        return self.observations[index]

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.observations)

    @property
    def is_empty(self) -> bool:
        """Whether the series has no observations."""
        return not self.observations

    def to_frame(self) -> pd.DataFrame:
        """Convert the series to a dataframe indexed by date.

        The dataframe has a ``value`` column, with ``NaN`` for missing values,
        and a ``quality_code`` column. An empty series gives an empty dataframe
        with the same columns. Units and site information are stored in
        the ``attrs`` of the dataframe.
        """
        frame = pd.DataFrame(
            {
                "value": np.array([o.value for o in self.observations], dtype="f8"),
                "quality_code": pd.Series(
                    [o.quality_code for o in self.observations], dtype=object
                ).to_numpy(),
            },
            index=pd.DatetimeIndex([o.date for o in self.observations], name="date"),
        )
        frame.attrs = {
            "site_id": self.site_id,
            "parameter": self.parameter.name,
            "units": self.parameter.units,
            "stat_cd": self.stat_code,
        }
        return frame


def _value_columns(raw: pd.DataFrame, parameter: Parameter, stat_code: str) -> list[str]:
    """Find the columns holding values of a parameter and statistic."""
    stat = f"(?:{stat_code}|{STAT_LABELS[stat_code]})"
    pattern = re.compile(rf"^(?:.+_)?{parameter.code}_{stat}$")
    return [str(c) for c in raw.columns if pattern.match(str(c))]


def _normalize(
    raw: pd.DataFrame,
    site_id: str,
    parameter: Parameter,
    stat_code: str,
    start: datetime.date,
    end: datetime.date,
) -> tuple[Observation, ...]:
    """Map a raw table onto observations, raising ``ValueError`` if it's malformed."""
    if not isinstance(raw, pd.DataFrame):
        raise ValueError(f"Expected a pandas.DataFrame but got {type(raw).__name__}.")
    if raw.columns.duplicated().any():
        dups = raw.columns[raw.columns.duplicated()].unique()
        raise ValueError(f"Response has duplicated columns: {', '.join(map(str, dups))}.")
    if raw.empty:
        return ()

    value_cols = _value_columns(raw, parameter, stat_code)
    if not value_cols:
        logger.warning(
            f"Response for site {site_id} has no {parameter.name} column"
            + f" with statistic code {stat_code}."
        )
        return ()
    vcol = value_cols[0]
    if len(value_cols) > 1:
        logger.warning(
            f"Found {len(value_cols)} {parameter.name} series for site {site_id}."
            + f" Using {vcol} and ignoring {', '.join(value_cols[1:])}."
        )

    if "datetime" in raw:
        raw_dates = raw["datetime"]
    elif isinstance(raw.index, pd.DatetimeIndex):
        raw_dates = raw.index
    else:
        raise ValueError("Response has no datetime column.")

    try:
        dates = pd.DatetimeIndex(pd.to_datetime(pd.Index(raw_dates)))
    except (TypeError, ValueError) as ex:
        raise ValueError(f"Unable to parse dates of the response: {ex}") from ex
    if dates.tz is not None:
        dates = dates.tz_localize(None)

    qcol = f"{vcol}_cd"
    frame = pd.DataFrame(
        {
            "date": dates.normalize(),
            "value": pd.to_numeric(raw[vcol].to_numpy(), errors="coerce"),
            "quality_code": raw[qcol].to_numpy() if qcol in raw else "",
        }
    )
    frame.loc[frame["value"] == NO_DATA_VALUE, "value"] = np.nan
    frame["quality_code"] = frame["quality_code"].fillna("").astype(str)

    in_window = (frame["date"] >= pd.Timestamp(start)) & (frame["date"] <= pd.Timestamp(end))
    frame = frame[frame["date"].notna() & in_window]
    frame = frame.drop_duplicates("date", keep="first").sort_values("date", kind="stable")
    return tuple(
        Observation(site_id, d.date(), None if np.isnan(v) else float(v), q)
        for d, v, q in frame.itertuples(index=False, name=None)
    )


class TimeSeriesFetcher:
    """Retrieve daily time series and normalize them into observations.

    Parameters
    ----------
    source : DailyValuesSource, optional
        The provider of raw daily values, defaults to :class:`~hydroreport.nwis.NWIS`.
    """

    def __init__(self, source: DailyValuesSource | None = None) -> None:
        self.source = NWIS() if source is None else source

    def fetch(
        self,
        site_id: str,
        parameter_code: str | Parameter,
        start_date: DateLike,
        end_date: DateLike,
        stat_code: str = STAT_MEAN,
    ) -> DailySeries:
        """Get the daily series of a parameter at a site within a date range.

        Parameters
        ----------
        site_id : str
            USGS site number, e.g., ``05340500``. The ``USGS-`` prefix is optional.
        parameter_code : str or Parameter
            Name or USGS code of a supported parameter, i.e., ``discharge``
            (``00060``) or ``temperature`` (``00010``).
        start_date : str, datetime.date, or pandas.Timestamp
            First day of the window.
        end_date : str, datetime.date, or pandas.Timestamp
            Last day of the window, inclusive.
        stat_code : str, optional
            USGS statistic code of the daily values, defaults to ``00003``
            (daily mean).

        Returns
        -------
        DailySeries
            The normalized series. It's empty, not an error, when the site has
            no data for the requested window.

        Raises
        ------
        InvalidParameterError
            If the parameter or statistic code is not supported. No request
            is sent in that case.
        RetrievalError
            If the source can't be reached or returns a malformed response.
        """
        parameter = get_parameter(parameter_code)
        stat_code = check_stat_code(stat_code)
        sid = check_site_id(site_id)
        start, end = check_dates(start_date, end_date)
        window = (start.strftime(T_FMT), end.strftime(T_FMT))

        try:
            raw = self.source.get_daily_values(sid, parameter.code, stat_code, start, end)
        except ServiceError as ex:
            raise RetrievalError(sid, parameter.name, window, str(ex)) from ex

        try:
            observations = _normalize(raw, sid, parameter, stat_code, start, end)
        except ValueError as ex:
            raise RetrievalError(sid, parameter.name, window, f"Malformed response. {ex}") from ex

        if observations:
            logger.info(
                f"Retrieved {len(observations)} daily {parameter.name} values"
                + f" for site {sid} from {window[0]} to {window[1]}."
            )
        else:
            logger.warning(
                f"Site {sid} has no daily {parameter.name} data from {window[0]} to {window[1]}."
            )
        return DailySeries(sid, parameter, stat_code, start, end, observations)
