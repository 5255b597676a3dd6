"""Accessing NWIS daily values."""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, Any, Literal, Protocol

import aiohttp
import cytoolz.curried as tlz
import pandas as pd
from loguru import logger

import async_retriever as ar
from hydroreport.exceptions import ServiceError
from hydroreport.helpers import PARAMETERS, STATISTICS, T_FMT
from pygeoogc import ServiceURL
from pygeoogc import utils as ogc_utils

if TYPE_CHECKING:
    from hydroreport.helpers import DateLike

RAW_COLUMNS = ["agency_cd", "site_no", "datetime"]
CATALOG_COLUMNS = ["site_no", "parm_cd", "stat_cd", "begin_date", "end_date", "count_nu"]
NO_DATA_MESSAGES = ("No sites found", "No sites/data found")
__all__ = ["NWIS", "DailyValuesSource"]


class DailyValuesSource(Protocol):
    """Anything that can provide raw daily values of a single site.

    Implementations return the rows as they come from the source, i.e., with
    source-specific column names, and an empty dataframe when there is no data
    for the requested window. Transport failures are raised as
    :class:`~hydroreport.exceptions.ServiceError`.
    """

    def get_daily_values(
        self,
        site_id: str,
        parameter_code: str,
        stat_code: str,
        start: DateLike,
        end: DateLike,
    ) -> pd.DataFrame:
        """Get raw daily values of one parameter and statistic at a site."""
        ...


def _is_no_data(ex: Exception) -> bool:
    return any(m in str(ex) for m in NO_DATA_MESSAGES)


class NWIS:
    """Access NWIS daily values web service.

    Parameters
    ----------
    timeout : float, optional
        Maximum number of seconds to wait for a response, defaults to 30.
    disable_cache : bool, optional
        If ``True``, don't use the response cache of ``async-retriever``,
        defaults to ``False``.

    Notes
    -----
    More information about query parameters and codes that NWIS accepts
    can be found at its help
    `webpage <https://help.waterdata.usgs.gov/codes-and-parameters>`__.
    """

    url: str = ServiceURL().restful.nwis

    def __init__(self, timeout: float = 30, disable_cache: bool = False) -> None:
        self.timeout = timeout
        self.disable_cache = disable_cache

    def _retrieve(
        self, url: str, payloads: list[dict[str, str]], read: Literal["json", "text"]
    ) -> list[Any]:
        """Send the requests and turn every transport failure into ``ServiceError``."""
        retrieve = ar.retrieve_json if read == "json" else ar.retrieve_text
        try:
            return retrieve(
                [url] * len(payloads),
                [{"params": p} for p in payloads],
                timeout=self.timeout,
                disable=self.disable_cache,
            )
        except ar.ServiceError as ex:
            raise ServiceError(ogc_utils.check_response(str(ex)), url) from ex
        except asyncio.TimeoutError as ex:
            raise ServiceError(f"Request timed out after {self.timeout} seconds.", url) from ex
        except aiohttp.ClientError as ex:
            raise ServiceError(str(ex) or type(ex).__name__, url) from ex

    def retrieve_rdb(self, url: str, payloads: list[dict[str, str]]) -> pd.DataFrame:
        """Retrieve and process requests with RDB format.

        Parameters
        ----------
        url : str
            URL of a USGS REST service that supports the RDB format, e.g.,
            ``site`` or ``dv``. Please consult USGS documentation
            `here <https://waterservices.usgs.gov/rest>`__ for more information.
        payloads : list of dict
            List of target payloads.

        Returns
        -------
        pandas.DataFrame
            Requested features as a pandas's DataFrame. An empty dataframe is
            returned if the service has nothing for the payloads.
        """
        resp = self._retrieve(url, [p | {"format": "rdb"} for p in payloads], "text")

        not_rdb = next(filter(lambda x: x and not x.startswith("#"), resp), None)
        if not_rdb is not None:
            msg = re.findall("<p>(.*?)</p>", not_rdb, flags=re.DOTALL)
            raise ServiceError(msg[-1].strip() if msg else not_rdb[:200], url)

        data = [
            line.split("\t")
            for r in resp
            for line in r.splitlines()
            if line and not line.startswith("#")
        ]
        if not data:
            return pd.DataFrame()

        rdb_df = pd.DataFrame([dict(zip(data[0], d)) for d in data[2:]])
        if "agency_cd" in rdb_df:
            rdb_df = rdb_df[~rdb_df["agency_cd"].str.contains("agency_cd|5s")].copy()
        return rdb_df.reset_index(drop=True)

    @staticmethod
    def _to_raw_frame(resp: dict[str, Any]) -> pd.DataFrame:
        """Flatten a daily values JSON response into an RDB-like dataframe.

        Every method block of every time series becomes a ``<tsid>_<parm>_<stat>``
        value column and a matching ``_cd`` column of comma separated qualifiers.
        """
        series = tlz.get_in(["value", "timeSeries"], resp, default=None)
        if not isinstance(series, list):
            raise ServiceError("Response has no timeSeries element.")

        agency, site_no = None, None
        columns = []
        try:
            for j, ts in enumerate(series):
                site_cd = ts["sourceInfo"]["siteCode"][0]
                agency, site_no = site_cd["agencyCode"], site_cd["value"]
                _, _, parm_cd, stat_cd = ts["name"].split(":")[:4]
                for i, block in enumerate(ts["values"]):
                    if not block["value"]:
                        continue
                    tsid = tlz.get_in(["method", 0, "methodID"], block, default=f"{j}.{i}")
                    col = f"{tsid}_{parm_cd}_{stat_cd}"
                    if any(col in c for c in columns):
                        raise ServiceError(f"Response has more than one {col} time series.")
                    values = pd.DataFrame.from_records(block["value"], index="dateTime")
                    if "qualifiers" in values:
                        quality = values["qualifiers"].map(
                            lambda q: ",".join(q) if isinstance(q, list) else ""
                        )
                    else:
                        quality = ""
                    columns.append(pd.DataFrame({col: values["value"], f"{col}_cd": quality}))
        except (KeyError, IndexError, TypeError, ValueError) as ex:
            raise ServiceError(f"Unexpected daily values response structure: {ex!r}") from ex

        if not columns:
            return pd.DataFrame(columns=RAW_COLUMNS)

        raw = pd.concat(columns, axis=1).rename_axis("datetime").reset_index()
        raw.insert(0, "site_no", site_no)
        raw.insert(0, "agency_cd", agency)
        return raw

    def get_daily_values(
        self,
        site_id: str,
        parameter_code: str,
        stat_code: str,
        start: DateLike,
        end: DateLike,
    ) -> pd.DataFrame:
        """Get raw daily values of one parameter at a USGS site.

        Parameters
        ----------
        site_id : str
            USGS site number.
        parameter_code : str
            USGS five-digit parameter code, e.g., ``00060`` for discharge.
        stat_code : str
            USGS statistic code, e.g., ``00003`` for daily mean.
        start : str, datetime.date, or pandas.Timestamp
            First day of the requested window.
        end : str, datetime.date, or pandas.Timestamp
            Last day of the requested window.

        Returns
        -------
        pandas.DataFrame
            Raw daily values with ``agency_cd``, ``site_no``, and ``datetime``
            columns plus a value and a qualifier column per time series. The
            dataframe has no rows if there's no data for the requested window.
        """
        payload = {
            "format": "json",
            "sites": site_id,
            "parameterCd": parameter_code,
            "statCd": stat_code,
            "startDT": pd.Timestamp(start).strftime(T_FMT),
            "endDT": pd.Timestamp(end).strftime(T_FMT),
            "siteStatus": "all",
        }
        logger.debug(f"Requesting daily values from NWIS with {payload}")
        try:
            resp = self._retrieve(f"{self.url}/dv", [payload], "json")
        except ServiceError as ex:
            if _is_no_data(ex):
                return pd.DataFrame(columns=RAW_COLUMNS)
            raise
        return self._to_raw_frame(resp[0])

    def get_series_catalog(self, site_id: str) -> pd.DataFrame:
        """Get the daily series that a USGS site provides.

        Parameters
        ----------
        site_id : str
            USGS site number.

        Returns
        -------
        pandas.DataFrame
            One row per parameter and statistic code with the period of record
            and number of daily values. Names of the parameters supported by
            this package and of the statistics are given in the ``parameter``
            and ``statistic`` columns.
        """
        payload = {
            "sites": site_id,
            "seriesCatalogOutput": "true",
            "outputDataTypeCd": "dv",
            "siteStatus": "all",
        }
        try:
            catalog = self.retrieve_rdb(f"{self.url}/site", [payload])
        except ServiceError as ex:
            if not _is_no_data(ex):
                raise
            catalog = pd.DataFrame()

        if catalog.empty:
            return pd.DataFrame(columns=[*CATALOG_COLUMNS, "parameter", "statistic"])

        if "data_type_cd" in catalog:
            catalog = catalog[catalog["data_type_cd"] == "dv"]
        catalog = catalog[CATALOG_COLUMNS].copy()
        for c in ("begin_date", "end_date"):
            catalog[c] = pd.to_datetime(catalog[c], errors="coerce")
        catalog["count_nu"] = pd.to_numeric(catalog["count_nu"], errors="coerce")
        catalog["parameter"] = catalog["parm_cd"].map({p.code: p.name for p in PARAMETERS.values()})
        catalog["statistic"] = catalog["stat_cd"].map(STATISTICS)
        return catalog.reset_index(drop=True)
