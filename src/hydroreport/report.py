"""Daily streamflow and water temperature report of a USGS site.

Run it with ``python -m hydroreport.report``. The site and the window are
fixed below.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from loguru import logger

from hydroreport.exceptions import (
    DependencyError,
    InputTypeError,
    InvalidParameterError,
    RetrievalError,
    ServiceError,
)
from hydroreport.helpers import check_site_id, get_parameter
from hydroreport.nwis import NWIS
from hydroreport.plot import hydrograph
from hydroreport.timeseries import TimeSeriesFetcher

if TYPE_CHECKING:
    from hydroreport.helpers import DateLike
    from hydroreport.nwis import DailyValuesSource
    from hydroreport.timeseries import DailySeries

SITE_ID = "05340500"
START_DATE = "2022-10-01"
END_DATE = "2023-09-30"
__all__ = ["Report", "ReportConfig", "build_report"]


@dataclass(frozen=True)
class ReportConfig:
    """Inputs of a report.

    Parameters
    ----------
    site_id : str
        USGS site number.
    start_date : str, datetime.date, or pandas.Timestamp
        First day of the report window.
    end_date : str, datetime.date, or pandas.Timestamp
        Last day of the report window.
    parameters : tuple of str, optional
        Parameters to fetch and plot, defaults to discharge and temperature.
    output_dir : str or Path, optional
        Directory for the figures, defaults to ``figures``.
    timeout : float, optional
        Timeout of each request in seconds, defaults to 30.
    show_catalog : bool, optional
        Whether to log the daily series that the site provides, defaults to ``False``.
    """

    site_id: str
    start_date: DateLike
    end_date: DateLike
    parameters: tuple[str, ...] = ("discharge", "temperature")
    output_dir: str | Path = "figures"
    timeout: float = 30
    show_catalog: bool = False


@dataclass
class Report:
    """Outcome of a report run."""

    config: ReportConfig
    series: dict[str, DailySeries] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    figures: dict[str, Path] = field(default_factory=dict)

    def summary(self) -> pd.DataFrame:
        """Summary statistics of the fetched series, one row per parameter."""
        rows = {}
        for name, ts in self.series.items():
            values = ts.to_frame()["value"]
            rows[name] = {
                "units": ts.parameter.units,
                "count": int(values.count()),
                "first_date": values.index.min() if len(values) else pd.NaT,
                "last_date": values.index.max() if len(values) else pd.NaT,
                "min": values.min(),
                "mean": values.mean(),
                "max": values.max(),
            }
        columns = ["units", "count", "first_date", "last_date", "min", "mean", "max"]
        return pd.DataFrame.from_dict(rows, orient="index", columns=columns)


def build_report(config: ReportConfig, source: DailyValuesSource | None = None) -> Report:
    """Fetch every parameter of a report and plot the ones that have data.

    The parameters are fetched one at a time. A failed fetch is logged and
    recorded in ``Report.failures`` and doesn't stop the others.

    Parameters
    ----------
    config : ReportConfig
        Inputs of the report.
    source : DailyValuesSource, optional
        The provider of raw daily values, defaults to :class:`~hydroreport.nwis.NWIS`
        with the timeout of ``config``.

    Returns
    -------
    Report
        The fetched series, the failures, and the paths of the saved figures.
    """
    try:
        from matplotlib import pyplot as plt
    except ImportError as ex:
        raise DependencyError("build_report", "matplotlib") from ex

    source = NWIS(timeout=config.timeout) if source is None else source
    fetcher = TimeSeriesFetcher(source)
    report = Report(config)

    if config.show_catalog and isinstance(source, NWIS):
        try:
            site_id = check_site_id(config.site_id)
            catalog = source.get_series_catalog(site_id)
        except (InputTypeError, ServiceError) as ex:
            logger.warning(f"Unable to get the series catalog of site {config.site_id}:\n{ex}")
        else:
            logger.info(f"Daily series of site {site_id}:\n{catalog.to_string()}")

    output_dir = Path(config.output_dir)
    for name in config.parameters:
        try:
            ts = fetcher.fetch(config.site_id, name, config.start_date, config.end_date)
        except (InvalidParameterError, RetrievalError) as ex:
            logger.error(str(ex))
            with contextlib.suppress(InvalidParameterError):
                name = get_parameter(name).name
            report.failures[name] = str(ex)
            continue

        key = ts.parameter.name
        report.series[key] = ts
        if ts.is_empty:
            logger.info(f"Skipped the {key} hydrograph since there's no data.")
            continue

        path = output_dir / f"{ts.site_id}_{key}.png"
        ax = hydrograph(ts, output=path)
        plt.close(ax.figure)
        report.figures[key] = path
        logger.info(f"Saved the {key} hydrograph to {path}.")
    return report


def main() -> None:
    """Build the report of the site and window fixed in this module."""
    config = ReportConfig(SITE_ID, START_DATE, END_DATE, show_catalog=True)
    report = build_report(config)
    summary = report.summary()
    if not summary.empty:
        logger.info(f"Summary of site {config.site_id}:\n{summary.to_string()}")


if __name__ == "__main__":
    main()
