"""Plot daily time series as hydrographs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from hydroreport.exceptions import DataNotAvailableError, DependencyError

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from hydroreport.timeseries import DailySeries

__all__ = ["hydrograph"]


def hydrograph(
    series: DailySeries,
    title: str | None = None,
    ax: Axes | None = None,
    output: str | Path | None = None,
    figsize: tuple[float, float] = (10, 4),
) -> Axes:
    """Plot a daily series as a line chart.

    Parameters
    ----------
    series : DailySeries
        A non-empty daily series. Check ``series.is_empty`` before plotting.
    title : str, optional
        The plot title, defaults to the parameter name and site number.
    ax : matplotlib.axes.Axes, optional
        Axes to draw on, defaults to a new figure.
    output : str or Path, optional
        Path to save the figure to, defaults to ``None`` which means
        the figure is not saved to a file.
    figsize : tuple, optional
        Width and height of a new figure in inches, defaults to (10, 4).

    Returns
    -------
    matplotlib.axes.Axes
        The axes with the hydrograph.
    """
    try:
        from matplotlib import pyplot as plt
    except ImportError as ex:
        raise DependencyError("hydrograph", "matplotlib") from ex

    if series.is_empty:
        raise DataNotAvailableError(series.parameter.long_name.lower())

    pd.plotting.register_matplotlib_converters()
    daily = series.to_frame()["value"]
    if ax is None:
        _, ax = plt.subplots(figsize=figsize)

    ax.plot(daily.index, daily.to_numpy())
    ax.set_xlim(pd.Timestamp(series.start), pd.Timestamp(series.end))
    ax.set_xlabel("Date")
    ax.set_ylabel(f"{series.parameter.long_name} ({series.parameter.units})")
    ax.set_title(title or f"{series.parameter.long_name} at USGS {series.site_id}")
    ax.grid(True, alpha=0.3)

    if output is not None:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        ax.figure.savefig(output, bbox_inches="tight")
    return ax
