"""Configuration for pytest."""

from __future__ import annotations

import matplotlib
import pytest

matplotlib.use("Agg")


@pytest.fixture(autouse=True)
def _add_standard_imports(doctest_namespace):
    """Add hydroreport namespace for doctest."""
    import hydroreport as hr

    doctest_namespace["hr"] = hr
