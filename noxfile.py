"""Nox sessions."""

from __future__ import annotations

import shutil
from pathlib import Path

import nox

try:
    import tomllib as tomli
except ImportError:
    import tomli


def get_extras() -> list[str]:
    """Get the optional dependency groups of the package."""
    with Path("pyproject.toml").open("rb") as f:
        extras = tomli.load(f)["project"]["optional-dependencies"]
    return [e for e in extras if e != "test"]


py39 = ["3.9"]
py312 = ["3.12"]
py313 = ["3.13"]
nox.options.sessions = (
    "pre-commit",
    "type-check",
    "test39",
    "test312",
)


def install_deps(session: nox.Session, extra: str | None = None) -> None:
    """Install package dependencies."""
    session.install(f".[{extra}]" if extra else ".")
    dirs = [".pytest_cache", "build", "dist", ".eggs"]
    for d in dirs:
        shutil.rmtree(d, ignore_errors=True)

    patterns = ["*.egg-info", "*.egg", "*.pyc", "*~", "**/__pycache__"]
    for p in patterns:
        for f in Path.cwd().rglob(p):
            shutil.rmtree(f, ignore_errors=True)


@nox.session(name="pre-commit", python=py313)
def pre_commit(session: nox.Session) -> None:
    """Lint using pre-commit."""
    session.install("pre-commit")
    session.run(
        "pre-commit",
        "run",
        "--all-files",
        "--hook-stage=manual",
        *session.posargs,
    )


@nox.session(name="type-check", python=py312)
def type_check(session: nox.Session) -> None:
    """Run Pyright."""
    install_deps(session, ",".join(get_extras()))
    session.install("pyright")
    session.run("pyright")


def run_tests(session: nox.Session) -> None:
    """Install the test dependencies and run the test suite."""
    install_deps(session, ",".join(["test", *get_extras()]))
    session.run("pytest", "--cov", "--cov-append", *session.posargs)
    session.notify("cover")


@nox.session(python=py39)
def test39(session: nox.Session) -> None:
    """Run the test suite for Python 3.9."""
    run_tests(session)


@nox.session(python=py312)
def test312(session: nox.Session) -> None:
    """Run the test suite for Python 3.12."""
    run_tests(session)


@nox.session(python=py313)
def cover(session: nox.Session) -> None:
    """Coverage analysis."""
    session.install("coverage[toml]")
    session.run("coverage", "combine")
    session.run("coverage", "report")
    session.run("coverage", "html")
