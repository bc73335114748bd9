"""Nox sessions orchestrating easydb-realtime test suites."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11", "3.12"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = [
    "tests(unit)",
]


def _install_test_requirements(session: nox.Session) -> None:
    """Install the package with its test extra inside the session environment."""

    session.install("-e", f"{PROJECT_ROOT}[test]")


def _normalize_pythonpath(existing: str | None) -> str:
    parts = [str(PROJECT_ROOT)]
    if existing:
        parts.append(existing)
    return ":".join(part for part in parts if part)


def _build_env(session: nox.Session) -> dict[str, str]:
    env = dict(session.env)
    env["PYTHONPATH"] = _normalize_pythonpath(env.get("PYTHONPATH"))
    return env


def _run_suite(session: nox.Session, suite: str, targets: Iterable[str]) -> None:
    _install_test_requirements(session)

    env = _build_env(session)
    args = [
        "coverage", "run",
        "--source", "easydb_realtime",
        f"--data-file=.coverage.{suite}",
        "-m", "pytest", *targets,
    ]
    args.extend(session.posargs)

    session.log("Running %s suite: %s", suite, " ".join(targets))
    session.run(*args, env=env)
    session.run("coverage", "report", f"--data-file=.coverage.{suite}", "--show-missing", env=env)


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit)")
def tests_unit(session: nox.Session) -> None:
    """Execute repository, stream and snapshot unit suites with coverage."""

    _run_suite(session, "unit", ["tests/unit"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(integration)")
def tests_integration(session: nox.Session) -> None:
    """Execute emulator-backed suites; needs EASYDB_RTDB_EMULATOR_TEST."""

    if not os.environ.get("EASYDB_RTDB_EMULATOR_TEST"):
        session.skip("EASYDB_RTDB_EMULATOR_TEST not set")

    _run_suite(session, "integration", ["tests/integration"])
