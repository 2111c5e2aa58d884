"""Pytest diagnostics and shared fixtures for the row-level harness."""

from __future__ import annotations

import os
import platform
import sys
from importlib import metadata
from pathlib import Path
from typing import Any

import pyarrow as pa
import pytest

from matrix import EnvironmentConfig, environment_id, parameters, resolve_matrix_seed
from serde_msgspec import dumps_json

_DIAG_DIR = Path("build/test-results")
_ENV_PATH = _DIAG_DIR / "diagnostics_env.json"
_VERSIONS_PATH = _DIAG_DIR / "diagnostics_versions.json"
_MATRIX_PATH = _DIAG_DIR / "environment_matrix.json"

_MATRIX = parameters()


def _env_subset(prefixes: tuple[str, ...]) -> dict[str, str]:
    return {key: value for key, value in os.environ.items() if key.startswith(prefixes)}


def _collect_env() -> dict[str, Any]:
    return {
        "python": sys.version,
        "executable": sys.executable,
        "platform": platform.platform(),
        "env": _env_subset(("PYTHON", "ARROW", "DATAFUSION", "PYICEBERG", "ROWLEVEL")),
        "pyarrow_version": pa.__version__,
    }


def _collect_versions() -> dict[str, str]:
    packages = ("pyarrow", "datafusion", "pyiceberg", "sqlglot", "msgspec", "pytest")
    versions: dict[str, str] = {}
    for name in packages:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            continue
    return versions


def _write_json(path: Path, payload: object) -> None:
    try:
        path.write_bytes(dumps_json(payload, pretty=True))
    except OSError:
        return


def pytest_sessionstart(session: pytest.Session) -> None:
    """Record the interpreter, library versions and environment matrix."""
    try:
        _DIAG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        return
    _write_json(_ENV_PATH, {**_collect_env(), "rootdir": session.config.rootpath})
    _write_json(_VERSIONS_PATH, _collect_versions())
    _write_json(
        _MATRIX_PATH,
        {"seed": resolve_matrix_seed(), "entries": list(_MATRIX)},
    )


@pytest.fixture(params=_MATRIX, ids=environment_id)
def environment(request: pytest.FixtureRequest) -> EnvironmentConfig:
    """Provide each entry of the environment matrix in run order.

    Returns
    -------
    EnvironmentConfig
        Matrix entry for the current test instance.
    """
    return request.param


@pytest.fixture
def warehouse(tmp_path: Path) -> Path:
    """Provide an isolated warehouse root for catalog metadata and data files.

    Returns
    -------
    Path
        Warehouse directory.
    """
    root = tmp_path / "warehouse"
    root.mkdir()
    return root
