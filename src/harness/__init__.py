"""Row-level operation harness: table setup, ingestion and queries."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

_EXPORT_MAP: dict[str, tuple[str, str]] = {
    "DEFAULT_TABLE_NAME": ("harness.session", "DEFAULT_TABLE_NAME"),
    "RowLevelHarness": ("harness.session", "RowLevelHarness"),
    "create_and_init_table": ("harness.initializer", "create_and_init_table"),
    "init_table": ("harness.initializer", "init_table"),
}

__all__ = tuple(sorted(_EXPORT_MAP))

if TYPE_CHECKING:
    from harness.initializer import create_and_init_table, init_table
    from harness.session import DEFAULT_TABLE_NAME, RowLevelHarness


def __getattr__(name: str) -> object:
    export = _EXPORT_MAP.get(name)
    if export is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    module_name, attr = export
    module = importlib.import_module(module_name)
    value = getattr(module, attr)
    globals()[name] = value
    return value
