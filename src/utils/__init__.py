"""Shared utilities for the row-level conformance harness."""

from utils.env_utils import env_int, env_path, env_value

__all__ = [
    "env_int",
    "env_path",
    "env_value",
]
