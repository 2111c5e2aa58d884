"""Vectorized-read policy per file format.

Every consumer of the vectorization flag goes through :func:`policy_for`, both
when the matrix is built and when an initialized table is checked.
"""

from __future__ import annotations

import random
from enum import StrEnum

from harness.errors import PolicyViolation, UnsupportedFormat
from matrix.enums import FileFormat


class VectorizationPolicy(StrEnum):
    """Allowed vectorized-read settings for a file format."""

    FORCED_TRUE = "forced_true"
    FORCED_FALSE = "forced_false"
    FREE = "free"


_POLICIES: dict[FileFormat, VectorizationPolicy] = {
    FileFormat.PARQUET: VectorizationPolicy.FREE,
    FileFormat.ORC: VectorizationPolicy.FORCED_TRUE,
    FileFormat.AVRO: VectorizationPolicy.FORCED_FALSE,
}


def coerce_file_format(value: object) -> FileFormat:
    """Return the recognized file format for a raw value.

    Returns
    -------
    FileFormat
        Normalized file format.

    Raises
    ------
    UnsupportedFormat
        Raised when the value is not a recognized format.
    """
    if isinstance(value, FileFormat):
        return value
    if isinstance(value, str):
        try:
            return FileFormat(value.strip().lower())
        except ValueError:
            pass
    raise UnsupportedFormat(value, supported=[item.value for item in FileFormat])


def policy_for(file_format: object) -> VectorizationPolicy:
    """Return the vectorization policy for a file format.

    Returns
    -------
    VectorizationPolicy
        Policy for the format.
    """
    return _POLICIES[coerce_file_format(file_format)]


def resolve_vectorized(file_format: object, rng: random.Random) -> bool:
    """Return a vectorization flag that satisfies the policy.

    Free formats take one draw from ``rng``.

    Returns
    -------
    bool
        Vectorization flag for the format.
    """
    policy = policy_for(file_format)
    if policy is VectorizationPolicy.FORCED_TRUE:
        return True
    if policy is VectorizationPolicy.FORCED_FALSE:
        return False
    return rng.random() < 0.5


def check_vectorization(file_format: object, *, vectorized: bool) -> None:
    """Validate a vectorization flag against the policy for its format.

    Raises
    ------
    PolicyViolation
        Raised when the flag contradicts a forced policy.
    """
    fmt = coerce_file_format(file_format)
    policy = _POLICIES[fmt]
    if policy is VectorizationPolicy.FORCED_TRUE and not vectorized:
        raise PolicyViolation(fmt.value, vectorized=vectorized, expected=True)
    if policy is VectorizationPolicy.FORCED_FALSE and vectorized:
        raise PolicyViolation(fmt.value, vectorized=vectorized, expected=False)


def vectorization_toggle_applies(file_format: object) -> bool:
    """Return whether the format carries a table-level vectorization property.

    Returns
    -------
    bool
        ``True`` only for formats whose policy leaves the flag free.
    """
    return policy_for(file_format) is VectorizationPolicy.FREE


__all__ = [
    "VectorizationPolicy",
    "check_vectorization",
    "coerce_file_format",
    "policy_for",
    "resolve_vectorized",
    "vectorization_toggle_applies",
]
