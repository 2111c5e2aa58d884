"""Environment matrix for row-level operation scenarios."""

from matrix.builder import MATRIX_SEED_ENV, parameters, resolve_matrix_seed
from matrix.enums import CatalogImplementation, DistributionMode, FileFormat
from matrix.environment import EnvironmentConfig, environment_id
from matrix.policy import (
    VectorizationPolicy,
    check_vectorization,
    policy_for,
    vectorization_toggle_applies,
)

__all__ = [
    "MATRIX_SEED_ENV",
    "CatalogImplementation",
    "DistributionMode",
    "EnvironmentConfig",
    "FileFormat",
    "VectorizationPolicy",
    "check_vectorization",
    "environment_id",
    "parameters",
    "policy_for",
    "resolve_matrix_seed",
    "vectorization_toggle_applies",
]
