"""
Schemas Package

JSON schema definitions and validation utilities for sessions and results.
"""

from .validator import (
    validate_session,
    validate_result,
    ValidationError,
    SESSION_SCHEMA_VERSION,
    RESULT_SCHEMA_VERSION,
)

__all__ = [
    "validate_session",
    "validate_result",
    "ValidationError",
    "SESSION_SCHEMA_VERSION",
    "RESULT_SCHEMA_VERSION",
]
