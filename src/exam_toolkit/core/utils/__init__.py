"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_session,
    deserialize_session,
    serialize_result,
    deserialize_result,
    save_session_json,
    load_session_json,
    save_result_json,
    load_result_json,
    load_answers_json,
)

__all__ = [
    "serialize_session",
    "deserialize_session",
    "serialize_result",
    "deserialize_result",
    "save_session_json",
    "load_session_json",
    "save_result_json",
    "load_result_json",
    "load_answers_json",
]
