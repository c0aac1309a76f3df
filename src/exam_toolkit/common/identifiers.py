"""
Module: common.identifiers

Purpose:
    Base-36 ids and ISO-8601 timestamps shared by session creation and
    attempt recording.

Key Functions:
    - to_base36(): Lowercase base-36 rendering of an integer
    - random_base36(): Random base-36 suffix
    - epoch_millis(): Milliseconds since the epoch for a datetime
    - iso_utc_millis(): "2026-01-02T03:04:05.678Z"
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

BASE36_DIGITS = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    """
    Lowercase base-36 rendering of a non-negative integer.

    Example:
        >>> to_base36(1295)
        'zz'
    """
    if value < 0:
        raise ValueError(f"Cannot render negative value in base 36: {value}")
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(BASE36_DIGITS[rem])
        if value == 0:
            break
    return "".join(reversed(digits))


def random_base36(length: int) -> str:
    return "".join(secrets.choice(BASE36_DIGITS) for _ in range(length))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(moment: Optional[datetime] = None) -> int:
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)


def iso_utc_millis(moment: Optional[datetime] = None) -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision and a Z suffix.

    Example:
        >>> iso_utc_millis(datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
        '2026-01-02T03:04:05.678Z'
    """
    utc = (moment or utc_now()).astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
