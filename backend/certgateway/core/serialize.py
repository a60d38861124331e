"""
JSON-safe conversion for database rows.

Rows go out with the same content MySQL stored: DATE/DATETIME/TIMESTAMP as
ISO strings, TIME (which PyMySQL reads as timedelta) as ``[-]HH:MM:SS``,
DECIMAL as its exact string form.
"""

import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any


def format_mysql_time(value: timedelta) -> str:
    """Render a TIME value the way MySQL prints it (hours may exceed 24)."""
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if micros < 0 else ""
    seconds, micros = divmod(abs(micros), 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}"
    return text


def make_json_safe(obj: Any) -> Any:
    """Recursively convert non-JSON-serializable types to safe primitives."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return format_mysql_time(obj)
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="replace")
    if isinstance(obj, dict):
        return {k: make_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [make_json_safe(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return [make_json_safe(item) for item in sorted(obj, key=str)]
    return str(obj)
