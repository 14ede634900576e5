from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path


INTEGER_TEXT_PATTERN = re.compile(r"^[+-]?[0-9]+(?:\.0+)?$")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def safe_mkdir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def unlink_if_exists(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def strip_integer_suffix(value: str) -> str:
    """Access ODBC drivers sometimes render integers as ``"123.0"``."""
    if value.endswith(".0") and INTEGER_TEXT_PATTERN.match(value):
        return value[: -len(".0")]
    return value
