from __future__ import annotations

import re
from typing import Iterable

from .models import Race


LEADING_DIGITS_PATTERN = re.compile(r"^[0-9]+")


def leading_number(name: str) -> int:
    match = LEADING_DIGITS_PATTERN.match(name or "")
    return int(match.group(0)) if match else 0


def race_sort_key(race: Race) -> tuple[int, str]:
    return (leading_number(race.name), race.name)


def race_compare(a: Race, b: Race) -> int:
    """Numeric wave prefix first ("2A" < "10B"), then the full name."""
    key_a = race_sort_key(a)
    key_b = race_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_races(races: Iterable[Race]) -> list[Race]:
    # sorted() is stable, so races with identical names keep their source order.
    return sorted(races, key=race_sort_key)
