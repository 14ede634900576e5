from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import AmbiguousCompetition, MissingCompetitionId, NoCompetition
from .tables import RowReader, read_typed_table


def resolve_competition_id(source: RowReader, location: Path | str, override: Optional[int] = None) -> int:
    """Return the active competition id.

    An explicit override wins and is not checked against the database. Otherwise
    ``TCompetition`` must contain exactly one row carrying an id.
    """
    if override is not None:
        return int(override)

    competitions = read_typed_table(source, location, "TCompetition")
    if not competitions:
        raise NoCompetition()
    if len(competitions) > 1:
        raise AmbiguousCompetition(len(competitions))

    competition_id = competitions[0]["NoCompetition"]
    if competition_id is None:
        raise MissingCompetitionId()
    return competition_id
