from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Competitor:
    no_patineur: int
    id: Optional[str] = None  # CodePat, the federation registration code
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[str] = None
    sex: Optional[str] = None
    division: Optional[str] = None
    category_id: Optional[int] = None
    club_id: Optional[int] = None


@dataclass(frozen=True)
class CompetitorInCompetition:
    id: int
    competitor_id: Optional[str] = None
    club_id: Optional[int] = None
    affiliation: Optional[str] = None
    club_name: Optional[str] = None
    rank: Optional[int] = None
    removed: Optional[bool] = None
    group: Optional[str] = None
    helmet_id: Optional[int] = None


@dataclass(frozen=True)
class Distance:
    id: int
    name: Optional[str] = None
    length: Optional[int] = None
    track: int = 100


@dataclass(frozen=True)
class ProgramItem:
    id: int
    competition_id: int
    distance_id: int
    distance: Optional[str] = None
    group: Optional[str] = None
    length: Optional[int] = None
    track: int = 100


@dataclass(frozen=True)
class Race:
    id: int
    name: str
    program_item_id: int
    distance: Optional[int] = None
    track: int = 100
    sequence: Optional[int] = None
    round: Optional[str] = None


@dataclass(frozen=True)
class Lane:
    id: int
    race_id: int
    skater_in_competition_id: int
    skater_upid: Optional[str] = None
    time: Optional[str] = None
    position: Optional[int] = None
    start_position: Optional[int] = None


@dataclass(frozen=True)
class RaceData:
    competition_id: int
    races: tuple[Race, ...] = field(default_factory=tuple)
    programs: tuple[ProgramItem, ...] = field(default_factory=tuple)
    lanes: tuple[Lane, ...] = field(default_factory=tuple)
    competitors: tuple[Competitor, ...] = field(default_factory=tuple)
    competitors_in_competition: tuple[CompetitorInCompetition, ...] = field(default_factory=tuple)
