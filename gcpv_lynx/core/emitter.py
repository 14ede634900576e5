from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from .config import DEFAULT_LOGO_TEMPLATE
from .errors import OutputWriteFailure
from .models import Competitor, CompetitorInCompetition, Lane, ProgramItem, Race, RaceData
from .utils import safe_mkdir


MISSING_START_POSITION = float("inf")


@dataclass(frozen=True)
class LaneRecord:
    start_position: Optional[int]
    helmet_id: Optional[int]
    name: str
    affiliation_url: str
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    affiliation: Optional[str] = None
    competitor_id: Optional[str] = None

    def evt_line(self) -> str:
        fields = [
            "",
            str(self.helmet_id if self.helmet_id is not None else 0),
            _text(self.start_position),
            _text(self.last_name),
            _text(self.first_name),
            _text(self.affiliation),
            "",
            _text(self.competitor_id),
        ]
        return ",".join(fields)

    def to_json(self) -> dict[str, Any]:
        return _drop_none(
            {
                "startPosition": self.start_position,
                "helmetId": self.helmet_id,
                "name": self.name,
                "affiliationUrl": self.affiliation_url,
                "lastName": self.last_name,
                "firstName": self.first_name,
                "affiliation": self.affiliation,
                "competitorId": self.competitor_id,
            },
            required=("name", "affiliationUrl"),
        )


@dataclass(frozen=True)
class RaceRecord:
    name: str
    title: str
    event: str
    heat: int
    group: Optional[str]
    length: Optional[int]
    track: int
    header_group: str
    header_length: int
    lanes: tuple[LaneRecord, ...]

    def evt_header(self) -> str:
        return f"{self.name},1,01,{self.name} {self.header_group} {self.header_length}m {self.track}m"

    def evt_lines(self) -> list[str]:
        return [self.evt_header()] + [lane.evt_line() for lane in self.lanes]

    def to_json(self) -> dict[str, Any]:
        payload = _drop_none(
            {
                "name": self.name,
                "title": self.title,
                "event": self.event,
                "heat": self.heat,
                "group": self.group,
                "length": self.length,
                "track": self.track,
            },
            required=("name", "title", "event", "heat", "track"),
        )
        payload["lanes"] = [lane.to_json() for lane in self.lanes]
        return payload


def split_race_name(name: str) -> tuple[str, str]:
    """``"101A"`` -> ``("101", "A")``: non-alphabetic characters form the event, letters the heat."""
    event = "".join(ch for ch in name if not ch.isalpha())
    letters = "".join(ch for ch in name if ch.isalpha())
    return event, letters


def letter_to_number(letters: str) -> int:
    # Only the first letter counts; multi-letter heat codes are not decoded.
    if not letters:
        return 0
    first = letters[0].lower()
    if "a" <= first <= "z":
        return ord(first) - ord("a") + 1
    return 0


def lane_sort_key(lane: Lane) -> float:
    return lane.start_position if lane.start_position is not None else MISSING_START_POSITION


def sort_lanes(lanes: Iterable[Lane]) -> list[Lane]:
    return sorted(lanes, key=lane_sort_key)


def affiliation_url(template: str, affiliation: Optional[str]) -> str:
    return template.replace("{affiliation}", affiliation or "")


def build_race_records(
    races: Sequence[Race],
    programs: Iterable[ProgramItem],
    lanes: Iterable[Lane],
    competitors: Iterable[Competitor],
    competitors_in_competition: Iterable[CompetitorInCompetition],
    logo_template: str = DEFAULT_LOGO_TEMPLATE,
) -> list[RaceRecord]:
    """Join races with their lanes and skaters once; both output formats render from the result."""
    program_map = {program.id: program for program in programs}
    entry_map = {entry.id: entry for entry in competitors_in_competition}
    competitor_map = {competitor.id: competitor for competitor in competitors if competitor.id is not None}

    lanes_by_race: dict[int, list[Lane]] = {}
    for lane in lanes:
        lanes_by_race.setdefault(lane.race_id, []).append(lane)

    records: list[RaceRecord] = []
    for race in races:
        program = program_map.get(race.program_item_id)
        group = program.group if program else None
        length = program.length if program else None
        header_group = group or ""
        header_length = length if length is not None else 0
        track = program.track if program else 100

        event, letters = split_race_name(race.name)

        lane_records: list[LaneRecord] = []
        for lane in sort_lanes(lanes_by_race.get(race.id, [])):
            entry = entry_map.get(lane.skater_in_competition_id)
            competitor = None
            if entry is not None and entry.competitor_id is not None:
                competitor = competitor_map.get(entry.competitor_id)

            first_name = competitor.first_name if competitor else None
            last_name = competitor.last_name if competitor else None
            affiliation = entry.affiliation if entry else None
            lane_records.append(
                LaneRecord(
                    start_position=lane.start_position,
                    helmet_id=entry.helmet_id if entry else None,
                    name=f"{first_name or ''} {last_name or ''}".strip(),
                    affiliation_url=affiliation_url(logo_template, affiliation),
                    last_name=last_name,
                    first_name=first_name,
                    affiliation=affiliation,
                    competitor_id=competitor.id if competitor else None,
                )
            )

        records.append(
            RaceRecord(
                name=race.name,
                title=f"{race.name} - {header_length}m  {header_group} ({track}m)",
                event=event,
                heat=letter_to_number(letters),
                group=group,
                length=length,
                track=track,
                header_group=header_group,
                header_length=header_length,
                lanes=tuple(lane_records),
            )
        )
    return records


def build_records_from_data(race_data: RaceData, logo_template: str = DEFAULT_LOGO_TEMPLATE) -> list[RaceRecord]:
    return build_race_records(
        race_data.races,
        race_data.programs,
        race_data.lanes,
        race_data.competitors,
        race_data.competitors_in_competition,
        logo_template=logo_template,
    )


def render_evt(records: Iterable[RaceRecord]) -> str:
    lines: list[str] = []
    for record in records:
        lines.extend(record.evt_lines())
    return "".join(f"{line}\n" for line in lines)


def render_json(records: Iterable[RaceRecord], pretty: bool = True) -> str:
    payload = [record.to_json() for record in records]
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def write_outputs(records: Sequence[RaceRecord], evt_path: Path, json_path: Path) -> None:
    """Write the EVT file, then the JSON file. A failure on either aborts; the other may already exist."""
    evt_text = render_evt(records)
    json_text = render_json(records, pretty=True)
    _write_text(evt_path, evt_text)
    _write_text(json_path, json_text)


def _write_text(path: Path, text: str) -> None:
    try:
        safe_mkdir(path.parent)
        with path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
    except OSError as exc:
        raise OutputWriteFailure(path, str(exc)) from exc


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _drop_none(payload: dict[str, Any], required: Sequence[str] = ()) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None or key in required}
