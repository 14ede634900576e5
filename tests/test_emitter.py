from __future__ import annotations

import json

import pytest

from gcpv_lynx.core.emitter import (
    affiliation_url,
    build_race_records,
    letter_to_number,
    render_evt,
    render_json,
    sort_lanes,
    split_race_name,
)
from gcpv_lynx.core.models import Competitor, CompetitorInCompetition, Lane, ProgramItem, Race


@pytest.mark.parametrize(
    "name, event, heat",
    [("101A", "101", 1), ("7", "7", 0), ("12C", "12", 3), ("3b", "3", 2), ("", "", 0)],
)
def test_heat_decomposition(name: str, event: str, heat: int) -> None:
    got_event, letters = split_race_name(name)
    assert got_event == event
    assert letter_to_number(letters) == heat


def test_only_first_heat_letter_counts() -> None:
    assert letter_to_number("BA") == 2
    assert letter_to_number("é") == 0


def test_lanes_without_start_position_sort_last() -> None:
    lanes = [
        Lane(id=1, race_id=1, skater_in_competition_id=1, start_position=None),
        Lane(id=2, race_id=1, skater_in_competition_id=2, start_position=3),
        Lane(id=3, race_id=1, skater_in_competition_id=3, start_position=1),
        Lane(id=4, race_id=1, skater_in_competition_id=4, start_position=None),
    ]
    assert [lane.id for lane in sort_lanes(lanes)] == [3, 2, 1, 4]


def test_affiliation_url_template() -> None:
    assert affiliation_url("/logos/{affiliation}.png", "CPVM") == "/logos/CPVM.png"
    assert affiliation_url("/logos/{affiliation}.png", None) == "/logos/.png"


def _records(**program_overrides):
    program = ProgramItem(id=10, competition_id=7, distance_id=1, group="Groupe A", length=500, track=111)
    if program_overrides.get("missing_program"):
        programs = []
    else:
        programs = [program]
    races = [Race(id=100, name="4A", program_item_id=10, distance=500, track=111)]
    lanes = [
        Lane(id=1, race_id=100, skater_in_competition_id=50, start_position=2),
        Lane(id=2, race_id=100, skater_in_competition_id=51, start_position=None),
        Lane(id=3, race_id=100, skater_in_competition_id=99, start_position=1),
    ]
    competitors = [Competitor(no_patineur=1, id="A-1", first_name="Alice", last_name="Tremblay")]
    entries = [
        CompetitorInCompetition(id=50, competitor_id="A-1", affiliation="CPVM", helmet_id=11),
        CompetitorInCompetition(id=51, competitor_id=None, affiliation=None, helmet_id=None),
    ]
    return build_race_records(races, programs, lanes, competitors, entries, logo_template="logos/{affiliation}.png")


def test_evt_lines_render_missing_values_as_empty() -> None:
    text = render_evt(_records())
    assert text.splitlines() == [
        "4A,1,01,4A Groupe A 500m 111m",
        ",0,1,,,,,",
        ",11,2,Tremblay,Alice,CPVM,,A-1",
        ",0,,,,,,",
    ]
    assert text.endswith("\n")


def test_header_defaults_when_program_is_absent() -> None:
    records = _records(missing_program=True)
    assert render_evt(records).splitlines()[0] == "4A,1,01,4A  0m 100m"
    payload = json.loads(render_json(records))
    assert payload[0]["title"] == "4A - 0m   (100m)"
    assert "group" not in payload[0]
    assert "length" not in payload[0]
    assert payload[0]["track"] == 100


def test_json_race_and_lane_fields() -> None:
    payload = json.loads(render_json(_records()))
    race = payload[0]
    assert race["name"] == "4A"
    assert race["title"] == "4A - 500m  Groupe A (111m)"
    assert race["event"] == "4"
    assert race["heat"] == 1
    assert race["group"] == "Groupe A"
    assert race["length"] == 500
    assert race["track"] == 111
    assert race["lanes"][1] == {
        "startPosition": 2,
        "helmetId": 11,
        "name": "Alice Tremblay",
        "affiliationUrl": "logos/CPVM.png",
        "lastName": "Tremblay",
        "firstName": "Alice",
        "affiliation": "CPVM",
        "competitorId": "A-1",
    }


def test_optional_json_fields_are_omitted_not_null() -> None:
    payload = json.loads(render_json(_records()))
    unknown = payload[0]["lanes"][0]
    assert unknown == {"startPosition": 1, "name": "", "affiliationUrl": "logos/.png"}
    no_start = payload[0]["lanes"][2]
    assert "startPosition" not in no_start
    assert None not in no_start.values()


def test_json_lane_order_matches_evt_lane_order() -> None:
    records = _records()
    evt_starts = [line.split(",")[2] for line in render_evt(records).splitlines()[1:]]
    json_starts = [str(lane.get("startPosition", "")) for lane in json.loads(render_json(records))[0]["lanes"]]
    assert evt_starts == json_starts


def test_pretty_json_uses_two_space_indent_and_keeps_unicode() -> None:
    records = build_race_records(
        [Race(id=1, name="1A", program_item_id=1)],
        [ProgramItem(id=1, competition_id=1, distance_id=1, group="Élite")],
        [],
        [],
        [],
    )
    text = render_json(records)
    assert '\n  {\n    "name": "1A",' in text
    assert "Élite" in text
    assert json.loads(text)[0]["lanes"] == []
