from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .models import Competitor, CompetitorInCompetition, Distance, Lane, ProgramItem, Race
from .tables import RowReader, read_typed_table


TRACK_111_MARKER = "(111)"
TRACK_111 = 111
TRACK_100 = 100


def classify_track(distance_name: Optional[str]) -> int:
    if distance_name and TRACK_111_MARKER in distance_name:
        return TRACK_111
    return TRACK_100


def club_affiliation(club: Optional[dict[str, Any]]) -> Optional[str]:
    if club is None:
        return None
    return club["Abreviation"] or club["Nom du Club"]


def get_competitors(source: RowReader, location: Path | str) -> list[Competitor]:
    competitors: list[Competitor] = []
    for row in read_typed_table(source, location, "TPatineurs"):
        if row["NoPatineur"] is None:
            continue
        competitors.append(
            Competitor(
                no_patineur=row["NoPatineur"],
                id=row["CodePat"],
                first_name=row["Prenom"],
                last_name=row["Nom"],
                birth_date=row["Date de naissance"],
                sex=row["Sexe"],
                division=row["Division"],
                category_id=row["NoCategorie"],
                club_id=row["NoClub"],
            )
        )
    return competitors


def get_competitors_in_competition(
    source: RowReader, location: Path | str, competition_id: int
) -> list[CompetitorInCompetition]:
    competitor_map = {competitor.no_patineur: competitor for competitor in get_competitors(source, location)}
    club_map = {
        club["NoClub"]: club for club in read_typed_table(source, location, "TClubs") if club["NoClub"] is not None
    }

    entries: list[CompetitorInCompetition] = []
    for row in read_typed_table(source, location, "TPatineur_compe"):
        if row["NoCompetition"] != competition_id:
            continue
        if row["NoPatCompe"] is None or row["NoPatineur"] is None:
            continue
        competitor = competitor_map.get(row["NoPatineur"])
        club_id = row["NoClub"]
        club = club_map.get(club_id) if club_id is not None else None
        entries.append(
            CompetitorInCompetition(
                id=row["NoPatCompe"],
                competitor_id=competitor.id if competitor else None,
                club_id=club_id,
                affiliation=club_affiliation(club),
                club_name=club["Nom du Club"] if club else None,
                rank=row["Rang"],
                removed=None if row["Retirer"] is None else row["Retirer"] != 0,
                group=row["Groupe"],
                helmet_id=row["NoCasque"],
            )
        )
    return entries


def get_distances(source: RowReader, location: Path | str) -> list[Distance]:
    distances: list[Distance] = []
    for row in read_typed_table(source, location, "TDistances_Standards"):
        if row["NoDistance"] is None:
            continue
        distances.append(
            Distance(
                id=row["NoDistance"],
                name=row["Distance"],
                length=row["LongueurEpreuve"],
                track=classify_track(row["Distance"]),
            )
        )
    return distances


def get_programs(source: RowReader, location: Path | str, competition_id: int) -> list[ProgramItem]:
    distance_map = {distance.id: distance for distance in get_distances(source, location)}

    programs: list[ProgramItem] = []
    for row in read_typed_table(source, location, "TProg_Courses"):
        if row["NoCompetition"] != competition_id:
            continue
        if row["NoDistance"] is None or row["CleDistancesCompe"] is None:
            continue
        distance = distance_map.get(row["NoDistance"])
        programs.append(
            ProgramItem(
                id=row["CleDistancesCompe"],
                competition_id=row["NoCompetition"],
                distance_id=row["NoDistance"],
                distance=row["Distance"],
                group=row["Groupe"],
                length=distance.length if distance else None,
                track=distance.track if distance else TRACK_100,
            )
        )
    return programs


def get_races(source: RowReader, location: Path | str, competition_id: int) -> list[Race]:
    program_map = {program.id: program for program in get_programs(source, location, competition_id)}

    races: list[Race] = []
    for row in read_typed_table(source, location, "TVagues"):
        program_key = row["CleDistancesCompe"]
        if program_key is None or row["CleTVagues"] is None:
            continue
        program = program_map.get(program_key)
        if program is None or program.competition_id != competition_id:
            continue
        races.append(
            Race(
                id=row["CleTVagues"],
                name=row["NoVague"] or "",
                program_item_id=program.id,
                distance=program.length,
                track=program.track,
                sequence=row["Seq"],
                round=row["Qual_ou_Fin"],
            )
        )
    return races


def get_lanes(source: RowReader, location: Path | str, competition_id: int) -> list[Lane]:
    race_ids = {race.id for race in get_races(source, location, competition_id)}
    entry_map = {
        entry.id: entry for entry in get_competitors_in_competition(source, location, competition_id)
    }

    lanes: list[Lane] = []
    for row in read_typed_table(source, location, "TPatVagues"):
        race_id = row["CleTVagues"]
        if race_id is None or race_id not in race_ids:
            continue
        if row["NoPatCompe"] is None or row["CleTPatVagues"] is None:
            continue
        entry = entry_map.get(row["NoPatCompe"])
        lanes.append(
            Lane(
                id=row["CleTPatVagues"],
                race_id=race_id,
                skater_in_competition_id=row["NoPatCompe"],
                skater_upid=entry.competitor_id if entry else None,
                time=row["Temps"],
                position=row["Rang"],
                start_position=row["NoCasque"],
            )
        )
    return lanes
