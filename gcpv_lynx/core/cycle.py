from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gcpv_lynx.sources.base import TableSource
from gcpv_lynx.sources.registry import build_table_source

from .competition import resolve_competition_id
from .config import ExportConfig
from .emitter import build_records_from_data, write_outputs
from .errors import OutputWriteFailure, SourceNotFound
from .joiner import get_competitors, get_competitors_in_competition, get_lanes, get_programs, get_races
from .models import RaceData
from .sequencer import sort_races
from .snapshot import Snapshot, SnapshotStore, build_snapshot
from .utils import unlink_if_exists


@dataclass(frozen=True)
class CycleResult:
    competition_id: int
    races: int
    lanes: int
    evt_path: Path
    json_path: Path
    snapshot: Snapshot


def check_source_exists(location: Path | str) -> Path:
    path = Path(location)
    if not path.exists():
        raise SourceNotFound(path)
    return path


def fetch_race_data(
    location: Path | str,
    competition_id_override: Optional[int] = None,
    source: Optional[TableSource] = None,
    config: Optional[ExportConfig] = None,
) -> RaceData:
    config = config or ExportConfig()
    path = check_source_exists(location)
    source = source or build_table_source(config)

    competition_id = resolve_competition_id(source, path, competition_id_override)
    print(f"[cycle] competition_id={competition_id}")

    races = sort_races(get_races(source, path, competition_id))
    print(f"[cycle] races={len(races)}")

    race_data = RaceData(
        competition_id=competition_id,
        races=tuple(races),
        programs=tuple(get_programs(source, path, competition_id)),
        lanes=tuple(get_lanes(source, path, competition_id)),
        competitors=tuple(get_competitors(source, path)),
        competitors_in_competition=tuple(get_competitors_in_competition(source, path, competition_id)),
    )
    print(f"[cycle] lanes={len(race_data.lanes)} competitors={len(race_data.competitors_in_competition)}")
    return race_data


def refresh_snapshot(
    location: Path | str,
    store: SnapshotStore,
    config: Optional[ExportConfig] = None,
    source: Optional[TableSource] = None,
) -> Snapshot:
    """Build a snapshot without touching any file and publish it once complete."""
    config = config or ExportConfig()
    race_data = fetch_race_data(location, config.competition_id, source=source, config=config)
    records = build_records_from_data(race_data, logo_template=config.logo_template)
    snapshot = build_snapshot(race_data.competition_id, records)
    store.publish(snapshot)
    return snapshot


def run_cycle(
    location: Path | str,
    text_output_path: Path | str,
    json_output_path: Path | str,
    competition_id_override: Optional[int] = None,
    config: Optional[ExportConfig] = None,
    source: Optional[TableSource] = None,
    store: Optional[SnapshotStore] = None,
) -> CycleResult:
    """Fetch, join, sequence and write both outputs. Any failure aborts the whole cycle."""
    config = config or ExportConfig()
    override = competition_id_override if competition_id_override is not None else config.competition_id
    evt_path = Path(text_output_path)
    json_path = Path(json_output_path)

    race_data = fetch_race_data(location, override, source=source, config=config)
    records = build_records_from_data(race_data, logo_template=config.logo_template)
    snapshot = build_snapshot(race_data.competition_id, records)

    for stale in (evt_path, json_path):
        try:
            unlink_if_exists(stale)
        except OSError as exc:
            raise OutputWriteFailure(stale, f"cannot remove previous file: {exc}") from exc

    write_outputs(records, evt_path, json_path)
    if store is not None:
        store.publish(snapshot)

    print(f"[cycle] wrote {evt_path} and {json_path} ({snapshot.race_count} races, {snapshot.lane_count} lanes)")
    return CycleResult(
        competition_id=race_data.competition_id,
        races=snapshot.race_count,
        lanes=snapshot.lane_count,
        evt_path=evt_path,
        json_path=json_path,
        snapshot=snapshot,
    )
