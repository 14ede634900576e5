from __future__ import annotations

import argparse
import time
from pathlib import Path

from gcpv_lynx.core.config import DEFAULT_EXPORT_INTERVAL, ExportConfig, default_evt_path, default_json_path
from gcpv_lynx.core.cycle import run_cycle
from gcpv_lynx.core.errors import GcpvExportError
from gcpv_lynx.core.scheduler import PollingScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export a GCPV competition database to a Lynx EVT file and race JSON.")
    parser.add_argument("--pat", required=True, help="GCPV .pat/.mdb database (or a directory of CSV tables)")
    parser.add_argument("--evt", default=str(default_evt_path()), help="Lynx EVT output file")
    parser.add_argument("--json", default=str(default_json_path()), help="Race JSON output file")
    parser.add_argument("--competition-id", type=int, default=None, help="Skip TCompetition lookup and use this id")
    parser.add_argument(
        "--strategy",
        action="append",
        default=None,
        help="Table extraction strategy, repeatable, tried in order: mdb-export | odbc | csv-dir",
    )
    parser.add_argument("--logo-template", default=None, help="Affiliation image path, with an {affiliation} placeholder")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help=f"Re-export every N seconds until interrupted (e.g. {DEFAULT_EXPORT_INTERVAL:g})",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    config = ExportConfig.from_env().with_overrides(
        competition_id=args.competition_id,
        strategies=args.strategy,
        logo_template=args.logo_template,
    )
    pat = Path(args.pat)
    evt_path = Path(args.evt)
    json_path = Path(args.json)

    def cycle() -> None:
        run_cycle(pat, evt_path, json_path, config=config)

    if args.interval is None:
        try:
            cycle()
        except GcpvExportError as exc:
            print(f"[export] ERROR: {exc}")
            raise SystemExit(1) from exc
        print("[export] done lynx and json")
        return

    scheduler = PollingScheduler(cycle, interval=args.interval, name="export")
    print(f"[export] polling {pat} every {args.interval:g}s (Ctrl+C to stop)")
    scheduler.start()
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        print("[export] stopping")
    finally:
        scheduler.stop(timeout=args.interval)


if __name__ == "__main__":
    main()
