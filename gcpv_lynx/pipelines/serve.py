from __future__ import annotations

import argparse
from pathlib import Path

from gcpv_lynx.core.config import DEFAULT_SERVE_INTERVAL, DEFAULT_SERVE_PORT, ExportConfig
from gcpv_lynx.core.cycle import refresh_snapshot
from gcpv_lynx.core.scheduler import PollingScheduler
from gcpv_lynx.core.snapshot import SnapshotStore
from gcpv_lynx.core.webapp import make_server


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Serve live race JSON from a GCPV database at /races.")
    parser.add_argument("--pat", required=True, help="GCPV .pat/.mdb database (or a directory of CSV tables)")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_SERVE_PORT)
    parser.add_argument("--interval", type=float, default=DEFAULT_SERVE_INTERVAL, help="Refresh interval in seconds")
    parser.add_argument("--competition-id", type=int, default=None)
    parser.add_argument("--strategy", action="append", default=None, help="mdb-export | odbc | csv-dir (repeatable)")
    parser.add_argument("--logo-template", default=None)
    args = parser.parse_args(argv)

    config = ExportConfig.from_env().with_overrides(
        competition_id=args.competition_id,
        strategies=args.strategy,
        logo_template=args.logo_template,
    )
    pat = Path(args.pat)
    store = SnapshotStore()
    scheduler = PollingScheduler(lambda: refresh_snapshot(pat, store, config=config), interval=args.interval, name="serve")
    server = make_server(store, host=args.host, port=args.port, scheduler=scheduler)

    scheduler.start()
    print(f"[serve] listening on http://{args.host}:{args.port}/races (refresh every {args.interval:g}s)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("[serve] stopping")
    finally:
        server.server_close()
        scheduler.stop(timeout=args.interval)


if __name__ == "__main__":
    main()
