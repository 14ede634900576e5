from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import pandas as pd

from gcpv_lynx.core.config import ExportConfig
from gcpv_lynx.core.cycle import check_source_exists
from gcpv_lynx.core.errors import GcpvExportError
from gcpv_lynx.core.tables import TABLE_SCHEMAS
from gcpv_lynx.core.utils import safe_mkdir
from gcpv_lynx.sources.base import TableSource
from gcpv_lynx.sources.registry import build_table_source


def dump_tables(source: TableSource, location: Path, out_dir: Path, tables: list[str] | None = None) -> dict[str, int]:
    """Copy the raw source tables to ``<out_dir>/<table>.csv``; the csv-dir strategy reads them back."""
    safe_mkdir(out_dir)
    counts: dict[str, int] = {}
    for table in tables or list(TABLE_SCHEMAS):
        rows = source.read_table(location, table)
        columns = list(rows[0]) if rows else list(TABLE_SCHEMAS.get(table, {}))
        # object dtype: an int column with NULLs is written as 12345, not 12345.0
        frame = pd.DataFrame(
            [{key: _dump_cell(value) for key, value in row.items()} for row in rows],
            columns=columns,
            dtype=object,
        )
        frame.to_csv(out_dir / f"{table}.csv", index=False)
        counts[table] = len(frame)
    return counts


def _dump_cell(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Extract the GCPV source tables to a directory of CSV files.")
    parser.add_argument("--pat", required=True, help="GCPV .pat/.mdb database")
    parser.add_argument("--out", required=True, help="Output directory")
    parser.add_argument("--table", action="append", default=None, help="Only this table (repeatable)")
    parser.add_argument("--strategy", action="append", default=None, help="mdb-export | odbc | csv-dir (repeatable)")
    args = parser.parse_args(argv)

    config = ExportConfig.from_env().with_overrides(strategies=args.strategy)
    out_dir = Path(args.out)
    try:
        location = check_source_exists(args.pat)
        counts = dump_tables(build_table_source(config), location, out_dir, tables=args.table)
    except GcpvExportError as exc:
        print(f"[dump_tables] ERROR: {exc}")
        raise SystemExit(1) from exc

    for table, count in counts.items():
        print(f"[dump_tables] {table}: {count} rows")
    print(f"[dump_tables] csv tables: {out_dir}")


if __name__ == "__main__":
    main()
