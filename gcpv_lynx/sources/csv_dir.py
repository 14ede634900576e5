from __future__ import annotations

from pathlib import Path

from .base import Row, StrategyError, TableStrategy


class CsvDirectoryStrategy(TableStrategy):
    """Reads ``<location>/<table>.csv`` files, as written by the dump-tables pipeline."""

    id = "csv-dir"
    name = "Directory of CSV tables"

    def read(self, location: Path, table_name: str) -> list[Row]:
        if not location.is_dir():
            raise StrategyError(f"{location} is not a directory")
        csv_path = location / f"{table_name}.csv"
        if not csv_path.exists():
            raise StrategyError(f"missing {csv_path.name}")
        try:
            text = csv_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StrategyError(f"cannot read {csv_path}: {exc}") from exc
        return self._rows_from_csv_text(text)
