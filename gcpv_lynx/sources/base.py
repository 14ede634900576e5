from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd

from gcpv_lynx.core.config import ExportConfig
from gcpv_lynx.core.errors import TableReadFailure


Row = dict[str, Any]


class StrategyError(RuntimeError):
    """Raised by a strategy when it cannot produce a table; the next strategy is tried."""


class TableStrategy(ABC):
    id: str = ""
    name: str = ""

    @classmethod
    def from_config(cls, config: ExportConfig) -> TableStrategy:
        return cls()

    @abstractmethod
    def read(self, location: Path, table_name: str) -> list[Row]:
        raise NotImplementedError

    @staticmethod
    def _rows_from_csv_text(text: str) -> list[Row]:
        if not text.strip():
            return []
        try:
            frame = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
        except pd.errors.ParserError as exc:
            raise StrategyError(f"malformed CSV: {exc}") from exc
        return frame_to_rows(frame)


def frame_to_rows(frame: pd.DataFrame) -> list[Row]:
    if frame is None or frame.empty:
        return []
    clean = frame.astype(object).where(pd.notna(frame), None)
    return [{str(key): value for key, value in record.items()} for record in clean.to_dict(orient="records")]


class TableSource:
    """Reads named tables through an ordered chain of strategies.

    A source is meant to live for a single cycle: tables are memoised so the
    joiner can re-run upstream retrievals without re-extracting.
    """

    def __init__(self, strategies: Sequence[TableStrategy], memoize: bool = True) -> None:
        self.strategies = list(strategies)
        self.memoize = memoize
        self._cache: dict[tuple[str, str], list[Row]] = {}

    @property
    def strategy_ids(self) -> list[str]:
        return [strategy.id for strategy in self.strategies]

    def read_table(self, location: Path | str, table_name: str) -> list[Row]:
        key = (str(location), table_name)
        if self.memoize and key in self._cache:
            return [dict(row) for row in self._cache[key]]

        failures: list[tuple[str, str]] = []
        for strategy in self.strategies:
            try:
                rows = strategy.read(Path(location), table_name)
            except StrategyError as exc:
                failures.append((strategy.id, str(exc)))
                if len(failures) < len(self.strategies):
                    print(f"[source] {strategy.id} failed for {table_name}, trying next strategy")
                continue
            if self.memoize:
                self._cache[key] = rows
                return [dict(row) for row in rows]
            return rows
        raise TableReadFailure(table_name, failures)


class StaticStrategy(TableStrategy):
    """Serves tables already held in memory (fixtures, replays)."""

    id = "static"
    name = "In-memory tables"

    def __init__(self, tables: dict[str, Iterable[Row]]) -> None:
        self.tables = {name: [dict(row) for row in rows] for name, rows in tables.items()}

    def read(self, location: Path, table_name: str) -> list[Row]:
        if table_name not in self.tables:
            raise StrategyError(f"table {table_name} not loaded")
        return [dict(row) for row in self.tables[table_name]]
