from __future__ import annotations

from typing import Iterable

from gcpv_lynx.core.config import ExportConfig

from .base import TableSource, TableStrategy
from .csv_dir import CsvDirectoryStrategy
from .mdb_export import MdbExportStrategy
from .odbc import OdbcStrategy


STRATEGY_REGISTRY = {
    "mdb-export": MdbExportStrategy,
    "odbc": OdbcStrategy,
    "csv-dir": CsvDirectoryStrategy,
}


def build_strategy(strategy_name: str, config: ExportConfig | None = None) -> TableStrategy:
    config = config or ExportConfig()
    key = strategy_name.strip().lower()
    if key not in STRATEGY_REGISTRY:
        available = ", ".join(sorted(STRATEGY_REGISTRY))
        raise ValueError(f"Unknown strategy '{strategy_name}'. Available: {available}")
    return STRATEGY_REGISTRY[key].from_config(config)


def build_table_source(config: ExportConfig, strategy_names: Iterable[str] | None = None) -> TableSource:
    names = list(strategy_names) if strategy_names is not None else list(config.strategies)
    return TableSource([build_strategy(name, config) for name in names])
