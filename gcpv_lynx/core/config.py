from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional


DEFAULT_LOGO_TEMPLATE = "logos/provinces/{affiliation}.png"
DEFAULT_MDB_EXPORT = "mdb-export"
DEFAULT_ODBC_DRIVER = "Microsoft Access Driver (*.mdb, *.accdb)"
DEFAULT_EVT_NAME = "lynx.evt"
DEFAULT_JSON_NAME = "races.json"
DEFAULT_SERVE_PORT = 3030
DEFAULT_SERVE_INTERVAL = 5.0
DEFAULT_EXPORT_INTERVAL = 60.0


def default_strategies(platform: str | None = None) -> tuple[str, ...]:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return ("mdb-export", "odbc")
    return ("mdb-export",)


@dataclass(frozen=True)
class ExportConfig:
    competition_id: Optional[int] = None
    logo_template: str = DEFAULT_LOGO_TEMPLATE
    strategies: tuple[str, ...] = field(default_factory=default_strategies)
    mdb_export: str = DEFAULT_MDB_EXPORT
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    debug_csv: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, platform: str | None = None) -> "ExportConfig":
        env = os.environ if environ is None else environ
        raw_strategies = env.get("GCPV_STRATEGIES", "")
        strategies = tuple(part.strip().lower() for part in raw_strategies.split(",") if part.strip())
        return cls(
            competition_id=parse_competition_id(env.get("GCPV_COMPETITION_ID")),
            logo_template=env.get("GCPV_LOGO_TEMPLATE") or DEFAULT_LOGO_TEMPLATE,
            strategies=strategies or default_strategies(platform),
            mdb_export=env.get("GCPV_MDB_EXPORT") or DEFAULT_MDB_EXPORT,
            odbc_driver=env.get("GCPV_ODBC_DRIVER") or DEFAULT_ODBC_DRIVER,
            debug_csv=bool(env.get("GCPV_DEBUG_CSV")),
        )

    def with_overrides(
        self,
        competition_id: Optional[int] = None,
        strategies: Optional[list[str]] = None,
        logo_template: Optional[str] = None,
    ) -> "ExportConfig":
        return ExportConfig(
            competition_id=competition_id if competition_id is not None else self.competition_id,
            logo_template=logo_template or self.logo_template,
            strategies=tuple(s.strip().lower() for s in strategies) if strategies else self.strategies,
            mdb_export=self.mdb_export,
            odbc_driver=self.odbc_driver,
            debug_csv=self.debug_csv,
        )


def parse_competition_id(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"GCPV_COMPETITION_ID must be an integer, got {raw!r}") from exc


def default_output_dir() -> Path:
    return Path("output")


def default_evt_path() -> Path:
    return default_output_dir() / DEFAULT_EVT_NAME


def default_json_path() -> Path:
    return default_output_dir() / DEFAULT_JSON_NAME
