from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from gcpv_lynx.core.config import ExportConfig

from .base import Row, StrategyError, TableStrategy


def resolve_mdb_export_command(command: str = "mdb-export", platform: str | None = None) -> str:
    """Prefer an ``mdb-export.exe`` shipped next to the running executable on Windows."""
    platform = platform or sys.platform
    if platform.startswith("win") and command == "mdb-export":
        local = Path(sys.executable).resolve().parent / "mdb-export.exe"
        if local.exists():
            return str(local)
    return command


class MdbExportStrategy(TableStrategy):
    id = "mdb-export"
    name = "mdbtools mdb-export"

    def __init__(self, command: str = "mdb-export", debug_csv: bool = False, timeout: int = 120) -> None:
        self.command = resolve_mdb_export_command(command)
        self.debug_csv = debug_csv
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ExportConfig) -> MdbExportStrategy:
        return cls(command=config.mdb_export, debug_csv=config.debug_csv)

    def read(self, location: Path, table_name: str) -> list[Row]:
        try:
            completed = subprocess.run(
                [self.command, str(location), table_name],
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise StrategyError(f"Failed to execute {self.command}: {exc}") from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            raise StrategyError(f"mdb-export failed for table {table_name}: {stderr or completed.returncode}")

        text = completed.stdout.decode("utf-8", errors="replace")
        if self.debug_csv:
            print(f"[source] CSV output for {table_name}:\n{text}")
        return self._rows_from_csv_text(text)
