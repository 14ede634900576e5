from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any

from gcpv_lynx.core.config import ExportConfig
from gcpv_lynx.core.utils import strip_integer_suffix

from .base import Row, StrategyError, TableStrategy


class OdbcStrategy(TableStrategy):
    """Reads tables through the Microsoft Access ODBC driver (Windows)."""

    id = "odbc"
    name = "Microsoft Access ODBC"

    def __init__(self, driver: str = "Microsoft Access Driver (*.mdb, *.accdb)") -> None:
        self.driver = driver

    @classmethod
    def from_config(cls, config: ExportConfig) -> OdbcStrategy:
        return cls(driver=config.odbc_driver)

    def connection_string(self, location: Path) -> str:
        return f"Driver={{{self.driver}}};Dbq={location};"

    def read(self, location: Path, table_name: str) -> list[Row]:
        try:
            import pyodbc
        except ImportError as exc:
            raise StrategyError("pyodbc is not installed (pip install gcpv-lynx[odbc])") from exc

        try:
            conn = pyodbc.connect(self.connection_string(location))
        except pyodbc.Error as exc:
            raise StrategyError(
                "Failed to connect to Access DB via ODBC. Ensure the Microsoft Access Database Engine "
                f"Redistributable is installed: {exc}"
            ) from exc

        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM [{table_name}]")
            if cursor.description is None:
                return []
            columns = [column[0] for column in cursor.description]
            return [
                {column: _normalize_cell(value) for column, value in zip(columns, record)}
                for record in cursor.fetchall()
            ]
        except pyodbc.Error as exc:
            raise StrategyError(f"ODBC query failed for table {table_name}: {exc}") from exc
        finally:
            conn.close()


def _normalize_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return strip_integer_suffix(value)
    return value
