from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


class GcpvExportError(RuntimeError):
    """Base class for every failure that aborts an export cycle."""


class SourceNotFound(GcpvExportError):
    def __init__(self, location: Path | str) -> None:
        super().__init__(f"File {location} not found")
        self.location = str(location)


class CompetitionError(GcpvExportError):
    """Raised when the active competition cannot be determined."""


class NoCompetition(CompetitionError):
    def __init__(self) -> None:
        super().__init__("No competition found in mdb")


class AmbiguousCompetition(CompetitionError):
    def __init__(self, count: int) -> None:
        super().__init__(f"Multiple competitions found in mdb ({count} rows)")
        self.count = count


class MissingCompetitionId(CompetitionError):
    def __init__(self) -> None:
        super().__init__("Competition ID is missing or invalid")


class TableReadFailure(GcpvExportError):
    def __init__(self, table: str, failures: Sequence[tuple[str, str]]) -> None:
        details = "; ".join(f"{strategy}: {message}" for strategy, message in failures) or "no strategy configured"
        super().__init__(f"Could not read table {table} ({details})")
        self.table = table
        self.failures = list(failures)


class FieldDeserializationFailure(GcpvExportError):
    def __init__(self, table: str, column: str, value: Any, expected: str) -> None:
        super().__init__(f"Failed to deserialize {table}.{column}: expected {expected}, got {value!r}")
        self.table = table
        self.column = column
        self.value = value


class OutputWriteFailure(GcpvExportError):
    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to write output file {path}: {reason}")
        self.path = str(path)
