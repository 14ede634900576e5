from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from gcpv_lynx.sources.base import frame_to_rows

from .errors import FieldDeserializationFailure
from .utils import strip_integer_suffix


class RowReader(Protocol):
    def read_table(self, location: Path | str, table_name: str) -> list[dict[str, Any]]:
        ...


INT = "int"
FLOAT = "float"
TEXT = "str"

TABLE_SCHEMAS: dict[str, dict[str, str]] = {
    "TCompetition": {
        "NoCompetition": INT,
        "Lieu": TEXT,
        "Date": TEXT,
        "NoClub": INT,
    },
    "TPatineurs": {
        "NoPatineur": INT,
        "Prenom": TEXT,
        "Nom": TEXT,
        "Date de naissance": TEXT,
        "Sexe": TEXT,
        "Division": TEXT,
        "NoCategorie": INT,
        "NoClub": INT,
        "CodePat": TEXT,
    },
    "TPatineur_compe": {
        "NoPatCompe": INT,
        "NoCompetition": INT,
        "NoPatineur": INT,
        "NoCategorie": INT,
        "NoClub": INT,
        "Rang": INT,
        "Retirer": INT,
        "Groupe": TEXT,
        "NoCasque": INT,
    },
    "TClubs": {
        "NoClub": INT,
        "Nom du Club": TEXT,
        "Commentaire": TEXT,
        "NoRegion": INT,
        "Abreviation": TEXT,
    },
    "TDistances_Standards": {
        "NoDistance": INT,
        "Distance": TEXT,
        "LongueurEpreuve": INT,
    },
    "TProg_Courses": {
        "CleDistancesCompe": INT,
        "NoCompetition": INT,
        "NoDistance": INT,
        "Distance": TEXT,
        "NoVague": TEXT,
        "Groupe": TEXT,
        "OrdreSequence": FLOAT,
    },
    "TVagues": {
        "CleTVagues": INT,
        "NoVague": TEXT,
        "CleDistancesCompe": INT,
        "Qual_ou_Fin": TEXT,
        "Seq": INT,
    },
    "TPatVagues": {
        "CleTVagues": INT,
        "NoPatCompe": INT,
        "Temps": TEXT,
        "Rang": INT,
        "NoCasque": INT,
        "CleTPatVagues": INT,
    },
}


def read_typed_table(source: RowReader, location: Path | str, table_name: str) -> list[dict[str, Any]]:
    """Read a table and coerce the known columns to their declared types.

    Columns absent from the extract come back as ``None``; unknown columns are dropped.
    """
    schema = TABLE_SCHEMAS[table_name]
    return coerce_rows(table_name, schema, source.read_table(location, table_name))


def coerce_rows(table_name: str, schema: dict[str, str], rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    if not rows:
        return []
    frame = pd.DataFrame(rows, columns=list(schema), dtype=object)
    typed = pd.DataFrame(index=frame.index)
    for column, kind in schema.items():
        if kind == INT:
            typed[column] = _numeric_column(table_name, column, frame[column], integral=True)
        elif kind == FLOAT:
            typed[column] = _numeric_column(table_name, column, frame[column], integral=False)
        else:
            typed[column] = pd.Series([_to_text(value) for value in frame[column]], index=frame.index, dtype=object)
    return frame_to_rows(typed)


def _numeric_column(table_name: str, column: str, values: pd.Series, integral: bool) -> pd.Series:
    cleaned = pd.Series([_strip_cell(value) for value in values], index=values.index, dtype=object)
    numbers = pd.to_numeric(cleaned, errors="coerce")

    present = cleaned.notna()
    bad = present & (numbers.isna() | numbers.isin([float("inf"), float("-inf")]))
    if integral:
        bad |= present & numbers.notna() & (numbers % 1 != 0)
    # Only ASCII digits are numbers in the source database.
    bad |= pd.Series([isinstance(value, str) and not value.isascii() for value in cleaned], index=values.index)

    if bad.any():
        expected = "integer" if integral else "number"
        raise FieldDeserializationFailure(table_name, column, values[bad].iloc[0], expected)

    convert = int if integral else float
    return pd.Series(
        [None if pd.isna(number) else convert(number) for number in numbers],
        index=values.index,
        dtype=object,
    )


def _strip_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float) and value != value:
        return None
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return value


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float):
        if value != value:
            return None
        return strip_integer_suffix(repr(value))
    text = str(value)
    return text if text != "" else None
