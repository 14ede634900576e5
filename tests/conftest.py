from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from gcpv_lynx.sources.base import StaticStrategy, TableSource


def competition_tables() -> dict[str, list[dict[str, Any]]]:
    """One competition (7), one 500m distance, races 1A/1B, two lanes in 1A; plus rows of competition 8."""
    return {
        "TCompetition": [
            {"NoCompetition": "7", "Lieu": "Québec", "Date": "2024-02-03", "NoClub": "1"},
        ],
        "TDistances_Standards": [
            {"NoDistance": "1", "Distance": "500m", "LongueurEpreuve": "500"},
            {"NoDistance": "2", "Distance": "777m (111)", "LongueurEpreuve": "777"},
        ],
        "TProg_Courses": [
            {"CleDistancesCompe": "10", "NoCompetition": "7", "NoDistance": "1", "Distance": "500m",
             "NoVague": "", "Groupe": "Groupe A", "OrdreSequence": "1.0"},
            {"CleDistancesCompe": "20", "NoCompetition": "8", "NoDistance": "1", "Distance": "500m",
             "NoVague": "", "Groupe": "Autre", "OrdreSequence": "2"},
        ],
        "TVagues": [
            {"CleTVagues": "101", "NoVague": "1B", "CleDistancesCompe": "10", "Qual_ou_Fin": "Qual", "Seq": "2"},
            {"CleTVagues": "100", "NoVague": "1A", "CleDistancesCompe": "10", "Qual_ou_Fin": "Qual", "Seq": "1"},
            {"CleTVagues": "200", "NoVague": "9X", "CleDistancesCompe": "20", "Qual_ou_Fin": "Fin", "Seq": "1"},
        ],
        "TClubs": [
            {"NoClub": "1", "Nom du Club": "Club de Montréal", "Commentaire": "", "NoRegion": "3", "Abreviation": "CPVM"},
            {"NoClub": "2", "Nom du Club": "Club Sans Abrev", "Commentaire": "", "NoRegion": "3", "Abreviation": ""},
            {"NoClub": "3", "Nom du Club": "", "Commentaire": "", "NoRegion": "", "Abreviation": ""},
        ],
        "TPatineurs": [
            {"NoPatineur": "1", "Prenom": "Alice", "Nom": "Tremblay", "Date de naissance": "2008-05-01",
             "Sexe": "F", "Division": "Junior", "NoCategorie": "4", "NoClub": "1", "CodePat": "A-1"},
            {"NoPatineur": "2", "Prenom": "Bob", "Nom": "Gagnon", "Date de naissance": "2007-11-12",
             "Sexe": "M", "Division": "Junior", "NoCategorie": "4", "NoClub": "2", "CodePat": "B-2"},
            {"NoPatineur": "3", "Prenom": "Chloé", "Nom": "Roy", "Date de naissance": "",
             "Sexe": "F", "Division": "", "NoCategorie": "", "NoClub": "3", "CodePat": "C-3"},
        ],
        "TPatineur_compe": [
            {"NoPatCompe": "50", "NoCompetition": "7", "NoPatineur": "1", "NoCategorie": "4", "NoClub": "1",
             "Rang": "", "Retirer": "0", "Groupe": "Groupe A", "NoCasque": "11"},
            {"NoPatCompe": "51", "NoCompetition": "7", "NoPatineur": "2", "NoCategorie": "4", "NoClub": "2",
             "Rang": "", "Retirer": "1", "Groupe": "Groupe A", "NoCasque": "12"},
            {"NoPatCompe": "52", "NoCompetition": "8", "NoPatineur": "3", "NoCategorie": "", "NoClub": "3",
             "Rang": "", "Retirer": "", "Groupe": "", "NoCasque": "13"},
        ],
        "TPatVagues": [
            {"CleTVagues": "100", "NoPatCompe": "50", "Temps": "45.12", "Rang": "2", "NoCasque": "2", "CleTPatVagues": "1000"},
            {"CleTVagues": "100", "NoPatCompe": "51", "Temps": "44.80", "Rang": "1", "NoCasque": "1", "CleTPatVagues": "1001"},
            {"CleTVagues": "200", "NoPatCompe": "52", "Temps": "", "Rang": "", "NoCasque": "1", "CleTPatVagues": "1002"},
        ],
    }


@pytest.fixture
def tables() -> dict[str, list[dict[str, Any]]]:
    return competition_tables()


@pytest.fixture
def make_source() -> Callable[[dict[str, list[dict[str, Any]]]], TableSource]:
    def _make(table_rows: dict[str, list[dict[str, Any]]]) -> TableSource:
        return TableSource([StaticStrategy(table_rows)])

    return _make


@pytest.fixture
def source(tables, make_source) -> TableSource:
    return make_source(tables)


@pytest.fixture
def pat_file(tmp_path: Path) -> Path:
    path = tmp_path / "competition.pat"
    path.write_bytes(b"")
    return path
