"""
Tests for JSON export and database upserts.
"""

import json
import pytest
from dataclasses import replace

from seznamovm.database import SubjektRecord, init_database, get_session
from seznamovm.models import Adresa, PravniForma, Subjekt
from seznamovm.parsing import load_subjects
from seznamovm.storage import (
    export_subjects,
    load_exported,
    save_subjects,
    set_coa_url,
    subjects_without_coa,
)


@pytest.fixture
def db_session(tmp_path):
    db_path = tmp_path / "test.db"
    init_database(db_path)
    session = get_session(db_path)
    yield session
    session.close()


class TestJSONExport:

    def test_export_and_load(self, tmp_path, registry_file):
        subjects = load_subjects(registry_file)
        out = tmp_path / "out" / "subjects.json"

        assert export_subjects(out, subjects) == 3
        assert load_exported(out) == subjects

    def test_export_uses_registry_field_names(self, tmp_path, registry_file):
        out = tmp_path / "subjects.json"
        export_subjects(out, load_subjects(registry_file))

        first = json.loads(out.read_text(encoding="utf-8"))[0]
        assert first["zkratka"] == "MUTRUTNOV"
        assert first["ICO"] == "00278360"
        assert first["datovaSchrankaID"] == "ajebk3t"
        assert first["pravniForma"] == {"type": 801, "label": "Obec"}
        assert first["mail"] == ["podatelna@trutnov.cz", "info@trutnov.cz"]
        assert first["adresaUradu"]["PSC"] == "54101"

    def test_load_missing_or_empty_file(self, tmp_path):
        assert load_exported(tmp_path / "missing.json") == []
        empty = tmp_path / "empty.json"
        empty.write_text("")
        assert load_exported(empty) == []


class TestSaveSubjects:

    def test_new_then_no_change(self, db_session, registry_file):
        subjects = load_subjects(registry_file)

        assert save_subjects(db_session, subjects) == {"new": 3, "updated": 0, "no-change": 0}
        assert save_subjects(db_session, subjects) == {"new": 0, "updated": 0, "no-change": 3}
        assert db_session.query(SubjektRecord).count() == 3

    def test_update_changed_subject(self, db_session, registry_file):
        subjects = load_subjects(registry_file)
        save_subjects(db_session, subjects)

        changed = replace(subjects[0], nazev="Město Trutnov (nový název)")
        assert save_subjects(db_session, [changed]) == {"new": 0, "updated": 1, "no-change": 0}
        assert db_session.get(SubjektRecord, "MUTRUTNOV").nazev == "Město Trutnov (nový název)"

    def test_repeated_zkratka_last_wins(self, db_session):
        forma = PravniForma(type=801, label="Obec")
        first = Subjekt(zkratka="Z", nazev="Stary", pravni_forma=forma)
        second = Subjekt(zkratka="Z", nazev="Novy", pravni_forma=forma)

        assert save_subjects(db_session, [first, second])["new"] == 1
        assert db_session.get(SubjektRecord, "Z").nazev == "Novy"


class TestCOAColumns:

    def test_set_coa_url(self, db_session, registry_file):
        save_subjects(db_session, load_subjects(registry_file))

        assert set_coa_url(db_session, "MUTRUTNOV", "https://commons.wikimedia.org/wiki/File:Trutnov_CoA_CZ.svg")
        record = db_session.get(SubjektRecord, "MUTRUTNOV")
        assert record.coa_url.endswith("Trutnov_CoA_CZ.svg")
        assert record.coa_checked_at is not None

    def test_set_coa_url_unknown_subject(self, db_session):
        assert not set_coa_url(db_session, "NEZNAMY", None)

    def test_subjects_without_coa(self, db_session):
        forma = PravniForma(type=801, label="Obec")
        save_subjects(db_session, [
            Subjekt(zkratka="A", nazev="A", pravni_forma=forma, adresa_uradu=Adresa(obec="Trutnov")),
            Subjekt(zkratka="B", nazev="B", pravni_forma=forma, adresa_uradu=Adresa()),
            Subjekt(zkratka="C", nazev="C", pravni_forma=forma, adresa_uradu=Adresa(obec="Čeladná")),
            Subjekt(zkratka="D", nazev="D", pravni_forma=forma),
        ])
        set_coa_url(db_session, "C", None)

        assert [r.zkratka for r in subjects_without_coa(db_session)] == ["A"]
        assert subjects_without_coa(db_session, limit=0) == []

    def test_subjects_without_coa_skips_empty_municipality(self, db_session):
        forma = PravniForma(type=801, label="Obec")
        save_subjects(db_session, [
            Subjekt(zkratka="A", nazev="A", pravni_forma=forma, adresa_uradu=Adresa(obec="")),
            Subjekt(zkratka="B", nazev="B", pravni_forma=forma, adresa_uradu=Adresa(obec="Trutnov")),
        ])

        assert [r.zkratka for r in subjects_without_coa(db_session)] == ["B"]

    def test_subjects_without_coa_order_and_limit(self, db_session):
        forma = PravniForma(type=801, label="Obec")
        save_subjects(db_session, [
            Subjekt(zkratka=z, nazev=z, pravni_forma=forma, adresa_uradu=Adresa(obec="Obec " + z))
            for z in ["C", "A", "B"]
        ])

        assert [r.zkratka for r in subjects_without_coa(db_session)] == ["A", "B", "C"]
        assert [r.zkratka for r in subjects_without_coa(db_session, limit=2)] == ["A", "B"]
