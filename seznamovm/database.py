"""
Database schema and connection management.

Uses SQLite with SQLAlchemy to keep imported registry subjects and the
coat-of-arms URLs guessed for them.
"""

import json
from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from .models import Adresa, PravniForma, Subjekt

Base = declarative_base()

ADRESA_COLUMNS = [
    "ulice",
    "cislo_domovni",
    "cislo_orientacni",
    "obec",
    "obec_kod",
    "psc",
    "cast_obce",
    "kraj",
    "adresni_bod",
]


class SubjektRecord(Base):
    """One registry subject, flattened into a single row."""

    __tablename__ = "subjekty"

    zkratka = Column(String, primary_key=True)
    nazev = Column(String, nullable=False)
    pravni_forma_type = Column(Integer, nullable=True)  # None for non-numeric codes
    pravni_forma_label = Column(String, nullable=False)
    ico = Column(String, nullable=True)
    datova_schranka_id = Column(String, nullable=True)
    mail = Column(Text, nullable=False, default="[]")  # JSON list
    has_adresa = Column(Integer, nullable=False, default=0)
    ulice = Column(String, nullable=True)
    cislo_domovni = Column(String, nullable=True)
    cislo_orientacni = Column(String, nullable=True)
    obec = Column(String, nullable=True)
    obec_kod = Column(String, nullable=True)
    psc = Column(String, nullable=True)
    cast_obce = Column(String, nullable=True)
    kraj = Column(String, nullable=True)
    adresni_bod = Column(String, nullable=True)
    coa_url = Column(String, nullable=True)
    coa_checked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_subjekt(self) -> Subjekt:
        adresa = None
        if self.has_adresa:
            adresa = Adresa(**{name: getattr(self, name) for name in ADRESA_COLUMNS})
        return Subjekt(
            zkratka=self.zkratka,
            nazev=self.nazev,
            pravni_forma=PravniForma(type=self.pravni_forma_type, label=self.pravni_forma_label),
            ico=self.ico,
            datova_schranka_id=self.datova_schranka_id,
            mail=tuple(json.loads(self.mail or "[]")),
            adresa_uradu=adresa,
        )


def record_values(subjekt: Subjekt) -> dict:
    """Column values for a subject, excluding coa_url and timestamps."""
    values = {
        "nazev": subjekt.nazev,
        "pravni_forma_type": subjekt.pravni_forma.type,
        "pravni_forma_label": subjekt.pravni_forma.label,
        "ico": subjekt.ico,
        "datova_schranka_id": subjekt.datova_schranka_id,
        "mail": json.dumps(list(subjekt.mail), ensure_ascii=False),
        "has_adresa": 1 if subjekt.adresa_uradu is not None else 0,
    }
    for name in ADRESA_COLUMNS:
        values[name] = getattr(subjekt.adresa_uradu, name) if subjekt.adresa_uradu else None
    return values


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
