"""Value objects for entries of the Seznam OVM registry."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class PravniForma:
    """Legal form of a body: numeric code plus its label."""

    type: Optional[int]
    label: str


@dataclass(frozen=True)
class Adresa:
    ulice: Optional[str] = None
    cislo_domovni: Optional[str] = None
    cislo_orientacni: Optional[str] = None
    obec: Optional[str] = None
    obec_kod: Optional[str] = None
    psc: Optional[str] = None
    cast_obce: Optional[str] = None
    kraj: Optional[str] = None
    adresni_bod: Optional[str] = None


@dataclass(frozen=True)
class Subjekt:
    """One public-administration body (orgán veřejné moci)."""

    zkratka: str
    nazev: str
    pravni_forma: PravniForma
    ico: Optional[str] = None
    datova_schranka_id: Optional[str] = None
    mail: Tuple[str, ...] = field(default_factory=tuple)
    adresa_uradu: Optional[Adresa] = None


# Attribute name -> key used in exported JSON
ADRESA_KEYS = {
    "ulice": "ulice",
    "cislo_domovni": "cisloDomovni",
    "cislo_orientacni": "cisloOrientacni",
    "obec": "obec",
    "obec_kod": "obecKod",
    "psc": "PSC",
    "cast_obce": "castObce",
    "kraj": "kraj",
    "adresni_bod": "adresniBod",
}


def adresa_to_dict(adresa: Adresa) -> Dict[str, Optional[str]]:
    return {key: getattr(adresa, attr) for attr, key in ADRESA_KEYS.items()}


def adresa_from_dict(data: Dict[str, Any]) -> Adresa:
    return Adresa(**{attr: data.get(key) for attr, key in ADRESA_KEYS.items()})


def subjekt_to_dict(subjekt: Subjekt) -> Dict[str, Any]:
    return {
        "zkratka": subjekt.zkratka,
        "ICO": subjekt.ico,
        "nazev": subjekt.nazev,
        "datovaSchrankaID": subjekt.datova_schranka_id,
        "pravniForma": {
            "type": subjekt.pravni_forma.type,
            "label": subjekt.pravni_forma.label,
        },
        "mail": list(subjekt.mail),
        "adresaUradu": adresa_to_dict(subjekt.adresa_uradu) if subjekt.adresa_uradu else None,
    }


def subjekt_from_dict(data: Dict[str, Any]) -> Subjekt:
    """Inverse of subjekt_to_dict. Raises KeyError on missing required keys."""
    forma = data["pravniForma"]
    adresa = data.get("adresaUradu")
    return Subjekt(
        zkratka=data["zkratka"],
        nazev=data["nazev"],
        pravni_forma=PravniForma(type=forma["type"], label=forma["label"]),
        ico=data.get("ICO"),
        datova_schranka_id=data.get("datovaSchrankaID"),
        mail=tuple(data.get("mail") or ()),
        adresa_uradu=adresa_from_dict(adresa) if adresa is not None else None,
    )
