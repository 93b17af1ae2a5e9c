"""
Extraction of Subjekt records from the Seznam OVM XML export.

The parser never raises for a malformed entry: an entry missing its
short code, name or legal form is left out of the result.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from lxml import etree

from .logger import get_logger
from .models import Adresa, PravniForma, Subjekt
from .xmltree import attribute, element_text, find_all, first_child

NAMESPACE = "http://www.czechpoint.cz/spravadat/p/ovm/datafile/seznamovm/v1"

logger = get_logger()

T = TypeVar("T")
U = TypeVar("U")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class RegistryParseError(Exception):
    """Raised when the registry export is not well-formed XML."""
    pass


def load_document(source: Union[str, Path, bytes]) -> etree._ElementTree:
    """Parse a registry export from a file path or raw bytes."""
    parser = etree.XMLParser(huge_tree=True, resolve_entities=False)
    try:
        if isinstance(source, bytes):
            return etree.ElementTree(etree.fromstring(source, parser))
        return etree.parse(str(source), parser)
    except etree.XMLSyntaxError as e:
        raise RegistryParseError(f"Invalid registry XML: {e}") from e
    except OSError as e:
        raise RegistryParseError(f"Cannot read registry file {source}: {e}") from e


def parse_all_valid_subjects(doc, namespace: str = NAMESPACE) -> List[Subjekt]:
    """Return every valid Subjekt in the document, in document order."""
    subjects = [parse_subjekt(elem, namespace) for elem in find_all(doc, "//ovm:Subjekt", namespace)]
    return [s for s in subjects if s is not None]


def parse_subjekt(elem: etree._Element, namespace: str = NAMESPACE) -> Optional[Subjekt]:
    zkratka = _child_text(elem, "Zkratka")
    nazev = _child_text(elem, "Nazev")
    pravni_forma = _map(first_child(elem, "PravniForma"), _parse_pravni_forma)

    if zkratka is None or nazev is None or pravni_forma is None:
        return None

    return Subjekt(
        zkratka=zkratka,
        nazev=nazev,
        pravni_forma=pravni_forma,
        ico=_child_text(elem, "ICO"),
        datova_schranka_id=_child_text(elem, "IdDS"),
        mail=tuple(_parse_emails(elem, namespace)),
        adresa_uradu=_map(first_child(elem, "AdresaUradu"), _parse_adresa),
    )


def load_subjects(source: Union[str, Path, bytes]) -> List[Subjekt]:
    """Load a registry export and parse it, recording counts in the metrics."""
    doc = load_document(source)
    seen = len(find_all(doc, "//ovm:Subjekt", NAMESPACE))
    subjects = parse_all_valid_subjects(doc)
    logger.record_subjects(seen, len(subjects))
    logger.info("Parsed registry", seen=seen, parsed=len(subjects))
    return subjects


def parse_int(value: str) -> Optional[int]:
    """Leading base-10 integer of value, or None if there is none."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _parse_pravni_forma(elem: etree._Element) -> Optional[PravniForma]:
    type_ = attribute(elem, "type")
    if type_ is None:
        return None
    code = parse_int(type_)
    if code is None:
        # Kept as an unknown code; the entry itself stays valid.
        logger.debug("Non-numeric legal form type", value=type_)
    return PravniForma(type=code, label=element_text(elem))


def _parse_adresa(elem: etree._Element) -> Adresa:
    def parse(name: str) -> Optional[str]:
        return _child_text(elem, name)

    return Adresa(
        ulice=parse("UliceNazev"),
        cislo_domovni=parse("CisloDomovni"),
        cislo_orientacni=parse("CisloOrientacni"),
        obec=parse("ObecNazev"),
        obec_kod=parse("ObecKod"),
        psc=parse("PSC"),
        cast_obce=parse("CastObceNeboKatastralniUzemi"),
        kraj=parse("KrajNazev"),
        adresni_bod=parse("AdresniBod"),
    )


def _parse_emails(elem: etree._Element, namespace: str) -> List[str]:
    emails = find_all(elem, "ovm:Email/ovm:Polozka/ovm:Email", namespace)
    seen = set()
    result = []
    for email in (element_text(e) for e in emails):
        if email not in seen:
            seen.add(email)
            result.append(email)
    return result


def _child_text(elem: etree._Element, name: str) -> Optional[str]:
    return _map(first_child(elem, name), element_text)


def _map(value: Optional[T], f: Callable[[T], Optional[U]]) -> Optional[U]:
    return f(value) if value is not None else None
