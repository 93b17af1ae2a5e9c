"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path

from seznamovm.logger import get_logger

# Modules bind the shared logger at import time; keep it quiet and off disk.
get_logger(level="DEBUG", enable_file=False, enable_console=False)

from seznamovm.catalog import COACatalog  # noqa: E402

NS = "http://www.czechpoint.cz/spravadat/p/ovm/datafile/seznamovm/v1"

REGISTRY_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<SeznamOvmIndex xmlns="{NS}" xmlns:other="urn:example:other">
  <Subjekt>
    <!-- full record -->
    <Zkratka>MUTRUTNOV</Zkratka>
    <ICO>00278360</ICO>
    <Nazev>Město Trutnov</Nazev>
    <IdDS>ajebk3t</IdDS>
    <PravniForma type="801">Obec</PravniForma>
    <Email>
      <Polozka><Typ>Podatelna</Typ><Email>podatelna@trutnov.cz</Email></Polozka>
      <Polozka><Typ>Info</Typ><Email>info@trutnov.cz</Email></Polozka>
      <Polozka><Typ>Jiny</Typ><Email>podatelna@trutnov.cz</Email></Polozka>
    </Email>
    <AdresaUradu>
      <UliceNazev>Slovanské náměstí</UliceNazev>
      <CisloDomovni>165</CisloDomovni>
      <CisloOrientacni>8</CisloOrientacni>
      <ObecNazev>Trutnov</ObecNazev>
      <ObecKod>579025</ObecKod>
      <PSC>54101</PSC>
      <CastObceNeboKatastralniUzemi>Horní Předměstí</CastObceNeboKatastralniUzemi>
      <KrajNazev>Královéhradecký</KrajNazev>
      <AdresniBod>16085817</AdresniBod>
    </AdresaUradu>
  </Subjekt>
  <Subjekt>
    <Nazev>Bez zkratky</Nazev>
    <PravniForma type="801">Obec</PravniForma>
  </Subjekt>
  <Subjekt>
    <Zkratka>BEZFORMY</Zkratka>
    <Nazev>Bez typu pravni formy</Nazev>
    <PravniForma>Obec</PravniForma>
  </Subjekt>
  <Subjekt>
    <Zkratka>BEZNAZVU</Zkratka>
    <PravniForma type="801">Obec</PravniForma>
  </Subjekt>
  <Skupina>
    <Subjekt>
      <Zkratka>OUCELADNA</Zkratka>
      <other:Nazev>Obec Čeladná</other:Nazev>
      <Nazev>Duplicitni nazev</Nazev>
      <PravniForma other:zdroj="ros" type="801">Obec</PravniForma>
      <AdresaUradu/>
    </Subjekt>
  </Skupina>
  <Subjekt>
    <Zkratka>DIVNYTYP</Zkratka>
    <Nazev>Nečíselný typ</Nazev>
    <PravniForma type="x12">Jiná</PravniForma>
  </Subjekt>
</SeznamOvmIndex>
"""


@pytest.fixture
def registry_xml() -> bytes:
    """Sample registry export with valid and invalid subjects."""
    return REGISTRY_XML.encode("utf-8")


@pytest.fixture
def registry_file(tmp_path, registry_xml) -> Path:
    path = tmp_path / "seznamovm.xml"
    path.write_bytes(registry_xml)
    return path


@pytest.fixture
def small_catalog() -> COACatalog:
    return COACatalog([
        "https://commons.wikimedia.org/wiki/File:Foo_CoA.svg",
        "https://commons.wikimedia.org/wiki/File:Trutnov_CoA_CZ.svg",
        "https://commons.wikimedia.org/wiki/File:Bar_CoA.svg",
    ])
