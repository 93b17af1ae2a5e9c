"""
Tests for the coat-of-arms resolver.
"""

import pytest

from seznamovm import coa
from seznamovm.catalog import COACatalog
from seznamovm.coa import COAResolver, guess_municipality_coa
from seznamovm.http import FetchError

PAGE = "https://cs.wikipedia.org/wiki/Trutnov"


class Recorder:
    """Callable fake that remembers its arguments."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, arg):
        self.calls.append(arg)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class TestCOAResolver:

    def test_no_search_result_skips_fetch(self, small_catalog):
        search = Recorder(None)
        fetch = Recorder("Trutnov_CoA_CZ.svg")
        resolver = COAResolver(small_catalog, search=search, fetch=fetch)

        assert resolver.resolve("Neexistující obec") is None
        assert search.calls == ["Neexistující obec"]
        assert fetch.calls == []

    def test_match_on_fetched_page(self, small_catalog):
        fetch = Recorder('<img src="//upload.wikimedia.org/Trutnov_CoA_CZ.svg">')
        resolver = COAResolver(small_catalog, search=Recorder(PAGE), fetch=fetch)

        assert resolver.resolve("Trutnov") == "https://commons.wikimedia.org/wiki/File:Trutnov_CoA_CZ.svg"
        assert fetch.calls == [PAGE]

    def test_first_in_catalog_order_wins(self, small_catalog):
        # Bar appears first in the text, Foo first in the catalog
        fetch = Recorder("Bar_CoA.svg and later Foo_CoA.svg")
        resolver = COAResolver(small_catalog, search=Recorder(PAGE), fetch=fetch)

        assert resolver.resolve("Foo") == "https://commons.wikimedia.org/wiki/File:Foo_CoA.svg"

    def test_page_without_known_file(self, small_catalog):
        resolver = COAResolver(small_catalog, search=Recorder(PAGE), fetch=Recorder("no images"))
        assert resolver.resolve("Trutnov") is None

    def test_fetch_failure_propagates(self, small_catalog):
        error = FetchError("Request failed (500)", PAGE, 500)
        resolver = COAResolver(small_catalog, search=Recorder(PAGE), fetch=Recorder(error))
        with pytest.raises(FetchError):
            resolver.resolve("Trutnov")

    def test_search_failure_propagates(self, small_catalog):
        error = FetchError("Request timed out", "https://cs.wikipedia.org/w/api.php")
        fetch = Recorder("")
        resolver = COAResolver(small_catalog, search=Recorder(error), fetch=fetch)
        with pytest.raises(FetchError):
            resolver.resolve("Trutnov")
        assert fetch.calls == []

    def test_resolver_is_reusable(self, small_catalog):
        resolver = COAResolver(small_catalog, search=Recorder(PAGE), fetch=Recorder("Foo_CoA.svg"))
        assert resolver.resolve("A") == resolver.resolve("B")


def test_guess_municipality_coa_uses_packaged_catalog(monkeypatch):
    catalog = COACatalog(["https://commons.wikimedia.org/wiki/File:Trutnov_CoA_CZ.svg"])
    monkeypatch.setattr(coa, "default_catalog", lambda: catalog)
    monkeypatch.setattr(
        coa, "COAResolver",
        lambda c: COAResolver(c, search=Recorder(PAGE), fetch=Recorder("x Trutnov_CoA_CZ.svg x")),
    )
    assert guess_municipality_coa("Trutnov") == "https://commons.wikimedia.org/wiki/File:Trutnov_CoA_CZ.svg"
