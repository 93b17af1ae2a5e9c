"""
Static catalog of known coat-of-arms files on Wikimedia Commons.

The packaged list only covers the SVG coats of arms that were found by
hand, so many municipalities (PNG/JPG uploads) are missing from it.
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "coa_list.txt"


def normalize_coa_record(record: str) -> str:
    """Turn a full coat-of-arms URL into just the file name.

    Everything after the last colon, so "…/wiki/File:Foo_CoA.svg" becomes
    "Foo_CoA.svg". A record without any colon normalizes to "".
    """
    start = record.rfind(":")
    return record[start + 1:] if start != -1 else ""


class COACatalog:
    """Immutable, ordered list of coat-of-arms URLs with their file tokens."""

    def __init__(self, entries: Iterable[str]):
        pairs = []
        for entry in entries:
            token = normalize_coa_record(entry)
            if not token:
                raise ValueError(f"Catalog entry has no file name after ':': {entry!r}")
            pairs.append((entry, token))
        self._pairs: Tuple[Tuple[str, str], ...] = tuple(pairs)

    @property
    def entries(self) -> Tuple[str, ...]:
        return tuple(entry for entry, _ in self._pairs)

    def tokens(self) -> Iterator[Tuple[str, str]]:
        """Yield (url, token) in catalog order."""
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[str]:
        return (entry for entry, _ in self._pairs)

    def __contains__(self, entry: object) -> bool:
        return any(entry == e for e, _ in self._pairs)


def load_catalog(path: Optional[Path] = None) -> COACatalog:
    """Read a catalog file: one URL per line, blank lines and # comments skipped."""
    path = path or DEFAULT_CATALOG_PATH
    with path.open("r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return COACatalog(line for line in lines if line and not line.startswith("#"))


_default_catalog: Optional[COACatalog] = None


def default_catalog() -> COACatalog:
    """The packaged catalog, read once per process."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = load_catalog()
    return _default_catalog


def match_coa_list(content: str, catalog: COACatalog) -> List[str]:
    """Find all catalog entries whose file name occurs in content.

    Matching is an exact, case-sensitive substring test. Results keep
    catalog order, not the order of appearance in content.
    """
    return [url for url, token in catalog.tokens() if token and token in content]
