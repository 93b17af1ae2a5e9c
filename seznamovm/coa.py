"""
Coat-of-arms guessing for municipalities.

The idea: find the municipality's Wikipedia page, download its source and
look for any known coat-of-arms file name in it. It is a heuristic. A page
that mentions a neighbour's coat of arms first in catalog order yields the
wrong image, and most municipalities outside the catalog yield nothing.
"""

from typing import Callable, Optional

from .catalog import COACatalog, default_catalog, match_coa_list
from .http import fetch_text
from .logger import get_logger
from .wiki_search import guess_municipality_wiki_page

logger = get_logger()

SearchFn = Callable[[str], Optional[str]]
FetchFn = Callable[[str], str]


class COAResolver:
    """Search for the page, fetch it, match it against the catalog.

    Holds no mutable state, so one instance can serve many lookups.
    Transport errors from search or fetch propagate to the caller.
    """

    def __init__(
        self,
        catalog: COACatalog,
        search: SearchFn = guess_municipality_wiki_page,
        fetch: FetchFn = fetch_text,
    ):
        self.catalog = catalog
        self.search = search
        self.fetch = fetch

    def resolve(self, municipality_name: str) -> Optional[str]:
        page_url = self.search(municipality_name)
        if page_url is None:
            logger.record_coa_result(False)
            logger.info("No wiki page found", name=municipality_name)
            return None

        content = self.fetch(page_url)
        matches = match_coa_list(content, self.catalog)
        logger.record_coa_result(bool(matches))
        if not matches:
            logger.info("No known coat of arms on page", name=municipality_name, page=page_url)
            return None
        if len(matches) > 1:
            logger.debug("Several coats of arms on page", name=municipality_name, matches=matches)
        return matches[0]


def guess_municipality_coa(municipality_name: str) -> Optional[str]:
    """Guess a URL to the coat of arms of a municipality using the packaged catalog."""
    return COAResolver(default_catalog()).resolve(municipality_name)
