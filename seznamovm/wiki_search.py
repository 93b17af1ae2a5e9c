from typing import Any, Optional

from .env import get_setting
from .http import fetch_json
from .logger import get_logger

logger = get_logger()


def build_open_search_request(query: str, api_url: Optional[str] = None) -> Any:
    """
    Query the Czech Wikipedia OpenSearch API for a single article.

    Args:
        query: Free-text query, usually a municipality name
        api_url: MediaWiki api.php endpoint (or SEZNAMOVM_WIKI_API_URL)

    Returns:
        The decoded JSON response, e.g.
        ["Trutnov", ["Trutnov"], [""], ["https://cs.wikipedia.org/wiki/Trutnov"]]
    """
    url = api_url or get_setting("SEZNAMOVM_WIKI_API_URL")
    params = {
        "action": "opensearch",
        "search": query,
        "limit": 1,
        "namespace": 0,  # articles only
        "format": "json",
    }
    logger.record_api_call()
    return fetch_json(url, params=params)


def extract_url_from_wiki_response(data: Any) -> Optional[str]:
    """Page URL of the top OpenSearch hit: last list, first item."""
    if not isinstance(data, list) or not data:
        return None
    urls = data[-1]
    if not isinstance(urls, list) or not urls:
        return None
    return urls[0] if isinstance(urls[0], str) else None


def guess_municipality_wiki_page(municipality_name: str) -> Optional[str]:
    """Guess the Wikipedia page URL for a given municipality."""
    url = extract_url_from_wiki_response(build_open_search_request(municipality_name))
    logger.debug("Wiki search", query=municipality_name, url=url)
    return url
