"""HTTP transport shared by the registry download and the Wikipedia lookups."""

from pathlib import Path
from typing import Any, Mapping, Optional

import requests

from . import __version__
from .env import http_timeout
from .logger import get_logger
from .retry import RetryError, exponential_backoff, should_retry_http_status

logger = get_logger()

USER_AGENT = f"seznamovm/{__version__}"


class FetchError(Exception):
    """Raised when a remote resource cannot be retrieved."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class TransientHTTPError(requests.exceptions.HTTPError):
    """HTTP error status that is worth another attempt."""


def _get(url: str, params: Optional[Mapping[str, Any]] = None, stream: bool = False) -> requests.Response:
    resp = requests.get(
        url,
        params=params,
        headers={"User-Agent": USER_AGENT},
        timeout=http_timeout(),
        stream=stream,
    )
    resp.raise_for_status()
    return resp


def _request(url: str, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
    """Single GET with requests errors translated into FetchError."""
    try:
        return _get(url, params=params)
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.record_error(f"HTTPError_{status}")
        logger.error("Request failed", url=url, status=status)
        raise FetchError(f"Request failed ({status}): {url}", url, status) from e
    except requests.exceptions.Timeout as e:
        logger.record_error("Timeout")
        logger.warning("Request timed out", url=url)
        raise FetchError(f"Request timed out: {url}", url) from e
    except requests.exceptions.RequestException as e:
        logger.record_error("RequestException")
        logger.error("Request error", url=url, error=str(e))
        raise FetchError(f"Request error: {e}", url) from e


def fetch_text(url: str) -> str:
    """Fetch a whole page and return its decoded text. No retries."""
    resp = _request(url)
    logger.record_page_fetch()
    logger.debug("Fetched page", url=url, size=len(resp.text))
    return resp.text


def fetch_json(url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
    """Fetch and decode a JSON document. No retries."""
    resp = _request(url, params=params)
    try:
        return resp.json()
    except ValueError as e:
        logger.record_error("InvalidJSON")
        raise FetchError(f"Response is not JSON: {url}", url, resp.status_code) from e


@exponential_backoff(
    max_retries=3,
    base_delay=2.0,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, TransientHTTPError),
    on_retry=lambda attempt, e, delay: logger.warning(
        "Retrying download", attempt=attempt, delay=delay, error=str(e)
    ),
)
def _download(url: str, out_path: Path) -> int:
    try:
        resp = _get(url, stream=True)
    except requests.exceptions.HTTPError as e:
        if e.response is not None and should_retry_http_status(e.response.status_code):
            raise TransientHTTPError(str(e), response=e.response) from e
        raise
    size = 0
    with resp, open(out_path, "wb") as fh:
        for chunk in resp.iter_content(chunk_size=8192 * 10):
            fh.write(chunk)
            size += len(chunk)
    return size


def download_file(url: str, out_path: Path) -> Path:
    """Download a (large) file to out_path, retrying transient failures.

    Raises FetchError once the retries are spent or on a permanent error.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading file", url=url, path=str(out_path))
    try:
        size = _download(url, out_path)
    except (RetryError, requests.exceptions.RequestException, OSError) as e:
        if out_path.exists():
            out_path.unlink()
        logger.record_error(type(e).__name__)
        logger.error("Download failed", url=url, error=str(e))
        raise FetchError(f"Download failed: {url}", url) from e
    logger.info("Download complete", url=url, bytes=size)
    return out_path
