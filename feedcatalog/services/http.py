"""Shared HTTP plumbing: session setup and response classification."""

import logging

import requests

from ..exceptions import (
    ClientError,
    FetchError,
    FetchTimeoutError,
    NetworkError,
    RateLimitedError,
    ServerError,
)

logger = logging.getLogger(__name__)


def create_session(user_agent: str) -> requests.Session:
    """Create a requests session that identifies this client."""
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    return session


def classify_status(url: str, status_code: int, reason: str = "") -> FetchError:
    """Map a non-2xx status code to the matching fetch error."""
    detail = f"HTTP {status_code}{f' {reason}' if reason else ''} for {url}"
    if status_code == 429:
        return RateLimitedError(detail, url=url, status_code=status_code)
    if status_code >= 500:
        return ServerError(detail, url=url, status_code=status_code)
    return ClientError(detail, url=url, status_code=status_code)


def get(
    session: requests.Session,
    url: str,
    timeout: float,
    params: dict | None = None,
    headers: dict | None = None,
) -> requests.Response:
    """Issue one GET and raise a typed fetch error on failure.

    Returns:
        The response, guaranteed to have a 2xx status.
    """
    try:
        response = session.get(url, params=params, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise FetchTimeoutError(f"Timed out after {timeout}s fetching {url}", url=url) from e
    except requests.ConnectionError as e:
        raise NetworkError(f"Connection failed for {url}: {e}", url=url) from e
    except requests.RequestException as e:
        raise NetworkError(f"Request failed for {url}: {e}", url=url) from e

    if not 200 <= response.status_code < 300:
        raise classify_status(url, response.status_code, getattr(response, "reason", "") or "")
    return response
