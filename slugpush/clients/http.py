"""HTTP helpers shared by the platform, build and storage clients"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..__version__ import get_user_agent
from ..api.exceptions import PlatformError
from ..constants import DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)


def create_http_client(base_url: str,
                       api_key: Optional[str] = None,
                       user_agent: Optional[str] = None,
                       headers: Optional[Dict[str, str]] = None,
                       timeout: float = DEFAULT_HTTP_TIMEOUT,
                       transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Create an authenticated async HTTP client

    Args:
        base_url: Service root URL
        api_key: Bearer token
        user_agent: Consumer user agent (defaults to slugpush/<version>)
        headers: Extra default headers
        timeout: Request timeout in seconds
        transport: Custom transport (tests pass httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient
    """
    default_headers = {"User-Agent": user_agent or get_user_agent()}
    if api_key:
        default_headers["Authorization"] = f"Bearer {api_key}"
    if headers:
        default_headers.update(headers)

    return httpx.AsyncClient(
        base_url=base_url.rstrip('/'),
        headers=default_headers,
        timeout=timeout,
        transport=transport,
    )


def raise_for_status(response: httpx.Response, action: str) -> None:
    """Translate an HTTP error response into PlatformError"""
    if response.is_success:
        return

    detail = ""
    try:
        body = response.json()
        if isinstance(body, dict):
            detail = body.get("message") or body.get("error") or ""
    except ValueError:
        detail = response.text[:200]

    message = f"{action} failed with HTTP {response.status_code}"
    if detail:
        message += f": {detail}"
    logger.debug(message)
    raise PlatformError(message, status_code=response.status_code)


def decode_json(response: httpx.Response, action: str) -> Any:
    """Parse a JSON body, reporting malformed content as PlatformError"""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        logger.debug(f"{action}: unparseable body {response.text[:200]!r}")
        raise PlatformError(f"{action} returned a malformed response: {e}",
                            status_code=response.status_code) from e
