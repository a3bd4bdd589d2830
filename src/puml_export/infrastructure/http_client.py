"""HTTP client used to fetch rendered diagrams from the PlantUML server.

A single `httpx.AsyncClient` is created per run and shared by all export
tasks; httpx pools connections internally and needs no extra locking.
"""

import logging

import httpx

from puml_export.core.errors import ClientConfigError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def create_client(
    proxy: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    """Create the HTTP client shared by all exports.

    Args:
        proxy: Proxy URL; all requests are routed through it if non-empty
        timeout: Request timeout in seconds

    Returns:
        A new async client; the caller is responsible for closing it

    Raises:
        ClientConfigError: If the proxy URL is malformed
    """
    httpx_proxy = None
    if proxy:
        try:
            httpx_proxy = httpx.Proxy(proxy)
        except (httpx.InvalidURL, ValueError) as e:
            raise ClientConfigError(f"Invalid proxy URL {proxy!r}: {e}") from e
        logger.debug(f"Setting proxy to {proxy}")

    # Proxy settings come from our configuration only, never implicitly from the environment
    return httpx.AsyncClient(
        proxy=httpx_proxy,
        timeout=timeout,
        trust_env=False,
        follow_redirects=True,
    )
