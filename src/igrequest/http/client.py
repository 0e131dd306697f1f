"""HTTP client utilities using httpx directly (async-only).

This module builds the async httpx client the signed request client sends
through. The session cookie jar is handed to httpx as-is, so cookies the
server sets land in the session state without any copying.

Retry logic is handled by tenacity decorators and is applied by callers
(the CLI), never inside SignedRequest.send().
"""

from typing import TYPE_CHECKING, Optional

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from igrequest.config import Config
from igrequest.exceptions import TransportError

if TYPE_CHECKING:
    from igrequest.state import SessionState


def create_client(
    config: Config,
    state: "SessionState",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an async httpx client from configuration.

    Args:
        config: Configuration object
        state: Session state whose cookie jar the client shares
        transport: Optional transport (e.g. httpx.MockTransport in tests)

    Returns:
        Configured httpx.AsyncClient instance

    Example:
        >>> state = SessionState.generate("seed")
        >>> async with create_client(Config(), state) as client:
        ...     response = await client.get("launcher/sync/")
    """
    return httpx.AsyncClient(
        base_url=config.api_url.rstrip('/') + '/',
        # A CookieJar (not a dict or Cookies) is wrapped, not copied
        cookies=state.cookie_jar,
        timeout=config.timeout,
        verify=config.verify_ssl,
        proxy=config.proxy if transport is None else None,
        transport=transport,
    )


def create_retry_decorator(config: Config):
    """Create a tenacity retry decorator from config.

    Only TransportError is retried: a response that arrived, whatever its
    status or body, is never sent again.

    Args:
        config: Configuration object

    Returns:
        Configured retry decorator
    """
    return retry(
        stop=stop_after_attempt(config.max_retries),
        wait=wait_exponential(
            multiplier=config.retry_multiplier,
            min=config.retry_wait_min,
            max=config.retry_wait_max,
        ),
        retry=retry_if_exception_type(TransportError),
        reraise=True,
    )
