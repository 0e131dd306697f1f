"""HTTP client infrastructure for igrequest (async-only).

Uses httpx directly for transport and tenacity for caller-side retries.
"""

from igrequest.http.client import (
    create_client,  # Returns AsyncClient
    create_retry_decorator,
)
from igrequest.http.cookies import load_cookies_from_file
from igrequest.http.headers import load_headers_from_file

__all__ = [
    "create_client",
    "create_retry_decorator",
    "load_cookies_from_file",
    "load_headers_from_file",
]
