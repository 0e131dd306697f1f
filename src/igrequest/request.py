"""Signed requests against the private mobile API.

Every request goes out with the header set of the Android app and a body
wrapped in a signed envelope::

    ig_sig_key_version=4&signed_body=<hmac-sha256 hex>.<json>

After each response, the auth-related headers the server sets are copied
into the session state before the decoded body is handed back.
"""

import hashlib
import hmac
import json
import logging
import re
import time
from typing import Any, Dict, Optional

import httpx

from igrequest import constants
from igrequest.config import Config
from igrequest.exceptions import DecodeError, TransportError
from igrequest.http.client import create_client
from igrequest.http.headers import merge_headers
from igrequest.models import RequestOptions, SignedFormBody
from igrequest.state import SessionState

logger = logging.getLogger(__name__)

# Response header -> SessionState attribute
STATE_HEADERS = {
    constants.HEADER_SET_WWW_CLAIM: 'ig_www_claim',
    constants.HEADER_SET_AUTHORIZATION: 'authorization',
    constants.HEADER_SET_PASSWORD_ENCRYPTION_KEY_ID: 'password_encryption_key_id',
    constants.HEADER_SET_PASSWORD_ENCRYPTION_PUB_KEY: 'password_encryption_pub_key',
}

# Surrogate code points left over after pairing cannot be encoded as UTF-8
LONE_SURROGATE = re.compile('[\ud800-\udfff]')


def _escape_lone_surrogates(string: str) -> str:
    """Join surrogate pairs and escape the unpaired ones as \\uXXXX."""
    if not LONE_SURROGATE.search(string):
        return string
    joined = string.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'surrogatepass')
    return LONE_SURROGATE.sub(lambda match: f"\\u{ord(match.group()):04x}", joined)


def sign(data: str) -> str:
    """HMAC-SHA256 of the UTF-8 bytes of data with the app signing key, as lowercase hex."""
    return hmac.new(
        constants.SIGNATURE_KEY.encode('utf-8'),
        data.encode('utf-8'),
        hashlib.sha256,
    ).hexdigest()


def sign_data(data: Dict[str, Any]) -> SignedFormBody:
    """Wrap data in a signed envelope.

    Keys are serialized in insertion order without whitespace, the same
    bytes the app signs. Unpaired surrogates are written as
    \\u escapes so the payload is always valid UTF-8.

    Args:
        data: Form data to sign

    Returns:
        SignedFormBody ready to be form-encoded
    """
    string = _escape_lone_surrogates(
        json.dumps(data, separators=(',', ':'), ensure_ascii=False)
    )
    signature = sign(string)

    return {
        'ig_sig_key_version': constants.SIGNATURE_VERSION,
        'signed_body': f"{signature}.{string}",
    }


class SignedRequest:
    """Sends signed requests and keeps the session state in sync.

    Args:
        state: Session state read for headers and updated from responses
        config: Configuration object (defaults to Config())
        client: httpx.AsyncClient to send through. When omitted, one is
            created with create_client() and closed by aclose().

    Example:
        >>> state = SessionState.generate("username")
        >>> async with SignedRequest(state) as request:
        ...     body = await request.send(RequestOptions(url="launcher/sync/", method="POST"))
    """

    def __init__(
        self,
        state: SessionState,
        config: Optional[Config] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.state = state
        self.config = config or Config()
        self._owns_client = client is None
        self.client = client or create_client(self.config, state)

    async def __aenter__(self) -> 'SignedRequest':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def send(self, options: RequestOptions) -> Any:
        """Send a request to the API.

        Args:
            options: Request options

        Returns:
            Decoded JSON body, whatever the status code

        Raises:
            TransportError: If no response was received
            DecodeError: If the response body is not JSON
        """
        headers = merge_headers(self.headers, options.headers)
        data = {**self.data, **(options.data or {})}
        form = self.sign_data(data)

        # Unset values are left out rather than sent empty
        headers = {name: value for name, value in headers.items() if value is not None}

        logger.debug(f"{options.method} {options.url}")

        try:
            response = await self.client.request(
                options.method,
                options.url,
                headers=headers,
                data=form,
            )
        except httpx.RequestError as e:
            raise TransportError(f"{options.method} {options.url} failed: {e}") from e

        self._update_state_from_response(response)

        logger.debug(f"{options.method} {options.url} -> {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"Invalid JSON in response to {options.method} {options.url} "
                f"(status {response.status_code}): {e}",
                status_code=response.status_code,
                body=response.content,
            ) from e

    async def get(self, url: str, headers: Optional[Dict[str, Optional[str]]] = None) -> Any:
        """Send a GET request (see send)."""
        return await self.send(RequestOptions(url=url, method='GET', headers=headers))

    async def post(
        self,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Optional[str]]] = None,
    ) -> Any:
        """Send a POST request (see send)."""
        return await self.send(RequestOptions(url=url, method='POST', headers=headers, data=data))

    def sign(self, data: str) -> str:
        """Sign data (see the module-level sign())."""
        return sign(data)

    def sign_data(self, data: Dict[str, Any]) -> SignedFormBody:
        """Sign form data (see the module-level sign_data())."""
        return sign_data(data)

    def _update_state_from_response(self, response: httpx.Response) -> None:
        """Copy auth headers set by the server into the session state.

        A header that is missing leaves the current value in place. A header
        sent more than once is ignored as well.
        """
        for header, attribute in STATE_HEADERS.items():
            values = response.headers.get_list(header)
            if len(values) != 1:
                continue

            setattr(self.state, attribute, values[0])
            logger.debug(f"Session {attribute} updated from {header}")

    @property
    def data(self) -> Dict[str, Any]:
        """Default form data for every request."""
        csrf_token = self.state.csrf_token
        if csrf_token is None:
            return {}
        return {'_csrfToken': csrf_token}

    @property
    def headers(self) -> Dict[str, Optional[str]]:
        """Default headers for every request, recomputed on each access."""
        return {
            'X-Ads-Opt-Out': '1',
            'X-CM-Bandwidth-KBPS': '-1.000',
            'X-CM-Latency': '-1.000',
            'X-IG-Connection-Speed': '3700kbps',
            'X-IG-Bandwidth-Speed-KBPS': '-1.000',
            'X-IG-Bandwidth-TotalBytes-B': '0',
            'X-IG-Bandwidth-TotalTime-MS': '0',
            'X-IG-EU-DC-ENABLED': 'false',
            'X-IG-Extended-CDN-Thumbnail-Cache-Busting-Value': '1000',
            'X-IG-WWW-Claim': '0',
            'X-Bloks-Is-Layout-RTL': 'false',
            'X-FB-HTTP-Engine': 'Liger',
            'X-Pigeon-Rawclienttime': f"{time.time():.3f}",
            'X-Pigeon-Session-Id': self.state.pigeon_session_id,
            'X-IG-Connection-Type': constants.HEADER_CONNECTION_TYPE,
            'X-IG-Capabilities': constants.HEADER_CAPABILITIES,
            'X-IG-App-ID': constants.FACEBOOK_ANALYTICS_APPLICATION_ID,
            'X-Bloks-Version-Id': constants.BLOKS_VERSION_ID,
            'X-IG-App-Locale': constants.LANGUAGE,
            'X-IG-Device-Locale': constants.LANGUAGE,
            'X-IG-Device-ID': self.state.uuid,
            'X-IG-Android-ID': self.state.device_id,
            'X-DEVICE-ID': self.state.uuid,
            'X-MID': self.state.get_cookie_value('mid'),
            'Accept-Language': constants.LANGUAGE.replace('_', '-'),
            'Accept-Encoding': 'gzip',
            'User-Agent': self.state.app_user_agent,
            'Authorization': self.state.authorization,
            'Host': constants.API_HOST,
            'Connection': 'close',
        }
