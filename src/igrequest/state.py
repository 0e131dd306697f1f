"""Session state shared by every request of a client session.

The state holds the device identity the app would report, the tokens the
server hands back, and the cookie jar the transport writes to. It is
mutated in place by :class:`igrequest.request.SignedRequest` after each
response and by httpx when cookies are set. Nothing here is locked:
callers that share one state between concurrent requests must serialize
those requests themselves if they need ordering.
"""

import hashlib
import json
import logging
import time
import uuid as uuid_lib
from dataclasses import dataclass, field
from http.cookiejar import Cookie, CookieJar
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from igrequest import constants
from igrequest.http.cookies import cookie_from_dict, cookie_to_dict

logger = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 1

# The app rotates its pigeon session id every 20 minutes
PIGEON_SESSION_LIFETIME = 1200


def _md5(value: str) -> str:
    return hashlib.md5(value.encode('utf-8')).hexdigest()


def generate_guid(*parts: str) -> str:
    """Build a UUID-formatted string from the md5 of the given parts."""
    return str(uuid_lib.UUID(hex=_md5(''.join(parts))))


@dataclass
class SessionState:
    """Identifiers, tokens and cookies of one client session.

    Attributes:
        device_id: Android id ("android-" + 16 hex chars)
        uuid: Device UUID, sent as X-IG-Device-ID and X-DEVICE-ID
        phone_id: Family device id
        adid: Advertising id
        device_string: Device profile used in the user agent
        authorization: Bearer token set by the server
        ig_www_claim: WWW claim token set by the server
        password_encryption_key_id: Key id for password encryption
        password_encryption_pub_key: Public key for password encryption
        cookie_jar: Cookie jar shared with the HTTP transport
    """

    device_id: str = ''
    uuid: str = ''
    phone_id: str = ''
    adid: str = ''
    device_string: str = constants.DEVICE_STRING
    authorization: Optional[str] = None
    ig_www_claim: Optional[str] = None
    password_encryption_key_id: Optional[str] = None
    password_encryption_pub_key: Optional[str] = None
    cookie_jar: CookieJar = field(default_factory=CookieJar, repr=False)
    _csrf_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def generate(cls, seed: str) -> 'SessionState':
        """Create a state with a device identity derived from a seed.

        The same seed always yields the same device, so a seed such as the
        account username keeps the server seeing one stable phone.

        Args:
            seed: Any string

        Returns:
            New SessionState with an empty cookie jar and no tokens
        """
        state = cls(
            device_id='android-' + _md5(seed)[:16],
            uuid=generate_guid(seed, 'uuid'),
            phone_id=generate_guid(seed, 'phone_id'),
            adid=generate_guid(seed, 'adid'),
        )
        logger.debug(f"Generated device {state.device_id} ({state.uuid})")
        return state

    @property
    def pigeon_session_id(self) -> str:
        """Per-session tracking id, rotated every PIGEON_SESSION_LIFETIME seconds."""
        bucket = round(time.time() / PIGEON_SESSION_LIFETIME)
        return generate_guid('pigeonSessionId', self.uuid, str(bucket))

    @property
    def csrf_token(self) -> Optional[str]:
        """CSRF token from the csrftoken cookie, or the last explicitly set one."""
        return self.get_cookie_value('csrftoken') or self._csrf_token

    @csrf_token.setter
    def csrf_token(self, value: Optional[str]) -> None:
        self._csrf_token = value

    @property
    def app_user_agent(self) -> str:
        """User agent of the impersonated Android app."""
        return (
            f"Instagram {constants.APP_VERSION} Android "
            f"({self.device_string}; {constants.LANGUAGE}; {constants.APP_VERSION_CODE})"
        )

    @property
    def is_logged_in(self) -> bool:
        """True once the server has issued an authorization token."""
        return bool(self.authorization)

    def get_cookie_value(self, name: str) -> Optional[str]:
        """Return the value of the first cookie called ``name``, if any."""
        for cookie in self.cookie_jar:
            if cookie.name == name:
                return cookie.value
        return None

    def add_cookies(self, cookies: Iterable[Cookie]) -> int:
        """Add cookies to the jar, replacing ones with the same domain/path/name.

        Returns:
            Number of cookies added
        """
        count = 0
        for cookie in cookies:
            self.cookie_jar.set_cookie(cookie)
            count += 1
        return count

    def dump(self) -> Dict[str, Any]:
        """Serialize the state to a JSON-compatible dict."""
        return {
            'version': STATE_FORMAT_VERSION,
            'device_id': self.device_id,
            'uuid': self.uuid,
            'phone_id': self.phone_id,
            'adid': self.adid,
            'device_string': self.device_string,
            'csrf_token': self._csrf_token,
            'authorization': self.authorization,
            'ig_www_claim': self.ig_www_claim,
            'password_encryption_key_id': self.password_encryption_key_id,
            'password_encryption_pub_key': self.password_encryption_pub_key,
            'cookies': [cookie_to_dict(cookie) for cookie in self.cookie_jar],
        }

    @classmethod
    def load(cls, data: Dict[str, Any]) -> 'SessionState':
        """Rebuild a state from the dict produced by dump().

        Raises:
            ValueError: If the dump has an unsupported format version
        """
        version = data.get('version')
        if version != STATE_FORMAT_VERSION:
            raise ValueError(f"Unsupported state format version: {version}")

        state = cls(
            device_id=data.get('device_id', ''),
            uuid=data.get('uuid', ''),
            phone_id=data.get('phone_id', ''),
            adid=data.get('adid', ''),
            device_string=data.get('device_string') or constants.DEVICE_STRING,
            authorization=data.get('authorization'),
            ig_www_claim=data.get('ig_www_claim'),
            password_encryption_key_id=data.get('password_encryption_key_id'),
            password_encryption_pub_key=data.get('password_encryption_pub_key'),
        )
        state.csrf_token = data.get('csrf_token')
        state.add_cookies(cookie_from_dict(c) for c in data.get('cookies', []))
        return state

    def save(self, path: Path) -> Path:
        """Write the state to a JSON file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.dump(), indent=2))
        logger.debug(f"Saved session state to {path}")
        return path

    @classmethod
    def from_file(cls, path: Path) -> 'SessionState':
        """Load a state previously written by save()."""
        with open(path, 'r') as f:
            return cls.load(json.load(f))
