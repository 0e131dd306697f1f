"""Cookie utilities.

Supports the Netscape cookie file format used by browsers and tools like
curl, and the dict form used when a session state is saved to JSON.
"""

from http.cookiejar import Cookie
from pathlib import Path
from typing import Any, Dict, List, Optional


def make_cookie(
    name: str,
    value: str,
    domain: str,
    path: str = '/',
    secure: bool = False,
    expires: Optional[int] = None,
    domain_specified: Optional[bool] = None,
) -> Cookie:
    """Build a Cookie object with sensible defaults for the unused fields.

    Args:
        name: Cookie name
        value: Cookie value
        domain: Cookie domain (a leading dot matches subdomains)
        path: Cookie path
        secure: Whether the cookie is HTTPS-only
        expires: Expiration as a unix timestamp, or None for a session cookie
        domain_specified: Defaults to True when domain starts with a dot

    Returns:
        Cookie object
    """
    if domain_specified is None:
        domain_specified = domain.startswith('.')

    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=domain_specified,
        domain_initial_dot=domain.startswith('.'),
        path=path,
        path_specified=True,
        secure=secure,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest={},
        rfc2109=False,
    )


def cookie_to_dict(cookie: Cookie) -> Dict[str, Any]:
    """Serialize a cookie to a JSON-compatible dict (see cookie_from_dict)."""
    return {
        'name': cookie.name,
        'value': cookie.value,
        'domain': cookie.domain,
        'path': cookie.path,
        'secure': cookie.secure,
        'expires': cookie.expires,
    }


def cookie_from_dict(data: Dict[str, Any]) -> Cookie:
    """Rebuild a cookie from the dict produced by cookie_to_dict."""
    return make_cookie(
        name=data['name'],
        value=data['value'],
        domain=data['domain'],
        path=data.get('path') or '/',
        secure=bool(data.get('secure', False)),
        expires=data.get('expires'),
    )


def load_cookies_from_file(cookie_file: str) -> List[Cookie]:
    """Load cookies from Netscape cookie file format.

    The Netscape cookie format is:
    # domain flag path secure expiration name value

    Args:
        cookie_file: Path to cookie file

    Returns:
        List of Cookie objects

    Example file format:
        # Netscape HTTP Cookie File
        .instagram.com    TRUE    /    TRUE    1735689600    mid    XyZ123
    """
    cookies = []
    cookie_path = Path(cookie_file)

    if not cookie_path.exists():
        return cookies

    with open(cookie_path, 'r') as f:
        for line in f:
            line = line.strip()

            # curl marks HttpOnly cookies with this prefix instead of a comment
            if line.startswith('#HttpOnly_'):
                line = line[len('#HttpOnly_'):]

            # Skip comments and empty lines
            if not line or line.startswith('#'):
                continue

            parts = line.split('\t')
            if len(parts) < 7:
                continue

            domain, flag, path, secure, expiration, name, value = parts[:7]

            try:
                expires = int(expiration) or None
            except ValueError:
                expires = None

            cookies.append(
                make_cookie(
                    name=name,
                    value=value,
                    domain=domain,
                    path=path,
                    secure=secure.upper() == 'TRUE',
                    expires=expires,
                    domain_specified=flag.upper() == 'TRUE',
                )
            )

    return cookies
