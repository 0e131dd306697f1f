"""
igrequest - Signed requests for the Instagram Android private API.

This package sends requests the way the Android app does: the app's header
set, a body wrapped in an HMAC-signed envelope, and a session state kept in
sync with the auth headers the server returns.
"""

__version__ = "1.0.0"
__license__ = "AGPL-3.0"

from igrequest.config import Config
from igrequest.exceptions import DecodeError, IgRequestError, TransportError
from igrequest.models import RequestOptions, SignedFormBody
from igrequest.request import SignedRequest
from igrequest.state import SessionState

__all__ = [
    "Config",
    "DecodeError",
    "IgRequestError",
    "RequestOptions",
    "SessionState",
    "SignedFormBody",
    "SignedRequest",
    "TransportError",
    "__version__",
]
