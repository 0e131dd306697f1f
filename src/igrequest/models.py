"""Request and signed body models."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TypedDict


class SignedFormBody(TypedDict):
    """Form payload sent in place of the plain JSON body.

    Attributes:
        ig_sig_key_version: Signature key version tag
        signed_body: ``"<hex hmac>.<json>"``
    """

    ig_sig_key_version: str
    signed_body: str


@dataclass
class RequestOptions:
    """A single request to the API.

    Attributes:
        url: Path relative to the API base URL (e.g. "accounts/current_user/")
        method: HTTP method
        headers: Headers overriding the defaults
        data: Body fields overriding the defaults
    """

    url: str
    method: str = "GET"
    headers: Optional[Dict[str, Optional[str]]] = None
    data: Optional[Dict[str, Any]] = field(default=None)

    def __post_init__(self):
        """Normalize the method name."""
        self.method = (self.method or "GET").upper()
