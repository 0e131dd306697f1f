"""Exceptions raised by igrequest."""


class IgRequestError(Exception):
    """Base class for errors raised while talking to the API."""


class TransportError(IgRequestError):
    """The request never produced a response (connection, DNS, timeout...).

    The underlying httpx exception is kept as ``__cause__``.
    """


class DecodeError(IgRequestError):
    """The response body could not be decoded as JSON."""

    def __init__(self, message: str, status_code: int = 0, body: bytes = b''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
