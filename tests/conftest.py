"""Shared fixtures for igrequest tests."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from igrequest.config import Config
from igrequest.http.client import create_client
from igrequest.http.cookies import make_cookie
from igrequest.request import SignedRequest
from igrequest.state import SessionState


CSRF_TOKEN = 'csrf-abc123'


def parse_form(request: httpx.Request) -> dict:
    """Decode a form-encoded request body into a flat dict."""
    return {key: values[0] for key, values in parse_qs(request.content.decode('utf-8')).items()}


def echo_handler(request: httpx.Request) -> httpx.Response:
    """Respond with a JSON description of the request."""
    return httpx.Response(
        200,
        json={
            'method': request.method,
            'url': str(request.url),
            'headers': dict(request.headers),
            'form': parse_form(request),
        },
    )


@pytest.fixture
def state() -> SessionState:
    """A generated session with a csrftoken cookie."""
    session = SessionState.generate('tester')
    session.add_cookies([make_cookie('csrftoken', CSRF_TOKEN, '.instagram.com')])
    return session


@pytest.fixture
def make_request(state):
    """Factory for a SignedRequest sending through a MockTransport handler."""

    def factory(handler=echo_handler, config=None) -> SignedRequest:
        config = config or Config()
        client = create_client(config, state, transport=httpx.MockTransport(handler))
        return SignedRequest(state, config, client=client)

    return factory


def decode_signed_body(signed_body: str):
    """Split a signed body into (signature, decoded JSON)."""
    signature, payload = signed_body.split('.', 1)
    return signature, json.loads(payload)
