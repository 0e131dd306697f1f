import httpx
import pytest

from igrequest.config import Config
from igrequest.exceptions import DecodeError, TransportError
from igrequest.http.client import create_client, create_retry_decorator
from igrequest.http.cookies import load_cookies_from_file
from igrequest.http.headers import load_headers_from_file, merge_headers, parse_header_lines


NETSCAPE_COOKIES = (
    "# Netscape HTTP Cookie File\n"
    "\n"
    ".instagram.com\tTRUE\t/\tTRUE\t2000000000\tmid\tYmId\n"
    "#HttpOnly_.instagram.com\tTRUE\t/\tTRUE\t0\tsessionid\ts3cr3t\n"
    "broken line\n"
)


def test_load_cookies_from_file(tmp_path):
    cookie_file = tmp_path / 'cookies.txt'
    cookie_file.write_text(NETSCAPE_COOKIES)

    cookies = {cookie.name: cookie for cookie in load_cookies_from_file(str(cookie_file))}

    assert set(cookies) == {'mid', 'sessionid'}
    assert cookies['mid'].value == 'YmId'
    assert cookies['mid'].expires == 2000000000
    assert cookies['mid'].secure is True
    assert cookies['sessionid'].expires is None
    assert cookies['sessionid'].domain == '.instagram.com'


def test_load_cookies_missing_file(tmp_path):
    assert load_cookies_from_file(str(tmp_path / 'missing.txt')) == []


def test_parse_header_lines():
    headers = parse_header_lines([
        '# comment',
        '',
        'X-IG-Connection-Type: MOBILE(LTE)',
        'no colon here',
        'X-Token: a:b:c',
        'X-IG-Connection-Type: WIFI',
    ])

    assert headers == {'X-IG-Connection-Type': 'WIFI', 'X-Token': 'a:b:c'}


def test_merge_headers_is_case_insensitive():
    merged = merge_headers(
        {'User-Agent': 'app', 'Authorization': 'Bearer x', 'X-Keep': '1'},
        None,
        {'user-agent': 'custom', 'AUTHORIZATION': None},
    )

    assert merged == {'X-Keep': '1', 'user-agent': 'custom', 'AUTHORIZATION': None}


def test_parse_header_lines_later_line_wins_in_any_case():
    assert parse_header_lines(['x-ig-app-locale: de_DE', 'X-IG-App-Locale: fr_FR']) == {
        'X-IG-App-Locale': 'fr_FR',
    }


def test_load_headers_from_file(tmp_path):
    header_file = tmp_path / 'headers.txt'
    header_file.write_text('X-IG-App-Locale: de_DE\n')

    assert load_headers_from_file(str(header_file)) == {'X-IG-App-Locale': 'de_DE'}
    assert load_headers_from_file(str(tmp_path / 'missing.txt')) == {}


def test_create_client_shares_state_cookie_jar(state):
    client = create_client(Config(), state, transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    assert client.cookies.jar is state.cookie_jar
    assert str(client.base_url) == 'https://i.instagram.com/api/v1/'


@pytest.mark.asyncio
async def test_retry_decorator_retries_transport_errors():
    config = Config(max_retries=3, retry_wait_min=0, retry_wait_max=0)
    attempts = []

    @create_retry_decorator(config)
    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise TransportError('connection reset')
        return 'ok'

    assert await flaky() == 'ok'
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_retry_decorator_gives_up_and_reraises():
    config = Config(max_retries=2, retry_wait_min=0, retry_wait_max=0)
    attempts = []

    @create_retry_decorator(config)
    async def always_down():
        attempts.append(1)
        raise TransportError('down')

    with pytest.raises(TransportError):
        await always_down()
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_retry_decorator_does_not_retry_decode_errors():
    config = Config(max_retries=3, retry_wait_min=0, retry_wait_max=0)
    attempts = []

    @create_retry_decorator(config)
    async def bad_body():
        attempts.append(1)
        raise DecodeError('not json')

    with pytest.raises(DecodeError):
        await bad_body()
    assert len(attempts) == 1
