import json
import re
import uuid

import pytest

from igrequest import constants, state as state_module
from igrequest.http.cookies import make_cookie
from igrequest.state import STATE_FORMAT_VERSION, SessionState


def test_generate_is_deterministic_per_seed():
    first = SessionState.generate('alice')
    second = SessionState.generate('alice')

    assert first.device_id == second.device_id
    assert first.uuid == second.uuid
    assert first.phone_id == second.phone_id
    assert first.adid == second.adid


def test_generate_differs_between_seeds():
    assert SessionState.generate('alice').uuid != SessionState.generate('bob').uuid


def test_generated_identifiers_have_app_formats():
    session = SessionState.generate('alice')

    assert re.fullmatch(r'android-[0-9a-f]{16}', session.device_id)
    assert str(uuid.UUID(session.uuid)) == session.uuid
    assert len({session.uuid, session.phone_id, session.adid}) == 3


def test_pigeon_session_id_rotates_with_time_bucket(monkeypatch):
    session = SessionState.generate('alice')

    monkeypatch.setattr(state_module.time, 'time', lambda: 1_700_000_000.0)
    first = session.pigeon_session_id
    monkeypatch.setattr(state_module.time, 'time', lambda: 1_700_000_010.0)
    same_bucket = session.pigeon_session_id
    monkeypatch.setattr(state_module.time, 'time', lambda: 1_700_000_000.0 + 3600)
    later = session.pigeon_session_id

    assert first == same_bucket
    assert first != later


def test_csrf_token_prefers_cookie():
    session = SessionState.generate('alice')
    session.csrf_token = 'stored'
    assert session.csrf_token == 'stored'

    session.add_cookies([make_cookie('csrftoken', 'from-cookie', '.instagram.com')])
    assert session.csrf_token == 'from-cookie'


def test_get_cookie_value_missing_returns_none():
    assert SessionState.generate('alice').get_cookie_value('mid') is None


def test_app_user_agent():
    session = SessionState.generate('alice')

    assert session.app_user_agent == (
        f"Instagram {constants.APP_VERSION} Android "
        f"({constants.DEVICE_STRING}; en_US; {constants.APP_VERSION_CODE})"
    )


def test_is_logged_in_follows_authorization():
    session = SessionState.generate('alice')
    assert not session.is_logged_in

    session.authorization = 'Bearer IGT:2:abc'
    assert session.is_logged_in


def test_save_and_load_preserve_identity_tokens_and_cookies(tmp_path):
    session = SessionState.generate('alice')
    session.authorization = 'Bearer IGT:2:abc'
    session.ig_www_claim = 'hmac.claim'
    session.password_encryption_key_id = '41'
    session.password_encryption_pub_key = 'pubkey'
    session.csrf_token = 'stored'
    session.add_cookies([
        make_cookie('mid', 'YmId', '.instagram.com', expires=2_000_000_000),
        make_cookie('sessionid', 's3cr3t', '.instagram.com', secure=True),
    ])

    path = session.save(tmp_path / 'nested' / 'state.json')
    restored = SessionState.from_file(path)

    assert restored.device_id == session.device_id
    assert restored.uuid == session.uuid
    assert restored.authorization == 'Bearer IGT:2:abc'
    assert restored.ig_www_claim == 'hmac.claim'
    assert restored.password_encryption_key_id == '41'
    assert restored.password_encryption_pub_key == 'pubkey'
    assert restored.get_cookie_value('mid') == 'YmId'
    assert restored.get_cookie_value('sessionid') == 's3cr3t'
    assert restored.dump() == session.dump()


def test_dump_is_json_serializable():
    session = SessionState.generate('alice')
    session.add_cookies([make_cookie('mid', 'YmId', '.instagram.com')])

    data = json.loads(json.dumps(session.dump()))

    assert data['version'] == STATE_FORMAT_VERSION
    assert data['cookies'][0]['name'] == 'mid'


def test_load_rejects_unknown_version():
    with pytest.raises(ValueError, match='Unsupported state format version'):
        SessionState.load({'version': 99})
