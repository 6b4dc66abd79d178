import pytest

from civrelay.auth import ProbeResult
from civrelay.errors import NotFound, PasswordTooShort, Unauthorized


@pytest.fixture()
def kv(flask_app):
    return flask_app.extensions['kv_store']


@pytest.fixture()
def gate(flask_app):
    return flask_app.extensions['auth_gate']


@pytest.fixture()
def access(flask_app):
    return flask_app.extensions['access_policy']


def test_kv_store_put_get_delete(kv):
    assert kv.get('auth:alice') is None
    kv.put('auth:alice', 'abcdef')
    kv.put('auth:alice', 'ghijkl')
    assert kv.get('auth:alice') == 'ghijkl'
    kv.delete('auth:alice')
    kv.delete('auth:alice')
    assert kv.get('auth:alice') is None


def test_credentials_and_files_use_separate_namespaces(kv, access):
    access.set_password('shared', None, 'abcdef')
    access.write_file('shared', 'abcdef', 'shared', 'save data')
    assert kv.get('auth:shared') == 'abcdef'
    assert kv.get('file:shared') == 'save data'


def test_authorize_without_stored_password_accepts_anything(gate):
    assert gate.authorize('alice', None)
    assert gate.authorize('alice', '')
    assert gate.authorize('alice', 'whatever')


def test_authorize_after_password_set(gate, access):
    access.set_password('alice', None, 'abcdef')
    assert gate.authorize('alice', 'abcdef')
    assert not gate.authorize('alice', 'wrong')
    assert not gate.authorize('alice', None)
    assert not gate.authorize('alice', 'ABCDEF')


def test_probe_outcomes(gate, access):
    assert gate.probe('alice', 'x') is ProbeResult.NO_PASSWORD
    access.set_password('alice', None, 'abcdef')
    assert gate.probe('alice', 'abcdef') is ProbeResult.AUTHORIZED
    assert gate.probe('alice', 'nope') is ProbeResult.MISMATCH


def test_empty_password_is_not_absent(gate, kv):
    kv.put('auth:bob', '')
    assert gate.probe('bob', None) is ProbeResult.MISMATCH
    assert gate.authorize('bob', '')


def test_password_change_checks_the_current_password(gate, access):
    access.set_password('alice', 'ignored-on-first-use', 'abcdef')
    with pytest.raises(Unauthorized):
        access.set_password('alice', 'ghijkl', 'ghijkl')
    access.set_password('alice', 'abcdef', 'ghijkl')
    assert gate.authorize('alice', 'ghijkl')
    assert not gate.authorize('alice', 'abcdef')


def test_short_password_is_rejected_and_keeps_old_one(gate, access):
    access.set_password('alice', None, 'abcdef')
    with pytest.raises(PasswordTooShort):
        access.set_password('alice', 'abcdef', 'abc')
    assert gate.authorize('alice', 'abcdef')


def test_short_first_password_is_not_stored(gate, access):
    with pytest.raises(PasswordTooShort):
        access.set_password('alice', None, '12345')
    assert gate.probe('alice', '12345') is ProbeResult.NO_PASSWORD


def test_new_file_is_writable_with_any_credentials(access):
    access.set_password('alice', None, 'abcdef')
    access.write_file('alice', 'wrong', 'game1', 'turn 1')
    assert access.read_file('alice', 'abcdef', 'game1') == 'turn 1'


def test_existing_file_requires_writers_password(access):
    access.set_password('alice', None, 'abcdef')
    access.write_file('alice', 'abcdef', 'game1', 'turn 1')
    with pytest.raises(Unauthorized):
        access.write_file('alice', 'wrong', 'game1', 'turn 2')
    assert access.read_file('alice', 'abcdef', 'game1') == 'turn 1'


def test_any_user_with_matching_own_password_may_overwrite(access):
    access.set_password('alice', None, 'abcdef')
    access.set_password('bob', None, 'bobpass')
    access.write_file('alice', 'abcdef', 'game1', 'alice turn')
    access.write_file('bob', 'bobpass', 'game1', 'bob turn')
    # A user who never set a password is open as well
    access.write_file('carol', None, 'game1', 'carol turn')
    assert access.read_file('alice', 'abcdef', 'game1') == 'carol turn'


def test_missing_file_is_not_found_before_auth(access):
    access.set_password('alice', None, 'abcdef')
    with pytest.raises(NotFound):
        access.read_file('alice', 'wrong', 'nope')


def test_read_existing_file_with_wrong_password(access):
    access.set_password('alice', None, 'abcdef')
    access.write_file('alice', 'abcdef', 'game1', 'turn 1')
    with pytest.raises(Unauthorized):
        access.read_file('alice', 'wrong', 'game1')
