import time

import jwt
import pytest

from studyaid.exceptions import NotAuthenticated, RemoteAPIError
from studyaid.services.session import (
    ADMIN_TOKEN_KEY,
    TOKEN_KEY,
    SessionContext,
    SessionRegistry,
)
from studyaid.utils.tokens import is_expired, token_expiry
from tests.fixtures.sample_data import SIGNING_KEY, make_jwt


@pytest.fixture
def fresh_session(token_store, cache, api_client):
    return SessionContext(
        'fresh-session',
        token_store,
        cache=cache,
        client_factory=lambda *args, **kwargs: api_client
    )


def test_token_expiry_reads_exp_claim():
    token = make_jwt(1700000000)
    assert token_expiry(token) == 1700000000.0
    assert is_expired(token, now=1700000001)
    assert not is_expired(token, now=1699999999)


@pytest.mark.parametrize('token', [
    'not-a-jwt',
    'a.!!!.c',
    jwt.encode({'sub': 'admin'}, SIGNING_KEY, algorithm='HS256'),
])
def test_token_expiry_rejects_undecodable_tokens(token):
    with pytest.raises(ValueError):
        token_expiry(token)


def test_login_persists_token(fresh_session, api_client, token_store):
    api_client.login.return_value = {'token': 'abc', 'user': {'id': 'u1'}}
    fresh_session.login('ada@example.com', 'secret')
    assert fresh_session.is_authenticated
    assert fresh_session.is_loading is False
    assert token_store.get('fresh-session', TOKEN_KEY) == 'abc'


def test_init_restores_persisted_tokens(fresh_session, token_store):
    token_store.set('fresh-session', TOKEN_KEY, 'persisted')
    fresh_session.init()
    assert fresh_session.token == 'persisted'
    assert fresh_session.is_loading is True
    assert fresh_session.is_authenticated is False


def test_check_auth_accepts_valid_token(fresh_session, api_client):
    fresh_session.token = 'abc'
    api_client.verify.return_value = {'valid': True, 'user': {'id': 'u1'}}
    assert fresh_session.check_auth() is True
    assert fresh_session.user == {'id': 'u1'}
    assert fresh_session.is_loading is False


@pytest.mark.parametrize('verify', [
    {'return_value': {'valid': False}},
    {'side_effect': RemoteAPIError('expired', status_code=401)},
])
def test_check_auth_drops_bad_token(fresh_session, api_client, token_store, verify):
    token_store.set('fresh-session', TOKEN_KEY, 'abc')
    fresh_session.init()
    api_client.verify.configure_mock(**verify)

    assert fresh_session.check_auth() is False
    assert fresh_session.token is None
    assert token_store.get('fresh-session', TOKEN_KEY) is None
    assert fresh_session.is_loading is False


def test_check_auth_without_token_skips_remote(fresh_session, api_client):
    assert fresh_session.check_auth() is False
    api_client.verify.assert_not_called()


def test_client_requires_token(fresh_session):
    with pytest.raises(NotAuthenticated):
        fresh_session.client


def test_logout_clears_everything(session, token_store, cache, mock_redis):
    token_store.set(session.session_id, TOKEN_KEY, 'user-token')
    cache.set(cache.generate_cache_key(session.cache_scope, ('lectures',)), [])
    session.quiz_sessions['quiz-1'] = object()

    session.logout()

    assert session.token is None
    assert session.is_authenticated is False
    assert session.quiz_sessions == {}
    assert token_store.get(session.session_id, TOKEN_KEY) is None
    assert mock_redis.store == {}


def test_admin_token_valid_until_expiry(fresh_session, token_store):
    fresh_session.admin_login(make_jwt(time.time() + 3600))
    assert fresh_session.is_admin is True
    assert token_store.get('fresh-session', ADMIN_TOKEN_KEY) is not None


@pytest.mark.parametrize('token', [make_jwt(time.time() - 10), 'garbage'])
def test_expired_or_invalid_admin_token_logs_out(fresh_session, token_store, token):
    fresh_session.admin_login(token)
    assert fresh_session.is_admin is False
    assert fresh_session.admin_token is None
    assert token_store.get('fresh-session', ADMIN_TOKEN_KEY) is None
    with pytest.raises(NotAuthenticated):
        fresh_session.admin_client


def test_admin_logout_invalidates_admin_queries(fresh_session, cache, mock_redis):
    scope = fresh_session.cache_scope
    cache.set(cache.generate_cache_key(scope, ('admin', 'users')), [])
    cache.set(cache.generate_cache_key(scope, ('lectures',)), [])
    fresh_session.admin_login(make_jwt(time.time() + 3600))
    fresh_session.admin_logout()
    assert list(mock_redis.store) == [f'query:{scope}:lectures']


def test_registry_reuses_contexts(token_store):
    registry = SessionRegistry(token_store=token_store)
    first = registry.get_or_create('abc')
    assert registry.get_or_create('abc') is first
    registry.discard('abc')
    assert registry.get_or_create('abc') is not first


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_registry_evicts_idle_contexts(token_store):
    clock = FakeClock()
    registry = SessionRegistry(token_store=token_store, idle_ttl=60, clock=clock)
    stale = registry.get_or_create('stale')
    registry.get_or_create('active')

    clock.now += 45
    registry.get_or_create('active')
    clock.now += 30
    registry.get_or_create('newcomer')

    assert len(registry) == 2
    assert registry.get_or_create('stale') is not stale


def test_evicted_context_is_rebuilt_from_token_store(token_store):
    clock = FakeClock()
    registry = SessionRegistry(token_store=token_store, idle_ttl=60, clock=clock)
    registry.get_or_create('abc')
    token_store.set('abc', TOKEN_KEY, 'persisted')

    clock.now += 61
    rebuilt = registry.get_or_create('abc')

    assert rebuilt.token == 'persisted'
    assert len(registry) == 1
