from unittest.mock import MagicMock

from studyaid.utils.cache import QueryCache


def test_scope_is_stable_and_opaque(cache):
    scope = cache.generate_scope('session-a')
    assert scope == cache.generate_scope('session-a')
    assert scope != cache.generate_scope('session-b')
    assert 'session-a' not in scope
    assert len(scope) == 16


def test_cache_key_joins_parts(cache):
    assert cache.generate_cache_key('abc', ('lecture', 'lec-1')) == 'query:abc:lecture:lec-1'


def test_fetch_loads_once_then_hits_cache(cache):
    loader = MagicMock(return_value={'id': 'lec-1'})
    assert cache.fetch('abc', ('lecture', 'lec-1'), loader) == {'id': 'lec-1'}
    assert cache.fetch('abc', ('lecture', 'lec-1'), loader) == {'id': 'lec-1'}
    loader.assert_called_once()


def test_fetch_does_not_cache_loader_errors(cache, mock_redis):
    loader = MagicMock(side_effect=RuntimeError('down'))
    try:
        cache.fetch('abc', ('lectures',), loader)
    except RuntimeError:
        pass
    assert mock_redis.store == {}


def test_invalidate_drops_key_and_nested_keys(cache, mock_redis):
    cache.set('query:abc:admin', 1)
    cache.set('query:abc:admin:users', 2)
    cache.set('query:abc:admin:lectures', 3)
    cache.set('query:abc:adminx', 4)
    cache.set('query:other:admin:users', 5)

    assert cache.invalidate('abc', ('admin',)) is True

    assert sorted(mock_redis.store) == ['query:abc:adminx', 'query:other:admin:users']


def test_invalidate_leaves_sibling_lectures(cache, mock_redis):
    cache.set('query:abc:lecture:lec-1', 1)
    cache.set('query:abc:lecture:lec-10', 2)
    cache.invalidate('abc', ('lecture', 'lec-1'))
    assert list(mock_redis.store) == ['query:abc:lecture:lec-10']


def test_clear_scope_only_touches_that_scope(cache, mock_redis):
    cache.set('query:abc:lectures', [])
    cache.set('query:abc:quiz:q1', {})
    cache.set('query:def:lectures', [])
    cache.clear_scope('abc')
    assert list(mock_redis.store) == ['query:def:lectures']


def test_set_uses_default_ttl(cache, mock_redis):
    cache.set('query:abc:lectures', [])
    assert mock_redis.expirations['query:abc:lectures'] == 300


def test_disabled_cache_always_loads():
    cache = QueryCache()
    cache.redis_client = None
    loader = MagicMock(return_value=[1])
    cache.fetch('abc', ('lectures',), loader)
    cache.fetch('abc', ('lectures',), loader)
    assert loader.call_count == 2
    assert cache.invalidate('abc', ('lectures',)) is False
