"""Unit tests for the LinkRedisDAO

Test coverage includes:

1. Lookup behavior
   - Ensures find_by_code() resolves a code to the earliest stored link.
   - Confirms stale code index entries are skipped and unknown codes return None.
   - Ensures existence checks hit the per-user code set and the code index.

2. Save behavior
   - Validates inserts draw an id and write the hash plus all indexes in one script.
   - Confirms a refused insert raises LinkAlreadyExistsError.
   - Validates updates go through the monotonic update script.
   - Confirms updating a purged link raises LinkNotFoundError.

3. Expiry and purge
   - Ensures find_expired_before() queries strictly before the timestamp.
   - Ensures delete_batch() removes every key in one transaction, once.

4. Atomic primitives
   - Ensures increment_clicks() maps a refused increment to None.
   - Ensures deactivate() reports whether this call flipped the link.

5. Error handling
   - Confirms Redis connection errors raise DataStoreError.
   - Ensures invalid types raise BeartypeCallHintParamViolation.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta, UTC
from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from shortlinks.models import LinkModel
from shortlinks.dao.exceptions import DataStoreError, LinkAlreadyExistsError, LinkNotFoundError
from shortlinks.dao.redis import LinkRedisDAO
from shortlinks.dao.redis.link_redis_dao import INSERT_LINK_LUA, UPDATE_LINK_LUA, INCREMENT_CLICKS_LUA, DEACTIVATE_LUA


CREATED_AT = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(redis_client, app_prefix):
    return LinkRedisDAO(redis_client=redis_client, prefix=app_prefix)


@pytest.fixture
def link() -> LinkModel:
    return LinkModel(
        user_id='user-1',
        code='aB3xY9',
        original_url='https://example.com/blog/article-123',
        max_clicks=5,
        created_at=CREATED_AT,
        expires_at=CREATED_AT + timedelta(days=1),
    )


@pytest.fixture
def link_hash() -> dict[str, str]:
    return {
        'id': '7',
        'user_id': 'user-1',
        'code': 'aB3xY9',
        'original_url': 'https://example.com/blog/article-123',
        'max_clicks': '5',
        'clicks': '2',
        'created_at': CREATED_AT.isoformat(),
        'expires_at': (CREATED_AT + timedelta(days=1)).isoformat(),
        'active': '1',
    }


# -------------------------------
# 1. Lookup behavior
# -------------------------------


def test_find_by_code(dao, redis_client, link_hash):
    redis_client.zrange.return_value = ['7']
    redis_client.hgetall.return_value = link_hash

    link = dao.find_by_code('aB3xY9')

    assert link.id == 7
    assert link.clicks == 2
    assert link.active is True
    redis_client.zrange.assert_called_once_with('testapp:test:links:code:aB3xY9', 0, -1)
    redis_client.hgetall.assert_called_once_with('testapp:test:links:7')


def test_find_by_code_unknown(dao, redis_client):
    redis_client.zrange.return_value = []

    assert dao.find_by_code('zzzzzz') is None
    redis_client.hgetall.assert_not_called()


def test_find_by_code_resolves_duplicates_to_earliest(dao, redis_client, link_hash, caplog):
    """Several users may hold the same code; the earliest stored link wins."""
    redis_client.zrange.return_value = ['7', '9']
    redis_client.hgetall.return_value = link_hash

    with caplog.at_level(logging.WARNING):
        link = dao.find_by_code('aB3xY9')

    assert link.id == 7
    redis_client.hgetall.assert_called_once_with('testapp:test:links:7')
    assert 'resolving to the earliest one' in caplog.text


def test_find_by_code_skips_stale_index_entries(dao, redis_client, link_hash):
    redis_client.zrange.return_value = ['3', '7']
    redis_client.hgetall.side_effect = [{}, link_hash]

    assert dao.find_by_code('aB3xY9').id == 7


def test_exists_by_code_and_user_id(dao, redis_client):
    redis_client.sismember.return_value = 1

    assert dao.exists_by_code_and_user_id('aB3xY9', 'user-1') is True
    redis_client.sismember.assert_called_once_with('testapp:test:users:user-1:codes', 'aB3xY9')


@pytest.mark.parametrize('count, expected', [(0, False), (1, True)])
def test_exists_by_code(dao, redis_client, count, expected):
    redis_client.exists.return_value = count

    assert dao.exists_by_code('aB3xY9') is expected
    redis_client.exists.assert_called_once_with('testapp:test:links:code:aB3xY9')


# -------------------------------
# 2. Save behavior
# -------------------------------


def test_save_inserts_new_link(dao, redis_client, link):
    redis_client.incr.return_value = 7
    redis_client.eval.return_value = 1

    stored = dao.save(link)

    assert stored == replace(link, id=7)
    redis_client.incr.assert_called_once_with('testapp:test:links:counter')
    redis_client.eval.assert_called_once_with(
        INSERT_LINK_LUA,
        4,
        'testapp:test:links:7',
        'testapp:test:links:code:aB3xY9',
        'testapp:test:users:user-1:codes',
        'testapp:test:links:expiry',
        7,
        'aB3xY9',
        CREATED_AT.timestamp(),
        (CREATED_AT + timedelta(days=1)).timestamp(),
        'id', 7,
        'user_id', 'user-1',
        'code', 'aB3xY9',
        'original_url', 'https://example.com/blog/article-123',
        'max_clicks', 5,
        'clicks', 0,
        'created_at', CREATED_AT.isoformat(),
        'expires_at', (CREATED_AT + timedelta(days=1)).isoformat(),
        'active', 1,
    )  # fmt: skip


def test_save_refuses_code_already_held_by_user(dao, redis_client, link):
    redis_client.incr.return_value = 8
    redis_client.eval.return_value = 0

    with pytest.raises(LinkAlreadyExistsError, match="User 'user-1' already holds a link with code 'aB3xY9'."):
        dao.save(link)


def test_save_updates_existing_link(dao, redis_client, link, link_hash):
    redis_client.eval.return_value = 1
    redis_client.hgetall.return_value = {**link_hash, 'clicks': '3', 'active': '0'}

    stored = dao.save(replace(link, id=7, clicks=3, active=False))

    assert stored.clicks == 3
    assert stored.active is False
    redis_client.eval.assert_called_once_with(UPDATE_LINK_LUA, 1, 'testapp:test:links:7', 3, 0)
    redis_client.incr.assert_not_called()


def test_save_update_of_missing_link(dao, redis_client, link):
    redis_client.eval.return_value = 0

    with pytest.raises(LinkNotFoundError, match="Link with id '7' not found."):
        dao.save(replace(link, id=7))


def test_update_script_never_reactivates_or_rewinds():
    """The update script only moves clicks up and active down."""
    assert "ARGV[2] == '0'" in UPDATE_LINK_LUA
    assert 'tonumber(ARGV[1]) > clicks' in UPDATE_LINK_LUA


# -------------------------------
# 3. Expiry and purge
# -------------------------------


def test_find_expired_before(dao, redis_client, link_hash):
    now = CREATED_AT + timedelta(days=2)
    redis_client.zrangebyscore.return_value = ['7', '8']
    redis_client.execute.return_value = [link_hash, {}]

    expired = dao.find_expired_before(now)

    assert [link.id for link in expired] == [7]
    redis_client.zrangebyscore.assert_called_once_with('testapp:test:links:expiry', '-inf', f'({now.timestamp()}')
    redis_client.pipeline.assert_called_once_with(transaction=False)
    redis_client.hgetall.assert_has_calls([call('testapp:test:links:7'), call('testapp:test:links:8')])


def test_find_expired_before_nothing_expired(dao, redis_client):
    redis_client.zrangebyscore.return_value = []

    assert dao.find_expired_before(CREATED_AT) == []
    redis_client.pipeline.assert_not_called()


def test_delete_batch(dao, redis_client, link):
    links = [replace(link, id=7), replace(link, id=8, user_id='user-2')]

    dao.delete_batch(links)

    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.delete.assert_has_calls([call('testapp:test:links:7'), call('testapp:test:links:8')])
    redis_client.zrem.assert_has_calls(
        [
            call('testapp:test:links:code:aB3xY9', 7),
            call('testapp:test:links:expiry', 7),
            call('testapp:test:links:code:aB3xY9', 8),
            call('testapp:test:links:expiry', 8),
        ]
    )
    redis_client.srem.assert_has_calls(
        [
            call('testapp:test:users:user-1:codes', 'aB3xY9'),
            call('testapp:test:users:user-2:codes', 'aB3xY9'),
        ]
    )
    redis_client.execute.assert_called_once()


def test_delete_batch_empty(dao, redis_client):
    dao.delete_batch([])
    redis_client.pipeline.assert_not_called()


# -------------------------------
# 4. Atomic primitives
# -------------------------------


@pytest.mark.parametrize('script_result, expected', [(1, 1), (5, 5), (-1, None)])
def test_increment_clicks(dao, redis_client, link, script_result, expected):
    redis_client.eval.return_value = script_result

    assert dao.increment_clicks(replace(link, id=7)) == expected
    redis_client.eval.assert_called_once_with(INCREMENT_CLICKS_LUA, 1, 'testapp:test:links:7')


@pytest.mark.parametrize('script_result, expected', [(1, True), (0, False)])
def test_deactivate(dao, redis_client, link, script_result, expected):
    redis_client.eval.return_value = script_result

    assert dao.deactivate(replace(link, id=7)) is expected
    redis_client.eval.assert_called_once_with(DEACTIVATE_LUA, 1, 'testapp:test:links:7')


# -------------------------------
# 5. Error handling
# -------------------------------


def test_find_by_code_with_redis_connection_error(dao, redis_client):
    redis_client.zrange.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.find_by_code('aB3xY9')


def test_increment_clicks_with_redis_connection_error(dao, redis_client, link):
    redis_client.eval.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        dao.increment_clicks(replace(link, id=7))


@pytest.mark.parametrize('code', [123, None, b'aB3xY9'])
def test_find_by_code_with_invalid_type(dao, code):
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.find_by_code(code)


def test_save_with_invalid_type(dao):
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.save({'code': 'aB3xY9'})
