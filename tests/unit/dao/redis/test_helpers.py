import pytest
import redis

from linkresolver.dao.redis.helpers import handle_redis_connection_error, redis_address
from linkresolver.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, client: redis.Redis, error: Exception | None = None):
        self.redis = client
        self.error = error

    @handle_redis_connection_error
    def run(self):
        if self.error is not None:
            raise self.error
        return 'ok'


def test_handle_redis_connection_error(redis_client: redis.Redis):
    dao = DummyDAO(redis_client, redis.exceptions.ConnectionError('Cannot connect'))

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.run()


def test_handle_redis_timeout_error(redis_client: redis.Redis):
    dao = DummyDAO(redis_client, redis.exceptions.TimeoutError('Timeout reading from socket'))

    with pytest.raises(DataStoreError, match='Timed out waiting for Redis at redis.test:6379/0.'):
        dao.run()


def test_other_redis_errors_propagate(redis_client: redis.Redis):
    dao = DummyDAO(redis_client, redis.exceptions.ResponseError('WRONGTYPE'))

    with pytest.raises(redis.exceptions.ResponseError):
        dao.run()


def test_successful_call_passes_through(redis_client: redis.Redis):
    assert DummyDAO(redis_client).run() == 'ok'


def test_redis_address(redis_client: redis.Redis):
    assert redis_address(redis_client) == 'redis.test:6379/0'
