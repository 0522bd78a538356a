from unittest.mock import MagicMock

import pytest
import redis

from linkresolver.dao.exceptions import DataStoreError
from linkresolver.dao.bloom import ExistenceFilterRedisDAO


FILTER_KEY = 'testapp:test:filters:shortcodes'


class TestExistenceFilterRedisDAO:
    dao: ExistenceFilterRedisDAO
    bloom: MagicMock

    @pytest.fixture(autouse=True)
    def setup(self, redis_client: redis.Redis, app_prefix: str):
        self.bloom = MagicMock()
        redis_client.bf.return_value = self.bloom
        self.dao = ExistenceFilterRedisDAO(redis_client=redis_client, prefix=app_prefix)

    def test_default_filter_key(self):
        assert self.dao.key == FILTER_KEY

    def test_custom_filter_name(self, redis_client: redis.Redis):
        dao = ExistenceFilterRedisDAO(redis_client=redis_client, prefix='testapp:test', name='codes-v2')
        assert dao.key == 'testapp:test:filters:codes-v2'

    def test_initialize_reserves_filter(self):
        assert self.dao.initialize(1_000_000, 0.01) is True
        self.bloom.reserve.assert_called_once_with(FILTER_KEY, 0.01, 1_000_000)

    def test_initialize_is_idempotent(self):
        self.bloom.reserve.side_effect = redis.exceptions.ResponseError('item exists')
        assert self.dao.initialize(1_000_000, 0.01) is False

    def test_initialize_fails_on_other_errors(self):
        self.bloom.reserve.side_effect = redis.exceptions.ResponseError("unknown command 'BF.RESERVE'")
        with pytest.raises(DataStoreError, match='BF.RESERVE'):
            self.dao.initialize(1_000_000, 0.01)

    def test_initialize_with_unreachable_redis(self):
        self.bloom.reserve.side_effect = redis.exceptions.ConnectionError('Connection refused')
        with pytest.raises(DataStoreError, match="Can't connect to Redis"):
            self.dao.initialize(1_000_000, 0.01)

    @pytest.mark.parametrize('capacity, error_rate', [(0, 0.01), (-1, 0.01), (1000, 0.0), (1000, 1.0)])
    def test_initialize_with_invalid_sizing(self, capacity: int, error_rate: float):
        with pytest.raises(ValueError):
            self.dao.initialize(capacity, error_rate)
        self.bloom.reserve.assert_not_called()

    def test_add(self):
        assert self.dao.add('abc123') is self.dao
        self.bloom.add.assert_called_once_with(FILTER_KEY, 'abc123')

    @pytest.mark.parametrize('reply, expected', [(1, True), (0, False)])
    def test_might_contain(self, reply: int, expected: bool):
        self.bloom.exists.return_value = reply
        assert self.dao.might_contain('abc123') is expected
        self.bloom.exists.assert_called_once_with(FILTER_KEY, 'abc123')

    def test_might_contain_with_timed_out_redis(self):
        self.bloom.exists.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')
        with pytest.raises(DataStoreError):
            self.dao.might_contain('abc123')
