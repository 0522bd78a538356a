"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

This test suite verifies the correctness, consistency, and safety of
Redis key generation supplied by RedisKeySchema.

Test coverage includes:

1. Link key generation
   - Ensures link_key() generates correct Redis keys for a given shortcode.

2. Target index key generation
   - Ensures target_index_key() is stable, bounded and target-specific.

3. Filter key generation
   - Ensures filter_key() generates correct Redis keys for a filter name.

4. Custom prefix behavior
   - Confirms keys are correctly prefixed when a valid prefix is provided.

5. Invalid prefix types
   - Ensures improper prefix types raise TypeError.
"""

import pytest
import xxhash

from linkresolver.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Link key generation
# -------------------------------

@pytest.mark.parametrize(
    "shortcode, expected",
    [
        ("abc123", "links:abc123"),
        ("XyZ_7-9", "links:XyZ_7-9"),
    ],
)
def test_link_key(shortcode, expected):
    """Ensure link_key() generates valid Redis keys."""
    keys = RedisKeySchema()
    assert keys.link_key(shortcode) == expected


# -------------------------------
# 2. Target index key generation
# -------------------------------

def test_target_index_key_uses_target_digest():
    """Ensure target_index_key() is keyed by the xxh64 digest of the target."""
    keys = RedisKeySchema()
    target = 'https://example.com/path?id=5'
    assert keys.target_index_key(target) == f'links:targets:{xxhash.xxh64_hexdigest(target)}'


def test_target_index_key_differs_per_target():
    """Ensure different targets land in different index keys."""
    keys = RedisKeySchema()
    assert keys.target_index_key('https://example.com/a') != keys.target_index_key('https://example.com/b')
    assert keys.target_index_key('https://example.com/a') == keys.target_index_key('https://example.com/a')


# -------------------------------
# 3. Filter key generation
# -------------------------------

def test_filter_key():
    """Ensure filter_key() generates valid Redis keys."""
    assert RedisKeySchema().filter_key('shortcodes') == 'filters:shortcodes'


# -------------------------------
# 4. Custom prefix behavior
# -------------------------------

@pytest.mark.parametrize(
    "prefix, expected_link_key, expected_filter_key",
    [
        ("testprefix", "testprefix:links:abc123", "testprefix:filters:shortcodes"),
        ("linkresolver:prod", "linkresolver:prod:links:abc123", "linkresolver:prod:filters:shortcodes"),
        (None, "links:abc123", "filters:shortcodes"),
    ],
)
def test_key_prefixing(prefix, expected_link_key, expected_filter_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.link_key('abc123') == expected_link_key
    assert keys.filter_key('shortcodes') == expected_filter_key


# -------------------------------
# 5. Invalid prefix types
# -------------------------------

@pytest.mark.parametrize("prefix", [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
