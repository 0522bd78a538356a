"""Unit tests for generate_shortcode() in shortener.py

Test coverage includes:

1. Output length and alphabet
2. Randomness (distinct codes across calls)
3. Error handling for invalid lengths
"""

import pytest

from linkresolver.utils import generate_shortcode
from linkresolver.utils.shortener import ALPHABET


# -------------------------------
# 1. Output length and alphabet
# -------------------------------

def test_default_length():
    """Ensure generate_shortcode() defaults to 10 characters."""
    result = generate_shortcode()
    assert isinstance(result, str)
    assert len(result) == 10


@pytest.mark.parametrize('length', [1, 7, 16, 64])
def test_custom_length(length):
    """Ensure the length argument is respected exactly."""
    assert len(generate_shortcode(length)) == length


def test_alphabet_is_url_safe():
    """All characters belong to the 64-symbol URL-safe alphabet."""
    assert len(ALPHABET) == 64
    assert len(set(ALPHABET)) == 64
    for _ in range(200):
        assert set(generate_shortcode()) <= set(ALPHABET)


# -------------------------------
# 2. Randomness
# -------------------------------

def test_codes_are_distinct():
    """1000 default-length codes never collide in practice (2**60 space)."""
    codes = {generate_shortcode() for _ in range(1000)}
    assert len(codes) == 1000


# -------------------------------
# 3. Error handling
# -------------------------------

@pytest.mark.parametrize('length', [0, -1])
def test_non_positive_length_raises_value_error(length):
    with pytest.raises(ValueError):
        generate_shortcode(length)


@pytest.mark.parametrize('length', [None, 7.5, '10', True])
def test_non_integer_length_raises_type_error(length):
    with pytest.raises(TypeError):
        generate_shortcode(length)
