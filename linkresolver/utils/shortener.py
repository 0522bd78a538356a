"""Shortcode generation utility

This module provides a helper function for generating short, URL-safe,
cryptographically random identifiers.

Functions:
    generate_shortcode(length=10):
        Generate a random shortcode suitable for use as a URL slug.

Example:
    >>> from linkresolver.utils import generate_shortcode
    >>> generate_shortcode()
    'V1StGXR8_Z'
"""

import secrets
import string

from linkresolver.utils.constants import DEFAULT_SHORTCODE_LENGTH


# URL-safe alphabet (RFC 3986 unreserved characters minus '.' and '~'):
# 26 uppercase + 26 lowercase + 10 digits + '_' + '-' = 64 symbols
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + '_-'


def generate_shortcode(length: int = DEFAULT_SHORTCODE_LENGTH) -> str:
    """Generate a random, URL-safe shortcode.

    Each character is drawn independently from ALPHABET using the `secrets`
    CSPRNG, so every call yields `6 * length` bits of entropy. With the
    default length of 10 that is 2**60 possible codes.

    NOTE:
        - Uniqueness is NOT checked here. The caller must insert the code
          into the store and regenerate on conflict.

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 10.

    Returns:
        str: A random shortcode of exactly `length` characters.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
