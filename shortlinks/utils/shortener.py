"""Shortcode generation utility

This module provides a helper function for generating short random codes
from a cryptographically strong source.

Functions:
    generate_shortcode(length=6):
        Generate a random Base62 code suitable for use as a URL slug.

Example:
    >>> from shortlinks.utils import generate_shortcode
    >>> generate_shortcode()
    'q7FemO'
"""

import secrets
import string


ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)  # 10 digits + 26 lowercase + 26 uppercase


def generate_shortcode(length: int = 6) -> str:
    """Generate a random fixed-length Base62 shortcode.

    Every character is drawn independently and uniformly from the Base62
    alphabet [0-9a-zA-Z] using `secrets`, so codes are not predictable from
    previously issued ones.

    Args:
        length (int, optional):
            Exact length of the resulting code. Defaults to 6.

    Returns:
        str: A random alphanumeric code of `length` characters.

    Raises:
        TypeError: If `length` is not an integer.
        ValueError: If `length` is not positive.

    Example:
        >>> len(generate_shortcode(8))
        8
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
