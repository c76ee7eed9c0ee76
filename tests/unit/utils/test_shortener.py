"""Unit tests for the generate_shortcode function in shortener.py.

This test suite verifies the output format, randomness and input
validation of the generate_shortcode() helper.

Test coverage includes:

1. Basic functionality
   - Ensures the function returns a string of the expected length.

2. Output format
   - All characters must belong to the Base62 alphabet.

3. Randomness
   - Consecutive calls produce different codes.

4. Error handling
   - Ensures invalid lengths raise appropriate exceptions.
"""

import string

import pytest

from shortlinks.utils import generate_shortcode
from shortlinks.utils.shortener import ALPHABET, BASE


# -------------------------------
# 1. Basic functionality and type
# -------------------------------


def test_generate_shortcode_returns_string():
    """Ensure generate_shortcode() returns a 6-character string by default."""
    result = generate_shortcode()
    assert isinstance(result, str)
    assert len(result) == 6


@pytest.mark.parametrize('length', [1, 6, 7, 32])
def test_generate_shortcode_respects_length(length):
    """Ensure the 'length' argument is respected exactly."""
    assert len(generate_shortcode(length)) == length


# -------------------------------
# 2. Output format validation
# -------------------------------


def test_alphabet_is_base62():
    """Ensure the alphabet holds exactly the Base62 characters."""
    assert BASE == 62
    assert set(ALPHABET) == set(string.ascii_letters + string.digits)


def test_generate_shortcode_is_base62_safe():
    """Ensure output contains only Base62-safe characters."""
    alphabet = set(string.ascii_letters + string.digits)
    for _ in range(200):
        assert set(generate_shortcode(12)) <= alphabet


# -------------------------------
# 3. Randomness
# -------------------------------


def test_generate_shortcode_is_not_repeating():
    """Ensure codes are drawn at random (1000 draws of 62^8 values never collide in practice)."""
    codes = {generate_shortcode(8) for _ in range(1000)}
    assert len(codes) == 1000


# -------------------------------
# 4. Error handling
# -------------------------------


@pytest.mark.parametrize('length', [None, '6', 6.0, True])
def test_invalid_length_type_raises_error(length):
    """Non-integer lengths raise TypeError."""
    with pytest.raises(TypeError):
        generate_shortcode(length)


@pytest.mark.parametrize('length', [0, -1])
def test_invalid_length_value_raises_error(length):
    """Non-positive lengths raise ValueError."""
    with pytest.raises(ValueError):
        generate_shortcode(length)
