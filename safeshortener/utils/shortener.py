"""Shortcode generation utility

This module maps link ids to short, deterministic, non-sequential codes and
back. The mapping is a bijection between positive integers and base62
strings, parametrized by a secret salt.

Functions:
    generate_shortcode(counter, salt='default_salt', length=7, mult=1315423911):
        Encode a positive integer id into a short code.
    decode_shortcode(code, salt='default_salt', length=7, mult=1315423911):
        Recover the id a short code was generated from.

Classes:
    ShortCodeAllocator:
        Holds the (fixed) salt and permutation parameters of a deployment.

Example:
    >>> from safeshortener.utils import generate_shortcode, decode_shortcode
    >>> generate_shortcode(12345, salt='my_secret')
    'Gh71WPT'
    >>> decode_shortcode('Gh71WPT', salt='my_secret')
    12345
"""

import math
import string

import xxhash

from safeshortener.constants import ShortCode
from safeshortener.exceptions import InvalidShortCodeError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits
_ALPHABET_INDEX = {character: index for index, character in enumerate(ALPHABET)}


def generate_shortcode(counter: int, salt: str = 'default_salt', length: int = ShortCode.LENGTH, mult: int = ShortCode.MULTIPLIER) -> str:
    """Generate a short, deterministic URL code from a counter and salt.

    This function encodes a positive counter into a Base62 string (using
    a-z, A-Z, 0-9). The counter is salted and permuted within the space
    BASE^L, where L is the code length.

    Counters in [1, BASE^length) produce `length` characters. Larger counters
    use the smallest L with counter < BASE^L, so each code length owns a
    disjoint band of counters and the mapping never collides.

    This implementation uses a **multiplicative permutation** over a fixed
    Base62 space to guarantee:
    - 1:1 mapping (bijective)
    - Deterministic output
    - No visible sequential patterns
    - Constant-time inversion (see decode_shortcode())

    Args:
        counter (int):
            Unique positive integer identifying the URL (the link id).

        salt (str, optional):
            Secret string used to randomize the output space.
            Defaults to "default_salt".
            Highly recommended to set a custom salt per deployment.

        length (int, optional):
            Minimum length of the resulting code.
            Defaults to 7.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Defaults to 1315423911.
            Must be coprime with BASE (62), hence with every BASE^L.

    Returns:
        str: A short alphanumeric code derived from the counter and salt.

    Example:
        >>> generate_shortcode(12345, salt='my_secret', length=7)
        'Gh71WPT'

    NOTE:
        - The output is not trivially predictable without knowledge of the salt
          and permutation parameters (this is obfuscation, not encryption).
        - The alphabet is Base62 safe: [a-zA-Z0-9].
        - Uses ultra-fast xxhash for hashing the salt.
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 1:
        raise ValueError(f'Counter must be a positive integer (given value: {counter}).')
    _validate_parameters(salt, length, mult)

    code_length = length
    while counter >= BASE**code_length:
        code_length += 1

    # Apply an affine (multiplicative + additive) permutation over the fixed
    # modulo space to scramble sequential counters while preserving a 1:1 mapping.
    modulo_space = BASE**code_length
    permuted = (counter * mult + _salt_offset(salt, modulo_space)) % modulo_space

    # Custom base62 encoding algorithm:
    # 1- Encode the permuted counter into base62, least significant digit first
    # 2- Reverse order to ensure most significant digit is first (reversed())
    # 3- Join characters into a single fixed-width string (''.join())
    return ''.join(reversed([ALPHABET[(permuted // BASE**i) % BASE] for i in range(code_length)]))


def decode_shortcode(code: str, salt: str = 'default_salt', length: int = ShortCode.LENGTH, mult: int = ShortCode.MULTIPLIER) -> int:
    """Recover the counter a short code was generated from.

    Inverts generate_shortcode() with the modular inverse of `mult`; no table
    lookup is involved. A code that generate_shortcode() could never have
    produced for the same parameters raises InvalidShortCodeError.

    Args:
        code (str):
            Short code (case-sensitive).
        salt (str, optional), length (int, optional), mult (int, optional):
            Same parameters the code was generated with.

    Returns:
        int: The positive counter encoded in `code`.

    Raises:
        TypeError:
            If `code` is not a string.
        InvalidShortCodeError:
            If `code` is too short, too long, contains characters outside the
            alphabet, or decodes outside the counter band of its length.

    Example:
        >>> decode_shortcode('Gh71WPT', salt='my_secret', length=7)
        12345
    """
    if not isinstance(code, str):
        raise TypeError(f'Short code must be of type string (given type: {type(code)}).')
    _validate_parameters(salt, length, mult)

    if not length <= len(code) <= max(length, ShortCode.MAX_LENGTH):
        raise InvalidShortCodeError(f"Short code '{code}' has an invalid length.")
    if any(character not in _ALPHABET_INDEX for character in code):
        raise InvalidShortCodeError(f"Short code '{code}' contains invalid characters.")

    code_length = len(code)
    modulo_space = BASE**code_length

    permuted = 0
    for character in code:
        permuted = permuted * BASE + _ALPHABET_INDEX[character]

    counter = ((permuted - _salt_offset(salt, modulo_space)) * pow(mult, -1, modulo_space)) % modulo_space

    # Each code length owns one counter band: [1, BASE^length) for the minimum
    # length, [BASE^(L-1), BASE^L) above it.
    lower_bound = 1 if code_length == length else BASE ** (code_length - 1)
    if counter < lower_bound:
        raise InvalidShortCodeError(f"Short code '{code}' is outside the code space.")
    return counter


class ShortCodeAllocator:
    """Bijective id <-> short code mapping with fixed deployment parameters.

    The parameters must not change for the lifetime of a deployment, otherwise
    stored codes no longer decode to their ids.

    Example:
        >>> allocator = ShortCodeAllocator(salt='my_secret')
        >>> allocator.encode(12345)
        'Gh71WPT'
        >>> allocator.decode('Gh71WPT')
        12345
    """

    def __init__(self, salt: str = 'default_salt', length: int = ShortCode.LENGTH, mult: int = ShortCode.MULTIPLIER):
        _validate_parameters(salt, length, mult)
        self.salt = salt
        self.length = length
        self.mult = mult

    def encode(self, link_id: int) -> str:
        return generate_shortcode(link_id, salt=self.salt, length=self.length, mult=self.mult)

    def decode(self, code: str) -> int:
        return decode_shortcode(code, salt=self.salt, length=self.length, mult=self.mult)


def _validate_parameters(salt: str, length: int, mult: int) -> None:
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
    if not isinstance(length, int) or isinstance(length, bool) or length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(mult, int) or mult < 1 or math.gcd(mult, BASE) != 1:
        raise ValueError(f'Multiplicative factor must be a positive integer coprime with {BASE} (given value: mult={mult}).')


def _salt_offset(salt: str, modulo_space: int) -> int:
    return xxhash.xxh64_intdigest(salt.encode('utf-8')) % modulo_space
