"""
Token Codec

Bijective mapping between non-negative integer identifiers and short,
URL-safe tokens.

The alphabet has 51 symbols: digits and consonants with the look-alike
characters (0, 1, i, l, I, o, O) and vowels removed, plus '-' and '_'.
Tokens are base-51 numerals, most significant symbol first, without padding.

Zero:
- encode(0) returns the zero-symbol ALPHABET[0] ("2")
- decode("") returns 0, the empty positional sum
- storage identifiers start at 1, so neither form ever names a stored row

Example:
    encode(1) -> "3"
    encode(11) -> "f"
    encode(51) -> "32"
    decode("32") -> 51
"""

from shortener.core.exceptions import InvalidCharacterError

__all__ = ["ALPHABET", "BASE", "encode", "decode", "check_token"]

ALPHABET = "23456789bcdfghjkmnpqrstvwxyzBCDFGHJKLMNPQRSTVWXYZ-_"
BASE = len(ALPHABET)

_POSITIONS = {symbol: index for index, symbol in enumerate(ALPHABET)}


def encode(identifier: int) -> str:
    """
    Encode a non-negative integer into a token.

    Args:
        identifier: The number to convert

    Returns:
        Token made of ALPHABET symbols, most significant first

    Raises:
        TypeError: If identifier is not an integer
        ValueError: If identifier is negative
    """
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise TypeError(f"Identifier must be an integer (given type: {type(identifier).__name__})")
    if identifier < 0:
        raise ValueError(f"Identifier must be non-negative (given value: {identifier})")

    if identifier == 0:
        return ALPHABET[0]

    digits = []
    while identifier > 0:
        identifier, remainder = divmod(identifier, BASE)
        digits.append(ALPHABET[remainder])

    return "".join(reversed(digits))


def decode(token: str) -> int:
    """
    Decode a token back to its identifier.

    Args:
        token: The token to parse

    Returns:
        The decoded number

    Raises:
        InvalidCharacterError: If any character is outside ALPHABET
    """
    number = 0
    for position, char in enumerate(token):
        index = _POSITIONS.get(char)
        if index is None:
            raise InvalidCharacterError(char, position)
        number = number * BASE + index
    return number


def check_token(token: str) -> None:
    """
    Check that every character of token is in ALPHABET without decoding it.

    Raises:
        InvalidCharacterError: For the first character outside ALPHABET
    """
    for position, char in enumerate(token):
        if char not in _POSITIONS:
            raise InvalidCharacterError(char, position)
