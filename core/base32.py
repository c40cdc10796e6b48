"""
base32.py — Base32 secret decoding (RFC 4648 alphabet, lenient padding).

- Input is upper-cased and trailing '=' padding is stripped.
- Every remaining character must be in A-Z2-7; anything else raises
  InvalidCharacterError (no sentinel values, no silent substitution).
- Bits that do not fill a whole byte at the end are dropped, as
  authenticator apps accept secrets whose length is not a multiple of 8.
"""

import re

from .errors import InvalidCharacterError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}
_WHITESPACE = re.compile(r"\s+")


def clean_secret(text: str) -> str:
    """Remove all whitespace from a user-entered secret ("JBSW Y3DP" -> "JBSWY3DP")."""
    return _WHITESPACE.sub("", text)


def decode(text: str) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Each symbol contributes 5 bits (MSB first). The bit stream is cut into
    8-bit groups from the start; a trailing partial group is discarded.

    Raises:
        InvalidCharacterError: if a character is not part of the alphabet.
    """
    normalized = text.upper().rstrip("=")

    buffer = 0
    bits = 0
    out = bytearray()
    for position, ch in enumerate(normalized):
        value = _INDEX.get(ch)
        if value is None:
            raise InvalidCharacterError(ch, position)
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)
