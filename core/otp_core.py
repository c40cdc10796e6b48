#!/usr/bin/env python3
"""
otp_core.py — TOTP code generation (RFC 4226 / RFC 6238, SHA-1, 30 s, 6 digits).

Pipeline:
    secret (Base32) -> key bytes -> counter = floor(now / step)
    -> HMAC-SHA1(key, counter as 8 bytes) -> dynamic truncation
    -> code mod 10^6 -> zero-padded 6-digit string

Everything here is a pure function of its arguments: the current time is
always supplied by the caller, nothing is cached and nothing is logged.
Errors surface as InvalidSecretError / HashProviderError (see errors.py).

Security notes:
- The profile matches Google Authenticator defaults. Other digit counts and
  hash algorithms are intentionally not supported.
- Keep stored secrets out of logs; only account names are logged by callers.
"""

import asyncio
import struct
import time

from . import base32
from .errors import HashProviderError
from .hash_provider import DEFAULT_PROVIDER, SHA1_DIGEST_SIZE

# --- Config / constants ----------------------------------------------------
DIGITS = 6                  # fixed: 6-digit codes only
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
_MODULUS = 10 ** DIGITS


# --- RFC helpers -----------------------------------------------------------
def time_counter(now_unix_seconds: int, time_step_seconds: int = DEFAULT_TIME_STEP) -> int:
    """
    Counter for a timestamp: floor(now / step).

    Raises:
        ValueError: step is not a positive integer, or now is negative.
    """
    if not isinstance(time_step_seconds, int) or time_step_seconds <= 0:
        raise ValueError(f"time step must be a positive integer, got {time_step_seconds!r}")
    if now_unix_seconds < 0:
        raise ValueError(f"timestamp must not be negative, got {now_unix_seconds!r}")
    return int(now_unix_seconds) // time_step_seconds


def counter_bytes(counter: int) -> bytes:
    """
    8-byte big-endian message for HMAC.

    The high 4 bytes stay zero and the low 4 bytes carry the low 32 bits of
    the counter; counters fit in 32 bits for any 30 s step until 2106.

    counter_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">II", 0, counter & 0xFFFFFFFF)


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation of a 20-byte HMAC-SHA1 digest.

    offset = low nibble of the last byte (0..15, so offset + 3 <= 18);
    the 4 bytes at offset form a 31-bit integer with the top bit cleared.
    """
    offset = digest[-1] & 0x0F
    return (
        ((digest[offset] & 0x7F) << 24)
        | (digest[offset + 1] << 16)
        | (digest[offset + 2] << 8)
        | digest[offset + 3]
    )


def format_code(value: int) -> str:
    """Reduce a truncated value to 6 digits: 42 -> "000042"."""
    return str(value % _MODULUS).zfill(DIGITS)


def _check_digest(digest: bytes) -> bytes:
    if len(digest) != SHA1_DIGEST_SIZE:
        raise HashProviderError(
            f"expected a {SHA1_DIGEST_SIZE}-byte HMAC-SHA1 digest, got {len(digest)} bytes"
        )
    return digest


# --- HOTP / TOTP -----------------------------------------------------------
def hotp(key: bytes, counter: int, provider=None) -> str:
    """
    HOTP code for raw key bytes and a counter (RFC 4226).

    Arguments:
        key: decoded secret (may be empty; the provider decides)
        counter: non-negative integer counter
        provider: object with sign(key, message) -> bytes; defaults to
                  the standard-library HMAC-SHA1 provider
    """
    provider = provider or DEFAULT_PROVIDER
    digest = _check_digest(provider.sign(key, counter_bytes(counter)))
    return format_code(dynamic_truncate(digest))


def generate(secret_text: str, now_unix_seconds: int,
             time_step_seconds: int = DEFAULT_TIME_STEP, provider=None) -> str:
    """
    Current TOTP code for a Base32 secret.

    Arguments:
        secret_text: Base32 secret, case-insensitive, optional '=' padding
        now_unix_seconds: epoch seconds supplied by the caller
        time_step_seconds: step X in seconds (default 30)
        provider: keyed-hash provider (see hash_provider.py)

    Returns:
        str: exactly 6 ASCII digits

    Raises:
        InvalidSecretError: the secret is not valid Base32
        HashProviderError: the HMAC primitive failed
        ValueError: invalid time arguments
    """
    key = base32.decode(secret_text)
    counter = time_counter(now_unix_seconds, time_step_seconds)
    return hotp(key, counter, provider)


async def generate_async(secret_text: str, now_unix_seconds: int,
                         time_step_seconds: int = DEFAULT_TIME_STEP,
                         provider=None, timeout: float = None) -> str:
    """
    Same as generate(), with the HMAC computed off the event loop.

    The digest is awaited in full before truncation. When `timeout` (seconds)
    expires first, HashProviderError is raised.
    """
    key = base32.decode(secret_text)
    counter = time_counter(now_unix_seconds, time_step_seconds)
    provider = provider or DEFAULT_PROVIDER
    try:
        digest = await asyncio.wait_for(
            asyncio.to_thread(provider.sign, key, counter_bytes(counter)),
            timeout,
        )
    except asyncio.TimeoutError:
        raise HashProviderError(f"hash provider did not answer within {timeout}s") from None
    return format_code(dynamic_truncate(_check_digest(digest)))


def seconds_remaining(now_unix_seconds: int, time_step_seconds: int = DEFAULT_TIME_STEP) -> int:
    """Seconds until the current code rotates, in 1..step."""
    time_counter(now_unix_seconds, time_step_seconds)
    return time_step_seconds - (int(now_unix_seconds) % time_step_seconds)


def now() -> int:
    """Wall-clock epoch seconds, for callers that do not pin the time."""
    return int(time.time())

