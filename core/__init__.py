"""
core package
============

TOTP code generation per RFC 4226 & RFC 6238 (HMAC-SHA1, 30 s step,
6 digits), the Google-Authenticator-compatible profile.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- Base32 decode:
  secret text -> key bytes; invalid characters always raise.

- TOTP:
  counter = floor(now / 30), written as 8 bytes big-endian
  code = Truncate(HMAC-SHA1(key, counter)) mod 10^6, zero-padded

- Dynamic truncation:
  offset = last byte & 0x0F, 4 bytes from offset, top bit cleared.

──────────────────────────────────────────────
Usage
──────────────────────────────────────────────
>>> from core import generate
>>> generate("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", 59)
'287082'

Batch use (scheduler / account list):
    from core import Account, generate_codes, format_notification
    results = generate_codes([Account("github", secret)], now())
    message = format_notification(results)   # "github: 123456"
"""
from .base32 import clean_secret, decode
from .batch import NOTIFICATION_TITLE, format_notification, generate_codes, generate_codes_async
from .errors import HashProviderError, InvalidCharacterError, InvalidSecretError, OTPError
from .hash_provider import CryptographyHmacProvider, HmacSha1Provider, get_provider
from .models import Account, CodeResult, Settings
from .otp_core import (
    DEFAULT_TIME_STEP,
    DIGITS,
    generate,
    generate_async,
    hotp,
    now,
    seconds_remaining,
)

__all__ = [
    "Account",
    "CodeResult",
    "CryptographyHmacProvider",
    "DEFAULT_TIME_STEP",
    "DIGITS",
    "HashProviderError",
    "HmacSha1Provider",
    "InvalidCharacterError",
    "InvalidSecretError",
    "NOTIFICATION_TITLE",
    "OTPError",
    "Settings",
    "clean_secret",
    "decode",
    "format_notification",
    "generate",
    "generate_async",
    "generate_codes",
    "generate_codes_async",
    "get_provider",
    "hotp",
    "now",
    "seconds_remaining",
]
