"""
hash_provider.py — keyed-hash primitives used by the TOTP generator.

The generator only needs HMAC-SHA1(key, message) -> 20 bytes. Two backends:

- "hmac": Python standard library (hmac + hashlib), default.
- "cryptography": the `cryptography` package (OpenSSL-backed).

Any failure inside a backend is re-raised as HashProviderError so callers
only deal with the core's error types.
"""

import hashlib
import hmac

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from .errors import HashProviderError

SHA1_DIGEST_SIZE = 20


class HmacSha1Provider:
    """HMAC-SHA1 via the standard library."""

    name = "hmac"

    def sign(self, key: bytes, message: bytes) -> bytes:
        try:
            return hmac.new(key, message, hashlib.sha1).digest()
        except (TypeError, ValueError) as e:
            raise HashProviderError(f"hmac: cannot compute HMAC-SHA1: {e}") from e


class CryptographyHmacProvider:
    """HMAC-SHA1 via `cryptography.hazmat.primitives.hmac`."""

    name = "cryptography"

    def sign(self, key: bytes, message: bytes) -> bytes:
        try:
            h = crypto_hmac.HMAC(key, hashes.SHA1())
            h.update(message)
            return h.finalize()
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise HashProviderError(f"cryptography: cannot compute HMAC-SHA1: {e}") from e


_PROVIDERS = {
    HmacSha1Provider.name: HmacSha1Provider,
    CryptographyHmacProvider.name: CryptographyHmacProvider,
}


def available_providers() -> list:
    return sorted(_PROVIDERS)


def get_provider(name: str = HmacSha1Provider.name):
    """Return a provider instance by name ("hmac" or "cryptography")."""
    try:
        return _PROVIDERS[name]()
    except KeyError:
        raise HashProviderError(
            f"unknown hash provider {name!r} (available: {', '.join(available_providers())})"
        ) from None


DEFAULT_PROVIDER = HmacSha1Provider()
