import hashlib
import hmac

import pytest

from core.errors import HashProviderError
from core.hash_provider import (
    CryptographyHmacProvider,
    HmacSha1Provider,
    available_providers,
    get_provider,
)
from core.otp_core import counter_bytes, generate

KEY = b"12345678901234567890"


@pytest.mark.parametrize("provider", [HmacSha1Provider(), CryptographyHmacProvider()])
def test_providers_compute_hmac_sha1(provider):
    message = counter_bytes(1)
    digest = provider.sign(KEY, message)
    assert len(digest) == 20
    assert digest == hmac.new(KEY, message, hashlib.sha1).digest()


def test_providers_agree_on_codes():
    secret = "JBSWY3DPEHPK3PXP"
    for t in (59, 1_111_111_109, 1_700_000_000):
        assert generate(secret, t, provider=HmacSha1Provider()) == generate(
            secret, t, provider=CryptographyHmacProvider()
        )


def test_cryptography_provider_rfc_vector():
    secret = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    assert generate(secret, 1234567890, provider=CryptographyHmacProvider()) == "005924"


@pytest.mark.parametrize("provider", [HmacSha1Provider(), CryptographyHmacProvider()])
def test_rejected_key_material_is_provider_error(provider):
    with pytest.raises(HashProviderError):
        provider.sign("not-bytes", counter_bytes(1))


def test_get_provider():
    assert isinstance(get_provider(), HmacSha1Provider)
    assert isinstance(get_provider("hmac"), HmacSha1Provider)
    assert isinstance(get_provider("cryptography"), CryptographyHmacProvider)
    assert available_providers() == ["cryptography", "hmac"]


def test_unknown_provider():
    with pytest.raises(HashProviderError) as excinfo:
        get_provider("sha256")
    assert "sha256" in excinfo.value.reason
