"""
errors.py — typed exceptions raised by the OTP core.

Callers decide how to surface them (inline error for add-account,
log-and-skip for batch notification). The core itself never logs.
"""


class OTPError(Exception):
    """Base class for every error raised by the code-generation pipeline."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidSecretError(OTPError, ValueError):
    """The Base32 secret cannot be decoded into key bytes."""


class InvalidCharacterError(InvalidSecretError):
    """A character outside the Base32 alphabet was found in the secret."""

    def __init__(self, character: str, position: int):
        super().__init__(f"invalid Base32 character {character!r} at position {position}")
        self.character = character
        self.position = position


class HashProviderError(OTPError):
    """The keyed-hash primitive failed to initialize, compute, or answer in time."""
