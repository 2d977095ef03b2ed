"""
Security module - bearer credential inspection
"""

from .token_codec import (
    TokenCodec,
    TokenCodecError,
    CredentialMalformed,
    CredentialExpired,
)

__all__ = [
    "TokenCodec",
    "TokenCodecError",
    "CredentialMalformed",
    "CredentialExpired",
]
