"""
API module - remote CertAxis service

Provides:
- AuthBackend: Abstract remote contract used by the session manager
- CertAxisApiClient: aiohttp implementation
- SessionsApi: Server-side session administration
"""

from .base_backend import (
    AuthBackend,
    BackendError,
    AuthenticationFailed,
    RegistrationFailed,
    RemoteUnreachable,
    ApiError,
    SessionRejected,
)
from .client import CertAxisApiClient
from .sessions import SessionsApi

__all__ = [
    "AuthBackend",
    "BackendError",
    "AuthenticationFailed",
    "RegistrationFailed",
    "RemoteUnreachable",
    "ApiError",
    "SessionRejected",
    "CertAxisApiClient",
    "SessionsApi",
]
