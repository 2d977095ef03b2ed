"""
Base Backend - Abstract contract of the remote CertAxis service

Module: api.base_backend
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - AuthBackend abstract base class
  - Remote error taxonomy
  - Session binding (token provider + unauthorized handler)

ARCHITECTURE:
AuthBackend is what AuthSessionManager talks to:
- authenticate(username, password) -> token
- register(username, password)
- terminate_session(token)
- bind_session(token_provider, on_unauthorized)

The session manager hands its logout operation to the backend through
bind_session() when it is constructed; the backend never imports the
session layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional
import logging


TokenProvider = Callable[[], Optional[str]]
UnauthorizedHandler = Callable[[], Awaitable[None]]


class BackendError(Exception):
    """Base remote backend error"""
    pass


class AuthenticationFailed(BackendError):
    """Credentials were rejected"""
    pass


class RegistrationFailed(BackendError):
    """Registration was rejected (e.g. username taken)"""
    pass


class RemoteUnreachable(BackendError):
    """Backend could not be reached or timed out"""
    pass


class ApiError(BackendError):
    """Non-success HTTP response"""

    def __init__(self, status: int, message: str, data: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data


class SessionRejected(ApiError):
    """Server refused the credential (HTTP 401)"""
    pass


class AuthBackend(ABC):
    """
    Abstract remote authentication backend

    Subclasses implement the three remote operations; session binding
    is shared.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"api.{self.__class__.__name__}")
        self._token_provider: Optional[TokenProvider] = None
        self._on_unauthorized: Optional[UnauthorizedHandler] = None

    def bind_session(
        self,
        token_provider: TokenProvider,
        on_unauthorized: UnauthorizedHandler,
    ) -> None:
        """
        Attach the owning session

        Args:
            token_provider: Returns the current bearer credential (or None)
            on_unauthorized: Forced-logout callback, awaited on any
                authorization failure of an authenticated call
        """
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized

    def current_token(self) -> Optional[str]:
        """Credential of the bound session, if any"""
        if self._token_provider is None:
            return None
        return self._token_provider()

    async def notify_unauthorized(self) -> None:
        """Run the forced-logout callback, if bound"""
        if self._on_unauthorized is None:
            return
        await self._on_unauthorized()

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> str:
        """
        Exchange credentials for a bearer token

        Raises:
            AuthenticationFailed: Credentials rejected
            RemoteUnreachable: Backend not reachable
        """
        pass

    @abstractmethod
    async def register(self, username: str, password: str) -> None:
        """
        Create an account

        Raises:
            RegistrationFailed: Registration rejected
            RemoteUnreachable: Backend not reachable
        """
        pass

    @abstractmethod
    async def terminate_session(self, token: str) -> None:
        """
        Tell the backend the session is over

        Must not invoke the unauthorized handler.
        """
        pass
