"""
Auth Session Manager - owner of the authentication session

Module: session.manager
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Startup restore from TokenStore (runs once)
  - login / register / logout
  - Forced-logout callback bound into the HTTP backend
  - State observation (subscribe / unsubscribe)

ARCHITECTURE:
States: loading -> {authenticated, unauthenticated}
        unauthenticated <-> authenticated

The manager is the only writer of the session:
  - In-memory token + profile are authoritative
  - TokenStore mirrors them for the next process start
  - Every logout trigger (user, SessionMonitor, HTTP 401) ends up in
    logout(), which is idempotent

SECURITY NOTES:
- A failed login always clears any cached credential
- Logout succeeds locally even if the backend is unreachable
- Credentials are never logged
"""

import logging
from typing import Awaitable, Callable, List, Optional

from .state import SessionState, SessionStatus
from ..api.base_backend import AuthBackend, BackendError
from ..persistence.token_store import TokenStore, UserProfile
from ..security.token_codec import TokenCodec


SessionListener = Callable[[SessionState], None]


class AuthSessionManager:
    """
    Orchestrates authentication and owns the session state.

    Consumers read `state` (or subscribe to changes) and call
    login(), register() and logout(); nothing else mutates the session.
    """

    def __init__(
        self,
        backend: AuthBackend,
        token_store: TokenStore,
        codec: Optional[TokenCodec] = None,
    ):
        """
        Initialize session manager

        Args:
            backend: Remote authentication backend; receives this
                manager's token accessor and logout callback
            token_store: Durable mirror of the session
            codec: Token codec used for expiry checks
        """
        self.logger = logging.getLogger("session.manager")
        self.backend = backend
        self.token_store = token_store
        self.codec = codec or TokenCodec()

        self._status = SessionStatus.LOADING
        self._user: Optional[UserProfile] = None
        self._token: Optional[str] = None
        self._restored = False
        self._listeners: List[SessionListener] = []

        self.backend.bind_session(self.get_token, self.logout)

    # ========================================================================
    # Read access
    # ========================================================================

    @property
    def state(self) -> SessionState:
        """Current session snapshot"""
        return SessionState(status=self._status, user=self._user)

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def get_token(self) -> Optional[str]:
        """Token accessor handed to collaborators"""
        return self._token

    @property
    def forced_logout(self) -> Callable[[], Awaitable[None]]:
        """No-argument logout callback for invalid-session detectors"""
        return self.logout

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a state listener

        Args:
            listener: Called with the new SessionState after each transition

        Returns:
            Callable removing the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ========================================================================
    # Transitions
    # ========================================================================

    async def restore(self) -> SessionState:
        """
        Restore the session persisted by a previous run

        Runs once; later calls return the current state untouched.
        """
        if self._restored:
            return self.state
        self._restored = True

        try:
            token, profile = self.token_store.load()
            if token is not None and profile is not None and not self.codec.is_expired(token):
                self._set_session(token, profile)
                self.logger.info(f"Session restored for {profile.username}")
            else:
                if token is not None:
                    self.logger.info("Persisted session expired or incomplete, discarding")
                self.token_store.clear()
                self._set_session(None, None)
        finally:
            if self._status is SessionStatus.LOADING:
                self._set_session(None, None)

        return self.state

    async def login(self, username: str, password: str) -> UserProfile:
        """
        Authenticate and open a session

        Raises:
            AuthenticationFailed: Credentials rejected (session left unauthenticated)
            RemoteUnreachable: Backend not reachable (session left unauthenticated)
        """
        await self._ensure_restored()

        try:
            token = await self.backend.authenticate(username, password)
        except Exception as e:
            if isinstance(e, BackendError):
                self.logger.warning(f"Login failed for {username}: {e}")
            else:
                self.logger.exception(f"Login failed for {username}")
            self.token_store.clear()
            self._set_session(None, None)
            raise

        profile = self._build_profile(username, token)
        self.token_store.save(token, profile)
        self._set_session(token, profile)

        self.logger.info(f"Logged in as {profile.username} (id={profile.id})")
        return profile

    async def register(self, username: str, password: str) -> UserProfile:
        """
        Create an account, then log in with the same credentials

        Raises:
            RegistrationFailed: Registration rejected (no login attempted)
            AuthenticationFailed: Follow-up login rejected
        """
        await self._ensure_restored()
        await self.backend.register(username, password)
        return await self.login(username, password)

    async def logout(self) -> None:
        """
        End the session

        Local state and storage are cleared before the backend is
        notified, so concurrent calls converge and a remote failure
        cannot keep the session alive.
        """
        await self._ensure_restored()

        token = self._token
        was_authenticated = self.is_authenticated

        self.token_store.clear()
        self._set_session(None, None)

        if was_authenticated:
            self.logger.info("Logged out")

        if token is None:
            return

        try:
            await self.backend.terminate_session(token)
        except BackendError as e:
            self.logger.warning(f"Remote logout failed (ignored): {e}")

    # ========================================================================
    # Internals
    # ========================================================================

    async def _ensure_restored(self) -> None:
        if not self._restored:
            await self.restore()

    def _build_profile(self, username: str, token: str) -> UserProfile:
        claims = self.codec.identity_claims(token)
        return UserProfile(
            id=claims.get("id", username),
            username=username,
            display_name=claims.get("name", username),
        )

    def _set_session(self, token: Optional[str], profile: Optional[UserProfile]) -> None:
        previous = self.state

        self._token = token
        self._user = profile
        if token is not None and profile is not None:
            self._status = SessionStatus.AUTHENTICATED
        else:
            self._token = None
            self._user = None
            self._status = SessionStatus.UNAUTHENTICATED

        current = self.state
        if current != previous:
            self._notify(current)

    def _notify(self, state: SessionState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                self.logger.exception("Session listener failed")
