"""
CertAxis API Client - aiohttp implementation of AuthBackend

Module: api.client
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Login / register / logout endpoints
  - Authenticated request helper (Bearer header)
  - Forced logout on HTTP 401 and on locally expired credentials
  - Network failures mapped to RemoteUnreachable

ARCHITECTURE:
One aiohttp.ClientSession per client, created lazily and closed by
close() (or by leaving the async context manager).

Response handling mirrors the console front end:
- Empty body -> {}
- JSON body -> decoded value
- Anything else -> raw text
- Error message taken from the body's "message" field when present
"""

import asyncio
import logging
import json
from typing import Any, Optional, Tuple

import aiohttp

from .base_backend import (
    AuthBackend,
    ApiError,
    AuthenticationFailed,
    RegistrationFailed,
    RemoteUnreachable,
    SessionRejected,
)
from ..core.config import ConsoleConfig
from ..core.constants import (
    DEFAULT_LOGIN_ERROR,
    DEFAULT_REGISTER_ERROR,
    ENDPOINT_LOGIN,
    ENDPOINT_LOGOUT,
    ENDPOINT_REGISTER,
)
from ..security.token_codec import TokenCodec, CredentialExpired


class CertAxisApiClient(AuthBackend):
    """
    HTTP client for the CertAxis backend

    Every authenticated call goes through request(), which is the single
    place where an authorization failure is turned into a forced logout.
    """

    def __init__(
        self,
        config: ConsoleConfig,
        codec: Optional[TokenCodec] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize API client

        Args:
            config: Console configuration (base URL, timeout)
            codec: Used to skip requests with a locally expired credential
            session: Pre-built aiohttp session (owned by the caller)
        """
        super().__init__()
        self.logger = logging.getLogger("api.client")
        self.config = config
        self.codec = codec
        self._session = session
        self._owns_session = session is None

        self.logger.info(f"API client initialized (base_url={config.api_base_url})")

    async def __aenter__(self) -> "CertAxisApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP session if this client created it"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    # ========================================================================
    # AuthBackend
    # ========================================================================

    async def authenticate(self, username: str, password: str) -> str:
        status, body = await self._send(
            "POST",
            ENDPOINT_LOGIN,
            payload={"username": username, "password": password},
        )
        if not _is_success(status):
            raise AuthenticationFailed(_error_message(body, DEFAULT_LOGIN_ERROR))

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationFailed("Login response did not contain a token")

        self.logger.info(f"Authenticated {username}")
        return token

    async def register(self, username: str, password: str) -> None:
        status, body = await self._send(
            "POST",
            ENDPOINT_REGISTER,
            payload={"username": username, "password": password},
        )
        if not _is_success(status):
            raise RegistrationFailed(_error_message(body, DEFAULT_REGISTER_ERROR))

        self.logger.info(f"Registered {username}")

    async def terminate_session(self, token: str) -> None:
        status, body = await self._send("POST", ENDPOINT_LOGOUT, token=token)
        if not _is_success(status):
            raise ApiError(status, _error_message(body, "Logout failed"), body)

    # ========================================================================
    # Authenticated requests
    # ========================================================================

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Any] = None,
    ) -> Any:
        """
        Perform an authenticated API call

        Args:
            method: HTTP method
            endpoint: Path below the API base URL
            payload: JSON body

        Returns:
            Decoded response body

        Raises:
            CredentialExpired: Local credential already expired (session dropped)
            SessionRejected: Server answered 401 (session dropped)
            ApiError: Any other non-success status
            RemoteUnreachable: Network failure or timeout
        """
        token = self.current_token()
        if token is not None and self.codec is not None:
            try:
                self.codec.ensure_valid(token)
            except CredentialExpired:
                self.logger.warning(f"Credential expired before {method} {endpoint}")
                await self.notify_unauthorized()
                raise

        status, body = await self._send(method, endpoint, payload=payload, token=token)

        if status == 401:
            self.logger.warning(f"{method} {endpoint} rejected with 401, ending session")
            await self.notify_unauthorized()
            raise SessionRejected(status, _error_message(body, "Unauthorized"), body)

        if not _is_success(status):
            raise ApiError(status, _error_message(body, f"HTTP {status}"), body)

        return body

    async def _send(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Any] = None,
        token: Optional[str] = None,
    ) -> Tuple[int, Any]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = f"{self.config.api_base_url}{endpoint}"
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)

        try:
            session = self._get_session()
            async with session.request(
                method,
                url,
                json=payload,
                headers=headers,
                timeout=timeout,
            ) as response:
                text = await response.text(errors="replace")
                return response.status, _parse_body(text)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.warning(f"{method} {endpoint} failed: {e!r}")
            raise RemoteUnreachable(f"Cannot reach {url}: {e!r}")

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _parse_body(text: str) -> Any:
    if not text:
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _error_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return default
