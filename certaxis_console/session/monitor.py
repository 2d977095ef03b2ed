"""
Session Monitor - periodic credential expiry check

Module: session.monitor
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Recurring asyncio task (default every 60 seconds)
  - Forced logout + redirect to the login path on expiry
  - start/stop pair and async context manager

ARCHITECTURE:
The monitor owns nothing but its task handle. Each tick reads the
manager's current credential and asks the codec whether it expired.
stop() cancels and awaits the task, so no logout can fire afterwards.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from .manager import AuthSessionManager
from ..core.constants import DEFAULT_SESSION_CHECK_INTERVAL, LOGIN_PATH
from ..security.token_codec import TokenCodec


Redirect = Callable[[str], Any]


class SessionMonitor:
    """
    Polls the session for credential expiry.

    Use as `async with SessionMonitor(...):` to guarantee the timer is
    cancelled on every exit path.
    """

    def __init__(
        self,
        manager: AuthSessionManager,
        redirect: Redirect,
        codec: Optional[TokenCodec] = None,
        interval: float = DEFAULT_SESSION_CHECK_INTERVAL,
        login_path: str = LOGIN_PATH,
    ):
        """
        Initialize session monitor

        Args:
            manager: Session owner (token accessor + forced logout)
            redirect: Navigates to a path; may be sync or async
            codec: Token codec (defaults to the manager's)
            interval: Seconds between checks
            login_path: Unauthenticated entry point
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.logger = logging.getLogger("session.monitor")
        self.manager = manager
        self.redirect = redirect
        self.codec = codec or manager.codec
        self.interval = interval
        self.login_path = login_path
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling (must be called from a running event loop)"""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self.logger.info(f"Session monitor started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Cancel polling and wait for the task to finish"""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        if task is asyncio.current_task():
            # Stopped from inside a check (e.g. by the redirect handler)
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.logger.info("Session monitor stopped")

    async def __aenter__(self) -> "SessionMonitor":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def check_now(self) -> bool:
        """
        Run one expiry check

        Returns:
            True if the session was expired and has been terminated
        """
        if not self.manager.is_authenticated:
            return False

        if not self.codec.is_expired(self.manager.token):
            return False

        self.logger.warning("Credential expired, forcing logout")
        await self.manager.forced_logout()

        result = self.redirect(self.login_path)
        if inspect.isawaitable(result):
            await result
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.check_now()
            except Exception:
                self.logger.exception("Session check failed")
