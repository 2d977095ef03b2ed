"""
Unit Tests - Authentication session manager

Module: tests.test_session_manager
Date: 2026-10-17
Version: 0.1.0-alpha

DESCRIPTION:
- Startup restore (valid, expired, absent, corrupt)
- login / register / logout transitions and persistence
- Forced logout through the backend's unauthorized hook
- State observation

SECURITY NOTES:
- A failed login must leave no credential in storage
- Logout must succeed when the backend is unreachable
"""

import asyncio
import logging
import shutil
import sys
import tempfile
import time
import unittest
from pathlib import Path

import jwt

sys.path.insert(0, str(Path(__file__).parent.parent))

from certaxis_console.api.base_backend import (
    AuthBackend,
    AuthenticationFailed,
    RegistrationFailed,
    RemoteUnreachable,
)
from certaxis_console.core.constants import TOKEN_KEY
from certaxis_console.persistence.json_store import JSONStore
from certaxis_console.persistence.token_store import TokenStore, UserProfile
from certaxis_console.session.manager import AuthSessionManager
from certaxis_console.session.state import SessionStatus

logging.basicConfig(level=logging.WARNING)

SECRET = "backend-secret-the-console-never-sees!!"


def make_token(expires_in: int = 3600, **claims) -> str:
    claims["exp"] = int(time.time()) + expires_in
    return jwt.encode(claims, SECRET, algorithm="HS256")


class FakeBackend(AuthBackend):
    """In-memory AuthBackend recording calls"""

    def __init__(self, token=None):
        super().__init__()
        self.token = token or make_token(sub="alice")
        self.fail_login = False
        self.login_error = None
        self.fail_register = False
        self.fail_logout = False
        self.calls = []

    async def authenticate(self, username, password):
        self.calls.append(("authenticate", username))
        if self.login_error is not None:
            raise self.login_error
        if self.fail_login:
            raise AuthenticationFailed("Invalid username or password")
        return self.token

    async def register(self, username, password):
        self.calls.append(("register", username))
        if self.fail_register:
            raise RegistrationFailed("Registration failed. Username may already exist.")

    async def terminate_session(self, token):
        self.calls.append(("terminate", token))
        if self.fail_logout:
            raise RemoteUnreachable("backend down")


class SessionManagerTestCase(unittest.TestCase):
    """Shared fixtures"""

    def setUp(self):
        """Setup before each test"""
        self.test_dir = tempfile.mkdtemp()
        self.json_store = JSONStore(str(Path(self.test_dir) / "session.json"))
        self.token_store = TokenStore(self.json_store)
        self.backend = FakeBackend()
        self.profile = UserProfile(id="42", username="alice", display_name="Alice")

    def tearDown(self):
        """Cleanup after each test"""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def new_manager(self) -> AuthSessionManager:
        return AuthSessionManager(self.backend, self.token_store)


class TestRestore(SessionManagerTestCase):
    """Startup restore from storage"""

    def test_initial_state_is_loading(self):
        """Test manager starts in loading state"""
        state = self.new_manager().state
        self.assertTrue(state.is_loading)
        self.assertIsNone(state.user)

    def test_restore_valid_session(self):
        """Test unexpired stored pair yields authenticated with exact profile"""
        token = make_token(3600)
        self.token_store.save(token, self.profile)
        manager = self.new_manager()

        state = asyncio.run(manager.restore())

        self.assertEqual(state.status, SessionStatus.AUTHENTICATED)
        self.assertFalse(state.is_loading)
        self.assertEqual(state.user, self.profile)
        self.assertEqual(manager.token, token)

    def test_restore_expired_session(self):
        """Test expired stored pair yields unauthenticated and clears storage"""
        self.token_store.save(make_token(-1), self.profile)
        manager = self.new_manager()

        state = asyncio.run(manager.restore())

        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)
        self.assertFalse(state.is_loading)
        self.assertIsNone(manager.token)
        self.assertEqual(self.json_store.load(), {})

    def test_restore_malformed_token(self):
        """Test garbage credential is discarded"""
        self.token_store.save("not-a-jwt", self.profile)
        state = asyncio.run(self.new_manager().restore())
        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)
        self.assertEqual(self.json_store.load(), {})

    def test_restore_exp_beyond_float_range(self):
        """Test unrepresentable exp is discarded instead of crashing startup"""
        token = jwt.encode({"exp": 10 ** 400}, SECRET, algorithm="HS256")
        self.token_store.save(token, self.profile)

        state = asyncio.run(self.new_manager().restore())

        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)
        self.assertEqual(self.json_store.load(), {})

    def test_restore_nothing_stored(self):
        """Test empty storage"""
        state = asyncio.run(self.new_manager().restore())
        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)
        self.assertFalse(state.is_loading)

    def test_restore_corrupt_storage(self):
        """Test corrupt document is treated as no session"""
        self.json_store.file_path.write_text("{corrupt")
        state = asyncio.run(self.new_manager().restore())
        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)

    def test_restore_runs_once(self):
        """Test second restore does not re-read storage"""
        manager = self.new_manager()

        async def run_test():
            await manager.restore()
            self.token_store.save(make_token(3600), self.profile)
            return await manager.restore()

        state = asyncio.run(run_test())
        self.assertEqual(state.status, SessionStatus.UNAUTHENTICATED)

    def test_loading_ends_exactly_once(self):
        """Test listeners see loading end a single time"""
        self.token_store.save(make_token(3600), self.profile)
        manager = self.new_manager()
        seen = []
        manager.subscribe(seen.append)

        asyncio.run(manager.restore())

        self.assertEqual(len(seen), 1)
        self.assertFalse(seen[0].is_loading)


class TestLogin(SessionManagerTestCase):
    """login / register"""

    def test_login_success_persists_pair(self):
        """Test storage holds the issued credential and matching profile"""
        manager = self.new_manager()

        profile = asyncio.run(manager.login("alice", "secret"))

        self.assertTrue(manager.is_authenticated)
        self.assertEqual(profile.username, "alice")
        token, stored = self.token_store.load()
        self.assertEqual(token, self.backend.token)
        self.assertEqual(stored, profile)

    def test_login_builds_profile_from_claims(self):
        """Test server-confirmed identity fields are used"""
        self.backend.token = make_token(3600, userId=99, name="Alice L.")
        profile = asyncio.run(self.new_manager().login("alice", "secret"))
        self.assertEqual(profile, UserProfile(id="99", username="alice", display_name="Alice L."))

    def test_login_profile_falls_back_to_username(self):
        """Test opaque-ish token without identity claims"""
        self.backend.token = make_token(3600)
        profile = asyncio.run(self.new_manager().login("bob", "secret"))
        self.assertEqual(profile, UserProfile(id="bob", username="bob", display_name="bob"))

    def test_login_failure_clears_storage(self):
        """Test failed login leaves no credential and re-raises"""
        self.token_store.save(make_token(3600), self.profile)
        manager = self.new_manager()
        self.backend.fail_login = True

        async def run_test():
            await manager.restore()
            self.assertTrue(manager.is_authenticated)
            with self.assertRaises(AuthenticationFailed):
                await manager.login("alice", "wrong")

        asyncio.run(run_test())

        self.assertEqual(manager.state.status, SessionStatus.UNAUTHENTICATED)
        self.assertIsNone(self.json_store.get(TOKEN_KEY))
        self.assertEqual(self.token_store.load(), (None, None))

    def test_unexpected_login_error_clears_storage(self):
        """Test any login failure drops the previous credential"""
        self.token_store.save(make_token(3600), self.profile)
        manager = self.new_manager()
        self.backend.login_error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        async def run_test():
            await manager.restore()
            self.assertTrue(manager.is_authenticated)
            with self.assertRaises(UnicodeDecodeError):
                await manager.login("alice", "secret")

        asyncio.run(run_test())

        self.assertFalse(manager.is_authenticated)
        self.assertEqual(self.token_store.load(), (None, None))

    def test_login_runs_restore_first(self):
        """Test login before restore still completes restore first"""
        manager = self.new_manager()
        seen = []
        manager.subscribe(seen.append)

        asyncio.run(manager.login("alice", "secret"))

        self.assertEqual(
            [s.status for s in seen],
            [SessionStatus.UNAUTHENTICATED, SessionStatus.AUTHENTICATED],
        )

    def test_register_chains_into_login(self):
        """Test successful registration logs in with same credentials"""
        manager = self.new_manager()
        profile = asyncio.run(manager.register("alice", "secret"))

        self.assertEqual(
            self.backend.calls,
            [("register", "alice"), ("authenticate", "alice")],
        )
        self.assertTrue(manager.is_authenticated)
        self.assertEqual(profile.username, "alice")

    def test_register_failure_skips_login(self):
        """Test failed registration is signaled and no login attempted"""
        self.backend.fail_register = True
        manager = self.new_manager()

        with self.assertRaises(RegistrationFailed):
            asyncio.run(manager.register("taken", "secret"))

        self.assertEqual(self.backend.calls, [("register", "taken")])
        self.assertFalse(manager.is_authenticated)


class TestLogout(SessionManagerTestCase):
    """logout and forced logout"""

    def login(self, manager):
        asyncio.run(manager.login("alice", "secret"))

    def test_logout_clears_everything(self):
        """Test logout clears memory and storage and notifies backend"""
        manager = self.new_manager()
        self.login(manager)

        asyncio.run(manager.logout())

        self.assertEqual(manager.state.status, SessionStatus.UNAUTHENTICATED)
        self.assertIsNone(manager.user)
        self.assertEqual(self.json_store.load(), {})
        self.assertIn(("terminate", self.backend.token), self.backend.calls)

    def test_logout_idempotent(self):
        """Test two logouts give same terminal state and empty storage"""
        manager = self.new_manager()
        self.login(manager)

        asyncio.run(manager.logout())
        first = manager.state
        self.assertEqual(self.json_store.load(), {})

        asyncio.run(manager.logout())
        self.assertEqual(manager.state, first)
        self.assertEqual(self.json_store.load(), {})

        terminates = [c for c in self.backend.calls if c[0] == "terminate"]
        self.assertEqual(len(terminates), 1)

    def test_logout_when_unauthenticated_clears_stray_storage(self):
        """Test stray storage removed even without a session"""
        manager = self.new_manager()
        asyncio.run(manager.restore())
        self.json_store.set(TOKEN_KEY, "stray")

        asyncio.run(manager.logout())

        self.assertEqual(self.json_store.load(), {})
        self.assertNotIn("terminate", [c[0] for c in self.backend.calls])

    def test_logout_ignores_remote_failure(self):
        """Test logout succeeds locally when backend is down"""
        manager = self.new_manager()
        self.login(manager)
        self.backend.fail_logout = True

        asyncio.run(manager.logout())

        self.assertFalse(manager.is_authenticated)
        self.assertEqual(self.json_store.load(), {})

    def test_concurrent_logouts_converge(self):
        """Test monitor and user logout racing"""
        manager = self.new_manager()
        self.login(manager)

        async def run_test():
            await asyncio.gather(manager.logout(), manager.forced_logout())

        asyncio.run(run_test())

        self.assertEqual(manager.state.status, SessionStatus.UNAUTHENTICATED)
        terminates = [c for c in self.backend.calls if c[0] == "terminate"]
        self.assertEqual(len(terminates), 1)

    def test_backend_unauthorized_hook_is_logout(self):
        """Test the HTTP layer's 401 hook runs the manager's logout"""
        manager = self.new_manager()
        self.login(manager)

        asyncio.run(self.backend.notify_unauthorized())

        self.assertFalse(manager.is_authenticated)
        self.assertEqual(self.json_store.load(), {})

    def test_backend_token_provider_bound(self):
        """Test backend reads the in-memory credential"""
        manager = self.new_manager()
        self.assertIsNone(self.backend.current_token())
        self.login(manager)
        self.assertEqual(self.backend.current_token(), self.backend.token)


class TestSubscribe(SessionManagerTestCase):
    """State observation"""

    def test_unsubscribe(self):
        """Test removed listener is not called"""
        manager = self.new_manager()
        seen = []
        unsubscribe = manager.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        asyncio.run(manager.login("alice", "secret"))
        self.assertEqual(seen, [])

    def test_failing_listener_does_not_break_transition(self):
        """Test listener errors are contained"""
        manager = self.new_manager()

        def broken(state):
            raise RuntimeError("listener bug")

        manager.subscribe(broken)
        with self.assertLogs("session.manager", level="ERROR"):
            asyncio.run(manager.login("alice", "secret"))
        self.assertTrue(manager.is_authenticated)


if __name__ == "__main__":
    unittest.main()
