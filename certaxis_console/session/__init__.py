"""
Session module - authentication session lifecycle

Provides:
- AuthSessionManager: login / register / logout, owns SessionState
- SessionMonitor: periodic expiry detection
- SessionState, SessionStatus: read-only session projection
"""

from .state import SessionState, SessionStatus
from .manager import AuthSessionManager
from .monitor import SessionMonitor

__all__ = [
    "SessionState",
    "SessionStatus",
    "AuthSessionManager",
    "SessionMonitor",
]
