"""
CertAxis Console Core

Session and renewal core of the CertAxis certificate-authority console:
credential persistence, expiry detection, login/registration/logout
against the CertAxis backend, and certificate renewal requests.

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial project setup
  - Persistence layer (JSON key-value document)
  - Token codec (unverified expiry check)
  - Session manager + monitor
  - aiohttp backend client
  - Renewal workflow

ARCHITECTURE:
- Layer 1 : Persistence (JSONStore, TokenStore)
- Layer 2 : Remote API (AuthBackend, CertAxisApiClient, SessionsApi)
- Layer 3 : Session (AuthSessionManager, SessionMonitor)
- Layer 4 : Workflows (RenewalWorkflow)

SECURITY NOTES:
- Token signatures are verified by the backend only
- Unparseable tokens are treated as expired
- Any 401 from the backend ends the local session
"""

__version__ = "0.1.0-alpha"
__author__ = "CertAxis Development Team"
__license__ = "See LICENSE file"

# Version info
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0
VERSION_SUFFIX = "alpha"

# Export main classes
from .core.config import ConsoleConfig
from .persistence.token_store import TokenStore, UserProfile
from .security.token_codec import TokenCodec
from .api.client import CertAxisApiClient
from .session.manager import AuthSessionManager
from .session.monitor import SessionMonitor
from .session.state import SessionState, SessionStatus
from .renewals.workflow import RenewalRequest, RenewalWorkflow

__all__ = [
    "ConsoleConfig",
    "TokenStore",
    "UserProfile",
    "TokenCodec",
    "CertAxisApiClient",
    "AuthSessionManager",
    "SessionMonitor",
    "SessionState",
    "SessionStatus",
    "RenewalRequest",
    "RenewalWorkflow",
]
