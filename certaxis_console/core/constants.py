"""
Constants for the CertAxis console core

Module: core.constants
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial constants definition
  - API host and endpoint paths
  - Session document keys (primary + legacy credential key)
  - Session monitor defaults
  - Renewal request enumerations

SECURITY NOTES:
- Credentials are stored in plain text on purpose (transport security
  and backend-side secrecy are assumed)
- Session document is written with 0600 permissions
"""

from typing import Final, Tuple

# ============================================================================
# API Configuration
# ============================================================================

API_HOST: Final[str] = "15.206.141.103:8080"
API_PROTOCOL: Final[str] = "http"
API_VERSION: Final[str] = ""
DEFAULT_API_BASE_URL: Final[str] = f"{API_PROTOCOL}://{API_HOST}{API_VERSION}"

# Seconds
DEFAULT_REQUEST_TIMEOUT: Final[float] = 30.0

# Environment overrides
ENV_API_BASE_URL: Final[str] = "CERTAXIS_API_BASE_URL"
ENV_API_TIMEOUT: Final[str] = "CERTAXIS_API_TIMEOUT"
ENV_DATA_DIR: Final[str] = "CERTAXIS_DATA_DIR"
ENV_SESSION_CHECK_INTERVAL: Final[str] = "CERTAXIS_SESSION_CHECK_INTERVAL"

# ============================================================================
# Endpoints
# ============================================================================

ENDPOINT_LOGIN: Final[str] = "/api/auth/login"
ENDPOINT_REGISTER: Final[str] = "/api/register"
ENDPOINT_LOGOUT: Final[str] = "/api/auth/logout"
ENDPOINT_SESSIONS_ACTIVE: Final[str] = "/api/sessions/active"
ENDPOINT_SESSION_TERMINATE: Final[str] = "/api/sessions/{session_id}/terminate"
ENDPOINT_SESSIONS_TERMINATE_ALL: Final[str] = "/api/sessions/terminate-all"

DEFAULT_LOGIN_ERROR: Final[str] = "Invalid username or password"
DEFAULT_REGISTER_ERROR: Final[str] = "Registration failed. Username may already exist."

# ============================================================================
# Session Persistence
# ============================================================================

DEFAULT_DATA_DIR: Final[str] = "./data"
SESSION_FILE_NAME: Final[str] = "session.json"

TOKEN_KEY: Final[str] = "certaxis_token"
LEGACY_TOKEN_KEY: Final[str] = "authToken"
USER_KEY: Final[str] = "user"

# ============================================================================
# Session Monitor
# ============================================================================

# Seconds between two expiration checks
DEFAULT_SESSION_CHECK_INTERVAL: Final[float] = 60.0

# Unauthenticated entry point
LOGIN_PATH: Final[str] = "/login"

# ============================================================================
# Renewal Requests
# ============================================================================

CERTIFICATE_TYPES: Final[Tuple[str, ...]] = ("server", "client", "mutual", "ca")
RENEWAL_PRIORITIES: Final[Tuple[str, ...]] = ("low", "medium", "high", "critical")

STATUS_PENDING: Final[str] = "pending"
STATUS_IN_PROGRESS: Final[str] = "in-progress"
STATUS_COMPLETED: Final[str] = "completed"
STATUS_REJECTED: Final[str] = "rejected"

RENEWAL_STATUSES: Final[Tuple[str, ...]] = (
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
    STATUS_REJECTED,
)
