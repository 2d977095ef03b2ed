"""
Session state - read-only projection of the authentication session

Module: session.state
Date: 2026-10-17
Version: 0.1.0-alpha
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..persistence.token_store import UserProfile


class SessionStatus(Enum):
    """Authentication lifecycle states"""
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot handed to session consumers

    Attributes:
        status: Current lifecycle state
        user: Logged-in profile (None unless authenticated)
    """
    status: SessionStatus
    user: Optional[UserProfile] = None

    @property
    def is_loading(self) -> bool:
        """True only while the startup restore has not completed"""
        return self.status is SessionStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED
