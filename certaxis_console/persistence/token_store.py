"""
Token Store - Credential and profile persistence

Module: persistence.token_store
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Credential + user profile written as a pair
  - Fail-safe load (partial or corrupt state reads as absent)
  - Legacy credential key fallback, normalized on next save

ARCHITECTURE:
TokenStore is a durability mirror of the in-memory session:
  - save() overwrites both keys and never raises
  - load() returns (token, profile) or (None, None)
  - clear() removes every key it owns, idempotent

SECURITY NOTES:
- The bearer credential is stored as plain text (no client-side
  encryption); the document itself is chmod 0600
- A partially written pair is never trusted
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .json_store import JSONStore, JSONStoreError
from ..core.constants import TOKEN_KEY, LEGACY_TOKEN_KEY, USER_KEY


class TokenStoreError(Exception):
    """Base token store error"""
    pass


class StorageCorrupt(TokenStoreError):
    """Persisted profile cannot be parsed into the expected shape"""
    pass


@dataclass(frozen=True)
class UserProfile:
    """Minimal identity of the logged-in user"""
    id: str
    username: str
    display_name: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "UserProfile":
        """
        Create from dictionary (from JSON)

        Raises:
            StorageCorrupt: If data does not have the profile shape
        """
        if not isinstance(data, dict):
            raise StorageCorrupt(f"Profile must be an object, got {type(data).__name__}")

        fields = {}
        for key in ("id", "username", "displayName"):
            value = data.get(key)
            # Numeric ids are accepted from older documents
            if isinstance(value, int) and not isinstance(value, bool) and key == "id":
                value = str(value)
            if not isinstance(value, str) or not value:
                raise StorageCorrupt(f"Profile field '{key}' missing or invalid")
            fields[key] = value

        return cls(
            id=fields["id"],
            username=fields["username"],
            display_name=fields["displayName"],
        )


class TokenStore:
    """
    Persists the bearer credential and the user profile.

    Both values live in the same JSON document so a save or clear
    is a single atomic write.
    """

    def __init__(self, store: JSONStore):
        """
        Initialize token store

        Args:
            store: Backing key-value document
        """
        self.logger = logging.getLogger("persistence.token_store")
        self.store = store

    def save(self, token: str, profile: UserProfile) -> None:
        """
        Persist credential and profile, replacing prior values

        Storage errors are logged and swallowed.
        """
        try:
            self.store.update(
                {
                    TOKEN_KEY: token,
                    USER_KEY: json.dumps(profile.to_dict()),
                },
                remove=(LEGACY_TOKEN_KEY,),
            )
        except JSONStoreError as e:
            self.logger.warning(f"Failed to persist session: {e}")
            return
        self.logger.info(f"Session persisted for {profile.username}")

    def load(self) -> Tuple[Optional[str], Optional[UserProfile]]:
        """
        Read credential and profile

        Returns:
            (token, profile) when both are present and well-formed,
            (None, None) otherwise
        """
        try:
            data = self.store.load()
            token = self._read_token(data)
            raw_profile = data.get(USER_KEY)
            if token is None or raw_profile is None:
                return None, None
            profile = self._parse_profile(raw_profile)
        except (JSONStoreError, StorageCorrupt) as e:
            self.logger.warning(f"Ignoring persisted session: {e}")
            return None, None

        return token, profile

    def clear(self) -> None:
        """Remove credential and profile (idempotent, never raises)"""
        try:
            self.store.remove(TOKEN_KEY, LEGACY_TOKEN_KEY, USER_KEY)
        except JSONStoreError as e:
            self.logger.warning(f"Failed to clear session: {e}")

    @staticmethod
    def _read_token(data: Dict[str, Any]) -> Optional[str]:
        for key in (TOKEN_KEY, LEGACY_TOKEN_KEY):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    @staticmethod
    def _parse_profile(raw: Any) -> UserProfile:
        if not isinstance(raw, str):
            raise StorageCorrupt("Serialized profile is not a string")
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorrupt(f"Profile is not valid JSON: {e}")
        return UserProfile.from_dict(decoded)
