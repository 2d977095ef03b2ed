"""
Persistence module - durable session storage

Provides:
- JSONStore: Atomic JSON key-value document
- TokenStore: Credential + user profile pair
- UserProfile: Persisted identity
"""

from .json_store import JSONStore, JSONStoreError
from .token_store import TokenStore, TokenStoreError, StorageCorrupt, UserProfile

__all__ = [
    "JSONStore",
    "JSONStoreError",
    "TokenStore",
    "TokenStoreError",
    "StorageCorrupt",
    "UserProfile",
]
