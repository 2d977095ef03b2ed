"""
Sessions API - server-side session administration

Module: api.sessions
Date: 2026-10-17
Version: 0.1.0-alpha

All calls are authenticated and therefore go through
CertAxisApiClient.request() (401 ends the local session).
"""

from typing import Any, Dict, List

from .client import CertAxisApiClient
from ..core.constants import (
    ENDPOINT_SESSIONS_ACTIVE,
    ENDPOINT_SESSION_TERMINATE,
    ENDPOINT_SESSIONS_TERMINATE_ALL,
)


class SessionsApi:
    """Active session listing and termination"""

    def __init__(self, client: CertAxisApiClient):
        self.client = client

    async def get_active(self) -> List[Dict[str, Any]]:
        """List the active sessions known to the backend"""
        body = await self.client.request("GET", ENDPOINT_SESSIONS_ACTIVE)
        if not isinstance(body, list):
            return []
        return body

    async def terminate(self, session_id: int) -> Any:
        """Terminate one session by id"""
        endpoint = ENDPOINT_SESSION_TERMINATE.format(session_id=int(session_id))
        return await self.client.request("DELETE", endpoint)

    async def terminate_all(self) -> Any:
        """Terminate every session except the current one"""
        return await self.client.request("DELETE", ENDPOINT_SESSIONS_TERMINATE_ALL)
