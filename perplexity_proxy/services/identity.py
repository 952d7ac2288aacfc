"""
Identity verification against Supabase Auth.
Resolves a caller's access token to the Supabase user it belongs to.
"""

from typing import Any, Dict, Optional

import httpx

from perplexity_proxy.shared.config import logger
from perplexity_proxy.shared.errors import IdentityServiceConfigError

class SupabaseIdentityVerifier:
    """Checks bearer tokens with the Supabase `/auth/v1/user` endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, supabase_url: str, anon_key: str):
        self._client = http_client
        self._supabase_url = supabase_url.rstrip("/")
        self._anon_key = anon_key

    async def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Returns the user for a valid token, or None when Supabase rejects it
        or cannot be asked. Only a missing Supabase URL raises.
        """
        if not self._supabase_url:
            raise IdentityServiceConfigError("supabaseUrl is required.")
        if not token:
            logger.warning("Identity check skipped: empty access token.")
            return None

        headers = {"apikey": self._anon_key, "Authorization": f"Bearer {token}"}
        try:
            response = await self._client.get(f"{self._supabase_url}/auth/v1/user", headers=headers)
        except httpx.RequestError as e:
            logger.warning("Supabase auth request failed: %s", e)
            return None

        if not response.is_success:
            logger.warning("Supabase rejected access token: %s - %s", response.status_code, response.text)
            return None

        try:
            user = response.json()
        except ValueError as e:
            logger.warning("Supabase auth returned a non-JSON body: %s", e)
            return None

        if not isinstance(user, dict) or not user.get("id"):
            return None
        return user
