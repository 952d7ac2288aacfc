# perplexity_proxy/features/proxy_chat/client.py
import httpx
from typing import Dict, Any, Optional

from perplexity_proxy.shared.config import logger
from perplexity_proxy.shared.errors import UpstreamError
from perplexity_proxy.shared.metrics import TOKENS_SENT, TOKENS_RECEIVED, UPSTREAM_ERRORS

from .command import ProxyChatCommand

class PerplexityClient:
    """Sends a single chat completion request to Perplexity. No retries."""

    def __init__(self, http_client: httpx.AsyncClient, api_key: Optional[str], url: str):
        self._client = http_client
        self._api_key = api_key
        self._url = url

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    async def complete(self, command: ProxyChatCommand) -> Any:
        """
        Forwards messages and model and returns the decoded completion.

        Raises UpstreamError for a non-success status. Transport and JSON
        decoding errors are left to the caller.
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.info("Forwarding chat completion for model '%s'.", command.model)
        response = await self._client.post(
            self._url, json=command.model_dump(), headers=headers, follow_redirects=True
        )

        if not response.is_success:
            error_data = response.text
            logger.error(
                "Perplexity API error: status=%s headers=%s body=%s",
                response.status_code, dict(response.headers), error_data
            )
            UPSTREAM_ERRORS.labels(status=str(response.status_code)).inc()
            raise UpstreamError(response.status_code, error_data)

        data = response.json()
        self._count_tokens(data)
        return data

    @staticmethod
    def _count_tokens(data: Any) -> None:
        usage = data.get("usage") if isinstance(data, dict) else None
        if not isinstance(usage, dict):
            return
        for counter, field in ((TOKENS_SENT, "prompt_tokens"), (TOKENS_RECEIVED, "completion_tokens")):
            value = usage.get(field)
            if isinstance(value, (int, float)) and value > 0:
                counter.inc(value)
