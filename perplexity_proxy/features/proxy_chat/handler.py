# perplexity_proxy/features/proxy_chat/handler.py
from typing import Any

from fastapi import Depends, Request
from fastapi.responses import JSONResponse, Response

from perplexity_proxy.shared.config import logger
from perplexity_proxy.shared.constants import BEARER_PREFIX, CORS_HEADERS, PREFLIGHT_METHOD
from perplexity_proxy.shared.dependencies import get_identity_verifier, get_perplexity_client
from perplexity_proxy.shared.errors import (
    InvalidAuthError,
    InvalidMessagesError,
    MissingAuthError,
    MissingModelError,
    ProxyError,
    ServerMisconfiguredError,
    error_response,
    status_for_unexpected,
    unexpected_envelope,
)
from perplexity_proxy.shared.metrics import PROXY_REQUESTS
from perplexity_proxy.services.identity import SupabaseIdentityVerifier

from .client import PerplexityClient
from .command import ProxyChatCommand


def extract_token(authorization: str) -> str:
    """Drops the first "Bearer " from the header; a value without it is used as is."""
    return authorization.replace(BEARER_PREFIX, "", 1)


def parse_command(payload: Any) -> ProxyChatCommand:
    """Validates messages, then model, from a decoded request body."""
    if payload is None:
        raise TypeError("Cannot read 'messages' from a null request body")
    if isinstance(payload, dict):
        messages = payload.get("messages")
        model = payload.get("model")
    else:
        messages = model = None

    if not messages or not isinstance(messages, list):
        raise InvalidMessagesError()
    if not model:
        raise MissingModelError()
    return ProxyChatCommand(messages=messages, model=model)


class ProxyChatHandler:
    def __init__(
        self,
        verifier: SupabaseIdentityVerifier = Depends(get_identity_verifier),
        perplexity_client: PerplexityClient = Depends(get_perplexity_client)
    ):
        self._verifier = verifier
        self._client = perplexity_client

    async def handle(self, request: Request) -> Response:
        if request.method == PREFLIGHT_METHOD:
            return self._finish(request, "preflight", Response(status_code=204, headers=CORS_HEADERS))

        try:
            completion = await self._proxy(request)
            # Rendering rejects NaN and Infinity, so it stays inside the catch-all.
            response = JSONResponse(content=completion, status_code=200, headers=CORS_HEADERS)
        except ProxyError as e:
            logger.warning("Proxy call rejected: %s (%s)", e.kind, e.status_code)
            return self._finish(request, e.kind, error_response(e.status_code, e.envelope()))
        except Exception as e:
            logger.exception("Proxy handler error: %s", e)
            return self._finish(
                request, "Unexpected", error_response(status_for_unexpected(e), unexpected_envelope(e))
            )

        return self._finish(request, "success", response)

    @staticmethod
    def _finish(request: Request, outcome: str, response: Response) -> Response:
        request.state.outcome = outcome
        PROXY_REQUESTS.labels(outcome=outcome).inc()
        return response

    async def _proxy(self, request: Request) -> Any:
        authorization = request.headers.get("Authorization")
        if not authorization:
            raise MissingAuthError()

        user = await self._verifier.verify(extract_token(authorization))
        if not user:
            raise InvalidAuthError()

        command = parse_command(await request.json())

        # Checked after validation so a bad request is still answered with a 4xx.
        if not self._client.has_credentials:
            logger.error("PERPLEXITY_API_KEY is not configured.")
            raise ServerMisconfiguredError()

        return await self._client.complete(command)
