from urllib.parse import urlsplit

import httpx
from fastapi import Depends
from perplexity_proxy.shared.dependencies import get_http_client
from perplexity_proxy.shared.config import config, logger
from .query import HealthCheckResponse

class HealthCheckHandler:
    def __init__(self, http_client: httpx.AsyncClient = Depends(get_http_client)):
        self._http_client = http_client

    async def _probe(self, name: str, method: str, url: str) -> str:
        try:
            resp = await self._http_client.request(method, url, timeout=5.0)
            return "up" if resp.status_code < 500 else "down"
        except Exception as e:
            logger.error("%s health check failed: %s", name, str(e))
            return "down"

    async def handle(self) -> HealthCheckResponse:
        services_status = {}

        parts = urlsplit(config["perplexity"]["url"])
        services_status["perplexity_api"] = await self._probe(
            "Perplexity API", "HEAD", f"{parts.scheme}://{parts.netloc}/"
        )

        supabase_url = config["supabase"]["url"]
        if supabase_url:
            services_status["supabase_auth"] = await self._probe(
                "Supabase auth", "GET", f"{supabase_url.rstrip('/')}/auth/v1/health"
            )
        else:
            logger.error("Supabase auth health check skipped: SUPABASE_URL is not configured.")
            services_status["supabase_auth"] = "down"

        overall_status = "ok" if all(s == "up" for s in services_status.values()) else "error"
        return HealthCheckResponse(status=overall_status, services=services_status)
