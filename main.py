#!/usr/bin/env python3
"""
Perplexity API Proxy
Authenticates callers with Supabase and relays chat completions to Perplexity.
"""

from contextlib import asynccontextmanager

import httpx
import uvicorn

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from perplexity_proxy.shared.config import config, logger
from perplexity_proxy.shared.errors import http_exception_handler
from perplexity_proxy.shared.middleware import RequestIDMiddleware, add_process_time_header
from perplexity_proxy.features.proxy_chat.endpoints import router as proxy_chat_router
from perplexity_proxy.features.health_check.endpoints import router as health_check_router
from perplexity_proxy.features.metrics.endpoints import router as metrics_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan resources."""
    client_kwargs = {"timeout": config["perplexity"]["timeout"]}
    if config["requestProxy"]["enabled"]:
        proxy_url = config["requestProxy"]["url"]
        client_kwargs["proxy"] = proxy_url
        logger.info("Using proxy for httpx client: %s", proxy_url)
    app.state.http_client = httpx.AsyncClient(**client_kwargs)

    logger.info("Application startup complete")
    yield
    await app.state.http_client.aclose()
    logger.info("Application shutdown complete")

app = FastAPI(
    title="Perplexity API Proxy",
    description="Authenticated pass-through from Supabase users to the Perplexity chat completions API",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(
    proxy_chat_router,
    prefix="/functions/v1",
    tags=["Proxy"]
)
app.include_router(health_check_router, tags=["Monitoring"])
app.include_router(metrics_router)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)

app.middleware("http")(add_process_time_header)
app.add_middleware(RequestIDMiddleware)

if __name__ == "__main__":
    if not config["perplexity"]["api_key"]:
        logger.warning("PERPLEXITY_API_KEY is not set; chat requests will fail with a server configuration error.")
    if not config["supabase"]["url"]:
        logger.warning("SUPABASE_URL is not set; callers cannot be authenticated.")

    host = config["server"]["host"]
    port = config["server"]["port"]

    logger.warning("Starting Perplexity Proxy on %s:%s", host, port)
    logger.warning("Proxy URL: http://%s:%s/functions/v1/perplexity", host, port)
    logger.warning("Metrics: http://%s:%s/metrics", host, port)

    log_config = uvicorn.config.LOGGING_CONFIG
    http_log_level = config["server"].get("http_log_level", "INFO").upper()
    log_config["loggers"]["uvicorn.access"]["level"] = http_log_level

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=log_config,
        timeout_graceful_shutdown=30,
        server_header=False
    )
