#!/usr/bin/env python3
"""
Dependency provider functions for the application.
"""

from fastapi import Request
import httpx

from perplexity_proxy.shared.config import config
from perplexity_proxy.services.identity import SupabaseIdentityVerifier
from perplexity_proxy.features.proxy_chat.client import PerplexityClient

def get_http_client(request: Request) -> httpx.AsyncClient:
    """Returns the shared httpx.AsyncClient instance."""
    return request.app.state.http_client

def get_identity_verifier(request: Request) -> SupabaseIdentityVerifier:
    """Returns a Supabase token verifier bound to the current configuration."""
    return SupabaseIdentityVerifier(
        http_client=get_http_client(request),
        supabase_url=config["supabase"]["url"],
        anon_key=config["supabase"]["anon_key"],
    )

def get_perplexity_client(request: Request) -> PerplexityClient:
    """Returns a Perplexity client bound to the current configuration."""
    return PerplexityClient(
        http_client=get_http_client(request),
        api_key=config["perplexity"]["api_key"],
        url=config["perplexity"]["url"],
    )
