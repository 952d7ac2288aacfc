#!/usr/bin/env python3
"""
Smoke test script for a running Perplexity proxy.
Needs a Supabase access token in SUPABASE_ACCESS_TOKEN; reads host and port from config.
"""

import asyncio
import os
from typing import Dict

import httpx

from perplexity_proxy.shared.config import config

MODEL = "sonar"
ORIGIN = "https://app.yfetch.com"

async def test_feature(feature_name: str, test_func: callable):
    """Run a feature test with formatted output"""
    print(f"\n=== Testing {feature_name} ===")
    try:
        await test_func()
        print(f"✅ {feature_name} test passed")
    except Exception as e:
        print(f"❌ {feature_name} test failed: {str(e)}")
        raise

async def test_health(client: httpx.AsyncClient, base_url: str):
    """Test the health endpoint"""
    resp = await client.get(f"{base_url}/health")
    resp.raise_for_status()
    print(f"Services: {resp.json()['services']}")

async def test_preflight(client: httpx.AsyncClient, proxy_url: str):
    """Test the CORS preflight"""
    resp = await client.options(proxy_url, headers={"Origin": ORIGIN})
    assert resp.status_code == 204, f"Expected 204, got {resp.status_code}"
    assert resp.headers["Access-Control-Allow-Origin"] == ORIGIN

async def test_missing_auth(client: httpx.AsyncClient, proxy_url: str):
    """Test that calls without a token are refused"""
    resp = await client.post(proxy_url, json={"model": MODEL, "messages": []})
    assert resp.status_code == 401, f"Expected 401, got {resp.status_code}"
    assert resp.json() == {"error": "Missing authorization header"}

async def test_proxy_chat(client: httpx.AsyncClient, proxy_url: str, headers: Dict[str, str]):
    """Test the Proxy Chat feature"""
    request_data = {
        "model": MODEL,
        "messages": [{"role": "user", "content": "Hello!"}],
    }
    resp = await client.post(proxy_url, headers=headers, json=request_data)
    resp.raise_for_status()
    print(f"Chat completion received: {resp.json().get('id')}")

async def run_tests():
    """Run all feature tests"""
    server_config = config["server"]
    host = "127.0.0.1" if server_config["host"] == "0.0.0.0" else server_config["host"]
    base_url = f"http://{host}:{server_config['port']}"
    proxy_url = f"{base_url}/functions/v1/perplexity"
    access_token = os.environ.get("SUPABASE_ACCESS_TOKEN", "")
    headers = {"Authorization": f"Bearer {access_token}"}

    async with httpx.AsyncClient(timeout=60.0) as client:
        await test_feature("Health", lambda: test_health(client, base_url))
        await test_feature("Preflight", lambda: test_preflight(client, proxy_url))
        await test_feature("Missing Auth", lambda: test_missing_auth(client, proxy_url))
        if access_token:
            await test_feature("Proxy Chat", lambda: test_proxy_chat(client, proxy_url, headers))
        else:
            print("\nSUPABASE_ACCESS_TOKEN not set, skipping Proxy Chat")

if __name__ == "__main__":
    print("Running Perplexity Proxy smoke tests")
    asyncio.run(run_tests())
