#!/usr/bin/env python3
"""
Metrics definitions for the Perplexity proxy.
"""

import prometheus_client

PROXY_REQUESTS = prometheus_client.Counter(
    'perplexity_proxy_requests_total',
    'Proxy calls by outcome (error kind, success or preflight)',
    ['outcome'],
)
UPSTREAM_ERRORS = prometheus_client.Counter(
    'perplexity_upstream_errors_total',
    'Non-success responses returned by the Perplexity API',
    ['status'],
)
TOKENS_SENT = prometheus_client.Counter('perplexity_tokens_sent_total', 'Prompt tokens reported by Perplexity')
TOKENS_RECEIVED = prometheus_client.Counter('perplexity_tokens_received_total', 'Completion tokens reported by Perplexity')
