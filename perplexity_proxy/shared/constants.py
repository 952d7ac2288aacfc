"""
Fixed response headers and error messages for the Perplexity proxy.
"""

ALLOWED_ORIGIN = "https://app.yfetch.com"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": ALLOWED_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, accept",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Max-Age": "86400",
    "Content-Type": "application/json",
}

PREFLIGHT_METHOD = "OPTIONS"
BEARER_PREFIX = "Bearer "

# Unclassified errors whose message mentions this are answered with 401.
AUTHORIZATION_HINT = "authorization"

MISSING_AUTH_MESSAGE = "Missing authorization header"
INVALID_AUTH_MESSAGE = "Invalid authorization token"
INVALID_MESSAGES_MESSAGE = "Invalid messages format"
MISSING_MODEL_MESSAGE = "Model parameter is required"
SERVER_MISCONFIGURED_MESSAGE = "Server configuration error"
UPSTREAM_ERROR_MESSAGE = "Perplexity API error"
