#!/usr/bin/env python3
"""
Configuration module for the Perplexity proxy.
Loads settings from an optional YAML file, applies environment overrides
and initializes logging with Pydantic validation.
"""

import os
import sys
import logging
from typing import Dict, Any, Optional

import yaml
from pydantic import BaseModel, ValidationError

CONFIG_FILE = os.environ.get("PROXY_CONFIG_FILE", "config.yml")

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "SUPABASE_URL": ("supabase", "url"),
    "SUPABASE_ANON_KEY": ("supabase", "anon_key"),
    "PERPLEXITY_API_KEY": ("perplexity", "api_key"),
}


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5555
    log_level: str = "INFO"
    http_log_level: str = "INFO"


class SupabaseConfig(BaseModel):
    url: str = ""
    anon_key: str = ""


class PerplexityConfig(BaseModel):
    api_key: Optional[str] = None
    url: str = "https://api.perplexity.ai/chat/completions"
    timeout: float = 600.0


class RequestProxyConfig(BaseModel):
    enabled: bool = False
    url: Optional[str] = None


def apply_env_overrides(config_data: Dict[str, Any], environ=None) -> Dict[str, Any]:
    """Copy set environment variables over the matching config fields."""
    environ = os.environ if environ is None else environ
    for env_name, (section, field) in ENV_OVERRIDES.items():
        if env_name in environ:
            config_data.setdefault(section, {})[field] = environ[env_name]
    return config_data


def validate_config(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate each configuration section, filling in defaults."""
    config_data["server"] = ServerConfig(**config_data.get("server", {})).model_dump()
    config_data["supabase"] = SupabaseConfig(**config_data.get("supabase", {})).model_dump()
    config_data["perplexity"] = PerplexityConfig(**config_data.get("perplexity", {})).model_dump()
    config_data["requestProxy"] = RequestProxyConfig(**config_data.get("requestProxy", {})).model_dump()
    return config_data


def load_config(path: str = CONFIG_FILE) -> Dict[str, Any]:
    """Load and validate configuration with Pydantic models."""
    try:
        try:
            with open(path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file) or {}
        except FileNotFoundError:
            # Secrets normally arrive through the environment alone.
            config_data = {}

        apply_env_overrides(config_data)
        return validate_config(config_data)
    except (yaml.YAMLError, ValidationError) as e:
        print(f"Error in configuration: {e}")
        sys.exit(1)


def setup_logging(config_: Dict[str, Any]) -> logging.Logger:
    """Configure logging based on validated configuration."""
    log_level = config_["server"]["log_level"]
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger_ = logging.getLogger("perplexity-proxy")
    logger_.info("Logging level set to %s", log_level)
    return logger_


# Load and validate configuration once at startup
config = load_config()
logger = setup_logging(config)
