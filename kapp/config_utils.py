#!/usr/bin/env python3
"""
Configuration utilities for the kintone app-schema client.

This module provides centralized configuration loading and environment
management functions used by the HTTP client and the command line tool.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from loguru import logger


def load_environment_config(environment: Optional[str] = None) -> None:
    """
    Load environment-specific configuration files.

    Args:
        environment: Specific environment to load ('dev', 'prod'),
                    or None to use ENVIRONMENT variable
    """
    if environment is None:
        environment = os.getenv("ENVIRONMENT", "")

    if environment in ["dev", "prod"]:
        env_file = f".env.{environment}"
        if os.path.exists(env_file):
            load_dotenv(env_file, override=True)
            logger.info(f"Loaded environment config: {env_file}")
        else:
            logger.warning(f"Environment config file not found: {env_file}")
    else:
        load_dotenv()
        if environment:
            logger.warning(f"Unknown environment '{environment}', loaded default .env")


def get_base_url_from_env() -> str:
    """
    Get the kintone domain URL from environment variables.

    Returns:
        Base URL without trailing slash (e.g. "https://example.cybozu.com")

    Raises:
        ValueError: If KINTONE_BASE_URL is not set
    """
    base_url = os.getenv("KINTONE_BASE_URL")

    if not base_url:
        raise ValueError("No base URL found. Set KINTONE_BASE_URL environment variable.")

    return base_url.rstrip("/")


def get_auth_from_env() -> dict:
    """
    Get kintone credentials from environment variables.

    API token authentication takes priority over password authentication.

    Returns:
        Dictionary with either {"api_token": ...} or {"username": ..., "password": ...}

    Raises:
        ValueError: If neither an API token nor a username/password pair is set
    """
    api_token = os.getenv("KINTONE_API_TOKEN")
    if api_token:
        return {"api_token": api_token}

    credentials = {
        "username": os.getenv("KINTONE_USERNAME"),
        "password": os.getenv("KINTONE_PASSWORD"),
    }

    missing_keys = [key for key, value in credentials.items() if not value]
    if missing_keys:
        raise ValueError(
            f"Missing kintone credentials: set KINTONE_API_TOKEN or {missing_keys}"
        )

    return credentials


def get_basic_auth_from_env() -> Optional[tuple]:
    """
    Get optional HTTP basic authentication placed in front of the domain.

    Returns:
        (username, password) tuple or None if not configured
    """
    username = os.getenv("KINTONE_BASIC_AUTH_USERNAME")
    password = os.getenv("KINTONE_BASIC_AUTH_PASSWORD")
    if username and password:
        return (username, password)
    return None


def get_guest_space_id() -> Optional[str]:
    """Get the guest space id from environment variables."""
    return os.getenv("KINTONE_GUEST_SPACE_ID") or None
