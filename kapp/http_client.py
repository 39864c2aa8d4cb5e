#!/usr/bin/env python3
"""
kintone REST API HTTP client

This module provides the transport used by the app-schema client: a
`requests` session with kintone authentication headers, query-string
encoding in the platform's bracket convention, rate limiting and retry logic.
"""

import base64
import random
import time
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union
from urllib.parse import urlencode

import requests
from loguru import logger

from kapp.config_utils import (
    get_auth_from_env,
    get_base_url_from_env,
    get_basic_auth_from_env,
    get_guest_space_id,
    load_environment_config,
)
from kapp.constants import MAX_GET_URL_LENGTH
from kapp.errors import KintoneAPIError

# Statuses the server returns before doing any work, safe to resubmit
RETRY_STATUSES = (429, 503)


class Transport(Protocol):
    """One HTTP round-trip per call, returning the decoded JSON body."""

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def post(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def put(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


def flatten_params(params: Any, prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flatten nested parameters into kintone query-string pairs.

    Lists use indexed keys and dicts use named keys, so
    {"apps": [1, 2]} becomes [("apps[0]", "1"), ("apps[1]", "2")].
    None values are dropped.

    Args:
        params: Parameter value (dict, list or scalar)
        prefix: Key of the enclosing value

    Returns:
        List of (key, value) pairs ready for urlencode
    """
    pairs = []
    if isinstance(params, dict):
        for key, value in params.items():
            pairs.extend(flatten_params(value, f"{prefix}[{key}]" if prefix else str(key)))
    elif isinstance(params, (list, tuple)):
        for index, value in enumerate(params):
            pairs.extend(flatten_params(value, f"{prefix}[{index}]"))
    elif params is None:
        pass
    elif isinstance(params, bool):
        pairs.append((prefix, "true" if params else "false"))
    else:
        pairs.append((prefix, str(params)))
    return pairs


class KintoneHTTPClient:
    """
    kintone REST API client implementing the Transport protocol.
    Implements authentication headers, rate limiting and retry logic.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[Union[str, List[str]]] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        basic_auth: Optional[Tuple[str, str]] = None,
        guest_space_id: Optional[Union[str, int]] = None,
        timeout: int = 30,
        max_retries: int = 3,
        min_interval: float = 0.1,
    ):
        """
        Initialize kintone HTTP client.

        Credentials that are not passed explicitly are read from the
        environment (see kapp.config_utils).

        Args:
            base_url: Domain URL, e.g. "https://example.cybozu.com"
            api_token: API token, or several tokens for multi-app calls
            username: Login name for password authentication
            password: Password for password authentication
            basic_auth: Optional (username, password) for HTTP basic auth
            guest_space_id: Guest space id when the apps live in a guest space
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            min_interval: Minimum number of seconds between two requests
        """
        if base_url is None or (api_token is None and username is None):
            load_environment_config()

        self.base_url = (base_url or get_base_url_from_env()).rstrip("/")
        self.guest_space_id = guest_space_id if guest_space_id is not None else get_guest_space_id()
        self.timeout = timeout
        self.max_retries = max_retries

        self.last_request_time = 0
        self.min_interval = min_interval

        if api_token is None and username is None:
            credentials = get_auth_from_env()
            api_token = credentials.get("api_token")
            username = credentials.get("username")
            password = credentials.get("password")

        self.session = requests.Session()
        self._setup_headers(api_token, username, password)

        basic_auth = basic_auth or get_basic_auth_from_env()
        if basic_auth:
            self.session.auth = basic_auth

        logger.debug(f"kintone client initialized for {self.base_url}")

    def _setup_headers(
        self,
        api_token: Optional[Union[str, List[str]]],
        username: Optional[str],
        password: Optional[str],
    ):
        """Setup authentication headers for kintone requests."""
        headers = {"Accept": "application/json"}

        if api_token:
            if isinstance(api_token, (list, tuple)):
                api_token = ",".join(api_token)
            headers["X-Cybozu-API-Token"] = api_token
        elif username and password:
            encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
            headers["X-Cybozu-Authorization"] = encoded
        else:
            raise ValueError("Either api_token or username and password are required")

        self.session.headers.update(headers)

    def _rate_limit(self):
        """Enforce the minimum interval between requests."""
        current_time = time.time()
        time_since_last = current_time - self.last_request_time
        if time_since_last < self.min_interval:
            time.sleep(self.min_interval - time_since_last)
        self.last_request_time = time.time()

    def _exponential_backoff(self, attempt: int, max_delay: int = 60) -> float:
        """Calculate exponential backoff delay."""
        return min(max_delay, (2 ** attempt) + random.uniform(0, 1))

    def _send(self, method: str, path: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        url = f"{self.base_url}{path}"

        if method in ("GET", "DELETE"):
            query = urlencode(flatten_params(params or {}))
            full_url = f"{url}?{query}" if query else url
            if method == "GET" and len(full_url) > MAX_GET_URL_LENGTH:
                logger.debug(f"URL too long ({len(full_url)} chars), sending GET {path} via POST")
                return self.session.request(
                    "POST",
                    url,
                    json=params or {},
                    headers={"X-HTTP-Method-Override": "GET"},
                    timeout=self.timeout,
                )
            return self.session.request(method, full_url, timeout=self.timeout)

        return self.session.request(method, url, json=params or {}, timeout=self.timeout)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    def _make_request(
        self, method: str, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Make HTTP request with rate limiting and retry logic.

        Only GET requests are resubmitted after a connection failure; writes
        are retried only when the server refused them with 429/503.

        Args:
            method: HTTP method
            path: Request path (see kapp.paths.build_path)
            params: Query parameters (GET/DELETE) or JSON body (POST/PUT)

        Returns:
            Decoded JSON response

        Raises:
            KintoneAPIError: If the server answers with an error status, or with a
                body that is not a JSON object
            requests.RequestException: If the request cannot be completed
        """
        for attempt in range(self.max_retries + 1):
            try:
                self._rate_limit()

                if attempt == 0:
                    logger.debug(f"{method} {path}")
                else:
                    logger.debug(f"{method} {path} (attempt {attempt + 1})")

                response = self._send(method, path, params)

                if response.status_code in RETRY_STATUSES and attempt < self.max_retries:
                    delay = self._exponential_backoff(attempt)
                    logger.warning(
                        f"HTTP {response.status_code} for {method} {path}, retrying in {delay:.2f} seconds"
                    )
                    time.sleep(delay)
                    continue

                body = self._decode(response)
                if response.status_code >= 400:
                    error = KintoneAPIError.from_response_body(response.status_code, body)
                    logger.warning(f"{method} {path} failed: {error}")
                    raise error

                if not isinstance(body, dict):
                    error = KintoneAPIError.from_response_body(response.status_code, body)
                    logger.warning(f"{method} {path} returned a non-JSON body: {error}")
                    raise error

                return body

            except (requests.ConnectionError, requests.Timeout) as e:
                if method == "GET" and attempt < self.max_retries:
                    delay = self._exponential_backoff(attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}): {e}, retrying in {delay:.2f} seconds"
                    )
                    time.sleep(delay)
                else:
                    logger.error(f"Request failed for {method} {path}: {e}")
                    raise

        raise requests.RequestException("Max retries exceeded")

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._make_request("GET", path, params)

    def post(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._make_request("POST", path, params)

    def put(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._make_request("PUT", path, params)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._make_request("DELETE", path, params)
