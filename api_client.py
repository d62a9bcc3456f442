"""
HTTP client for the league's spreadsheet-backed API.

Every request first tries a plain JSON GET. If that fails for any reason
(network error, non-2xx status, body that is not JSON) the same request is
repeated once with a ``callback`` parameter and the callback-wrapped body
(``<callback>(<json>);``) is unwrapped instead.
"""

import json
import re
import secrets
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Set
from urllib.parse import urlencode

import requests

from config import ApiError, ConfigurationError, get_timeout, require_api_base

__all__ = [
    'ApiError', 'ConfigurationError', 'HttpError', 'JsonpError',
    'build_url', 'fetch_json', 'jsonp', 'api_get',
]

CALLBACK_PREFIX = '__pokerUplifeCb_'

# Callback names of requests currently waiting on a wrapped response
_pending_callbacks: Set[str] = set()
_pending_lock = threading.Lock()


class HttpError(ApiError):
    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class JsonpError(ApiError):
    pass


def build_url(params: Dict[str, Any]) -> str:
    """
    Build the request URL for the configured API base.

    Args:
        params: Query parameters; entries whose value is None are dropped

    Returns:
        Full URL, e.g. ``https://host/exec?action=ranking&ano=2024``
    """
    base = require_api_base()
    query = urlencode({k: str(v) for k, v in params.items() if v is not None})
    return f"{base}?{query}"


def fetch_json(url: str, timeout: Optional[float] = None) -> Any:
    response = requests.get(url, timeout=timeout or get_timeout())
    if not response.ok:
        raise HttpError(response.status_code)
    return response.json()


@contextmanager
def _callback_slot() -> Iterator[str]:
    """Reserve a unique callback name for one request and release it on exit."""
    with _pending_lock:
        name = CALLBACK_PREFIX + secrets.token_hex(6)
        while name in _pending_callbacks:
            name = CALLBACK_PREFIX + secrets.token_hex(6)
        _pending_callbacks.add(name)
    try:
        yield name
    finally:
        with _pending_lock:
            _pending_callbacks.discard(name)


def pending_callbacks() -> Set[str]:
    with _pending_lock:
        return set(_pending_callbacks)


def _unwrap_callback(body: str, callback: str) -> Any:
    match = re.match(
        r'^\s*(?:/\*\*/)?\s*' + re.escape(callback) + r'\s*\((.*)\)\s*;?\s*$',
        body,
        re.DOTALL,
    )
    if not match:
        raise ValueError(f"response is not wrapped in {callback}(...)")
    return json.loads(match.group(1))


def jsonp(url: str, timeout: Optional[float] = None) -> Any:
    """
    Fetch ``url`` asking the server to wrap its JSON in a callback call.

    Raises:
        JsonpError: if the request fails or the body is not the expected wrapper
    """
    with _callback_slot() as callback:
        separator = '&' if '?' in url else '?'
        wrapped_url = f"{url}{separator}{urlencode({'callback': callback})}"
        try:
            response = requests.get(wrapped_url, timeout=timeout or get_timeout())
            if not response.ok:
                raise HttpError(response.status_code)
            return _unwrap_callback(response.text, callback)
        except (requests.RequestException, HttpError, ValueError) as e:
            raise JsonpError("Falha ao carregar JSONP") from e


def api_get(params: Dict[str, Any], timeout: Optional[float] = None) -> Any:
    """
    GET the API with the given query parameters.

    Falls back to the callback-wrapped request exactly once when the plain
    JSON request fails.
    """
    url = build_url(params)
    try:
        return fetch_json(url, timeout=timeout)
    except (requests.RequestException, HttpError, ValueError) as e:
        print(f"⚠️ JSON request failed for action={params.get('action')} ({e}); retrying with callback")
        try:
            return jsonp(url, timeout=timeout)
        except JsonpError as jsonp_error:
            print(f"❌ Callback request failed for action={params.get('action')}: {jsonp_error.__cause__}")
            raise
