"""Pooled HTTP client shared by the pricing API and Telegram clients.

One instance is created at process start and passed to whoever needs it.
Requests are made exactly once; callers decide what a failure means.
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT = 10.0
DEFAULT_POOL_SIZE = 32


class HTTPClient:
    def __init__(
        self,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        pool_size: int = DEFAULT_POOL_SIZE,
    ) -> None:
        self.timeout = float(timeout)
        base_headers = {
            "User-Agent": "kartel-bot/0.1",
            "Accept": "application/json",
        }
        self.headers = {**base_headers, **(headers or {})}
        self._client = requests.Session()
        self._client.headers.update(self.headers)
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self._client.mount('https://', adapter)
        self._client.mount('http://', adapter)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | list[tuple[str, str]] | None = None,
        json: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        return self._client.request(
            method.upper(),
            url,
            params=params,
            json=json,
            timeout=self.timeout if timeout is None else timeout,
        )

    def get(
        self,
        url: str,
        params: dict[str, Any] | list[tuple[str, str]] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        return self._request('GET', url, params=params, timeout=timeout)

    def post(
        self, url: str, json: dict[str, Any] | None = None, timeout: float | None = None
    ) -> requests.Response:
        return self._request('POST', url, json=json, timeout=timeout)

    def close(self) -> None:
        self._client.close()


__all__ = ["HTTPClient", "DEFAULT_TIMEOUT"]
