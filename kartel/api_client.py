"""Client for the pricing API (forex convert and rates endpoints).

Each call is made once. Transport problems raise NetworkError; an error
reported by the API itself comes back inside the envelope.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any, Callable

import requests

from utils.http_client import HTTPClient
from utils.logging_setup import get_logger

from .exceptions import NetworkError
from .models import ConvertData, Envelope, RatesData
from .queries import CONVERT, RATES, Query

logger = get_logger('api_client')

DEFAULT_CONVERT_ENDPOINT = 'https://api.mfirhas.com/pfm/forex/convert'
DEFAULT_RATES_ENDPOINT = 'https://api.mfirhas.com/pfm/forex/rates'


class ForexClient:
    """Pricing API client; the HTTP client is shared and injected."""

    def __init__(
        self,
        http: HTTPClient,
        convert_endpoint: str = DEFAULT_CONVERT_ENDPOINT,
        rates_endpoint: str = DEFAULT_RATES_ENDPOINT,
    ):
        self.http = http
        self.convert_endpoint = convert_endpoint
        self.rates_endpoint = rates_endpoint

    def _decoder(self, query: Query) -> tuple[str, Callable[[dict[str, Any]], Any]]:
        if query.endpoint == CONVERT:
            return self.convert_endpoint, ConvertData.from_dict
        if query.endpoint == RATES:
            return self.rates_endpoint, RatesData.from_dict
        raise ValueError(f"unknown endpoint: {query.endpoint}")

    def fetch(self, query: Query, url: str | None = None) -> Envelope:
        """Run one query and decode its envelope.

        Raises NetworkError when no envelope could be obtained.
        """
        default_url, decode = self._decoder(query)
        url = url or default_url
        logger.debug(f"GET {url} {query.as_list()}")

        try:
            resp = self.http.get(url, params=query.as_list())
        except requests.RequestException as e:
            logger.warning(f"forex api call to {url} failed: {e}")
            raise NetworkError(
                f"failed calling forex api: {type(e).__name__}", details={'url': url}
            ) from e

        status = resp.status_code
        try:
            body = resp.json()
        except ValueError as e:
            logger.warning(f"forex api {url} returned non-JSON body (HTTP {status})")
            raise NetworkError(
                f"malformed response from forex api (HTTP {status})",
                details={'url': url, 'status': status},
            ) from e

        try:
            env = Envelope.from_json(body, decode)
        except ValueError as e:
            logger.warning(f"forex api {url} returned an unexpected envelope: {e}")
            raise NetworkError(
                f"malformed response from forex api: {e}", details={'url': url, 'status': status}
            ) from e

        if not 200 <= status < 300 and env.error is None:
            logger.warning(f"forex api {url} answered HTTP {status} without an error message")
            raise NetworkError(
                f"forex api answered HTTP {status}", details={'url': url, 'status': status}
            )
        return env

    def fetch_batch(self, queries: Sequence[Query], url: str | None = None) -> list[Envelope]:
        """Run independent queries concurrently, keeping request order.

        Every query gets its own slot; a failing query turns into an error
        envelope in its slot and never affects the others.
        """
        slots: list[Envelope | None] = [None] * len(queries)

        def worker(index: int, query: Query) -> None:
            try:
                slots[index] = self.fetch(query, url)
            except NetworkError as e:
                slots[index] = Envelope.failure(e.message)
            except Exception as e:
                logger.exception(f"unexpected failure for batch query {index}")
                slots[index] = Envelope.failure(f"unexpected error: {type(e).__name__}")

        threads = [
            threading.Thread(target=worker, args=(i, q), name=f"forex-batch-{i}", daemon=True)
            for i, q in enumerate(queries)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        return [s if s is not None else Envelope.failure("no result") for s in slots]
