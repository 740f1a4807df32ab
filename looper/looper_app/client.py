"""
HTTP client for the broker REST API.

Wraps the five broker operations the looper exercises.  Every call goes
through ``BrokerClient._call`` so that the bearer token and the configured
timeout are applied uniformly, and so that non-2xx responses surface as a
single ``BrokerServiceError`` type.

Endpoints (relative to the configured ``BROKER_URL``):
    GET    /                              - Summary of all brokers
    POST   /<owner>                       - Create a broker
    GET    /<owner>                       - Broker details, with stocks
    PUT    /<owner>?symbol=..&shares=..   - Buy (or, with negative shares, sell)
    DELETE /<owner>                       - Remove a broker
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from .models import Broker

logger = logging.getLogger(__name__)


class BrokerServiceError(Exception):
    """Raised when the broker service answers with a non-2xx status."""

    def __init__(self, method: str, url: str, status_code: int, body: str):
        super().__init__(f"{method} {url} returned HTTP {status_code}: {body}")
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body


class BrokerClient:
    """
    Synchronous client for one broker service.

    Args:
        base_url: Root URL of the broker API (e.g.
            ``"http://broker-service:9080/broker"``).
        authorization: Value of the ``Authorization`` header, normally
            ``"Bearer <jwt>"``.
        timeout: Seconds to wait for each response.
    """

    def __init__(self, base_url: str, authorization: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.authorization = authorization
        self.timeout = timeout

    def _url(self, owner: str | None = None) -> str:
        if owner is None:
            return f"{self.base_url}/"
        return f"{self.base_url}/{quote(owner, safe='')}"

    def _call(self, method: str, url: str, **kwargs) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            BrokerServiceError: If the response status is not 2xx.
            requests.RequestException: For network-level failures.
        """
        logger.debug("%s %s", method, url)
        response = requests.request(
            method=method,
            url=url,
            headers={
                "Authorization": self.authorization,
                "Accept": "application/json",
            },
            timeout=self.timeout,
            **kwargs,
        )
        if not 200 <= response.status_code < 300:
            raise BrokerServiceError(method, url, response.status_code, response.text)
        if not response.content:
            return None
        return response.json()

    def get_brokers(self) -> list[Broker | None]:
        """Return the summary of all brokers (without their stocks)."""
        data = self._call("GET", self._url())
        return [Broker.from_payload(item) for item in data or []]

    def create_broker(self, owner: str) -> Broker | None:
        """Create a new, empty broker named *owner*."""
        return Broker.from_payload(self._call("POST", self._url(owner)))

    def get_broker(self, owner: str) -> Broker | None:
        """Return the details of *owner*, including its stocks."""
        return Broker.from_payload(self._call("GET", self._url(owner)))

    def update_broker(self, owner: str, symbol: str, shares: int) -> Broker | None:
        """Buy *shares* of *symbol* for *owner*; negative shares sell."""
        data = self._call(
            "PUT",
            self._url(owner),
            params={"symbol": symbol, "shares": shares},
        )
        return Broker.from_payload(data)

    def delete_broker(self, owner: str) -> Broker | None:
        """
        Remove *owner* and return its final state.

        Returns ``None`` when the service answers with an empty body.
        """
        return Broker.from_payload(self._call("DELETE", self._url(owner)))
