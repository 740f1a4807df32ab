"""
Looper data models.

Mirrors the broker service's JSON contract for a single broker (a stock
portfolio).  The looper never persists brokers and never computes with
their fields; it only renders each response into the transcript, so a
``Broker`` wraps the decoded payload exactly as the service sent it.

Key Concepts Demonstrated:
- Contract duplication for service independence
- Lossless rendering of the payload the service actually sent
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Broker:
    """
    A broker (portfolio) as returned by the broker REST API.

    Wire fields: owner, total, loyalty, balance, commissions, free,
    nextCommission, sentiment and stocks.  The "all brokers" listing
    omits ``stocks`` for performance reasons.
    """

    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Any) -> Broker | None:
        """Wrap a decoded JSON object; an empty response body gives ``None``."""
        if data is None:
            return None
        return cls(payload=dict(data))

    @property
    def owner(self) -> str | None:
        return self.payload.get("owner")

    @property
    def stocks(self) -> dict[str, Any]:
        return self.payload.get("stocks") or {}

    def __str__(self) -> str:
        return json.dumps(self.payload, separators=(",", ":"))


def format_broker(broker: Broker | None) -> str:
    """Render one broker for the transcript; a missing broker renders as ``null``."""
    return "null" if broker is None else str(broker)


def format_brokers(brokers: list[Broker | None] | None) -> str:
    """Render a broker listing as ``[b1, b2, ...]``; ``None`` renders as ``[]``."""
    return "[" + ", ".join(format_broker(broker) for broker in brokers or []) + "]"
