"""
Loop driver for the broker smoke test.

Runs a fixed sequence of broker REST calls ``count`` times and builds a
plain-text transcript of every call and its result.  Each iteration:

1. Deletes any broker left behind by an earlier aborted run.  A failure
   here is expected when there is nothing to clean up, so it is logged and
   the run carries on.
2. Runs the twelve-step create/buy/read/sell/delete sequence.  The first
   failure stops that iteration; its stack trace goes into the transcript
   and the next iteration starts normally.
3. Records how long the sequence took.

When more than one iteration was requested, the mean iteration time is
appended at the end.
"""

from __future__ import annotations

import logging
import time
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field

from .client import BrokerClient
from .models import format_broker, format_brokers

logger = logging.getLogger(__name__)

BASE_ID = "Looper"
SYMBOL1 = "IBM"
SYMBOL2 = "AAPL"
SYMBOL3 = "GOOG"


@dataclass
class LoopResult:
    """Outcome of one looper run."""

    transcript: str
    durations_ms: list[int] = field(default_factory=list)

    @property
    def average_ms(self) -> float | None:
        """Mean iteration duration, or ``None`` for single-iteration runs."""
        if len(self.durations_ms) < 2:
            return None
        return sum(self.durations_ms) / len(self.durations_ms)


def step_labels(owner: str) -> list[str]:
    """Return the labels of the call sequence, in the order they run."""
    return [
        "1:  GET /broker",
        f"2:  POST /broker/{owner}",
        f"3:  PUT /broker/{owner}?symbol={SYMBOL1}&shares=1",
        f"4:  PUT /broker/{owner}?symbol={SYMBOL2}&shares=2",
        f"5:  PUT /broker/{owner}?symbol={SYMBOL3}&shares=3",
        f"6:  GET /broker/{owner}",
        "7:  GET /broker",
        f"8:  PUT /broker/{owner}?symbol={SYMBOL1}&shares=6",
        f"9:  PUT /broker/{owner}?symbol={SYMBOL3}&shares=-3",
        f"10: GET /broker/{owner}",
        f"11: DELETE /broker/{owner}",
        "12: GET /broker",
    ]


class Looper:
    """
    Drives the call sequence against one broker client.

    Args:
        client: Broker client already carrying the bearer token.
        clock: Monotonic clock returning seconds; swapped out in tests.
    """

    def __init__(self, client: BrokerClient, clock: Callable[[], float] = time.perf_counter):
        self.client = client
        self.clock = clock

    def cleanup(self, owner: str) -> str:
        """Best-effort delete of a broker left over from an aborted run."""
        try:
            broker = self.client.delete_broker(owner)
        except Exception as exc:
            logger.info(
                "The following error is expected if there's nothing to cleanup: %s", exc
            )
            return f'No left-over broker named "{owner}" to delete.  That\'s OK, continuing on....'
        return format_broker(broker)

    def iteration(self, owner: str) -> str:
        """
        Run the call sequence once and return its transcript.

        Stops at the first failing call and appends the stack trace.
        """
        client = self.client
        calls = [
            # the "all brokers" summary does not include stocks
            lambda: format_brokers(client.get_brokers()),
            lambda: format_broker(client.create_broker(owner)),
            lambda: format_broker(client.update_broker(owner, SYMBOL1, 1)),
            lambda: format_broker(client.update_broker(owner, SYMBOL2, 2)),
            lambda: format_broker(client.update_broker(owner, SYMBOL3, 3)),
            lambda: format_broker(client.get_broker(owner)),
            lambda: format_brokers(client.get_brokers()),
            lambda: format_broker(client.update_broker(owner, SYMBOL1, 6)),
            lambda: format_broker(client.update_broker(owner, SYMBOL3, -3)),
            lambda: format_broker(client.get_broker(owner)),
            lambda: format_broker(client.delete_broker(owner)),
            lambda: format_brokers(client.get_brokers()),
        ]

        parts: list[str] = []
        try:
            for label, call in zip(step_labels(owner), calls):
                parts.append(f"\n\n{label}\n")
                parts.append(call())
        except Exception:
            stack_trace = traceback.format_exc()
            logger.error("Iteration for %s failed:\n%s", owner, stack_trace)
            parts.append("\n" + stack_trace)
        return "".join(parts)

    def run(self, owner: str = BASE_ID, count: int = 1) -> LoopResult:
        """Run ``count`` iterations for *owner* and collect the transcript."""
        logger.info("Entering looper, with ID: %s and count: %d", owner, count)

        parts: list[str] = []
        durations: list[int] = []
        for index in range(1, count + 1):
            parts.append(f"0:  DELETE /broker/{owner}\n")
            parts.append(self.cleanup(owner))

            if count > 1:
                parts.append(f"\nIteration #{index}\n")

            start = self.clock()
            parts.append(self.iteration(owner))
            elapsed = int(round((self.clock() - start) * 1000))
            durations.append(elapsed)

            parts.append(f"\n\nElapsed time for this iteration: {elapsed} ms\n\n")

        result = LoopResult(transcript="", durations_ms=durations)
        if result.average_ms is not None:
            parts.append(f"Overall average time per iteration: {result.average_ms} ms\n")

        result.transcript = "".join(parts)
        logger.info("Exiting looper")
        return result
