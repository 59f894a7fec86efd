"""Bounded progress handoff between a metrics scan and the UI loop.

One ``ProgressReporter`` is created per scan. The scan thread is the only
producer: it calls ``send`` after each page and ``close`` when it stops,
whether it succeeded or failed. Closing carries no payload. The UI side calls
``receive`` for one tick at a time and subscribes again until it gets None.

Progress is independent of the scan result, so the UI can see the close
before or after the result arrives.
"""

from __future__ import annotations

import logging
import queue
import threading

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4
SEND_TIMEOUT = 1.0
POLL_INTERVAL = 0.1

_CLOSED = object()


class ProgressReporter:
    """A bounded queue of cumulative scanned-record counts."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._queue: queue.Queue = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, scanned: int) -> None:
        """Hand one tick to the consumer, waiting briefly if the queue is full.

        A tick that cannot be delivered in time is dropped: a later tick
        carries a larger cumulative count anyway.
        """
        if self._closed.is_set():
            return
        try:
            self._queue.put(scanned, timeout=SEND_TIMEOUT)
        except queue.Full:
            logger.debug("Dropped progress tick %d; consumer is behind", scanned)

    def close(self) -> None:
        """Signal that no more ticks will be sent. Safe to call twice."""
        if self._closed.is_set():
            return
        self._closed.set()
        try:
            self._queue.put_nowait(_CLOSED)
        except queue.Full:
            # receive() notices the flag once the queue drains
            pass

    def receive(self, timeout: float | None = None) -> int | None:
        """Block for the next tick. Returns None once the reporter is closed.

        With a timeout, raises ``queue.Empty`` if nothing arrived in time.
        """
        waited = 0.0
        while True:
            try:
                item = self._queue.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                if self._closed.is_set() and self._queue.empty():
                    return None
                waited += POLL_INTERVAL
                if timeout is not None and waited >= timeout:
                    raise
                continue
            if item is _CLOSED:
                return None
            return item

    def __enter__(self) -> "ProgressReporter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
