"""
Process-wide write gate for the guestbook.

All guestbook appends go through a single ``WriteGate`` so two
submissions never interleave their header check and append.  Waiting
is bounded: when the gate is not free within ``timeout_seconds`` the
caller gets ``ServerBusyError`` and nothing is written.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .exceptions import ServerBusyError

logger = logging.getLogger(__name__)


class WriteGate:
    """A mutual-exclusion lock with a bounded acquisition wait."""

    def __init__(self, timeout_seconds: float = 30.0) -> None:
        self.timeout_seconds = timeout_seconds
        self._lock = threading.Lock()

    @contextmanager
    def hold(self, timeout_seconds: Optional[float] = None) -> Iterator[None]:
        """Hold the gate for the duration of the ``with`` block.

        Raises ``ServerBusyError`` before entering the block if the
        gate stays taken for longer than the timeout.  The gate is
        released however the block exits.
        """
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        if not self._lock.acquire(timeout=timeout):
            logger.warning("Write gate still held after %.1fs; rejecting write", timeout)
            raise ServerBusyError()
        try:
            yield
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()
