"""Cooperative cancellation for long-running parses and builds."""

import logging
import threading

from .exceptions import OperationCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Flag checked between work items.

    Cancellation is cooperative: callers check the token before each metadata
    item, file and representation, and the current item always completes.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        if not self._event.is_set():
            logger.info("Cancellation requested")
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self) -> None:
        """Raise OperationCancelled if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelled()
