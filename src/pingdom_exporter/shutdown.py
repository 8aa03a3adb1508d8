"""
Shutdown Watcher

Exits the process as soon as SIGINT or SIGTERM arrives. In-flight poll
cycles and scrape requests are abandoned.
"""

import logging
import os
import signal
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

WATCHED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownWatcher:
    """
    Installs exit handlers for the termination signals.

    Must be installed from the main thread (a restriction of signal.signal).
    """

    def __init__(
        self,
        signals: Iterable[signal.Signals] = WATCHED_SIGNALS,
        exit_func: Callable[[int], None] = os._exit,
    ):
        self.signals = tuple(signals)
        self._exit = exit_func
        self.received: Optional[signal.Signals] = None

    def install(self) -> None:
        for sig in self.signals:
            signal.signal(sig, self.handle)

    def handle(self, signum: int, frame=None) -> None:
        sig = signal.Signals(signum)
        self.received = sig
        logger.info(f"Received {sig.name}, exiting")
        for handler in logging.getLogger().handlers:
            handler.flush()
        self._exit(0)
