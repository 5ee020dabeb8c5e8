import logging
import threading
from typing import Optional

from .registry import GameRegistry


class Sweeper:
    """Background thread that evicts expired games on a fixed interval.

    Eviction only bounds memory; the registry already hides expired games
    from readers. ``stop()`` sets an event the loop waits on, so shutdown
    does not have to wait out a full interval.
    """

    def __init__(self, registry: GameRegistry, interval: float = 60, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.interval = interval
        self.logger = logger or logging.getLogger(__name__)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> int:
        try:
            removed = self.registry.purge_expired()
        except Exception:
            self.logger.exception('[sweep-error] pass aborted')
            return 0
        if removed:
            self.logger.info(f'[sweep] removed={removed} remaining={len(self.registry)}')
        return removed

    def run(self) -> None:
        self.logger.info(f'[sweep-start] interval={self.interval}s')
        while not self._stop_event.wait(self.interval):
            self.sweep_once()
        self.logger.info('[sweep-stop]')

    def start(self) -> None:
        if self.running:
            if not self._stop_event.is_set():
                return
            self._thread.join()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name='game-sweeper', daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            # still mid-pass; keep tracking it so start() cannot run a second loop
            if not self._thread.is_alive():
                self._thread = None
