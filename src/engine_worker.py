"""
Threaded Engine Worker

Runs one NQueensEngine on a dedicated thread. The caller and the engine share
no mutable state: control messages travel through an inbound queue and
events come back through an outbound queue.

Pending control messages are applied only between generations, so a pause
or reset never interrupts a generation step that has already begun.
"""

import threading
from queue import Queue, Empty
from typing import Any, List, Mapping, Optional

from nq_logging import get_logger
from nqueens_engine import Event, NQueensEngine, ParamsInput


class EngineWorker:
    """
    Message-passing wrapper around an engine running on its own thread.

    Usage:
        with EngineWorker(seed=7) as worker:
            worker.init({'board_size': 8})
            worker.start()
            solution = worker.wait_for('solution', timeout=30)
    """

    def __init__(self, params: ParamsInput = None, seed: Optional[int] = None,
                 rng=None, name: str = "nqueens-engine"):
        """
        Args:
            params: Initial parameters handed to the engine
            seed: Seed for the engine's random source
            rng: Explicit random source (overrides ``seed``)
            name: Thread name
        """
        self.logger = get_logger()
        self.name = name

        self._inbox: Queue = Queue()
        self._events: Queue = Queue()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.engine = NQueensEngine(params, rng=rng, seed=seed, listener=self._events.put)

    # Thread lifecycle
    def start_thread(self):
        """Start the worker thread (idempotent)."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        self.logger.debug("Engine worker started", thread=self.name)

    def shutdown(self, timeout: Optional[float] = 5.0):
        """Stop the worker thread after its current generation."""
        self._stop_event.set()
        self._inbox.put(None)  # wake a blocked get()

        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self.logger.debug("Engine worker stopped", thread=self.name)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> 'EngineWorker':
        self.start_thread()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()

    def _loop(self):
        while not self._stop_event.is_set():
            if self.engine.is_running:
                # Generation boundary: apply everything queued so far
                self._apply_pending()
                if self.engine.is_running and not self._stop_event.is_set():
                    self._guarded(self.engine.advance_one_generation, "generation step")
            else:
                message = self._inbox.get()
                if message is not None:
                    self._guarded(lambda: self.engine.handle_message(message), "control message")

    def _guarded(self, step, description: str):
        """Run one engine call; a failure becomes an error event and pauses the run."""
        try:
            step()
        except Exception as e:
            self.logger.error(f"Engine {description} failed", exception=e)
            self.engine.pause()
            self._events.put(Event('error', f"Engine {description} failed: {e}"))

    def _apply_pending(self):
        while True:
            try:
                message = self._inbox.get_nowait()
            except Empty:
                return
            if message is not None:
                self._guarded(lambda: self.engine.handle_message(message), "control message")

    # Control protocol (caller -> engine)
    def send(self, message: Mapping[str, Any]):
        """Queue a control message; it is applied at the next generation boundary."""
        self._inbox.put(dict(message) if isinstance(message, Mapping) else message)

    def init(self, params: ParamsInput = None):
        self.send({'type': 'init', 'params': params})

    def start(self):
        self.send({'type': 'start'})

    def pause(self):
        self.send({'type': 'pause'})

    def reset(self, params: ParamsInput = None):
        self.send({'type': 'reset', 'params': params})

    # Event protocol (engine -> caller)
    def get_event(self, timeout: Optional[float] = None) -> Event:
        """
        Next event from the engine.

        Raises:
            queue.Empty: If no event arrives within ``timeout``
        """
        return self._events.get(timeout=timeout)

    def drain_events(self) -> List[Event]:
        """All events currently queued, oldest first."""
        events = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except Empty:
                return events

    def wait_for(self, event_type: str, timeout: Optional[float] = None) -> Optional[Event]:
        """
        Consume events until one of ``event_type`` arrives.

        Events of other types read along the way are discarded.

        Returns:
            The matching event, or None on timeout
        """
        while True:
            try:
                event = self._events.get(timeout=timeout)
            except Empty:
                return None
            if event.type == event_type:
                return event
