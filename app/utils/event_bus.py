"""
Lightweight EventBus used by the registry and its listeners.

Key invariants (enforced by call sites + tests):
  - Event topics come from enums in app.enums.events (EventType).
  - Payloads are Pydantic models in app.schemas.events.
  - Subscribers always receive a plain dict payload.
  - Events are delivered in publish order. Inline delivery is the default;
    async mode uses a single worker so ordering survives the queue hop.
  - No event is dropped: a full queue makes the publisher wait for space.
"""
import logging
import threading
import time
from collections import defaultdict
from dataclasses import asdict, is_dataclass
from enum import Enum
from queue import Full, Queue
from typing import Any, Callable, Dict, Hashable, Iterable, Optional

from pydantic import BaseModel

from app.config import load_config
from app.enums.events import EventType

logger = logging.getLogger(__name__)

# Backpressure warning configuration
_WAIT_WARNING_THRESHOLD = 10  # Log summary every N blocked publishes
_WAIT_WARNING_INTERVAL_SECONDS = 60  # Minimum seconds between summaries


class EventBus:
    """
    Handles event-driven communication across modules.

    One instance is shared by the registry and all listeners built by the
    service container.
    """

    def __init__(self, *, asynchronous: Optional[bool] = None, queue_size: Optional[int] = None) -> None:
        config = load_config() if asynchronous is None or queue_size is None else None
        self.asynchronous = config.eventbus_async if asynchronous is None else asynchronous
        self._queue_size = config.eventbus_queue_size if queue_size is None else queue_size

        self.subscribers: Dict[Hashable, list[Callable[[Any], None]]] = defaultdict(list)
        self.lock = threading.Lock()
        self._queue: Queue = Queue(maxsize=self._queue_size)
        self._worker: Optional[threading.Thread] = None
        self._blocked_publishes = 0
        self._waits_by_event: Dict[str, int] = defaultdict(int)
        self._waits_since_last_warning = 0
        self._last_wait_warning_time = 0.0
        if self.asynchronous:
            self._start_worker()

    def _start_worker(self) -> None:
        """Start the single delivery worker."""
        with self.lock:
            if self._worker is not None:
                return
            self._worker = threading.Thread(target=self._worker_loop, name="eventbus-worker", daemon=True)
            self._worker.start()
            logger.info("EventBus worker started (queue=%s)", self._queue_size)

    def subscribe(self, event_name: EventType | str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """
        Subscribes a callback function to an event.

        Args:
            event_name: The enum topic (preferred) or raw string.
            callback: Function to call when the event occurs.

        Returns:
            A callable that removes the subscription.
        """
        name = event_name.value if isinstance(event_name, Enum) else event_name
        with self.lock:
            self.subscribers[name].append(callback)

        def unsubscribe() -> None:
            with self.lock:
                callbacks = self.subscribers.get(name, [])
                try:
                    callbacks.remove(callback)
                except ValueError:
                    return

        return unsubscribe

    def _deliver(self, event_name: str, callback: Callable[[Any], None], payload: Any) -> None:
        try:
            callback(payload)
        except Exception as exc:
            logger.error("Error in callback for event %s: %s", event_name, exc, exc_info=True)

    def _worker_loop(self) -> None:
        """Worker thread loop to process events from the queue."""
        while True:
            event_name, callback, payload = self._queue.get()
            try:
                self._deliver(event_name, callback, payload)
            finally:
                self._queue.task_done()

    def publish(self, event_name: EventType | str, data: Any | None = None) -> None:
        """
        Publishes an event, calling all subscribed callback functions.

        Args:
            event_name: The enum topic (preferred) or raw string.
            data: Payload object (Pydantic model, dataclass, or dict/primitive).
        """
        name = event_name.value if isinstance(event_name, Enum) else event_name

        # Normalize payload for subscribers: they always receive a dict or primitive.
        if isinstance(data, BaseModel):
            payload: Any = data.model_dump()
        elif is_dataclass(data):
            payload = asdict(data)
        else:
            payload = data

        with self.lock:
            callbacks: Iterable[Callable[[Any], None]] = list(self.subscribers.get(name, []))

        for callback in callbacks:
            if not self.asynchronous:
                self._deliver(name, callback, payload)
                continue
            item = (name, callback, payload)
            try:
                self._queue.put_nowait(item)
            except Full:
                if threading.current_thread() is self._worker:
                    # A subscriber publishing from the worker cannot wait on itself.
                    self._deliver(name, callback, payload)
                    continue
                self._record_wait(name)
                self._queue.put(item)

    def drain(self) -> None:
        """Block until every queued event has been delivered (async mode)."""
        if self.asynchronous:
            self._queue.join()

    def _record_wait(self, event_name: str) -> None:
        """Record a publish that had to wait for queue space and log periodic warnings."""
        with self.lock:
            self._blocked_publishes += 1
            self._waits_by_event[event_name] += 1
            self._waits_since_last_warning += 1

            now = time.time()
            should_warn = (
                self._waits_since_last_warning >= _WAIT_WARNING_THRESHOLD
                and (now - self._last_wait_warning_time) >= _WAIT_WARNING_INTERVAL_SECONDS
            )
            if not should_warn:
                return
            top_waits = sorted(self._waits_by_event.items(), key=lambda x: x[1], reverse=True)[:5]
            recent = self._waits_since_last_warning
            self._waits_since_last_warning = 0
            self._last_wait_warning_time = now

        logger.warning(
            "EventBus queue full, publishers are waiting: queue_size=%d, total_blocked=%d, "
            "recent_blocked=%d, top_blocked_events=[%s]. "
            "Consider increasing PLANTREG_EVENTBUS_QUEUE_SIZE.",
            self._queue_size,
            self._blocked_publishes,
            recent,
            ", ".join(f"{k}:{v}" for k, v in top_waits),
        )

    def listener(self, event_name: EventType | str) -> Callable[[Callable[[Any], None]], Callable[[Any], None]]:
        """
        Decorator for subscribing a function to an event at definition time.

        Args:
            event_name: The enum topic (preferred) or raw string.
        """

        def decorator(func: Callable[[Any], None]) -> Callable[[Any], None]:
            self.subscribe(event_name, func)
            return func

        return decorator

    def get_metrics(self) -> Dict[str, Any]:
        """Return lightweight metrics for logging."""
        top_blocked = dict(sorted(self._waits_by_event.items(), key=lambda x: x[1], reverse=True)[:5])

        return {
            "asynchronous": self.asynchronous,
            "queue_depth": self._queue.qsize(),
            "queue_size": self._queue_size,
            "blocked_publishes": self._blocked_publishes,
            "blocked_by_event_top5": top_blocked,
            "subscribers": sum(len(values) for values in self.subscribers.values()),
        }
