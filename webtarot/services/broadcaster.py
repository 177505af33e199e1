"""In-process publish/subscribe bus for interpretation state changes."""
import logging
import queue
import threading
from typing import Generic, Iterator, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 1024


class Subscription(Generic[T]):
    """
    One consumer's view of the bus.

    Events published after the subscription was created are queued here
    until read. Closing the subscription detaches it from the bus and
    wakes up a blocked reader.
    """

    _CLOSED = object()

    def __init__(self, broadcaster: "Broadcaster[T]", capacity: int):
        self._broadcaster = broadcaster
        self._queue: "queue.Queue" = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _deliver(self, event: T) -> None:
        while True:
            try:
                self._queue.put_nowait(event)
                return
            except queue.Full:
                # Lagging consumer: drop the oldest event.
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """
        Wait for the next event.

        Returns:
            The event, or None on timeout or once the subscription is closed
        """
        if self.closed:
            return None
        try:
            event = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if event is self._CLOSED:
            return None
        return event

    def __iter__(self) -> Iterator[T]:
        while not self.closed:
            event = self.get()
            if event is not None:
                yield event

    def close(self) -> None:
        if self.closed:
            return
        self._closed.set()
        self._broadcaster._remove(self)
        try:
            self._queue.put_nowait(self._CLOSED)
        except queue.Full:
            pass


class Broadcaster(Generic[T]):
    """
    Thread-safe fan-out to every live subscription.

    Events are immutable values, so every subscriber receives the same
    object without any sharing hazard.

    Usage:
        bus = Broadcaster()
        sub = bus.subscribe()
        bus.publish(event)
        sub.get(timeout=1)  # -> event
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self._capacity = capacity
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription[T]] = []

    def subscribe(self) -> Subscription[T]:
        subscription = Subscription(self, self._capacity)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription[T]) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: T) -> int:
        """
        Deliver an event to all current subscribers.

        Returns:
            Number of subscriptions the event was delivered to
        """
        with self._lock:
            targets = list(self._subscriptions)
        for subscription in targets:
            subscription._deliver(event)
        logger.debug(f"Published event to {len(targets)} subscriber(s)")
        return len(targets)
