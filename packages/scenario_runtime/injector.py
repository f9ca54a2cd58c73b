"""Pipeline injectors for scenario context updates.

An injector delivers context-update events into the running message
pipeline at an entry coordinate. Scenarios only depend on the
``PipelineInjector`` interface; two in-process implementations are provided:
a thread-safe FIFO queue and a bridge into asyncio queues.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Deque, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence

from loguru import logger

from .events import ContextUpdate

EntryCoordinate = Hashable


class DeliveryError(Exception):
    """Raised when an injector cannot deliver events into the pipeline."""

    pass


class PipelineInjector(ABC):
    """Abstract capability delivering events into a message pipeline."""

    @abstractmethod
    def inject(self, entry_coordinate: EntryCoordinate, events: Sequence[ContextUpdate]) -> None:
        """Deliver events to the pipeline entry point.

        Events must be delivered in the order they are submitted.

        Args:
            entry_coordinate: Where in the pipeline the events enter
            events: Context updates to deliver

        Raises:
            DeliveryError: If the events cannot be delivered
        """
        pass


class QueueInjector(PipelineInjector):
    """In-memory FIFO injector with one queue per entry coordinate.

    Consumers pull delivered events with ``drain``. Thread-safe.
    """

    def __init__(self, entry_coordinates: Optional[Iterable[EntryCoordinate]] = None) -> None:
        """Initialize the injector.

        Args:
            entry_coordinates: Optional allow-list of entry coordinates. When
                given, injecting anywhere else raises DeliveryError.
        """
        self._allowed = set(entry_coordinates) if entry_coordinates is not None else None
        self._queues: Dict[EntryCoordinate, Deque[ContextUpdate]] = {}
        self._closed = False
        self._lock = Lock()

    def inject(self, entry_coordinate: EntryCoordinate, events: Sequence[ContextUpdate]) -> None:
        with self._lock:
            if self._closed:
                raise DeliveryError("Injector is closed")
            if self._allowed is not None and entry_coordinate not in self._allowed:
                raise DeliveryError(f"Unknown entry coordinate: {entry_coordinate!r}")

            queue = self._queues.setdefault(entry_coordinate, deque())
            queue.extend(events)
            logger.debug(
                "Queued {n} event(s) at {entry}", n=len(events), entry=entry_coordinate
            )

    def drain(self, entry_coordinate: EntryCoordinate) -> List[ContextUpdate]:
        """Remove and return every pending event for an entry coordinate.

        Args:
            entry_coordinate: Entry coordinate to drain

        Returns:
            Pending events in delivery order
        """
        with self._lock:
            queue = self._queues.get(entry_coordinate)
            if not queue:
                return []
            events = list(queue)
            queue.clear()
            return events

    def pending(self, entry_coordinate: EntryCoordinate) -> int:
        """Count events waiting at an entry coordinate."""
        with self._lock:
            return len(self._queues.get(entry_coordinate, ()))

    def close(self) -> None:
        """Stop accepting events. Pending events can still be drained."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        """Whether the injector has been closed."""
        return self._closed


class AsyncioQueueInjector(PipelineInjector):
    """Injector feeding ``asyncio.Queue`` consumers running on an event loop.

    Delivery is fire-and-forget: events are scheduled onto the loop with
    ``call_soon_threadsafe``, which runs callbacks in submission order, so
    consumers see updates in the order they were injected. Safe to call from
    the loop thread or any other thread. Queues must be unbounded, since a
    full queue would fail inside the loop callback after the update was
    reported as delivered.
    """

    def __init__(
        self,
        queues: Mapping[EntryCoordinate, "asyncio.Queue[ContextUpdate]"],
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        """Initialize the injector.

        Args:
            queues: Consumer queue for each entry coordinate
            loop: Event loop the queues belong to

        Raises:
            ValueError: If a queue has a maxsize
        """
        for entry, queue in queues.items():
            if queue.maxsize > 0:
                raise ValueError(
                    f"Queue for {entry!r} must be unbounded (maxsize={queue.maxsize})"
                )
        self._queues = dict(queues)
        self._loop = loop

    def inject(self, entry_coordinate: EntryCoordinate, events: Sequence[ContextUpdate]) -> None:
        queue = self._queues.get(entry_coordinate)
        if queue is None:
            raise DeliveryError(f"Unknown entry coordinate: {entry_coordinate!r}")
        if self._loop.is_closed():
            raise DeliveryError("Event loop is closed")

        try:
            for event in events:
                self._loop.call_soon_threadsafe(queue.put_nowait, event)
        except RuntimeError as e:
            raise DeliveryError(f"Failed to schedule delivery: {e}") from e

        logger.debug("Scheduled {n} event(s) at {entry}", n=len(events), entry=entry_coordinate)
