import threading
from queue import Queue, Empty
from typing import Optional

from models import Transaction


class InMemoryQueue:
    """
    Bounded FIFO hand-off between one publisher thread and one consumer.
    A transaction is only visible to the consumer once it is fully parsed,
    and with a single consumer the input order is preserved.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self, max_size: int = 0):
        self._main_queue: Queue[Transaction] = Queue(maxsize=max_size)
        self._shutdown_event = threading.Event()

    def publish_message(self, message: Transaction) -> None:
        """Add message to the queue, blocking while it is full. Thread-safe."""
        self._main_queue.put(message)

    def consume_message(self) -> Optional[Transaction]:
        """
        Get next message from the queue.
        Returns None if queue is empty after timeout.
        Thread-safe.
        """
        try:
            return self._main_queue.get(timeout=self.DEFAULT_TIMEOUT)
        except Empty:
            return None

    def is_empty(self) -> bool:
        return self._main_queue.empty()

    def size(self) -> int:
        """Return approximate queue size."""
        return self._main_queue.qsize()

    def shutdown(self) -> None:
        """Signal no more messages will be published."""
        self._shutdown_event.set()

    def is_shutdown(self) -> bool:
        return self._shutdown_event.is_set()

    def is_drained(self) -> bool:
        """True once shutdown was signaled and every message was consumed."""
        return self.is_shutdown() and self.is_empty()
