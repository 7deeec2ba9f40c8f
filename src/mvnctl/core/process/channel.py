"""
Bounded output channel between a process worker and its consumer.

The worker blocks when the buffer is full; the consumer never does unless it
asks to. Closing the channel enqueues the single terminal update, after which
further lines are rejected.
"""

from __future__ import annotations

import threading
from collections import deque

from mvnctl.core.process.models import ProcessUpdate


class OutputChannel:
    """
    Single-producer, single-consumer queue of ProcessUpdate items.

    Example:
        >>> channel = OutputChannel(maxsize=100)
        >>> channel.put_line("[INFO] BUILD SUCCESS")
        True
        >>> channel.close(ProcessUpdate.exited(0))
        True
        >>> [u.kind.value for u in channel.poll()]
        ['output', 'exited']
    """

    def __init__(self, maxsize: int = 1000) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self.maxsize = maxsize
        self._items: deque[ProcessUpdate] = deque()
        self._cond = threading.Condition()
        self._terminal: ProcessUpdate | None = None

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._terminal is not None

    @property
    def terminal(self) -> ProcessUpdate | None:
        """The terminal update, once the channel is closed."""
        with self._cond:
            return self._terminal

    @property
    def finished(self) -> bool:
        """Closed and fully drained."""
        with self._cond:
            return self._terminal is not None and not self._items

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put_line(self, line: str, timeout: float | None = None) -> bool:
        """
        Enqueue an output line, waiting while the buffer is full.

        Returns:
            False if the channel was closed (the line is dropped) or the
            timeout elapsed
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: self._terminal is not None or len(self._items) < self.maxsize,
                timeout=timeout,
            )
            if not ready or self._terminal is not None:
                return False
            self._items.append(ProcessUpdate.output(line))
            self._cond.notify_all()
            return True

    def close(self, terminal: ProcessUpdate) -> bool:
        """
        Enqueue the terminal update. Only the first call has an effect.

        The terminal update is appended even when the buffer is full.

        Returns:
            True if this call closed the channel
        """
        if not terminal.is_terminal:
            raise ValueError(f"{terminal.kind.value} is not a terminal update")
        with self._cond:
            if self._terminal is not None:
                return False
            self._terminal = terminal
            self._items.append(terminal)
            self._cond.notify_all()
            return True

    def poll(self, max_items: int | None = None) -> list[ProcessUpdate]:
        """Take up to ``max_items`` buffered updates without blocking."""
        with self._cond:
            count = len(self._items) if max_items is None else min(max_items, len(self._items))
            updates = [self._items.popleft() for _ in range(count)]
            if updates:
                self._cond.notify_all()
            return updates

    def get(self, timeout: float | None = None) -> ProcessUpdate | None:
        """Take one update, waiting up to ``timeout`` seconds. None on timeout."""
        with self._cond:
            if not self._cond.wait_for(lambda: bool(self._items), timeout=timeout):
                return None
            update = self._items.popleft()
            self._cond.notify_all()
            return update
