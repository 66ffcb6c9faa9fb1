"""
Producer/consumer plumbing shared by maze generation and analysis.

A routine is handed an intermediate stream (a Channel) and returns a
ResultSlot. The routine runs on its own thread, publishes snapshots to the
stream in order, closes it, then fills the slot with its final value. The
consumer drains the stream to closure and only then reads the slot.

Because the channel is bounded (one slot by default), the producer blocks
on every publish until the consumer takes the previous snapshot, which
paces generation to whatever rate the consumer draws frames at.
"""
import functools
import logging
import queue
import threading
from collections import deque
from typing import Any, Callable, Iterable, Optional

from maze_carver.core.errors import Cancelled, ProtocolError

logger = logging.getLogger(__name__)


class Channel:
    def __init__(self, capacity: int = 1):
        if capacity < 1:
            raise ValueError("Channel capacity must be at least 1")
        self.capacity = capacity
        self._items = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._cancelled = False
        self.drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def put(self, item):
        """Blocks while the channel is full. Raises Cancelled if the consumer gave up."""
        if item is None:
            raise ValueError("None marks closure and cannot be published")
        with self._cond:
            if self._closed:
                raise ProtocolError("Cannot publish to a closed stream")
            self._cond.wait_for(lambda: self._cancelled or len(self._items) < self.capacity)
            if self._cancelled:
                raise Cancelled("Stream cancelled by consumer")
            self._items.append(item)
            self._cond.notify_all()

    def get(self, block: bool = True, timeout: Optional[float] = None):
        """
        Returns the next item, or None once the channel is closed and empty.
        With block=False (or on timeout) raises queue.Empty if nothing is ready.
        """
        with self._cond:
            ready = lambda: self._items or self._closed or self._cancelled
            if block:
                if not self._cond.wait_for(ready, timeout):
                    raise queue.Empty
            elif not ready():
                raise queue.Empty

            if self._items:
                item = self._items.popleft()
                self._cond.notify_all()
                return item
            if self._closed:
                self.drained = True
            return None

    def close(self):
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def cancel(self):
        """Abandons the stream. A producer blocked in put() wakes up with Cancelled."""
        with self._cond:
            self._cancelled = True
            self._items.clear()
            self._cond.notify_all()

    def __iter__(self):
        while True:
            item = self.get()
            if item is None:
                return
            yield item


class ResultSlot:
    def __init__(self, stream: Optional[Channel] = None):
        self._stream = stream
        self._done = threading.Event()
        self._value = None
        self._error: Optional[BaseException] = None

    def set(self, value):
        self._value = value
        self._done.set()

    def fail(self, error: BaseException):
        self._error = error
        self._done.set()

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Waits for the producer to finish, succeed or not. Does not check the protocol."""
        return self._done.wait(timeout)

    def get(self, timeout: Optional[float] = None):
        if self._stream is not None:
            if self._stream.cancelled:
                raise Cancelled("Stream was cancelled before the result was produced")
            if not self._stream.drained:
                raise ProtocolError("Result read before the intermediate stream was drained")
        if not self._done.wait(timeout):
            raise TimeoutError("Result not ready")
        if self._error is not None:
            raise self._error
        return self._value


class Reporter:
    """
    Publishes a routine's updates following the protocol rules:
    - updates that changed nothing are dropped
    - the initial (untouched) report goes out right before the first update
    """

    def __init__(self, initial, stream: Optional[Channel]):
        self.initial = initial
        self.stream = stream
        self.published = 0

    def publish(self, snapshot) -> bool:
        if self.stream is None or not snapshot.changed_cells:
            return False
        if self.published == 0:
            self.stream.put(self.initial)
            self.published += 1
        self.stream.put(snapshot)
        self.published += 1
        return True


def spawn(snapshots: Iterable, initial, stream: Optional[Channel] = None,
          finish: Optional[Callable[[Any], Any]] = None, name: str = "routine") -> ResultSlot:
    """
    Runs `snapshots` (typically a generator) on a producer thread.
    The last snapshot produced (or `initial` if there were none), passed
    through `finish`, becomes the final result.
    """
    slot = ResultSlot(stream)

    def produce():
        reporter = Reporter(initial, stream)
        final = initial
        logger.debug(f"{name}: started")
        try:
            for snapshot in snapshots:
                reporter.publish(snapshot)
                final = snapshot
            if finish is not None:
                final = finish(final)
        except Cancelled as e:
            logger.debug(f"{name}: cancelled after {reporter.published} reports")
            slot.fail(e)
            return
        except Exception as e:
            logger.debug(f"{name}: failed with {e!r}")
            if stream is not None:
                stream.close()
            slot.fail(e)
            return

        if stream is not None:
            stream.close()
        slot.set(final)
        logger.debug(f"{name}: finished after {reporter.published} reports")

    thread = threading.Thread(target=produce, name=name, daemon=True)
    thread.start()
    return slot


def drain(stream: Channel, slot: ResultSlot, on_report: Optional[Callable[[Any], None]] = None):
    """Consumes every intermediate report, then returns the final result."""
    for report in stream:
        if on_report is not None:
            on_report(report)
    return slot.get()


def synchronous(routine: Callable[..., ResultSlot]) -> Callable[..., Any]:
    """Wraps a protocol routine so that calling it simply returns the final result."""

    @functools.wraps(routine)
    def call(*args, **kwargs):
        stream = Channel()
        slot = routine(*args, stream=stream, **kwargs)
        return drain(stream, slot)

    return call
