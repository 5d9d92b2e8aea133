"""Config file watcher for live reload.

Watches the config file for external edits and delivers debounced change
events to the asyncio event loop. The watchdog observer and the debounce
worker run on their own threads; the only link to the event loop is a
bounded queue fed through asyncio.run_coroutine_threadsafe.

Consumers should re-load the whole config on every event. Events carry no
diff and may not correspond one-to-one with file states.
"""

from __future__ import annotations

import asyncio
import logging
import os
import queue
import threading
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from mcwrap.config.errors import WatchSetupError

logger = logging.getLogger(__name__)

__all__ = [
    "CHANNEL_CAPACITY",
    "DEBOUNCE_SECONDS",
    "MAX_PENDING_EVENTS",
    "ChangeEvent",
    "ChangeEventStream",
    "ChangeKind",
    "ConfigWatcher",
    "setup_watcher",
]

# Bursts of writes closer together than this collapse into one event
DEBOUNCE_SECONDS = 0.3

# Maximum number of undelivered events held for the consumer
CHANNEL_CAPACITY = 8

# Maximum number of forwards allowed to wait on a full channel
MAX_PENDING_EVENTS = 64


class ChangeKind(str, Enum):
    """Coarse kind of change seen on the config file."""

    CREATE = "create"
    MODIFY = "modify"
    REMOVE = "remove"
    RENAME = "rename"
    RESCAN = "rescan"
    ERROR = "error"


@dataclass(frozen=True)
class ChangeEvent:
    """Signal that the config file changed and should be re-read."""

    path: Path
    kind: ChangeKind


# opened/closed_no_write are left out so reading the file never triggers a reload
_FILE_EVENT_KINDS = {
    "created": ChangeKind.CREATE,
    "modified": ChangeKind.MODIFY,
    "closed": ChangeKind.MODIFY,
    "deleted": ChangeKind.REMOVE,
    "moved": ChangeKind.RENAME,
}

_STREAM_END = object()


class ChangeEventStream:
    """Consumer end of the watcher channel.

    Supports ``async for event in stream``. Iteration ends once the watcher is
    stopped and every event forwarded before that has been received.

    Events are delivered in the order they were sent. While the channel is
    full, senders wait their turn; at most ``max_pending`` of them may wait
    and further events are dropped, since a queued event already means "re-read
    the file". A consumer that stops reading should call close() so waiting
    senders are released.
    """

    def __init__(self, capacity: int = CHANNEL_CAPACITY, max_pending: int = MAX_PENDING_EVENTS):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=capacity)
        # A put() arriving as a slot frees can overtake a waiting put(); the
        # lock hands out turns in arrival order
        self._send_lock = asyncio.Lock()
        self._max_pending = max_pending
        self._pending = 0
        self._closed = False
        self._closed_event = asyncio.Event()
        self._ended = False

    @property
    def closed(self) -> bool:
        """True once the consumer has dropped the stream."""
        return self._closed

    def qsize(self) -> int:
        return self._queue.qsize()

    @property
    def pending(self) -> int:
        """Number of senders waiting for room in the channel."""
        return self._pending

    async def put(self, event: ChangeEvent) -> None:
        """Deliver an event, waiting while the channel is full.

        Events sent after the consumer closed the stream, or while
        ``max_pending`` senders are already waiting, are discarded.
        """
        if self._closed:
            logger.debug(f"Config change consumer is gone, dropping {event.kind.value} event")
            return
        if self._pending >= self._max_pending:
            logger.debug(f"Config change consumer is not reading, dropping {event.kind.value} event")
            return
        await self._send(event)

    async def finish(self) -> None:
        """Mark the end of the stream after all events already sent."""
        if self._closed:
            return
        await self._send(_STREAM_END)

    async def _send(self, item: Any) -> None:
        self._pending += 1
        try:
            async with self._send_lock:
                if self._closed:
                    return
                put = asyncio.ensure_future(self._queue.put(item))
                closed = asyncio.ensure_future(self._closed_event.wait())
                try:
                    # close() releases a sender stuck on a full channel
                    await asyncio.wait({put, closed}, return_when=asyncio.FIRST_COMPLETED)
                finally:
                    put.cancel()
                    closed.cancel()
        finally:
            self._pending -= 1

    async def get(self) -> ChangeEvent | None:
        """Wait for the next event.

        Returns:
            The next ChangeEvent, or None once the stream has ended
        """
        if self._ended:
            return None
        item = await self._queue.get()
        if item is _STREAM_END:
            self._ended = True
            return None
        return item

    def close(self) -> None:
        """Drop the consumer side. Pending and future events are discarded."""
        if self._closed:
            return
        self._closed = True
        self._closed_event.set()
        while not self._queue.empty():
            self._queue.get_nowait()
        # Wake any task still waiting in get()
        self._queue.put_nowait(_STREAM_END)

    def __aiter__(self) -> AsyncIterator[ChangeEvent]:
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event


class _ConfigEventHandler(FileSystemEventHandler):
    """Passes raw watchdog events for the config file to the watcher."""

    def __init__(self, watcher: ConfigWatcher) -> None:
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        self.watcher._on_raw_event(event)


class ConfigWatcher:
    """
    Watch a single config file and stream debounced change events.

    start() attaches a watchdog observer to the file's directory and spawns a
    worker thread that debounces raw events. Each debounced event is scheduled
    onto the event loop captured at start(), so neither thread ever blocks on
    the consumer.

    When the config path is a symlink, the directory of the file it points to
    is watched (``target``) while events keep reporting the path as given
    (``path``). The link is resolved once, at construction.
    """

    def __init__(
        self,
        config_file: str | Path,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        capacity: int = CHANNEL_CAPACITY,
    ):
        """Initialize config watcher.

        Args:
            config_file: Config file to watch.
            debounce_seconds: Quiet period that ends a burst of raw events.
            capacity: Maximum undelivered events held for the consumer.
        """
        if debounce_seconds <= 0:
            raise ValueError("debounce_seconds must be greater than 0")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.path = Path(config_file).expanduser().absolute()
        self.target = self.path.resolve()
        self.debounce_seconds = debounce_seconds
        self.capacity = capacity

        # None is the stop sentinel
        self._raw_events: queue.Queue[ChangeEvent | None] = queue.Queue()
        self._observer: Any = None
        self._worker: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stream: ChangeEventStream | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if watcher is running."""
        return self._running

    def start(self) -> ChangeEventStream:
        """Start watching the config file.

        Must be called from a coroutine or callback on the event loop that
        will consume the events.

        Returns:
            Stream of debounced ChangeEvents

        Raises:
            WatchSetupError: If the file is missing or cannot be watched
        """
        if self._running and self._stream is not None:
            return self._stream

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise WatchSetupError(
                "Config watcher must be started from a running event loop", self.path
            ) from e

        if not self.path.is_file():
            raise WatchSetupError("Config file does not exist", self.path)

        observer = Observer()
        try:
            observer.schedule(_ConfigEventHandler(self), str(self.target.parent), recursive=False)
            observer.start()
        except OSError as e:
            raise WatchSetupError(f"Failed to watch config file: {e}", self.path) from e

        self._loop = loop
        self._stream = ChangeEventStream(self.capacity)
        self._observer = observer
        self._worker = threading.Thread(
            target=self._run,
            name=f"config-watcher:{self.path.name}",
            daemon=True,
        )
        self._worker.start()
        self._running = True

        logger.info(f"Config watcher started for {self.path}")
        return self._stream

    def stop(self, timeout: float = 5.0) -> None:
        """Stop watching and end the event stream.

        Blocks while the observer and worker threads are joined. From a
        coroutine, use astop() instead.

        A burst still inside its debounce window is discarded.
        """
        if not self._running:
            return
        self._running = False
        self._join_threads(timeout)
        self._end_stream()

    async def astop(self, timeout: float = 5.0) -> None:
        """Stop watching without blocking the event loop.

        Same as stop(), but the thread joins run in the default executor.
        """
        if not self._running:
            return
        self._running = False
        await asyncio.to_thread(self._join_threads, timeout)
        self._end_stream()

    def _join_threads(self, timeout: float) -> None:
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=timeout)

        self._raw_events.put(None)
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.join(timeout=timeout)

    def _end_stream(self) -> None:
        if self._stream is not None:
            self._schedule(self._stream.finish())
        logger.info(f"Config watcher stopped for {self.path}")

    def __enter__(self) -> ConfigWatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _classify(self, event: FileSystemEvent) -> ChangeKind | None:
        """Map a raw watchdog event to a change kind, or None to ignore it."""
        src_path = Path(os.fsdecode(event.src_path))
        dest_path = Path(os.fsdecode(event.dest_path)) if event.dest_path else None

        if event.is_directory:
            # Only the watched directory itself going away matters
            if src_path != self.target.parent:
                return None
            if event.event_type == "deleted":
                return ChangeKind.ERROR
            if event.event_type == "moved":
                return ChangeKind.RESCAN
            return None

        if src_path.name != self.target.name and (
            dest_path is None or dest_path.name != self.target.name
        ):
            return None
        return _FILE_EVENT_KINDS.get(event.event_type)

    def _on_raw_event(self, event: FileSystemEvent) -> None:
        """Queue a raw event for debouncing. Runs on the observer thread."""
        kind = self._classify(event)
        if kind is None:
            return
        logger.debug(f"Raw config file event: {event.event_type} {event.src_path}")
        self._raw_events.put(ChangeEvent(path=self.path, kind=kind))

    def _run(self) -> None:
        """Debounce loop. Runs on the worker thread until stop()."""
        while True:
            pending = self._raw_events.get()
            if pending is None:
                return

            # Absorb the rest of the burst; the last kind wins
            while True:
                try:
                    event = self._raw_events.get(timeout=self.debounce_seconds)
                except queue.Empty:
                    break
                if event is None:
                    return
                pending = event

            logger.debug(f"Config file changed ({pending.kind.value}): {pending.path}")
            if self._stream is not None:
                self._schedule(self._stream.put(pending))

    def _schedule(self, coro: Any) -> None:
        """Run a coroutine on the captured loop without waiting for it."""
        if self._loop is None:
            coro.close()
            return
        try:
            asyncio.run_coroutine_threadsafe(coro, self._loop)
        except RuntimeError:
            # Loop closed: no consumer can exist any more
            coro.close()
            logger.debug("Event loop is closed, dropping config change event")


def setup_watcher(
    config_file: str | Path,
    *,
    debounce_seconds: float = DEBOUNCE_SECONDS,
    capacity: int = CHANNEL_CAPACITY,
) -> tuple[ConfigWatcher, ChangeEventStream]:
    """Create and start a config watcher.

    Args:
        config_file: Config file to watch.
        debounce_seconds: Quiet period that ends a burst of raw events.
        capacity: Maximum undelivered events held for the consumer.

    Returns:
        The running watcher (call stop() to end it) and its event stream.

    Raises:
        WatchSetupError: If the file is missing or cannot be watched
    """
    watcher = ConfigWatcher(config_file, debounce_seconds=debounce_seconds, capacity=capacity)
    stream = watcher.start()
    return watcher, stream
