"""Routers: match log records and hand them to transfers."""

from __future__ import annotations

import logging
import queue
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from logtailer.config import MatcherConfig, RouterConfig
from logtailer.config_check import check_matchers
from logtailer.matcher import ContainsMatcher, Matcher

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_BUFFER_SIZE = 16

_POLL_INTERVAL = 0.01


class Transfer(ABC):
    """A destination that routed log data is sent to."""

    @abstractmethod
    def trans(self, source: str, *args: bytes) -> None:
        """Send the data chunks from ``source``; raise on failure."""


TransferMatcher = Callable[[list[str]], list[Transfer]]


class Runner:
    """A stop signal that can be waited on and propagates to child runners."""

    def __init__(self) -> None:
        self._stopped = threading.Event()
        self._lock = threading.Lock()
        self._children: list[Runner] = []

    def new_child(self) -> Runner:
        """Return a runner that is stopped when this one is."""
        child = Runner()
        with self._lock:
            stopped = self._stopped.is_set()
            if not stopped:
                self._children.append(child)
        if stopped:
            child.stop()
        return child

    def stop(self) -> bool:
        """Stop this runner and its children; return False if already stopped."""
        return self.stop_with(None)

    def stop_with(self, callback: Callable[[], object] | None) -> bool:
        """Stop, running ``callback`` once if this call did the stopping."""
        with self._lock:
            if self._stopped.is_set():
                return False
            self._stopped.set()
            children, self._children = self._children, []
        if callback is not None:
            callback()
        for child in children:
            child.stop()
        return True

    def is_stopped(self) -> bool:
        return self._stopped.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait until stopped; return True if stopped within ``timeout``."""
        return self._stopped.wait(timeout)


def new_matchers(configs: Iterable[MatcherConfig] | None) -> list[Matcher]:
    """Check the matcher configs and build matchers from them."""
    configs = list(configs or ())
    check_matchers(configs)
    return build_matchers(configs)


def build_matchers(configs: Iterable[MatcherConfig] | None) -> list[Matcher]:
    """Build the matchers of all configs, in order."""
    return [m for config in configs or () for m in build_matcher(config)]


def build_matcher(config: MatcherConfig) -> list[Matcher]:
    """Build the contains matchers, then the not-contains matchers, of one config."""
    return [ContainsMatcher(p, True) for p in config.contains] + [
        ContainsMatcher(p, False) for p in config.not_contains
    ]


@dataclass(eq=False)
class Router:
    """Receives log records, filters them through matchers and forwards them."""

    id: str = ""
    name: str = ""
    source: str = ""
    runner: Runner = field(default_factory=Runner)
    matchers: list[Matcher] = field(default_factory=list)
    transfers: list[Transfer] = field(default_factory=list)
    buffer_size: int = DEFAULT_CHANNEL_BUFFER_SIZE
    blocking_mode: bool = False
    channel: queue.Queue | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _drop_count: int = field(default=0, init=False, repr=False)
    _drop_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.buffer_size <= 0:
            self.buffer_size = DEFAULT_CHANNEL_BUFFER_SIZE
        if self.channel is None:
            self.channel = queue.Queue(maxsize=self.buffer_size)

    def set_matchers(self, matchers: list[Matcher]) -> None:
        self.matchers = matchers

    def route(self, data: bytes) -> None:
        """Forward ``data`` if it passes all matchers (or there are none)."""
        if not self.matchers or self.matches(data):
            self.trans(data)

    def trans(self, data: bytes) -> None:
        """Send ``data`` to every transfer; the first failure is raised."""
        for transfer in self.transfers:
            transfer.trans(self.source, data)

    def stop(self) -> None:
        self.runner.stop_with(lambda: logger.info("Routers [%s] stopping", self.id))

    def receive(self, data: bytes | None) -> None:
        """Queue ``data``; when full, drop it or, in blocking mode, wait for room."""
        if self.runner.is_stopped():
            return

        if self.blocking_mode:
            while not self.runner.is_stopped():
                try:
                    self.channel.put(data, timeout=_POLL_INTERVAL)
                    return
                except queue.Full:
                    continue
            return

        try:
            self.channel.put_nowait(data)
        except queue.Full:
            with self._drop_lock:
                self._drop_count += 1

    def dropped_messages(self) -> int:
        """Return the cumulative count of dropped messages."""
        with self._drop_lock:
            return self._drop_count

    def matches(self, data: bytes) -> bool:
        return all(m.match(data) for m in self.matchers)

    def start_loop(self) -> None:
        """Route queued data until stopped, a None item arrives, or routing fails."""
        logger.info("Routers [%s] StartLoop", self.id)
        try:
            while not self.runner.is_stopped():
                try:
                    data = self.channel.get(timeout=_POLL_INTERVAL)
                except queue.Empty:
                    continue

                if data is None:
                    self.stop()
                    return

                try:
                    self.route(data)
                except Exception as exc:  # noqa: BLE001 - any transfer failure stops the router
                    logger.warning("Routers [%s] route error: %r", self.id, exc)
                    self.stop()
                    return
        finally:
            logger.info("Routers [%s] stopped", self.id)


def build_router(
    runner: Runner,
    router_config: RouterConfig,
    transfers_func: TransferMatcher,
    router_id: str,
    source: str,
) -> Router:
    """Build a router from its config, running under a child of ``runner``."""
    matchers = new_matchers(router_config.matchers)
    buffer_size = router_config.buffer_size
    if buffer_size <= 0:
        buffer_size = DEFAULT_CHANNEL_BUFFER_SIZE

    return Router(
        id=router_id,
        name=router_config.name,
        source=source,
        runner=runner.new_child(),
        matchers=matchers,
        transfers=transfers_func(router_config.transfers),
        buffer_size=buffer_size,
        blocking_mode=router_config.blocking_mode,
    )