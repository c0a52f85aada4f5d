"""
Background sampler for /proc/net/dev byte rates.

Constructing a NetDevSampler starts a daemon thread that reads the counter
file once per interval, sums the receive and transmit bytes of the selected
interfaces and hands a Result to the callback. The first successful read only
records a baseline. Read errors are logged and the next tick tries again.

Any other exception raised inside the loop, including one raised by the
callback, is logged and ends that sampler's thread. The host process and
other samplers keep running, but no further results are delivered.
"""

import logging
import threading
import time
from typing import Callable

from netrate.data.net_dev import AggregateState, Result, SamplerConfig
from netrate.util import log, procfs

logger = logging.getLogger(__name__)

Option = Callable[[SamplerConfig], None]


def with_path(path: str) -> Option:
    def apply(config: SamplerConfig):
        config.path = path

    return apply


def with_callback(callback: Callable[[Result], None]) -> Option:
    def apply(config: SamplerConfig):
        config.callback = callback

    return apply


def with_interfaces(interfaces: list[str] | None) -> Option:
    def apply(config: SamplerConfig):
        config.interfaces = list(interfaces) if interfaces is not None else None

    return apply


def log_result(data: Result):
    logger.info(
        log.kv(
            name=data.name,
            bytes_tx=data.bytes_tx,
            bytes_rx=data.bytes_rx,
            interfaces=data.interfaces,
            interval=data.interval,
        )
    )


def whole_seconds(interval: float) -> int:
    # Fractions of a second are dropped; sub-second intervals divide by 1
    return max(int(interval), 1)


def compute_rate(current: int, previous: int, interval: float) -> int:
    rate = (current - previous) // whole_seconds(interval)
    return rate if rate > 0 else 0


def tick(config: SamplerConfig, state: AggregateState) -> Result | None:
    """
    Run one sampling step against `state`.

    Returns the Result handed to the callback, or None when nothing was
    emitted (bootstrap tick or failed read).
    """
    try:
        snapshot = procfs.read_net_dev(config.path, interfaces=config.interfaces)
    except OSError as e:
        logger.error(log.kv(error=e, path=config.path))
        return None

    total_rx, total_tx = 0, 0
    for sample in snapshot.values():
        total_rx += sample.receive.bytes
        total_tx += sample.transmit.bytes

    result: Result | None = None
    if state.primed:
        result = Result(
            name=config.name,
            bytes_rx=compute_rate(total_rx, state.last_rx, config.interval),
            bytes_tx=compute_rate(total_tx, state.last_tx, config.interval),
            interval=config.interval,
            interfaces=list(config.interfaces)
            if config.interfaces is not None
            else None,
        )
        callback = config.callback or log_result
        callback(result)
    else:
        logger.debug(f"[tick] - baseline rx={total_rx} tx={total_tx}")
        state.primed = True

    state.last_rx = total_rx
    state.last_tx = total_tx
    return result


class NetDevSampler:
    def __init__(self, name: str, interval: float, *opts: Option):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self.config = SamplerConfig(name=name, interval=interval, callback=log_result)
        for opt in opts:
            opt(self.config)

        self._done = threading.Event()
        self._closed = False
        self._close_lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._guarded_run, name=f"netrate-{name}", daemon=True
        )
        self._thread.start()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def close(self):
        """
        Signal the loop to stop. Does not wait for the thread to exit.
        """
        with self._close_lock:
            if self._closed:
                raise RuntimeError(f"sampler {self.config.name!r} already closed")
            self._closed = True
        self._done.set()

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the loop thread to exit. Returns True if it has.
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _guarded_run(self):
        try:
            self._run()
        except Exception:
            logger.exception(
                log.kv(error="sampler loop stopped", name=self.config.name)
            )

    def _run(self):
        interval = self.config.interval
        state = AggregateState()
        next_tick = time.monotonic() + interval

        while not self._done.is_set():
            if self._done.wait(timeout=max(0.0, next_tick - time.monotonic())):
                return

            tick(self.config, state)

            # Ticks that passed while this one ran are dropped
            next_tick += interval
            now = time.monotonic()
            if next_tick <= now:
                next_tick += (int((now - next_tick) // interval) + 1) * interval
