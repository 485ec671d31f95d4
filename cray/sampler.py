"""Rates derived from two successive samples of process and network counters."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .records import NetworkStats, Process

# Clock ticks per second (USER_HZ); 100 on practically every Linux system.
CLK_TCK = 100

_MIN_INTERVAL = 0.1
_UINT64 = 1 << 64


@dataclass(frozen=True)
class _ProcessSnapshot:
    utime: int
    stime: int
    read_bytes: int
    write_bytes: int
    timestamp: float


@dataclass(frozen=True)
class _NetSnapshot:
    rx_bytes: int
    tx_bytes: int
    timestamp: float


def _rate(current: int, previous: int, interval: float) -> float | None:
    if current < previous:
        return None
    return (current - previous) / interval


class Sampler:
    """Computes CPU%, I/O and network rates by comparing with the previous sample.

    Process samples belong to one container at a time; switching to another
    container discards the stored samples, since PIDs inside containers are
    not globally unique.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._container_id = ""
        self._processes: dict[int, _ProcessSnapshot] = {}
        self._network: dict[str, _NetSnapshot] = {}

    def calculate_process_rates(
        self,
        container_id: str,
        processes: Iterable[Process],
        cpu_cores: float = 0.0,
        memory_limit: int = 0,
    ) -> None:
        """Fill in CPU%, memory% and I/O rates of the processes and remember this sample.

        cpu_cores is the container's CPU limit (0 for unlimited) and
        memory_limit its memory limit in bytes (0 for unlimited).
        """
        with self._lock:
            if container_id != self._container_id:
                self._processes = {}
                self._network = {}
                self._container_id = container_id

            now = self._clock()
            ceiling = 100.0 * max(cpu_cores, 1)
            current: dict[int, _ProcessSnapshot] = {}

            for process in processes:
                previous = self._processes.get(process.pid)
                if previous is not None:
                    interval = now - previous.timestamp
                    if interval >= _MIN_INTERVAL:
                        ticks = (
                            (process.utime + process.stime) - (previous.utime + previous.stime)
                        ) % _UINT64
                        core_fraction = ticks / (interval * CLK_TCK)
                        if cpu_cores > 0:
                            percent = core_fraction / cpu_cores * 100.0
                        else:
                            percent = core_fraction * 100.0
                        process.cpu_percent = min(percent, ceiling)

                        read_rate = _rate(process.read_bytes, previous.read_bytes, interval)
                        if read_rate is not None:
                            process.read_bytes_per_sec = read_rate
                        write_rate = _rate(process.write_bytes, previous.write_bytes, interval)
                        if write_rate is not None:
                            process.write_bytes_per_sec = write_rate

                if memory_limit > 0 and process.memory_rss > 0:
                    process.memory_percent = process.memory_rss / memory_limit * 100.0

                current[process.pid] = _ProcessSnapshot(
                    utime=process.utime,
                    stime=process.stime,
                    read_bytes=process.read_bytes,
                    write_bytes=process.write_bytes,
                    timestamp=now,
                )

            self._processes = current

    def calculate_network_rates(self, stats: Iterable[NetworkStats]) -> None:
        """Fill in receive and transmit rates of the interfaces and remember this sample."""
        with self._lock:
            now = self._clock()
            current: dict[str, _NetSnapshot] = {}

            for entry in stats:
                previous = self._network.get(entry.interface)
                if previous is not None:
                    interval = now - previous.timestamp
                    if interval >= _MIN_INTERVAL:
                        rx_rate = _rate(entry.rx_bytes, previous.rx_bytes, interval)
                        if rx_rate is not None:
                            entry.rx_bytes_per_sec = rx_rate
                        tx_rate = _rate(entry.tx_bytes, previous.tx_bytes, interval)
                        if tx_rate is not None:
                            entry.tx_bytes_per_sec = tx_rate

                current[entry.interface] = _NetSnapshot(
                    rx_bytes=entry.rx_bytes, tx_bytes=entry.tx_bytes, timestamp=now
                )

            self._network = current