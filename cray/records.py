"""Plain records describing processes, network counters, mounts and cgroup limits."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Process:
    """A process as seen through a proc filesystem, plus derived rates."""

    pid: int
    ppid: int = 0
    state: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    utime: int = 0
    stime: int = 0
    memory_rss: int = 0
    memory_vms: int = 0
    read_bytes: int = 0
    write_bytes: int = 0
    read_ops: int = 0
    write_ops: int = 0
    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    read_bytes_per_sec: float = 0.0
    write_bytes_per_sec: float = 0.0
    children: list[Process] = field(default_factory=list, repr=False, compare=False)


@dataclass
class NetworkStats:
    """Counters for one network interface, plus derived rates."""

    interface: str
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0
    rx_bytes_per_sec: float = 0.0
    tx_bytes_per_sec: float = 0.0


@dataclass
class Mount:
    """A mounted filesystem."""

    source: str = ""
    destination: str = ""
    type: str = ""
    options: list[str] = field(default_factory=list)


@dataclass
class CGroupLimits:
    """Resource limits and usage read from a cgroup; zero means unknown or unlimited."""

    cpu_quota: int = 0
    cpu_period: int = 0
    cpu_shares: int = 0
    memory_limit: int = 0
    memory_usage: int = 0
    pids_limit: int = 0
    pids_current: int = 0
    blkio_weight: int = 0


@dataclass
class ProcessTop:
    """A top-like snapshot of a container's processes."""

    processes: list[Process] = field(default_factory=list)
    timestamp: int = 0
    cpu_cores: float = 0.0
    memory_limit: int = 0
    network_io: list[NetworkStats] = field(default_factory=list)