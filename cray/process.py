"""Process trees and top-like collection of a container's processes."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from pathlib import Path

from .cgroup import CGroupReader
from .procfs import ProcError, ProcReader
from .records import Process, ProcessTop
from .sampler import Sampler


class ProcessTree:
    """Processes keyed by PID, with children linked to their parents."""

    def __init__(self, processes: Iterable[Process] = ()) -> None:
        self._processes: dict[int, Process] = {process.pid: process for process in processes}
        for process in self.all():
            parent = self._processes.get(process.ppid)
            if parent is not None:
                parent.children.append(process)

    @classmethod
    def build(cls, reader: ProcReader, pids: Iterable[int]) -> ProcessTree:
        """Read the given PIDs and link them; processes that cannot be read are left out."""
        processes = []
        for pid in pids:
            try:
                processes.append(reader.read_process(pid))
            except (ProcError, OSError):
                continue
        return cls(processes)

    def roots(self) -> list[Process]:
        """Processes whose parent is not in the tree, ordered by PID."""
        return [process for process in self.all() if process.ppid not in self._processes]

    def all(self) -> list[Process]:
        """All processes, ordered by PID."""
        return sorted(self._processes.values(), key=lambda process: process.pid)

    def get(self, pid: int) -> Process | None:
        """Return the process with this PID, if present."""
        return self._processes.get(pid)

    def __len__(self) -> int:
        return len(self._processes)


class ProcessCollector:
    """Collects the processes of a container seen through its root's proc filesystem."""

    def __init__(
        self,
        proc_reader: ProcReader | None = None,
        cgroup_reader: CGroupReader | None = None,
        sampler: Sampler | None = None,
    ) -> None:
        self.proc_reader = proc_reader if proc_reader is not None else ProcReader()
        # Without a cgroup reader no CPU or memory limits are taken into account.
        self.cgroup_reader = cgroup_reader
        self.sampler = sampler if sampler is not None else Sampler()

    def collect_container_processes(self, container_pid: int) -> list[Process]:
        """Return all processes of the container whose main process is container_pid.

        When the container's proc filesystem cannot be listed, only the main
        process is returned; ProcError is raised if that cannot be read either.
        """
        container_root = str(Path(self.proc_reader.root, str(container_pid), "root", "proc"))
        container_reader = ProcReader(container_root)
        try:
            pids = container_reader.list_pids()
        except ProcError:
            return [self.proc_reader.read_process(container_pid)]
        return ProcessTree.build(container_reader, pids).all()

    def collect_process_top(self, container_pid: int, cgroup_path: str = "") -> ProcessTop:
        """Collect processes with CPU%, memory%, I/O rates and container network I/O."""
        processes = self.collect_container_processes(container_pid)
        top = ProcessTop(processes=processes, timestamp=int(time.time()))

        if cgroup_path and self.cgroup_reader is not None:
            limits = self.cgroup_reader.read_limits(cgroup_path)
            if limits.cpu_quota > 0 and limits.cpu_period > 0:
                top.cpu_cores = limits.cpu_quota / limits.cpu_period
            top.memory_limit = limits.memory_limit

        self.sampler.calculate_process_rates(
            str(container_pid), processes, top.cpu_cores, top.memory_limit
        )

        try:
            network = self.proc_reader.read_net_dev(container_pid)
        except ProcError:
            pass
        else:
            self.sampler.calculate_network_rates(network)
            top.network_io = network

        return top


def filter_processes(
    processes: Iterable[Process], predicate: Callable[[Process], bool]
) -> list[Process]:
    """Return the processes for which predicate holds."""
    return [process for process in processes if predicate(process)]


def sort_by_memory(processes: list[Process]) -> None:
    """Sort processes in place by resident memory, largest first."""
    processes.sort(key=lambda process: process.memory_rss, reverse=True)


def sort_by_io(processes: list[Process]) -> None:
    """Sort processes in place by bytes read plus written, largest first."""
    processes.sort(key=lambda process: process.read_bytes + process.write_bytes, reverse=True)