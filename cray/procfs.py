"""Reading process information from a proc filesystem."""

from __future__ import annotations

import os
import posixpath
import re
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from .records import NetworkStats, Process

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1

_KERNEL_DEFAULT_INTERFACES = frozenset(
    {
        "tunl0",
        "gre0",
        "gretap0",
        "erspan0",
        "ip_vti0",
        "ip6_vti0",
        "ip6tnl0",
        "ip6gre0",
        "ip6gretap0",
        "ip6erspan0",
        "sit0",
    }
)
_SKIPPED_PREFIXES = ("veth", "virbr")
_ARPHRD_ETHER = "1"


class ProcError(Exception):
    """Raised when process information cannot be read or parsed."""


@dataclass(frozen=True)
class ProcStat:
    """The fields of /proc/<pid>/stat this package uses."""

    state: str
    ppid: int
    utime: int
    stime: int


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"unsigned integer out of range: {text!r}")
    return value


def _base(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return posixpath.basename(stripped)


def _read_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="surrogateescape")


def parse_proc_stat(content: str) -> ProcStat:
    """Parse the contents of a stat file; the command name may hold spaces and parentheses."""
    start = content.find("(")
    end = content.rfind(")")
    if start == -1 or end == -1:
        raise ProcError("invalid stat format")

    fields = content[end + 2 :].split()
    if len(fields) < 13:
        raise ProcError("insufficient fields in stat")

    try:
        ppid = _atoi(fields[1])
    except ValueError as exc:
        raise ProcError(f"invalid ppid in stat: {exc}") from exc
    try:
        utime = _parse_uint(fields[11])
    except ValueError as exc:
        raise ProcError(f"invalid utime in stat: {exc}") from exc
    try:
        stime = _parse_uint(fields[12])
    except ValueError as exc:
        raise ProcError(f"invalid stime in stat: {exc}") from exc

    return ProcStat(state=fields[0], ppid=ppid, utime=utime, stime=stime)


def parse_memory_size(text: str) -> int:
    """Parse a size such as "12345 kB" from a status file into bytes."""
    parts = text.split()
    if not parts:
        raise ValueError("invalid memory size format")
    size = _parse_uint(parts[0])
    if len(parts) > 1 and parts[1].lower() == "kb":
        size = (size * 1024) & _UINT64_MAX
    return size


def _split_key_value(line: str) -> tuple[str, str] | None:
    key, sep, value = line.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()


class ProcReader:
    """Reads process information below a proc root such as /proc or /proc/<pid>/root/proc."""

    def __init__(self, root: str = "/proc") -> None:
        self.root = root

    def _pid_path(self, pid: int, *parts: str) -> Path:
        return Path(self.root, str(pid), *parts)

    def read_process(self, pid: int) -> Process:
        """Read stat, command line, memory and I/O counters of a process."""
        stat = self._read_stat(pid)
        process = Process(
            pid=pid,
            ppid=stat.ppid,
            state=stat.state,
            utime=stat.utime,
            stime=stat.stime,
        )

        try:
            args = self.read_cmdline_raw(pid)
        except ProcError:
            process.command = f"[{pid}]"
        else:
            process.command = _base(args[0])
            process.args = args[1:]

        with suppress(OSError):
            self._read_status(pid, process)
        with suppress(OSError):
            self._read_io(pid, process)
        return process

    def get_process_ppid(self, pid: int) -> int:
        """Return the parent PID of a process."""
        return self._read_stat(pid).ppid

    def _read_stat(self, pid: int) -> ProcStat:
        try:
            content = _read_text(self._pid_path(pid, "stat"))
        except OSError as exc:
            raise ProcError(f"failed to read stat: {exc}") from exc
        return parse_proc_stat(content)

    def read_cmdline_raw(self, pid: int) -> list[str]:
        """Return the argument vector of a process, without empty entries."""
        try:
            data = _read_text(self._pid_path(pid, "cmdline"))
        except OSError as exc:
            raise ProcError(f"failed to read cmdline: {exc}") from exc
        args = [part for part in data.split("\x00") if part]
        if not args:
            raise ProcError("empty cmdline")
        return args

    def read_exe_path(self, pid: int) -> str:
        """Return the target of the exe link."""
        return self._readlink(pid, "exe")

    def read_cwd(self, pid: int) -> str:
        """Return the target of the cwd link."""
        return self._readlink(pid, "cwd")

    def _readlink(self, pid: int, name: str) -> str:
        try:
            return os.readlink(self._pid_path(pid, name))
        except OSError as exc:
            raise ProcError(f"failed to read {name} link: {exc}") from exc

    def read_unified_cgroup_path(self, pid: int) -> str:
        """Return the cgroup v2 path of a process."""
        try:
            data = _read_text(self._pid_path(pid, "cgroup"))
        except OSError as exc:
            raise ProcError(f"failed to read cgroup: {exc}") from exc

        for line in data.split("\n"):
            if not line:
                continue
            parts = line.split(":", 2)
            if len(parts) != 3:
                continue
            if parts[0] == "0" and parts[1] == "":
                return parts[2].strip()
        raise ProcError("unified cgroup path not found")

    def _read_status(self, pid: int, process: Process) -> None:
        for line in _read_text(self._pid_path(pid, "status")).splitlines():
            pair = _split_key_value(line)
            if pair is None:
                continue
            key, value = pair
            if key not in ("VmRSS", "VmSize"):
                continue
            try:
                size = parse_memory_size(value)
            except ValueError:
                continue
            if key == "VmRSS":
                process.memory_rss = size
            else:
                process.memory_vms = size

    def _read_io(self, pid: int, process: Process) -> None:
        targets = {
            "read_bytes": "read_bytes",
            "write_bytes": "write_bytes",
            "syscr": "read_ops",
            "syscw": "write_ops",
        }
        for line in _read_text(self._pid_path(pid, "io")).splitlines():
            pair = _split_key_value(line)
            if pair is None:
                continue
            key, value = pair
            attribute = targets.get(key)
            if attribute is None:
                continue
            with suppress(ValueError):
                setattr(process, attribute, _parse_uint(value))

    def list_pids(self) -> list[int]:
        """Return the PIDs found as numeric directories under the proc root, in name order."""
        try:
            entries = sorted(os.scandir(self.root), key=lambda entry: entry.name)
        except OSError as exc:
            raise ProcError(f"failed to read proc directory: {exc}") from exc

        pids = []
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            with suppress(ValueError):
                pids.append(_atoi(entry.name))
        return pids

    def read_net_dev(self, pid: int) -> list[NetworkStats]:
        """Return counters of the meaningful interfaces in the network namespace of a process."""
        try:
            content = _read_text(self._pid_path(pid, "net", "dev"))
        except OSError as exc:
            raise ProcError(f"failed to read net/dev: {exc}") from exc

        stats = []
        for line in content.splitlines()[2:]:
            name, sep, rest = line.partition(":")
            if not sep:
                continue
            iface = name.strip()
            if self._skip_net_interface(pid, iface):
                continue
            fields = rest.split()
            if len(fields) < 16:
                continue
            counters = [_uint_or_zero(value) for value in fields]
            stats.append(
                NetworkStats(
                    interface=iface,
                    rx_bytes=counters[0],
                    rx_packets=counters[1],
                    rx_errors=counters[2],
                    rx_dropped=counters[3],
                    tx_bytes=counters[8],
                    tx_packets=counters[9],
                    tx_errors=counters[10],
                    tx_dropped=counters[11],
                )
            )
        return stats

    def _skip_net_interface(self, pid: int, name: str) -> bool:
        # Name rules always apply: some kernel default devices report an
        # Ethernet type, so the sysfs type alone cannot rule them out.
        if name == "lo":
            return True
        if name.startswith(_SKIPPED_PREFIXES):
            return True
        if name in _KERNEL_DEFAULT_INTERFACES:
            return True

        type_path = self._pid_path(pid, "root", "sys", "class", "net", name, "type")
        try:
            if_type = _read_text(type_path).strip()
        except OSError:
            return False
        return if_type != _ARPHRD_ETHER


def _uint_or_zero(text: str) -> int:
    try:
        return _parse_uint(text)
    except ValueError:
        return 0