"""Reading resource limits from cgroup v1 and v2 hierarchies."""

from __future__ import annotations

import enum
import posixpath
import re
from pathlib import Path

from .records import CGroupLimits

DEFAULT_ROOT = "/sys/fs/cgroup"

# cgroup v1 reports this page-aligned maximum when memory is unlimited.
_V1_UNLIMITED_MEMORY = 9223372036854771712

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")


class CGroupVersion(enum.IntEnum):
    """The cgroup hierarchy version."""

    V1 = 1
    V2 = 2


class CGroupError(Exception):
    """Raised when the cgroup hierarchy cannot be identified."""


def detect_cgroup_version(root_dir: str = DEFAULT_ROOT) -> CGroupVersion:
    """Tell whether the hierarchy at root_dir is cgroup v2 or v1."""
    root = Path(root_dir)
    if (root / "cgroup.controllers").exists():
        return CGroupVersion.V2
    if (root / "cpu").exists():
        return CGroupVersion.V1
    raise CGroupError("unable to detect cgroup version")


def _parse_int64(text: str) -> int | None:
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if not -(1 << 63) <= value < (1 << 63):
        return None
    return value


def _parse_uint16(text: str) -> int | None:
    text = text.strip()
    if not _UINT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value < (1 << 16) else None


class CGroupReader:
    """Reads limits and usage of one cgroup below a hierarchy root."""

    def __init__(self, version: CGroupVersion, root_dir: str = DEFAULT_ROOT) -> None:
        self.version = CGroupVersion(version)
        self.root_dir = root_dir

    @classmethod
    def detect(cls, root_dir: str = DEFAULT_ROOT) -> CGroupReader:
        """Create a reader for the hierarchy found at root_dir."""
        return cls(detect_cgroup_version(root_dir), root_dir)

    def read_limits(self, cgroup_path: str) -> CGroupLimits:
        """Read what is readable of a cgroup's limits; unreadable values stay zero."""
        relative = cgroup_path.lstrip("/")
        if self.version is CGroupVersion.V2:
            return self._read_v2(relative)
        return self._read_v1(relative)

    def _path(self, *parts: str) -> Path:
        return Path(posixpath.normpath(posixpath.join(self.root_dir, *parts)))

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def _read_int(self, path: Path) -> int | None:
        content = self._read(path)
        return None if content is None else _parse_int64(content)

    def _read_v1(self, relative: str) -> CGroupLimits:
        limits = CGroupLimits()

        def read(controller: str, name: str) -> int | None:
            return self._read_int(self._path(controller, relative, name))

        if (value := read("cpu", "cpu.cfs_quota_us")) is not None:
            limits.cpu_quota = value
        if (value := read("cpu", "cpu.cfs_period_us")) is not None:
            limits.cpu_period = value
        if (value := read("cpu", "cpu.shares")) is not None:
            limits.cpu_shares = value

        value = read("memory", "memory.limit_in_bytes")
        if value is not None and value != _V1_UNLIMITED_MEMORY:
            limits.memory_limit = value
        if (value := read("memory", "memory.usage_in_bytes")) is not None:
            limits.memory_usage = value

        value = read("pids", "pids.max")
        if value is not None and value > 0:
            limits.pids_limit = value
        if (value := read("pids", "pids.current")) is not None:
            limits.pids_current = value

        content = self._read(self._path("blkio", relative, "blkio.weight"))
        if content is not None and (weight := _parse_uint16(content)) is not None:
            limits.blkio_weight = weight

        return limits

    def _read_v2(self, relative: str) -> CGroupLimits:
        limits = CGroupLimits()

        def path(name: str) -> Path:
            return self._path(relative, name)

        cpu_max = self._read(path("cpu.max"))
        if cpu_max is not None:
            parts = cpu_max.split()
            if len(parts) >= 2:
                if parts[0] != "max" and (quota := _parse_int64(parts[0])) is not None:
                    limits.cpu_quota = quota
                if (period := _parse_int64(parts[1])) is not None:
                    limits.cpu_period = period

        if (value := self._read_int(path("cpu.weight"))) is not None:
            limits.cpu_shares = value

        memory_max = self._read(path("memory.max"))
        if memory_max is not None and (value := _parse_int64(memory_max)) is not None:
            limits.memory_limit = value
        if (value := self._read_int(path("memory.current"))) is not None:
            limits.memory_usage = value

        pids_max = self._read(path("pids.max"))
        if pids_max is not None and (value := _parse_int64(pids_max)) is not None:
            limits.pids_limit = value
        if (value := self._read_int(path("pids.current"))) is not None:
            limits.pids_current = value

        io_weight = self._read(path("io.weight"))
        if io_weight is not None:
            parts = io_weight.split()
            if len(parts) >= 2 and (weight := _parse_uint16(parts[1])) is not None:
                limits.blkio_weight = weight

        return limits