"""Parsing mount tables and overlay filesystem options."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .records import Mount

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_OVERLAY_TYPES = frozenset({"overlay", "overlayfs"})
_SEPARATOR = "-"
_FIRST_OPTIONAL_FIELD = 6


class MountParseError(ValueError):
    """Raised when a mountinfo line cannot be parsed."""


@dataclass
class MountInfo:
    """One entry of a /proc/<pid>/mountinfo table."""

    mount_id: int
    parent_id: int
    major: int = 0
    minor: int = 0
    root: str = ""
    mount_point: str = ""
    mount_options: list[str] = field(default_factory=list)
    optional_fields: list[str] = field(default_factory=list)
    fs_type: str = ""
    mount_source: str = ""
    super_options: list[str] = field(default_factory=list)


def _atoi(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise MountParseError(f"invalid integer: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise MountParseError(f"integer out of range: {text!r}")
    return value


def _atoi_or_zero(text: str) -> int:
    try:
        return _atoi(text)
    except MountParseError:
        return 0


def parse_mountinfo_line(line: str) -> MountInfo:
    """Parse one mountinfo line.

    The format is, for example:
    36 35 98:0 /mnt1 /mnt2 rw,noatime master:1 - ext3 /dev/root rw,errors=continue
    """
    fields = line.split()
    if len(fields) < 10:
        raise MountParseError("invalid mountinfo line")

    mount_id = _atoi(fields[0])
    parent_id = _atoi(fields[1])

    major = minor = 0
    device = fields[2].split(":")
    if len(device) == 2:
        major = _atoi_or_zero(device[0])
        minor = _atoi_or_zero(device[1])

    try:
        separator = fields.index(_SEPARATOR, _FIRST_OPTIONAL_FIELD)
    except ValueError:
        raise MountParseError("separator not found") from None

    info = MountInfo(
        mount_id=mount_id,
        parent_id=parent_id,
        major=major,
        minor=minor,
        root=fields[3],
        mount_point=fields[4],
        mount_options=fields[5].split(","),
        optional_fields=fields[_FIRST_OPTIONAL_FIELD:separator],
    )

    if separator + 3 < len(fields):
        info.fs_type = fields[separator + 1]
        info.mount_source = fields[separator + 2]
        info.super_options = fields[separator + 3].split(",")

    return info


def read_mounts(pid: int, proc_root: str = "/proc") -> list[Mount]:
    """Read the mount table of a process; unparsable lines are skipped.

    Raises OSError when the mountinfo file cannot be read.
    """
    path = Path(proc_root, str(pid), "mountinfo")
    mounts = []
    with path.open(encoding="utf-8", errors="surrogateescape") as handle:
        for line in handle:
            try:
                info = parse_mountinfo_line(line)
            except MountParseError:
                continue
            mounts.append(
                Mount(
                    source=info.mount_source,
                    destination=info.mount_point,
                    type=info.fs_type,
                    options=info.mount_options,
                )
            )
    return mounts


def parse_overlayfs(mount: Mount) -> tuple[str, str, str]:
    """Return (lowerdir, upperdir, workdir) of an overlay mount; empty strings otherwise."""
    found = {"lowerdir": "", "upperdir": "", "workdir": ""}
    if mount.type not in _OVERLAY_TYPES:
        return "", "", ""
    for option in mount.options:
        key, sep, value = option.partition("=")
        if sep and key in found:
            found[key] = value
    return found["lowerdir"], found["upperdir"], found["workdir"]


def overlay_layers(mount: Mount) -> list[str]:
    """Return the lower layers of an overlay mount, top first."""
    lowerdir, _, _ = parse_overlayfs(mount)
    if not lowerdir:
        return []
    return lowerdir.split(":")


def find_root_mount(mounts: Iterable[Mount]) -> Mount | None:
    """Return the first mount at "/", if any."""
    return next((mount for mount in mounts if mount.destination == "/"), None)


def filter_mounts_by_type(mounts: Iterable[Mount], fs_type: str) -> list[Mount]:
    """Return the mounts of the given filesystem type, in their original order."""
    return [mount for mount in mounts if mount.type == fs_type]