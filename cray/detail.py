"""Header, tab bar and merging logic of the container detail page."""

from __future__ import annotations

import enum
from datetime import datetime

from .formatting import fallback_value, format_age, short_id
from .models import ContainerDetail, ContainerStatus

_TAB_LABELS = ("Summary", "Processes", "Filesystem", "Runtime", "Network")

# Fields copied from the runtime detail when the base detail leaves them unset.
_MERGED_WHEN_EMPTY = (
    "image_name",
    "image_id",
    "snapshot_key",
    "snapshotter",
    "cgroup_path",
    "exit_reason",
    "oci_bundle_path",
    "oci_runtime_dir",
    "writable_layer_path",
    "read_only_layer_path",
    "ip_address",
)
_MERGED_WHEN_ZERO = (
    "cgroup_version",
    "process_count",
    "shim_pid",
    "rw_layer_usage",
    "rw_layer_inodes",
)
_MERGED_WHEN_NONE = (
    "image_config",
    "cgroup_limits",
    "runtime_profile",
    "pod_network",
    "namespaces",
    "shared_pid",
    "restart_count",
    "exited_at",
    "exit_code",
)
_MERGED_WHEN_NO_ITEMS = ("environment", "port_mappings")


class DetailTab(enum.IntEnum):
    """The pages of the container detail view."""

    SUMMARY = 0
    PROCESSES = 1
    FILESYSTEM = 2
    RUNTIME = 3
    NETWORK = 4

    @property
    def label(self) -> str:
        """The name shown in the tab bar."""
        return _TAB_LABELS[self.value]

    def next(self) -> DetailTab:
        """The following tab, wrapping around."""
        return DetailTab((self.value + 1) % len(DetailTab))

    def previous(self) -> DetailTab:
        """The preceding tab, wrapping around."""
        return DetailTab((self.value - 1) % len(DetailTab))


def merge_runtime_detail(base: ContainerDetail | None, runtime_detail: ContainerDetail | None) -> None:
    """Fill the unset fields of base from runtime_detail, in place."""
    if base is None or runtime_detail is None:
        return

    for name in _MERGED_WHEN_EMPTY:
        if getattr(base, name) == "":
            setattr(base, name, getattr(runtime_detail, name))
    for name in _MERGED_WHEN_ZERO:
        if getattr(base, name) == 0:
            setattr(base, name, getattr(runtime_detail, name))
    for name in _MERGED_WHEN_NONE:
        if getattr(base, name) is None:
            setattr(base, name, getattr(runtime_detail, name))
    for name in _MERGED_WHEN_NO_ITEMS:
        if not getattr(base, name):
            setattr(base, name, getattr(runtime_detail, name))

    if base.mounts is None:
        base.mounts = runtime_detail.mounts
        base.mount_count = runtime_detail.mount_count


def time_label(ts: datetime | None, now: datetime | None = None) -> str:
    """Return "<age> ago", or "unknown" for a missing time."""
    if ts is None:
        return "unknown"
    return f"{format_age(ts, now)} ago"


def runtime_headline(detail: ContainerDetail) -> str:
    """The colored state summary shown in the first header line."""
    status = detail.status
    if status is ContainerStatus.RUNNING:
        if detail.pid > 0:
            return f"[green]PID {detail.pid}[-]"
        return "[green]Running[-]"
    if status is ContainerStatus.STOPPED:
        if detail.exit_code is not None:
            return f"[red]Exit {detail.exit_code}[-]"
        return "[red]Exit unknown[-]"
    if status is ContainerStatus.CREATED:
        return "[darkcyan]Created[-]"
    if status is ContainerStatus.PAUSED:
        if detail.pid > 0:
            return f"[yellow]Paused PID {detail.pid}[-]"
        return "[yellow]Paused[-]"
    return "[white]Unknown[-]"


def secondary_headline(detail: ContainerDetail, now: datetime | None = None) -> str:
    """The start/exit summary shown in the second header line."""
    status = detail.status
    if status is ContainerStatus.RUNNING:
        if detail.started_at is not None:
            return f"Started {time_label(detail.started_at, now)}"
        return "Started unknown"
    if status is ContainerStatus.STOPPED:
        exited = "Exited time unknown"
        if detail.exited_at is not None:
            exited = f"Exited {time_label(detail.exited_at, now)}"
        if detail.exit_reason:
            return f"{exited}  Reason {detail.exit_reason}"
        return f"{exited}  Reason unknown"
    if status is ContainerStatus.CREATED:
        return "Not started"
    if status is ContainerStatus.PAUSED:
        if detail.started_at is not None:
            return f"Paused after start {time_label(detail.started_at, now)}"
        return "Paused"
    return "State unknown"


def header_lines(detail: ContainerDetail | None, now: datetime | None = None) -> tuple[str, str, str]:
    """The three header lines: identity and state, timing, and pod context."""
    if detail is None:
        return " [gray]Loading container detail...[-]", " ", " "

    name = detail.name or short_id(detail.id)
    first = (
        f" [white::b]{name}[-:-:-] [gray]({short_id(detail.id)})[-]   "
        f"{runtime_headline(detail)}   [gray]Created[-] {time_label(detail.created_at, now)}"
    )
    second = " " + secondary_headline(detail, now)
    if detail.pod_namespace or detail.pod_name:
        context = (
            f" [gray]Pod[-] [white]{fallback_value(detail.pod_namespace, '?')}"
            f"/{fallback_value(detail.pod_name, '?')}[-]"
        )
    else:
        context = " "
    return first, second, context


def tab_bar_text(active: DetailTab) -> str:
    """The tab bar with the active tab highlighted."""
    parts = [" "]
    for tab in DetailTab:
        style = "[black:aqua]" if tab is active else "[white:darkslategray]"
        parts.append(f"{style} {tab.label}({tab.value + 1}) [-:-] ")
    return "".join(parts)


def status_bar_text(active: DetailTab) -> str:
    """The key hints for the detail view, with extras for the active tab."""
    text = (
        " [yellow]Esc/q[white]:back  [yellow]1-5[white]:pages  "
        "[yellow]Tab[white]:next page  [yellow]r[white]:refresh"
    )
    if active is DetailTab.PROCESSES:
        text += "  [yellow]s/g/t[white]:process tabs  [yellow][/[white]]:cycle"
    elif active is DetailTab.FILESYSTEM:
        text += "  [yellow]m/l[white]:filesystem tabs"
    elif active in (DetailTab.RUNTIME, DetailTab.NETWORK):
        text += "  [yellow]e[white]:toggle  [yellow]a[white]:expand/collapse"
    return text