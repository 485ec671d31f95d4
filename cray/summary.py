"""The Summary page of the container detail view."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .components import TreeNode
from .formatting import fallback_value, short_id, truncate_for_card
from .models import ContainerDetail, ContainerStatus

_SUMMARY_WIDTH = 52


@dataclass
class DetailSection:
    """A collapsible group of summary rows."""

    title: str
    summary: str = ""
    expanded: bool = False
    rows: list[str] = field(default_factory=list)


def format_summary_time(ts: datetime | None) -> str:
    """Format a time as "YYYY-MM-DD HH:MM:SS", or "unknown" when missing."""
    if ts is None:
        return "unknown"
    return (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d} "
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )


def sandbox_id(detail: ContainerDetail) -> str:
    """The pod sandbox ID, from the pod network or the OCI profile; empty if unknown."""
    if detail.pod_network is not None and detail.pod_network.sandbox_id:
        return detail.pod_network.sandbox_id
    if detail.runtime_profile is not None and detail.runtime_profile.oci is not None:
        return detail.runtime_profile.oci.sandbox_id
    return ""


def snapshotter_summary(detail: ContainerDetail) -> str:
    """"snapshotter/key", whichever part is known, or "unknown"."""
    if not detail.snapshotter and not detail.snapshot_key:
        return "unknown"
    if not detail.snapshotter:
        return detail.snapshot_key
    if not detail.snapshot_key:
        return detail.snapshotter
    return f"{detail.snapshotter}/{detail.snapshot_key}"


def section_label(title: str, summary: str) -> str:
    """The markup label of a section, with its summary shortened to fit."""
    if not summary:
        return f"[white::b]{title}[-:-:-]"
    return f"[white::b]{title}[-:-:-] [gray]{truncate_for_card(summary, _SUMMARY_WIDTH)}[-]"


def build_status_rows(detail: ContainerDetail) -> list[str]:
    """Rows describing the container's lifecycle."""
    rows = [
        f"Created At: {format_summary_time(detail.created_at)}",
        f"Started At: {format_summary_time(detail.started_at)}",
    ]
    if detail.pid > 0:
        rows.append(f"PID: {detail.pid}")
    if detail.shim_pid > 0:
        rows.append(f"Shim PID: {detail.shim_pid}")
    if detail.status is ContainerStatus.STOPPED:
        exit_code = "unknown" if detail.exit_code is None else str(detail.exit_code)
        rows += [
            f"Exited At: {format_summary_time(detail.exited_at)}",
            f"Exit Code: {exit_code}",
            f"Exit Reason: {fallback_value(detail.exit_reason, 'unknown')}",
        ]
    restart_count = "unknown" if detail.restart_count is None else str(detail.restart_count)
    rows.append(f"Restart Count: {restart_count}")
    return rows


def build_image_rows(detail: ContainerDetail) -> list[str]:
    """Rows describing the container's image."""
    image_id = detail.image_id or detail.image
    media_type = "unknown"
    config_path = "unknown"
    config = detail.image_config
    if config is not None:
        if config.target_kind or config.schema:
            media_type = f"{config.target_kind} / {config.schema}".strip().strip(" /")
        if config.content_path:
            config_path = config.content_path

    rows = [
        f"Name: {fallback_value(detail.image_name, 'unknown')}",
        f"ID: {fallback_value(image_id, 'unknown')}",
        f"Media Type: {media_type}",
        f"Config Path: {config_path}",
        "Manifest: Reserved for future manifest view",
    ]
    if config is not None and config.target_media_type:
        rows.append(f"Raw Media Type: {config.target_media_type}")
    return rows


def build_detail_sections(detail: ContainerDetail) -> list[DetailSection]:
    """The sections of the Summary page, in display order."""
    sections = [
        DetailSection(
            title="Status",
            summary=detail.status.value,
            expanded=True,
            rows=build_status_rows(detail),
        )
    ]

    if detail.pod_namespace or detail.pod_name or detail.pod_uid:
        sections.append(
            DetailSection(
                title="Pod",
                summary=(
                    f"{fallback_value(detail.pod_namespace, '?')}"
                    f"/{fallback_value(detail.pod_name, '?')}"
                ),
                expanded=True,
                rows=[
                    f"Namespace: {fallback_value(detail.pod_namespace, 'unknown')}",
                    f"Name: {fallback_value(detail.pod_name, 'unknown')}",
                    f"UID: {fallback_value(detail.pod_uid, 'unknown')}",
                ],
            )
        )

    sandbox = sandbox_id(detail)
    sections += [
        DetailSection(
            title="Sandbox",
            summary=short_id(sandbox),
            expanded=False,
            rows=[f"Sandbox ID: {fallback_value(sandbox, 'unknown')}"],
        ),
        DetailSection(
            title="Image",
            summary=fallback_value(detail.image_name, fallback_value(detail.image, "unknown")),
            expanded=True,
            rows=build_image_rows(detail),
        ),
        DetailSection(
            title="Snapshotter",
            summary=snapshotter_summary(detail),
            expanded=False,
            rows=[
                f"Key: {fallback_value(detail.snapshot_key, 'unknown')}",
                f"Snapshotter: {fallback_value(detail.snapshotter, 'unknown')}",
            ],
        ),
    ]
    return sections


def build_summary_tree(detail: ContainerDetail | None) -> TreeNode:
    """The display tree of the Summary page; a loading placeholder when detail is None."""
    if detail is None:
        return TreeNode("[gray]Loading container summary...[-]", selectable=False)

    root = TreeNode("[aqua::b]Container Summary[-:-:-]", selectable=False, expanded=True)
    for section in build_detail_sections(detail):
        node = TreeNode(
            section_label(section.title, section.summary),
            reference=section,
            selectable=True,
            expanded=section.expanded,
        )
        for row in section.rows:
            node.add_child(TreeNode(f"[gray]{row}[-]", selectable=False))
        root.add_child(node)
    return root