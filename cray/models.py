"""Records describing containers, images, image layers and container details."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime

from .records import CGroupLimits, Mount


class ContainerStatus(str, enum.Enum):
    """Lifecycle state of a container."""

    RUNNING = "running"
    STOPPED = "stopped"
    CREATED = "created"
    PAUSED = "paused"
    UNKNOWN = "unknown"


@dataclass
class Container:
    """A container as listed by the runtime; a missing time is None."""

    id: str = ""
    name: str = ""
    image: str = ""
    status: ContainerStatus = ContainerStatus.UNKNOWN
    pid: int = 0
    created_at: datetime | None = None
    pod_name: str = ""
    pod_namespace: str = ""
    pod_uid: str = ""


@dataclass
class Image:
    """An image stored by the runtime."""

    name: str = ""
    digest: str = ""
    size: int = 0
    created_at: datetime | None = None


@dataclass
class ImageLayer:
    """One read-only layer of an image and where it lives on disk."""

    index: int = 0
    snapshot_key: str = ""
    uncompressed_digest: str = ""
    compressed_digest: str = ""
    snapshot_path: str = ""
    content_path: str = ""
    size: int = 0
    compression_type: str = ""
    usage_size: int = 0
    usage_inodes: int = 0


@dataclass
class ImageConfigInfo:
    """Where an image's configuration is stored and what kind it is."""

    target_kind: str = ""
    schema: str = ""
    content_path: str = ""
    target_media_type: str = ""


@dataclass
class RootFSInfo:
    """Root filesystem locations of a running container."""

    mount_rootfs_path: str = ""
    bundle_rootfs_path: str = ""


@dataclass
class OCIInfo:
    """OCI runtime details of a container."""

    sandbox_id: str = ""


@dataclass
class RuntimeProfile:
    """Runtime-level details gathered for a container."""

    oci: OCIInfo | None = None
    rootfs: RootFSInfo | None = None


@dataclass
class PodNetwork:
    """Network details of the pod sandbox a container runs in."""

    sandbox_id: str = ""


@dataclass
class ContainerDetail(Container):
    """Everything known about one container; unknown values are empty, zero or None."""

    image_name: str = ""
    image_id: str = ""
    image_config: ImageConfigInfo | None = None
    snapshot_key: str = ""
    snapshotter: str = ""
    cgroup_path: str = ""
    cgroup_version: int = 0
    cgroup_limits: CGroupLimits | None = None
    runtime_profile: RuntimeProfile | None = None
    pod_network: PodNetwork | None = None
    namespaces: dict[str, str] | None = None
    mounts: list[Mount] | None = None
    mount_count: int = 0
    process_count: int = 0
    environment: list[str] = field(default_factory=list)
    shared_pid: bool | None = None
    restart_count: int | None = None
    started_at: datetime | None = None
    exited_at: datetime | None = None
    exit_code: int | None = None
    exit_reason: str = ""
    shim_pid: int = 0
    oci_bundle_path: str = ""
    oci_runtime_dir: str = ""
    writable_layer_path: str = ""
    read_only_layer_path: str = ""
    rw_layer_usage: int = 0
    rw_layer_inodes: int = 0
    ip_address: str = ""
    port_mappings: list[str] = field(default_factory=list)