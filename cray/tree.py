"""Containers shown as a tree, with pods as parent nodes."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .components import TreeNode
from .models import Container, ContainerStatus

_LOADING_TEXT = "[gray]Loading containers...[-]"

_STATUS_COLORS = {
    ContainerStatus.RUNNING: "green",
    ContainerStatus.PAUSED: "yellow",
    ContainerStatus.STOPPED: "red",
    ContainerStatus.CREATED: "darkcyan",
}


class NodeType(enum.IntEnum):
    """The kind of thing a tree node stands for."""

    POD = 0
    CONTAINER = 1
    STANDALONE_CONTAINER = 2


@dataclass(frozen=True)
class NodeData:
    """The reference attached to pod and container nodes."""

    node_type: NodeType
    container_id: str = ""
    pod_uid: str = ""


@dataclass
class PodGroup:
    """The containers of one pod, summarised."""

    uid: str
    name: str = ""
    namespace: str = ""
    status: ContainerStatus = ContainerStatus.UNKNOWN
    running: int = 0
    total: int = 0


def _status_color(status: ContainerStatus) -> str:
    return _STATUS_COLORS.get(status, "white")


def _created_key(container: Container) -> tuple:
    # A missing creation time counts as the oldest possible.
    return (container.created_at is not None, container.created_at)


class ContainerTree:
    """A tree of pods and containers with a current node.

    on_select, when set, is called with a container ID when a container
    node is activated.
    """

    def __init__(self) -> None:
        self.root = TreeNode("Containers", color="aqua", selectable=False)
        self.root.add_child(TreeNode(_LOADING_TEXT, selectable=False))
        self.current: TreeNode = self.root
        self.containers: list[Container] = []
        self.selected_container_id = ""
        self.on_select: Callable[[str], None] | None = None
        self._pod_count = 0
        self._standalone_count = 0

    def set_containers(self, containers: Iterable[Container]) -> None:
        """Replace the containers, redraw and keep the selection where possible."""
        saved = self._current_data()
        self.containers = list(containers)
        self.render()
        self.restore_selection(saved)

    def _current_data(self) -> NodeData | None:
        reference = self.current.reference if self.current is not None else None
        return reference if isinstance(reference, NodeData) else None

    def render(self) -> None:
        """Rebuild the tree: pods by name with their containers, then standalone containers."""
        self.root.clear_children()

        groups: dict[str, PodGroup] = {}
        standalone: list[Container] = []
        for container in self.containers:
            if not container.pod_uid:
                standalone.append(container)
                continue
            group = groups.get(container.pod_uid)
            if group is None:
                group = PodGroup(
                    uid=container.pod_uid,
                    name=container.pod_name,
                    namespace=container.pod_namespace,
                )
                groups[container.pod_uid] = group
            group.total += 1
            if container.status is ContainerStatus.RUNNING:
                group.running += 1
                group.status = ContainerStatus.RUNNING

        for group in sorted(groups.values(), key=lambda g: g.name):
            pod_node = self._pod_node(group)
            for container in self._pod_containers(group.uid):
                pod_node.add_child(self._container_node(container, in_pod=True))
            self.root.add_child(pod_node)

        for container in sorted(standalone, key=lambda c: c.name):
            self.root.add_child(self._container_node(container, in_pod=False))

        self.root.expanded = True
        for node in self.root.children:
            if isinstance(node.reference, NodeData) and node.reference.node_type is NodeType.POD:
                node.expanded = True

        self._pod_count = len(groups)
        self._standalone_count = len(standalone)

    def _pod_containers(self, pod_uid: str) -> list[Container]:
        # Newest first, so exited (usually older) containers end up at the bottom.
        members = [c for c in self.containers if c.pod_uid == pod_uid]
        return sorted(members, key=_created_key, reverse=True)

    @staticmethod
    def _pod_node(group: PodGroup) -> TreeNode:
        running_color = "red" if group.running == 0 else "green"
        text = (
            f"[::b][Pod][-] [::b]{group.name}[-] [gray]{group.namespace}[-]  "
            f"[{running_color}]{group.running}[-]/[white]{group.total}[-]"
        )
        return TreeNode(
            text,
            reference=NodeData(NodeType.POD, pod_uid=group.uid),
            color="white",
            selectable=True,
            expanded=True,
        )

    @staticmethod
    def _container_node(container: Container, in_pod: bool) -> TreeNode:
        short = container.id[:12]
        if in_pod and container.name == short:
            display_name = f"phase:{short}"
        else:
            display_name = f"{container.name}:{short}"
        pid = str(container.pid) if container.pid != 0 else "-"
        prefix = "[red][Exited][-] " if container.status is ContainerStatus.STOPPED else ""
        body = (
            f"[{_status_color(container.status)}]{prefix} {display_name} "
            f"[gray]{container.image}[-]  [darkgray]PID:[-]{pid}"
        )
        text = f"  ├─ {body}" if in_pod else body
        if in_pod:
            data = NodeData(NodeType.CONTAINER, container.id, container.pod_uid)
        else:
            data = NodeData(NodeType.STANDALONE_CONTAINER, container.id)
        return TreeNode(text, reference=data, color="white", selectable=True)

    def status_text(self) -> str:
        """The status bar text with pod and container counts and key hints."""
        total = len(self.containers)
        running = sum(1 for c in self.containers if c.status is ContainerStatus.RUNNING)
        return (
            f" [white]Pods:[green]{self._pod_count}[white]  "
            f"Standalone:[green]{self._standalone_count}[white]  "
            f"Containers:[green]{running}[white]/[green]{total}[white] running  |  "
            "[yellow]e[white]:expand  [yellow]a[white]:expand-all  "
            "[yellow]Enter[white]:detail  [yellow]r[white]:refresh"
        )

    def _pod_nodes(self) -> list[TreeNode]:
        return [
            node
            for node in self.root.children
            if isinstance(node.reference, NodeData) and node.reference.node_type is NodeType.POD
        ]

    def toggle_all(self) -> None:
        """Expand every pod if any is collapsed, otherwise collapse them all."""
        pods = self._pod_nodes()
        expand = any(not node.expanded for node in pods)
        for node in pods:
            node.expanded = expand

    def select(self, node: TreeNode) -> None:
        """Make node the current node."""
        self.current = node

    def activate(self) -> None:
        """Act on the current node: open a container or toggle a pod."""
        data = self._current_data()
        if data is None:
            return
        if data.node_type is NodeType.POD:
            self.current.toggle()
            return
        self.selected_container_id = data.container_id
        if self.on_select is not None:
            self.on_select(data.container_id)

    def find_container(self, container_id: str) -> TreeNode | None:
        """The node of a container, standalone or inside a pod."""
        for child in self.root.children:
            data = child.reference
            if (
                isinstance(data, NodeData)
                and data.node_type is NodeType.STANDALONE_CONTAINER
                and data.container_id == container_id
            ):
                return child
            for grandchild in child.children:
                data = grandchild.reference
                if (
                    isinstance(data, NodeData)
                    and data.node_type is NodeType.CONTAINER
                    and data.container_id == container_id
                ):
                    return grandchild
        return None

    def find_pod(self, pod_uid: str) -> TreeNode | None:
        """The node of a pod."""
        for node in self._pod_nodes():
            if node.reference.pod_uid == pod_uid:
                return node
        return None

    def _select_first(self) -> None:
        self.current = self.root.children[0] if self.root.children else self.root

    def restore_selection(self, saved: NodeData | None) -> None:
        """Select the node saved before a redraw, its pod, or else the first node."""
        if saved is None:
            self._select_first()
            return
        if saved.node_type is NodeType.POD:
            node = self.find_pod(saved.pod_uid)
        else:
            node = self.find_container(saved.container_id)
            if node is None and saved.pod_uid:
                node = self.find_pod(saved.pod_uid)
        if node is None:
            self._select_first()
        else:
            self.current = node