"""The Rootfs Layers page: the writable layer, read-only image layers and a file browser."""

from __future__ import annotations

import enum
import os
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from .components import TreeNode
from .formatting import format_bytes
from .models import ContainerDetail, ImageConfigInfo, ImageLayer

RW_LAYER_LABEL = "[yellow::b]RW Layer[-:-:-]"

_PREVIEW_LIMIT = 16384
_DIRECTORY_PREVIEW_ENTRIES = 24
_NO_FILE_SELECTED = " [gray]No file selected[-]"
_BROWSER_HINT = " [gray]Select a layer and press i to inspect its snapshot path[-]"
_NO_BROWSER_DATA = "[gray]No layer browser data[-]"
_PREVIEW_TITLE = " Preview "
_FILE_PREVIEW_TITLE = " File Preview "
_DIRECTORY_PREVIEW_TITLE = " Directory Preview "


@dataclass(eq=False)
class BrowserEntry:
    """A file or directory shown in the layer browser."""

    path: str
    is_dir: bool = False
    loaded: bool = False


class _FocusPane(enum.Enum):
    TREE = "tree"
    BROWSER = "browser"


def build_layer_header(detail: ContainerDetail | None) -> str:
    """The header with snapshotter, rootfs directory and whether the rootfs is read-only."""
    snapshotter = "-"
    rootfs_path = "-"
    readonly = "yes"

    if detail is not None:
        if detail.snapshotter.strip():
            snapshotter = detail.snapshotter
        profile = detail.runtime_profile
        if profile is not None and profile.rootfs is not None:
            rootfs = profile.rootfs
            if rootfs.mount_rootfs_path.strip():
                rootfs_path = rootfs.mount_rootfs_path
            elif rootfs.bundle_rootfs_path.strip():
                rootfs_path = rootfs.bundle_rootfs_path
        if detail.snapshot_key.strip() or detail.writable_layer_path.strip():
            readonly = "no"

    return (
        f" [gray]Snapshotter:[-] [white]{snapshotter}[-]\n"
        f" [gray]Rootfs Directory:[-] [white]{rootfs_path}[-]\n"
        f" [gray]Readonly:[-] [white]{readonly}[-]"
    )


def rw_layer_node(detail: ContainerDetail | None) -> TreeNode:
    """The node describing the container's writable layer."""
    node = TreeNode(RW_LAYER_LABEL, selectable=True, expanded=True)
    if detail is None:
        node.add_child(TreeNode("[gray]RW layer is unresolved[-]", selectable=False))
        return node
    node.reference = detail

    rows = [
        f"Snapshot Key: {detail.snapshot_key or 'unknown'}",
        f"Path: {detail.writable_layer_path or 'unknown'}",
    ]
    if detail.rw_layer_usage > 0 or detail.rw_layer_inodes > 0:
        rows.append(
            f"Disk Usage: {format_bytes(detail.rw_layer_usage)} ({detail.rw_layer_inodes} inodes)"
        )
    else:
        rows.append("Disk Usage: unknown")
    for row in rows:
        node.add_child(TreeNode(f"[gray]  {row}[-]", selectable=False))
    return node


def read_only_layers_node(layers: Iterable[ImageLayer]) -> TreeNode:
    """The node listing the read-only layers, top layer first."""
    layers = list(layers)
    title = f"[aqua::b]Read-Only Layer ({len(layers)}, top to base)[-:-:-]"
    node = TreeNode(title, selectable=True, expanded=True)
    if not layers:
        node.add_child(TreeNode("[gray]No read-only image layers resolved[-]", selectable=False))
        return node

    for layer in sorted(layers, key=lambda item: item.index, reverse=True):
        layer_id = shorten_layer_id(
            layer.snapshot_key, layer.uncompressed_digest, layer.compressed_digest
        )
        layer_node = TreeNode(
            f"Layer {layer.index}: {layer_id}", reference=layer, selectable=True, expanded=False
        )
        rows = (
            f"[gray]  Rootfs Diff ID: [white]{fallback_layer_value(layer.uncompressed_digest)}[-]",
            f"[gray]  Snapshot Key: [white]{fallback_layer_value(layer.snapshot_key)}[-]",
            f"[gray]  Snapshot Path: [white]{fallback_layer_value(layer.snapshot_path)}[-]",
            f"[gray]  Content Path: [white]{fallback_layer_value(layer.content_path)}[-]",
            f"[gray]  Content Size: [white]{format_layer_content_size(layer)}[-]",
            f"[gray]  Disk Usage: [white]{format_layer_usage(layer)}[-]",
        )
        for row in rows:
            layer_node.add_child(TreeNode(row, selectable=False))
        node.add_child(layer_node)
    return node


def shorten_layer_id(*args: str) -> str:
    """The first non-blank identifier, without "sha256:" and cut to 12 characters."""
    for value in args:
        value = value.strip()
        if not value:
            continue
        return value.removeprefix("sha256:")[:12]
    return "unresolved"


def fallback_layer_value(value: str) -> str:
    """Return value, or "unresolved" when it is blank."""
    return value if value.strip() else "unresolved"


def format_layer_usage(layer: ImageLayer | None) -> str:
    """The disk usage of a layer's snapshot, or "unknown"."""
    if layer is None:
        return "unknown"
    if layer.usage_size > 0 or layer.usage_inodes > 0:
        return f"{format_bytes(layer.usage_size)} ({layer.usage_inodes} inodes)"
    return "unknown"


def format_layer_content_size(layer: ImageLayer | None) -> str:
    """The stored size of a layer with its compression, or "unknown"."""
    if layer is None or layer.size <= 0:
        return "unknown"
    compression = layer.compression_type.strip() or "unknown"
    return f"{format_bytes(layer.size)} ({compression})"


def resolve_layer_image_ref(detail: ContainerDetail | None) -> str:
    """The image reference used to look up layers: image, image name or image ID."""
    if detail is None:
        return ""
    for candidate in (detail.image, detail.image_name, detail.image_id):
        candidate = candidate.strip()
        if candidate:
            return candidate
    return ""


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _sorted_entries(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as iterator:
        return sorted(iterator, key=lambda entry: entry.name)


def browser_children(path: str) -> list[TreeNode]:
    """Nodes for the entries of a directory: directories first, then by name ignoring case.

    Raises OSError when the directory cannot be read.
    """
    entries = _sorted_entries(path)
    entries.sort(key=lambda entry: (not _is_dir(entry), entry.name.lower()))
    children = []
    for entry in entries:
        is_dir = _is_dir(entry)
        label = entry.name + "/" if is_dir else entry.name
        node = TreeNode(
            label,
            reference=BrowserEntry(os.path.join(path, entry.name), is_dir=is_dir),
            selectable=True,
        )
        if is_dir:
            node.add_child(TreeNode("[gray]loading[-]", selectable=False))
        children.append(node)
    if not children:
        children.append(TreeNode("[gray]Empty directory[-]", selectable=False))
    return children


def looks_binary(data: bytes) -> bool:
    """Whether data is not valid UTF-8 or contains a NUL byte."""
    if not data:
        return False
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return b"\x00" in data


def describe_browser_entry(entry: BrowserEntry | None) -> tuple[str, str]:
    """The preview text and title for a browser entry."""
    if entry is None:
        return _NO_FILE_SELECTED, _PREVIEW_TITLE
    try:
        info = os.stat(entry.path)
    except OSError as err:
        return f" [red]Unable to stat path:[-] {err}", _PREVIEW_TITLE

    if os.path.isdir(entry.path):
        try:
            entries = _sorted_entries(entry.path)
        except OSError as err:
            return f" [red]Unable to read directory:[-] {err}", _PREVIEW_TITLE
        lines = [
            f" [gray]Directory:[-] [white]{entry.path}[-]",
            f" [gray]Entries:[-] [white]{len(entries)}[-]",
        ]
        shown = entries[:_DIRECTORY_PREVIEW_ENTRIES]
        lines += [f"  {child.name}/" if _is_dir(child) else f"  {child.name}" for child in shown]
        if len(entries) > len(shown):
            lines.append(f"  ... {len(entries) - len(shown)} more")
        return "\n".join(lines), _DIRECTORY_PREVIEW_TITLE

    try:
        with open(entry.path, "rb") as handle:
            chunk = handle.read(_PREVIEW_LIMIT)
    except OSError as err:
        return f" [red]Unable to read file:[-] {err}", _FILE_PREVIEW_TITLE

    lines = [
        f" [gray]File:[-] [white]{entry.path}[-]",
        f" [gray]Size:[-] [white]{format_bytes(info.st_size)}[-]",
    ]
    if looks_binary(chunk):
        lines.append(" [gray]Preview:[-] binary or non-UTF8 content")
        return "\n".join(lines), _FILE_PREVIEW_TITLE
    lines += ["", chunk.decode("utf-8")]
    if info.st_size > len(chunk):
        lines += ["", f"[gray]... truncated, showing first {len(chunk)} bytes[-]"]
    return "\n".join(lines), _FILE_PREVIEW_TITLE


def selected_browse_path(
    node: TreeNode | None, detail: ContainerDetail | None
) -> tuple[str, str]:
    """The filesystem path and title of the layer a node stands for; empty when none."""
    if node is None:
        return "", ""
    reference = node.reference
    if isinstance(reference, ImageLayer):
        return reference.snapshot_path.strip(), node.text
    if isinstance(reference, ContainerDetail):
        return reference.writable_layer_path.strip(), "RW Layer"
    if detail is not None and node.text == RW_LAYER_LABEL:
        return detail.writable_layer_path.strip(), "RW Layer"
    return "", ""


def _browser_root_text(path: str) -> str:
    base = os.path.basename(path.rstrip(os.sep))
    if base and base != ".":
        return base
    return path


class LayersView:
    """State of the Rootfs Layers page: the layer tree and an optional file browser."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.detail: ContainerDetail | None = None
        self.runtime_info: ContainerDetail | None = None
        self.layers: list[ImageLayer] = []
        self.config_info: ImageConfigInfo | None = None
        self.last_error: BaseException | str | None = None

        self.header = ""
        self.tree = TreeNode("[gray]No rootfs layer data[-]", selectable=False)
        self.current: TreeNode | None = self.tree

        self.browser_open = False
        self.browser_root = ""
        self.browser_info = _BROWSER_HINT
        self.browser_tree = TreeNode(_NO_BROWSER_DATA, selectable=False)
        self.browser_current: TreeNode | None = self.browser_tree
        self.preview_text = _NO_FILE_SELECTED
        self.preview_title = _PREVIEW_TITLE
        self._focus = _FocusPane.TREE
        self._status = ""

        self.render()
        self._update_status()

    @property
    def browser_focused(self) -> bool:
        """Whether keys act on the browser rather than the layer tree."""
        return self.browser_open and self._focus is _FocusPane.BROWSER

    def set_detail(self, detail: ContainerDetail | None) -> None:
        """Store the container detail used to resolve the image."""
        with self._lock:
            self.detail = detail
        self.render()

    def set_runtime_info(self, detail: ContainerDetail | None) -> None:
        """Store the runtime detail used by the header and the writable layer."""
        with self._lock:
            self.runtime_info = detail
        self.render()

    def set_layers(
        self, layers: Iterable[ImageLayer], config_info: ImageConfigInfo | None = None
    ) -> None:
        """Show freshly loaded read-only layers."""
        with self._lock:
            self.layers = list(layers)
            self.config_info = config_info
            self.last_error = None
        self.render()
        self._update_status()

    def set_error(self, error: BaseException | str) -> None:
        """Show that loading the read-only layers failed."""
        with self._lock:
            self.last_error = error
            self.layers = []
            self.config_info = None
        self.render()
        self._update_status()

    def _active_detail(self) -> ContainerDetail | None:
        with self._lock:
            return self.runtime_info if self.runtime_info is not None else self.detail

    def render(self) -> None:
        """Rebuild the header and the layer tree from the stored state."""
        with self._lock:
            active = self.runtime_info if self.runtime_info is not None else self.detail
            layers = list(self.layers)
            last_error = self.last_error

        self.header = build_layer_header(active)
        root = TreeNode("[aqua::b]Rootfs Layers[-:-:-]", selectable=False, expanded=True)
        if last_error is not None:
            root.add_child(
                TreeNode(f"[red]Failed to load read-only layers: {last_error}[-]", selectable=False)
            )
        elif active is None and not layers:
            root.add_child(
                TreeNode(
                    "[gray]Refresh to resolve snapshotter, rootfs path and image layers[-]",
                    selectable=False,
                )
            )
        else:
            root.add_child(rw_layer_node(active))
            root.add_child(read_only_layers_node(layers))
        self.tree = root
        self.current = root

    def handle_key(self, key: str) -> bool:
        """Act on a key ("enter", "ctrl+c" or a character); True when it was consumed."""
        if key == "ctrl+c":
            return False
        if key == "enter" or key in ("e", "E"):
            if self._focus is _FocusPane.BROWSER:
                self.toggle_browser_node(self.browser_current)
            elif self.current is not None:
                self.current.toggle()
            return True
        if key in ("i", "I"):
            if self.browser_open:
                self.close_browser()
            else:
                self.open_browser()
            return True
        if key in ("a", "A"):
            if self._focus is _FocusPane.BROWSER:
                self.expand_browser_all()
            else:
                self.expand_all()
            return True
        return False

    def open_browser(self) -> None:
        """Open the file browser on the path of the selected layer."""
        path, title = selected_browse_path(self.current, self._active_detail())
        if not path.strip():
            self._status = (
                " [white]Rootfs Layers:[-] select a concrete layer with a readable path"
                " before opening the browser"
            )
            return
        try:
            os.stat(path)
        except OSError as err:
            self._status = f" [white]Rootfs Layers:[-] unable to inspect layer path: {err}"
            return

        with self._lock:
            self.browser_open = True
            self.browser_root = path
            self._focus = _FocusPane.BROWSER

        self.browser_info = f" [gray]Layer:[-] [white]{title}[-]\n [gray]Path:[-] [white]{path}[-]"
        entry = BrowserEntry(path, is_dir=os.path.isdir(path))
        root = TreeNode(_browser_root_text(path), reference=entry, selectable=True, expanded=True)
        self._load_children(root, entry)
        self.browser_tree = root
        self.browser_current = root
        self._render_preview(root)
        self._update_status()

    def close_browser(self) -> None:
        """Close the file browser and return to the layer tree."""
        with self._lock:
            self.browser_open = False
            self.browser_root = ""
            self._focus = _FocusPane.TREE
        self.browser_info = _BROWSER_HINT
        self.preview_text = _NO_FILE_SELECTED
        self.browser_tree = TreeNode(_NO_BROWSER_DATA, selectable=False)
        self.browser_current = self.browser_tree
        self._update_status()

    def toggle_browser_node(self, node: TreeNode | None) -> None:
        """Expand or collapse a browser directory, loading it first; preview the node."""
        if node is None:
            return
        entry = node.reference if isinstance(node.reference, BrowserEntry) else None
        if entry is None or not entry.is_dir:
            self._render_preview(node)
            return
        self._load_children(node, entry)
        node.toggle()
        self._render_preview(node)

    def expand_all(self) -> None:
        """Collapse every layer node if the tree is expanded, else expand them; keep the root open."""
        root = self.tree
        expand = not root.expanded
        for node in root.walk():
            node.expanded = expand
        root.expanded = True
        self.current = root

    def expand_browser_all(self) -> None:
        """Load and expand every directory below the browser root."""
        root = self.browser_tree
        self._expand_browser(root)
        self.browser_current = root
        self._render_preview(root)

    def status_text(self) -> str:
        """The status bar text."""
        return self._status

    def _expand_browser(self, node: TreeNode) -> None:
        entry = node.reference if isinstance(node.reference, BrowserEntry) else None
        if entry is not None and entry.is_dir:
            self._load_children(node, entry)
            node.expanded = True
        for child in node.children:
            self._expand_browser(child)

    @staticmethod
    def _load_children(node: TreeNode, entry: BrowserEntry) -> None:
        if not entry.is_dir or entry.loaded:
            return
        try:
            children = browser_children(entry.path)
        except OSError as err:
            node.clear_children()
            node.add_child(TreeNode(f"[red]Unable to read directory: {err}[-]", selectable=False))
            entry.loaded = True
            return
        node.clear_children()
        for child in children:
            node.add_child(child)
        entry.loaded = True

    def _render_preview(self, node: TreeNode | None) -> None:
        if node is None:
            self.preview_text = _NO_FILE_SELECTED
            return
        entry = node.reference if isinstance(node.reference, BrowserEntry) else None
        if entry is None:
            self.preview_text = " [gray]Select a file or directory to preview[-]"
            return
        self.preview_text, self.preview_title = describe_browser_entry(entry)
        if entry.is_dir:
            self._load_children(node, entry)

    def _update_status(self) -> None:
        if self.browser_open:
            self._status = (
                " [white]Rootfs Layers:[-] browser open for selected layer  |  "
                "[yellow]i[white]:close browser  [yellow]e/Enter[white]:toggle dir  "
                "[yellow]a[white]:expand/collapse all"
            )
        else:
            self._status = (
                " [white]Rootfs Layers:[-] rw layer and read-only layers (top to base)  |  "
                "[yellow]i[white]:browse layer files  [yellow]e[white]:toggle  "
                "[yellow]a[white]:expand/collapse all"
            )