"""Table models for the container and image lists."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from .components import Align, Column, Table
from .formatting import format_age, format_size
from .models import Container, ContainerStatus, Image

CONTAINER_BASIC_COLUMNS = (
    Column("ID", 14),
    Column("NAME", 0),
    Column("IMAGE", 0),
    Column("STATUS", 10),
    Column("PID", 8, Align.RIGHT),
    Column("AGE", 12),
)

CONTAINER_EXTENDED_COLUMNS = CONTAINER_BASIC_COLUMNS + (
    Column("POD", 0),
    Column("NAMESPACE", 14),
)

IMAGE_COLUMNS = (
    Column("NAME", 0),
    Column("DIGEST", 20),
    Column("SIZE", 12, Align.RIGHT),
    Column("CREATED", 20),
)

_STATUS_COLORS = {
    ContainerStatus.RUNNING: "green",
    ContainerStatus.PAUSED: "yellow",
    ContainerStatus.STOPPED: "red",
    ContainerStatus.CREATED: "darkcyan",
}

_ZERO_TIME = "0001-01-01 00:00:00"


def _format_timestamp(ts: datetime | None) -> str:
    if ts is None:
        return _ZERO_TIME
    return (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d} "
        f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )


class ContainerList:
    """A table of containers with basic or extended columns.

    on_select, when set, is called with the ID of the container whose row
    is selected.
    """

    def __init__(self) -> None:
        self.table = Table(CONTAINER_BASIC_COLUMNS)
        self.table.on_select = self._row_selected
        self.containers: list[Container] = []
        self.show_extended = False
        self.on_select: Callable[[str], None] | None = None

    def set_containers(self, containers: Iterable[Container]) -> None:
        """Replace the listed containers."""
        self.containers = list(containers)

    def toggle_extended(self) -> None:
        """Switch between basic and extended columns and redraw."""
        self.show_extended = not self.show_extended
        columns = CONTAINER_EXTENDED_COLUMNS if self.show_extended else CONTAINER_BASIC_COLUMNS
        self.table.set_columns(columns)
        self.render()

    def render(self, now: datetime | None = None) -> None:
        """Fill the table with the containers, coloring rows by status."""
        self.table.clear_data()
        for container in self.containers:
            values = [
                container.id[:12],
                container.name,
                container.image,
                container.status.value,
                str(container.pid) if container.pid != 0 else "-",
                format_age(container.created_at, now),
            ]
            if self.show_extended:
                values += [container.pod_name, container.pod_namespace]
            self.table.add_row(*values)

            color = _STATUS_COLORS.get(container.status)
            if color is not None:
                self.table.set_row_color(self.table.data_row_count() - 1, color)

    def status_text(self) -> str:
        """The status bar text with container counts and key hints."""
        total = len(self.containers)
        running = sum(1 for c in self.containers if c.status is ContainerStatus.RUNNING)
        hint = "[yellow]e[white]:basic" if self.show_extended else "[yellow]e[white]:extended"
        return (
            f" [white]Containers: [green]{total}[white] total, [green]{running}[white] running"
            f"  |  {hint}  [yellow]Enter[white]:detail  [yellow]r[white]:refresh"
        )

    def container_at(self, row: int) -> Container | None:
        """The container shown in a data row, if any."""
        if 0 <= row < len(self.containers):
            return self.containers[row]
        return None

    def _row_selected(self, row: int) -> None:
        container = self.container_at(row)
        if container is not None and self.on_select is not None:
            self.on_select(container.id)


class ImageList:
    """A table of images."""

    def __init__(self) -> None:
        self.table = Table(IMAGE_COLUMNS)
        self.table.add_row("[gray]Loading images...[-]", "", "", "")
        self.images: list[Image] = []

    def set_images(self, images: Iterable[Image]) -> None:
        """Replace the listed images."""
        self.images = list(images)

    def render(self) -> None:
        """Fill the table with the images."""
        self.table.clear_data()
        for image in self.images:
            self.table.add_row(
                image.name,
                image.digest[:19],
                format_size(image.size),
                _format_timestamp(image.created_at),
            )

    def status_text(self) -> str:
        """The status bar text with the image count and total size."""
        total_size = sum(image.size for image in self.images)
        return (
            f" [white]Images: [green]{len(self.images)}[white] total, "
            f"{format_size(total_size)} total size  |  [yellow]r[white]:refresh"
        )