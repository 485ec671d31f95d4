from datetime import datetime, timedelta, timezone

from cray.lists import ContainerList, ImageList
from cray.models import Container, ContainerStatus, Image

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def texts(cells):
    return [cell.text for cell in cells]


def make_containers():
    return [
        Container(
            id="a" * 64,
            name="web",
            image="nginx",
            status=ContainerStatus.RUNNING,
            pid=42,
            created_at=NOW - timedelta(seconds=30),
            pod_name="frontend",
            pod_namespace="default",
        ),
        Container(
            id="b" * 64,
            name="job",
            image="busybox",
            status=ContainerStatus.STOPPED,
            pid=0,
            created_at=None,
        ),
    ]


def test_container_rows():
    view = ContainerList()
    view.set_containers(make_containers())
    view.render(NOW)
    rows = view.table.data_rows
    assert len(rows) == 2
    assert texts(rows[0]) == [
        "a" * 12,
        "web",
        "nginx",
        ContainerStatus.RUNNING.value,
        "42",
        "30s",
    ]
    assert texts(rows[1])[4:] == ["-", "-"]


def test_container_rows_are_colored_by_status():
    view = ContainerList()
    view.set_containers(make_containers())
    view.render(NOW)
    assert {cell.color for cell in view.table.data_rows[0]} == {"green"}
    assert {cell.color for cell in view.table.data_rows[1]} == {"red"}


def test_render_replaces_previous_rows():
    view = ContainerList()
    view.set_containers(make_containers())
    view.render(NOW)
    view.render(NOW)
    assert view.table.data_row_count() == 2


def test_toggle_extended_adds_pod_columns():
    view = ContainerList()
    view.set_containers(make_containers())
    view.toggle_extended()
    assert view.show_extended
    header = texts(view.table.header())
    assert header[-2:] == ["POD", "NAMESPACE"]
    assert texts(view.table.data_rows[0])[-2:] == ["frontend", "default"]
    assert "[yellow]e[white]:basic" in view.status_text()

    view.toggle_extended()
    assert not view.show_extended
    assert len(view.table.data_rows[0]) == 6
    assert "[yellow]e[white]:extended" in view.status_text()


def test_container_status_text_counts():
    view = ContainerList()
    view.set_containers(make_containers())
    text = view.status_text()
    assert "Containers: [green]2[white] total, [green]1[white] running" in text


def test_container_selection():
    view = ContainerList()
    containers = make_containers()
    view.set_containers(containers)
    view.render(NOW)
    chosen = []
    view.on_select = chosen.append
    view.table.select(2)
    view.table.select(5)
    assert chosen == [containers[1].id]
    assert view.container_at(0) is containers[0]
    assert view.container_at(-1) is None
    assert view.container_at(2) is None


def test_image_list_starts_with_loading_row():
    view = ImageList()
    assert view.table.data_row_count() == 1
    assert texts(view.table.data_rows[0])[0] == "[gray]Loading images...[-]"


def test_image_rows():
    digest = "sha256:" + "c" * 64
    view = ImageList()
    view.set_images(
        [
            Image(name="nginx:latest", digest=digest, size=100, created_at=datetime(2024, 1, 2, 3, 4, 5)),
            Image(name="busybox", digest="sha256:d", size=200),
        ]
    )
    view.render()
    rows = view.table.data_rows
    assert len(rows) == 2
    assert texts(rows[0]) == ["nginx:latest", digest[:19], "100 B", "2024-01-02 03:04:05"]
    assert texts(rows[1])[1] == "sha256:d"
    assert texts(rows[1])[3] == "0001-01-01 00:00:00"


def test_image_status_text():
    view = ImageList()
    view.set_images([Image(name="a", size=100), Image(name="b", size=200)])
    text = view.status_text()
    assert "Images: [green]2[white] total, 300 B total size" in text
    assert text.endswith("[yellow]r[white]:refresh")