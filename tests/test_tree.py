from datetime import datetime

from cray.models import Container, ContainerStatus
from cray.tree import ContainerTree, NodeData, NodeType


def make(cid, name, status=ContainerStatus.RUNNING, pod_uid="", pod_name="",
         created=None, pid=0, image="img"):
    return Container(
        id=cid,
        name=name,
        image=image,
        status=status,
        pid=pid,
        created_at=created,
        pod_name=pod_name,
        pod_namespace="ns" if pod_uid else "",
        pod_uid=pod_uid,
    )


def sample():
    return [
        make("c1", "web", pod_uid="u1", pod_name="pod-b", created=datetime(2024, 1, 1)),
        make("c2", "side", pod_uid="u1", pod_name="pod-b", created=datetime(2024, 2, 1)),
        make("c3", "db", pod_uid="u2", pod_name="pod-a", status=ContainerStatus.STOPPED),
        make("c4", "zeta"),
        make("c5", "alpha"),
    ]


def test_initial_tree_shows_loading():
    tree = ContainerTree()
    assert tree.root.children[0].text == "[gray]Loading containers...[-]"
    assert tree.current is tree.root


def test_grouping_and_order():
    tree = ContainerTree()
    tree.set_containers(sample())
    kinds = [node.reference.node_type for node in tree.root.children]
    assert kinds == [NodeType.POD, NodeType.POD,
                     NodeType.STANDALONE_CONTAINER, NodeType.STANDALONE_CONTAINER]
    pods = [node.reference.pod_uid for node in tree.root.children[:2]]
    assert pods == ["u2", "u1"]
    standalone = [node.reference.container_id for node in tree.root.children[2:]]
    assert standalone == ["c5", "c4"]


def test_pod_containers_newest_first():
    tree = ContainerTree()
    tree.set_containers(sample())
    pod = tree.find_pod("u1")
    ids = [child.reference.container_id for child in pod.children]
    assert ids == ["c2", "c1"]
    assert all(child.reference.pod_uid == "u1" for child in pod.children)
    assert all(child.text.startswith("  ├─ ") for child in pod.children)


def test_pause_container_display_name():
    tree = ContainerTree()
    tree.set_containers([make("abcdef1234567890", "abcdef123456", pod_uid="u", pod_name="p")])
    node = tree.find_container("abcdef1234567890")
    assert "phase:abcdef123456" in node.text


def test_standalone_name_and_pid_dash():
    tree = ContainerTree()
    tree.set_containers([make("abcdef1234567890", "abcdef123456")])
    node = tree.find_container("abcdef1234567890")
    assert "abcdef123456:abcdef123456" in node.text
    assert node.text.endswith("[darkgray]PID:[-]-")


def test_exited_prefix_and_pod_running_color():
    tree = ContainerTree()
    tree.set_containers(sample())
    node = tree.find_container("c3")
    assert "[red][Exited][-] " in node.text
    pod = tree.find_pod("u2")
    assert "[red]" in pod.text
    assert "[green]" not in pod.text
    assert "[green]" in tree.find_pod("u1").text


def test_status_text_counts():
    tree = ContainerTree()
    tree.set_containers(sample())
    text = tree.status_text()
    assert "Pods:[green]2[white]  Standalone:[green]2[white]" in text
    assert "[yellow]Enter[white]:detail" in text


def test_activate_container_calls_on_select():
    tree = ContainerTree()
    chosen = []
    tree.on_select = chosen.append
    tree.set_containers(sample())
    tree.select(tree.find_container("c4"))
    tree.activate()
    assert chosen == ["c4"]
    assert tree.selected_container_id == "c4"


def test_activate_pod_toggles():
    tree = ContainerTree()
    tree.set_containers(sample())
    pod = tree.find_pod("u1")
    tree.select(pod)
    tree.activate()
    assert pod.expanded is False
    tree.activate()
    assert pod.expanded is True


def test_toggle_all():
    tree = ContainerTree()
    tree.set_containers(sample())
    tree.toggle_all()
    assert not tree.find_pod("u1").expanded and not tree.find_pod("u2").expanded
    tree.find_pod("u1").expanded = True
    tree.toggle_all()
    assert tree.find_pod("u1").expanded and tree.find_pod("u2").expanded


def test_selection_survives_refresh():
    tree = ContainerTree()
    tree.set_containers(sample())
    tree.select(tree.find_container("c1"))
    tree.set_containers(sample())
    assert tree.current.reference == NodeData(NodeType.CONTAINER, "c1", "u1")


def test_missing_container_falls_back_to_pod():
    tree = ContainerTree()
    tree.set_containers(sample())
    tree.select(tree.find_container("c1"))
    tree.set_containers([c for c in sample() if c.id != "c1"])
    assert tree.current is tree.find_pod("u1")


def test_missing_pod_falls_back_to_first_node():
    tree = ContainerTree()
    tree.set_containers(sample())
    tree.select(tree.find_pod("u2"))
    tree.set_containers([c for c in sample() if c.pod_uid != "u2"])
    assert tree.current is tree.root.children[0]


def test_empty_selects_root_and_find_returns_none():
    tree = ContainerTree()
    tree.set_containers([])
    assert tree.current is tree.root
    assert tree.root.children == []
    assert tree.find_container("c1") is None
    assert tree.find_pod("u1") is None