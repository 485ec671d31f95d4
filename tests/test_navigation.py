import pytest

from cray.navigation import Navigator, PageName


@pytest.fixture
def calls():
    return {"switch": [], "focus": []}


@pytest.fixture
def nav(calls):
    return Navigator(on_switch=calls["switch"].append, on_focus=calls["focus"].append)


def test_page_names():
    assert PageName.MAIN.value == "main"
    assert PageName.CONTAINER_DETAIL.value == "container_detail"
    assert PageName("pod_list") is PageName.POD_LIST


def test_navigate_to_focuses_registered_widget(nav, calls):
    widget = object()
    nav.register_focus(PageName.MAIN, widget)
    nav.navigate_to(PageName.MAIN)
    assert nav.current_page() is PageName.MAIN
    assert calls["switch"] == [PageName.MAIN]
    assert calls["focus"] == [widget]


def test_navigate_to_without_focus(nav, calls):
    nav.navigate_to(PageName.IMAGE_LIST)
    assert nav.current_page() is PageName.IMAGE_LIST
    assert nav.history == (PageName.IMAGE_LIST,)
    assert calls["switch"] == [PageName.IMAGE_LIST]
    assert calls["focus"] == []


def test_navigate_to_and_focus(nav, calls):
    widget = object()
    nav.navigate_to_and_focus(PageName.CONTAINER_DETAIL, widget)
    nav.navigate_to_and_focus(PageName.MAIN, None)
    assert calls["focus"] == [widget]
    assert nav.history == (PageName.CONTAINER_DETAIL, PageName.MAIN)


def test_back(nav, calls):
    nav.navigate_to(PageName.MAIN)
    nav.navigate_to(PageName.CONTAINER_DETAIL)
    assert nav.back() is True
    assert nav.current_page() is PageName.MAIN
    assert calls["switch"][-1] is PageName.MAIN


def test_back_at_first_page(nav, calls):
    assert nav.back() is False
    nav.navigate_to(PageName.MAIN)
    assert nav.back() is False
    assert nav.current_page() is PageName.MAIN
    assert calls["switch"] == [PageName.MAIN]


def test_clear_history(nav):
    nav.navigate_to(PageName.MAIN)
    nav.navigate_to(PageName.POD_LIST)
    nav.clear_history()
    assert nav.current_page() is None
    assert nav.history == ()


def test_default_callbacks():
    navigator = Navigator()
    navigator.navigate_to(PageName.MAIN)
    navigator.navigate_to(PageName.CONTAINER_LIST)
    assert navigator.back() is True
    assert navigator.current_page() is PageName.MAIN