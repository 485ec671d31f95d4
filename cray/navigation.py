"""Page navigation with a history stack."""

from __future__ import annotations

import enum
from collections.abc import Callable
from typing import Any


class PageName(str, enum.Enum):
    """Identifiers of the application's pages."""

    MAIN = "main"
    CONTAINER_LIST = "container_list"
    IMAGE_LIST = "image_list"
    POD_LIST = "pod_list"
    CONTAINER_DETAIL = "container_detail"


def _ignore(_: Any) -> None:
    return None


class Navigator:
    """Keeps a history of visited pages and asks the UI to switch and focus.

    on_switch is called with the page to show; on_focus with the widget
    that should take the focus.
    """

    def __init__(
        self,
        on_switch: Callable[[PageName], None] | None = None,
        on_focus: Callable[[Any], None] | None = None,
    ) -> None:
        self._on_switch = on_switch or _ignore
        self._on_focus = on_focus or _ignore
        self._history: list[PageName] = []
        self._focuses: dict[PageName, Any] = {}

    @property
    def history(self) -> tuple[PageName, ...]:
        """The visited pages, oldest first."""
        return tuple(self._history)

    def register_focus(self, page: PageName, focus: Any) -> None:
        """Set the widget that receives the focus when page is shown."""
        self._focuses[page] = focus

    def navigate_to(self, page: PageName) -> None:
        """Show page and focus its registered widget, if any."""
        self._history.append(page)
        self._on_switch(page)
        focus = self._focuses.get(page)
        if focus is not None:
            self._on_focus(focus)

    def navigate_to_and_focus(self, page: PageName, focus: Any) -> None:
        """Show page and focus the given widget."""
        self._history.append(page)
        self._on_switch(page)
        if focus is not None:
            self._on_focus(focus)

    def back(self) -> bool:
        """Return to the previous page; False when there is none."""
        if len(self._history) <= 1:
            return False
        self._history.pop()
        self._on_switch(self._history[-1])
        return True

    def current_page(self) -> PageName | None:
        """The page shown last, or None before any navigation."""
        return self._history[-1] if self._history else None

    def clear_history(self) -> None:
        """Forget all visited pages."""
        self._history.clear()