"""Route paths and per-browser navigation history."""

from __future__ import annotations

from collections import deque
from typing import Deque, Union

LIST_PATH = "/"
DETAIL_PATH_TEMPLATE = "/user/{user_id}"

_MAX_HISTORY_ENTRIES = 50


def detail_path(user_id: Union[int, str]) -> str:
    return DETAIL_PATH_TEMPLATE.format(user_id=user_id)


class NavigationHistory:
    """Remembers visited screens so "Go Back" can return to the previous one."""

    def __init__(self, *, max_entries: int = _MAX_HISTORY_ENTRIES) -> None:
        self._entries: Deque[str] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def current(self) -> str | None:
        return self._entries[-1] if self._entries else None

    def visit(self, path: str) -> None:
        # Reloading the same screen does not add a new entry.
        if self._entries and self._entries[-1] == path:
            return
        self._entries.append(path)

    def back(self) -> str:
        if self._entries:
            self._entries.pop()
        if self._entries:
            return self._entries[-1]
        return LIST_PATH


__all__ = ["DETAIL_PATH_TEMPLATE", "LIST_PATH", "NavigationHistory", "detail_path"]
