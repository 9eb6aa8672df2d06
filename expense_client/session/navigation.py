from __future__ import annotations

import logging
from typing import Protocol


class Navigator(Protocol):
    """Where the client "is" and how it moves to another page."""

    @property
    def current_path(self) -> str: ...

    def replace(self, path: str) -> None:
        """Navigate to ``path`` overwriting the current history entry."""
        ...


class HistoryNavigator:
    """In-memory browser-style history.

    ``replace`` overwrites the current entry so ``back`` can never return to
    the page that was left; ``push`` appends like a link click. Every
    ``replace`` is recorded in ``navigations``.
    """

    def __init__(self, current_path: str = "/") -> None:
        self._entries: list[str] = [current_path]
        self._index = 0
        self.navigations: list[str] = []

    @property
    def current_path(self) -> str:
        return self._entries[self._index]

    @property
    def history(self) -> list[str]:
        return list(self._entries[: self._index + 1])

    def replace(self, path: str) -> None:
        previous = self.current_path
        self._entries[self._index] = path
        self.navigations.append(path)
        logging.debug(f"🧭 Navigation replace {previous} -> {path}")

    def push(self, path: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(path)
        self._index += 1

    def back(self) -> str | None:
        """Step back one entry; None when already at the first entry."""
        if self._index == 0:
            return None
        self._index -= 1
        return self.current_path
