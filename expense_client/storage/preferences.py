from __future__ import annotations

import math

from ..constants import (
    DEFAULT_THEME,
    DEFAULT_VIEW,
    PREFERRED_VIEW_KEY,
    THEME_KEY,
    THEMES,
    USER_BUDGET_KEY,
    VIEWS,
)
from .local_store import LocalStore


class Preferences:
    """Presentation preferences and the advisory budget cache.

    All values live in the local store under ``theme``, ``preferredView``
    and ``userBudget``.
    """

    def __init__(self, local_store: LocalStore):
        self._local = local_store

    @property
    def theme(self) -> str:
        value = self._local.get(THEME_KEY)
        return value if value in THEMES else DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}")
        self._local.set(THEME_KEY, theme)

    def toggle_theme(self) -> str:
        new_theme = "light" if self.theme == "dark" else "dark"
        self.set_theme(new_theme)
        return new_theme

    @property
    def preferred_view(self) -> str:
        value = self._local.get(PREFERRED_VIEW_KEY)
        return value if value in VIEWS else DEFAULT_VIEW

    def set_preferred_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"view must be one of {VIEWS}")
        self._local.set(PREFERRED_VIEW_KEY, view)

    @property
    def budget(self) -> float | None:
        """Cached monthly budget, or None when unset or unparsable."""
        raw = self._local.get(USER_BUDGET_KEY)
        if raw is None:
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
        if not math.isfinite(value) or value < 0:
            return None
        return value

    def set_budget(self, amount: float | None) -> None:
        if amount is None:
            self._local.remove(USER_BUDGET_KEY)
            return
        if not math.isfinite(amount) or amount < 0:
            raise ValueError("budget must be a non-negative number")
        self._local.set(USER_BUDGET_KEY, str(amount))
