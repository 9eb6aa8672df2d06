from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    message: str
    level: NotificationLevel


class Notifier(Protocol):
    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None: ...


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}

_ICONS = {
    NotificationLevel.SUCCESS: "✅",
    NotificationLevel.INFO: "ℹ️",
    NotificationLevel.WARNING: "⚠️",
    NotificationLevel.ERROR: "❌",
}


class LogNotifier:
    """Shows user-facing notifications as log lines and remembers them."""

    def __init__(self) -> None:
        self.history: list[Notification] = []

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        self.history.append(Notification(message, level))
        logging.log(_LOG_LEVELS[level], f"{_ICONS[level]} {message}")

    def messages(self, level: NotificationLevel | None = None) -> list[str]:
        return [n.message for n in self.history if level is None or n.level == level]
