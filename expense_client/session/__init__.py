"""Session guard: token validation, redirect control and notifications."""

from .guard import GuardState, SessionGuard
from .navigation import HistoryNavigator, Navigator
from .notifier import LogNotifier, Notification, NotificationLevel, Notifier
from .timeouts import race_timeout
from .validator import TokenValidator, ValidationOutcome

__all__ = [
    "GuardState",
    "HistoryNavigator",
    "LogNotifier",
    "Navigator",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "SessionGuard",
    "TokenValidator",
    "ValidationOutcome",
    "race_timeout",
]
