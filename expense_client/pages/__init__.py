"""Page controllers: one instance per page load."""

from .auth_page import AuthPage
from .dashboard import DashboardPage, DashboardState

__all__ = ["AuthPage", "DashboardPage", "DashboardState"]
