"""
Configuration constants for the Expense Tracker client

This module contains all configurable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


# Backend location
API_BASE_URL = _get_env_str("API_BASE_URL", "http://localhost:8080")
AUTH_API_PATH = "/api/auth"
EXPENSES_API_PATH = "/api/expenses"

# Navigation targets (the only two destinations the guard navigates to)
LOGIN_PATH = "/login.html"
DASHBOARD_PATH = "/dashboard"

# Durable storage keys
AUTH_TOKEN_KEY = "authToken"
USERNAME_KEY = "username"
THEME_KEY = "theme"
PREFERRED_VIEW_KEY = "preferredView"
USER_BUDGET_KEY = "userBudget"

# Cookie carrying the token for server-side route guarding
AUTH_COOKIE_NAME = AUTH_TOKEN_KEY
AUTH_COOKIE_MAX_AGE_SECONDS = _get_env_int(
    "AUTH_COOKIE_MAX_AGE_SECONDS", 604800
)  # 7 days

# Session guard timing
TOKEN_VALIDATION_TIMEOUT_SECONDS = _get_env_float(
    "TOKEN_VALIDATION_TIMEOUT_SECONDS", 3.0
)  # Bound on the network validation call
DASHBOARD_INIT_TIMEOUT_SECONDS = _get_env_float(
    "DASHBOARD_INIT_TIMEOUT_SECONDS", 5.0
)  # Outer bound on dashboard validation, covers the shared in-flight path
LOGIN_REDIRECT_DELAY_SECONDS = _get_env_float(
    "LOGIN_REDIRECT_DELAY_SECONDS", 1.0
)  # Lets the success notification render before navigating
AUTH_FAILURE_REDIRECT_DELAY_SECONDS = _get_env_float(
    "AUTH_FAILURE_REDIRECT_DELAY_SECONDS", 2.0
)  # Pause after an authentication timeout before returning to login

# Network/HTTP constants
HTTP_REQUEST_TIMEOUT_SECONDS = _get_env_int(
    "HTTP_REQUEST_TIMEOUT_SECONDS", 30
)  # Default HTTP request timeout

# Retry/backoff constants for idempotent data loads
DATA_LOAD_MAX_ATTEMPTS = _get_env_int(
    "DATA_LOAD_MAX_ATTEMPTS", 2
)  # Attempts per GET data load (network errors only)
RETRY_BACKOFF_MULTIPLIER = _get_env_float(
    "RETRY_BACKOFF_MULTIPLIER", 0.5
)  # Exponential backoff multiplier
RETRY_MAX_BACKOFF_SECONDS = _get_env_int(
    "RETRY_MAX_BACKOFF_SECONDS", 4
)  # Maximum backoff time in seconds

# Local state
STATE_DIR = _get_env_str(
    "EXPENSE_CLIENT_STATE_DIR", os.path.join(os.path.expanduser("~"), ".expense_client")
)
LOCAL_STORE_FILENAME = "local_storage.json"
COOKIE_STORE_FILENAME = "cookies.json"
CONFIG_FILE_ENV = "EXPENSE_CLIENT_CONF_FILE"
DEFAULT_CONFIG_FILE = "expense_client.conf"

# Presentation choices persisted in the local store
THEMES = ("light", "dark")
VIEWS = ("card", "table")
DEFAULT_THEME = "light"
DEFAULT_VIEW = "card"
