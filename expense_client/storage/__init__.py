"""Client-side state: local store, cookies, token store and preferences."""

from .cookies import CookieStore, build_cookie, format_cookie
from .local_store import LocalStore
from .preferences import Preferences
from .token_store import TokenStore

__all__ = [
    "CookieStore",
    "LocalStore",
    "Preferences",
    "TokenStore",
    "build_cookie",
    "format_cookie",
]
