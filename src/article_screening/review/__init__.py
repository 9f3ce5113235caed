"""
Human review of assigned articles.

Provides:
- Session state and queue navigation
- Reason catalog and decision validation
- Web-based review interface (Django)
"""

from .login_memory import InMemoryLoginMemory, LoginMemory
from .navigator import (
    Back,
    Decide,
    Login,
    LoginOptions,
    Logout,
    Previous,
    ReviewNavigator,
    Skip,
    ViewSummary,
)
from .reasons import ReasonCatalog
from .session import Phase, Progress, SessionState

__all__ = [
    "Back",
    "Decide",
    "InMemoryLoginMemory",
    "Login",
    "LoginMemory",
    "LoginOptions",
    "Logout",
    "Phase",
    "Previous",
    "Progress",
    "ReasonCatalog",
    "ReviewNavigator",
    "SessionState",
    "Skip",
    "ViewSummary",
]
