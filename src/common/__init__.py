# Common utilities and shared modules
"""
Shared components used by the grouping engine and the promotion matcher:
- Data models (Pydantic schemas)
- Logging configuration
- Project configuration
"""

from .config import PROJECT_ROOT, GroupingSettings, Settings, StorePriorityRule, settings
from .logging import setup_logging
from .models import Listing, ListingKind

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "Settings",
    "GroupingSettings",
    "StorePriorityRule",
    "Listing",
    "ListingKind",
    "setup_logging",
]
