"""
Utility modules for the onboarding service.
"""

from .formatting import format_area, format_currency, format_percent
from .config import Config
from .logging import setup_logging

__all__ = ["format_area", "format_currency", "format_percent", "Config", "setup_logging"]
