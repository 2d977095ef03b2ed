"""
Core module - constants and configuration
"""

from .config import ConsoleConfig

__all__ = ["ConsoleConfig"]
