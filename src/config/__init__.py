# Configuration package initialization
"""
Quake Log Tools - Configuration System

This package provides a lightweight configuration system for the Quake Log Tools.

Quick Usage:
    from config import Config

    config = Config(profile='tournament')
    value = config.get('report.missing_names')
"""

from config.config import Config

__all__ = ['Config']
