"""
Quake Log Tools - Python package for Quake server log analysis

This package provides an I/O-free core that parses Quake server
logs into per-match kill statistics, plus command-line tools that export the
statistics as JSON, Excel workbooks and charts.

Configuration is handled by the sibling config module.
"""

__version__ = '1.0.0'
