"""
Quake Log Analysis Tools

This package provides the command-line tools built on the log parser:
the per-match kill report and the kills-by-cause chart.
"""

from .kill_report import KillReport
from .means_plotter import MeansPlotter

__all__ = [
    'KillReport',
    'MeansPlotter',
]
