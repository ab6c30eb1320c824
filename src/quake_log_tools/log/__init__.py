"""
Quake Log Parsing

This package turns raw Quake server log text into typed events, folds the
events into per-match kill statistics, and builds the exported kill report.
"""

__all__ = ['events', 'parser', 'matches', 'report']

# Export main entry points for easy importing
from .events import WORLD_ID, DeathCause, Event
from .parser import parse_line
from .matches import Match, MatchAggregator, parse_matches
from .report import MissingPlayerName, Report, generate_report
