"""
Quake Kill Report

Projects completed matches into the two exported views of a report:

- ``match_kills``: total kills, player names, and net kills keyed by name
- ``match_by_means``: kills keyed by ``MOD_*`` cause label

Both lists share the same index for the same match.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .events import DeathCause
from .matches import Match, MatchAggregator

logger = logging.getLogger(__name__)

__all__ = [
    'MissingPlayerName', 'MatchKills', 'MatchByMeans', 'Report',
    'build_match_report', 'build_report', 'generate_report',
    'MISSING_NAME_POLICIES', 'DEFAULT_MISSING_NAME_TEMPLATE',
]

MISSING_NAME_POLICIES = ("placeholder", "omit", "strict")
DEFAULT_MISSING_NAME_POLICY = "placeholder"
DEFAULT_MISSING_NAME_TEMPLATE = "<player {id}>"


class MissingPlayerName(KeyError):
    """A kill delta references a player id that never announced a nickname."""

    def __init__(self, player_id: int, match_index: Optional[int] = None):
        where = f" in match {match_index}" if match_index is not None else ""
        super().__init__(f"No nickname known for player id {player_id}{where}")
        self.player_id = player_id
        self.match_index = match_index

    def __str__(self) -> str:
        return self.args[0]


@dataclass
class MatchKills:
    total_kills: int
    players: List[str]
    kills: Dict[str, int]
    # Ids from kill_deltas with no nickname; not part of the exported view
    unresolved_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_kills": self.total_kills,
            "players": list(self.players),
            "kills": dict(self.kills),
        }


@dataclass
class MatchByMeans:
    kills_by_means: Dict[DeathCause, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kills_by_means": {
                cause.label: count
                for cause, count in sorted(self.kills_by_means.items())
            }
        }


@dataclass
class Report:
    match_kills: List[MatchKills] = field(default_factory=list)
    match_by_means: List[MatchByMeans] = field(default_factory=list)
    # Parse counters from generate_report; not part of the exported views
    lines_seen: int = 0
    lines_dropped: int = 0

    def __len__(self) -> int:
        return len(self.match_kills)

    @property
    def total_kills(self) -> int:
        return sum(match.total_kills for match in self.match_kills)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_kills": [match.to_dict() for match in self.match_kills],
            "match_by_means": [match.to_dict() for match in self.match_by_means],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_dataframes(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Flatten the report into two long-format tables.

        Returns:
            Tuple of (kills, means). ``kills`` has columns match/player/kills,
            ``means`` has columns match/cause/kills. Matches are numbered from 1.
        """
        kill_rows = []
        for number, match in enumerate(self.match_kills, 1):
            for player, delta in match.kills.items():
                kill_rows.append({"match": number, "player": player, "kills": delta})

        means_rows = []
        for number, match in enumerate(self.match_by_means, 1):
            for cause, count in sorted(match.kills_by_means.items()):
                means_rows.append({"match": number, "cause": cause.label, "kills": count})

        kills_df = pd.DataFrame(kill_rows, columns=["match", "player", "kills"])
        means_df = pd.DataFrame(means_rows, columns=["match", "cause", "kills"])
        return kills_df, means_df


def _check_policy(policy: str) -> None:
    if policy not in MISSING_NAME_POLICIES:
        raise ValueError(
            f"Unknown missing-name policy '{policy}'. "
            f"Expected one of: {', '.join(MISSING_NAME_POLICIES)}"
        )


def build_match_report(match: Match, index: Optional[int] = None,
                       missing_names: str = DEFAULT_MISSING_NAME_POLICY,
                       template: str = DEFAULT_MISSING_NAME_TEMPLATE) -> Tuple[MatchKills, MatchByMeans]:
    """
    Build both report views for one completed match.

    Args:
        match: Completed match
        index: Position of the match in the log, used in messages
        missing_names: How to treat a kill delta whose player id has no
            nickname: "placeholder", "omit" or "strict"
        template: Placeholder label, formatted with ``id``

    Returns:
        Tuple of (MatchKills, MatchByMeans)

    Raises:
        MissingPlayerName: With the "strict" policy, for the first unresolved id
        ValueError: If the policy is unknown
    """
    _check_policy(missing_names)

    kills: Dict[str, int] = {}
    unresolved = []

    for player_id, delta in match.kill_deltas.items():
        name = match.players.get(player_id)
        if name is None:
            if missing_names == "strict":
                raise MissingPlayerName(player_id, index)
            unresolved.append(player_id)
            logger.warning(f"Match {index}: no nickname for player id {player_id} ({delta:+d} kills)")
            if missing_names == "omit":
                continue
            name = template.format(id=player_id)
        # Two ids can share one nickname; their deltas are summed
        kills[name] = kills.get(name, 0) + delta

    match_kills = MatchKills(
        total_kills=match.total_kills,
        players=list(match.players.values()),
        kills=kills,
        unresolved_ids=unresolved,
    )
    return match_kills, MatchByMeans(kills_by_means=dict(match.kills_by_cause))


def build_report(matches: List[Match], missing_names: str = DEFAULT_MISSING_NAME_POLICY,
                 template: str = DEFAULT_MISSING_NAME_TEMPLATE) -> Report:
    """Build a Report from completed matches, keeping their order."""
    report = Report()
    for index, match in enumerate(matches, 1):
        match_kills, by_means = build_match_report(match, index, missing_names, template)
        report.match_kills.append(match_kills)
        report.match_by_means.append(by_means)
    return report


def generate_report(text: str, flush_trailing: bool = False,
                    missing_names: str = DEFAULT_MISSING_NAME_POLICY,
                    template: str = DEFAULT_MISSING_NAME_TEMPLATE) -> Report:
    """
    Parse a complete log text and build its report.

    Args:
        text: Complete log text
        flush_trailing: Keep a final match that was never closed by ShutdownGame
        missing_names: Missing nickname policy, see ``build_match_report``
        template: Placeholder label for the "placeholder" policy

    Returns:
        The Report, carrying the aggregator's line counters

    Raises:
        MissingPlayerName: With the "strict" policy
        ValueError: If the policy is unknown
    """
    _check_policy(missing_names)
    aggregator = MatchAggregator(flush_trailing=flush_trailing).consume(text)
    matches = aggregator.finish()
    logger.info(
        f"Parsed {aggregator.lines_seen} lines into {len(matches)} matches "
        f"({aggregator.lines_dropped} lines dropped)"
    )
    report = build_report(matches, missing_names, template)
    report.lines_seen = aggregator.lines_seen
    report.lines_dropped = aggregator.lines_dropped
    return report
