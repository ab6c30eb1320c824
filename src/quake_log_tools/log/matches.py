"""
Quake Match Aggregation

Folds the ordered event stream of a log into per-match kill statistics.
A match is closed by ShutdownGame; InitGame is only a marker and does not
reset anything.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .events import (
    ClientInfoChanged, DeathCause, Event, Kill, ShutdownGame,
)
from .parser import iter_events

logger = logging.getLogger(__name__)

__all__ = ['Match', 'MatchAggregator', 'parse_matches']


@dataclass
class Match:
    """
    Statistics accumulated for one match.

    Attributes:
        total_kills: Number of Kill events, world kills included
        players: Player id -> latest nickname
        kill_deltas: Player id -> kills scored minus world deaths suffered
        kills_by_cause: DeathCause -> number of kills
    """
    total_kills: int = 0
    players: Dict[int, str] = field(default_factory=dict)
    kill_deltas: Dict[int, int] = field(default_factory=dict)
    kills_by_cause: Dict[DeathCause, int] = field(default_factory=dict)

    def add_player(self, player_id: int, nickname: str) -> None:
        self.players[player_id] = nickname

    def killed(self, killer: int) -> None:
        self.kill_deltas[killer] = self.kill_deltas.get(killer, 0) + 1

    def killed_by_world(self, victim: int) -> None:
        self.kill_deltas[victim] = self.kill_deltas.get(victim, 0) - 1

    def record_cause(self, cause: DeathCause) -> None:
        self.kills_by_cause[cause] = self.kills_by_cause.get(cause, 0) + 1
        self.total_kills += 1

    def apply_kill(self, kill: Kill) -> None:
        self.record_cause(kill.cause)
        if kill.by_world:
            self.killed_by_world(kill.victim)
        else:
            self.killed(kill.killer)


class MatchAggregator:
    """
    Stateful fold from events to completed matches.

    The aggregator owns one in-progress Match. On ShutdownGame it is handed
    to the caller and replaced with a fresh one. Whatever is still in
    progress at end of input is discarded unless ``flush_trailing`` is set.
    """

    def __init__(self, flush_trailing: bool = False):
        self.flush_trailing = flush_trailing
        self.current = Match()
        self.completed: List[Match] = []
        # Set once the current match has seen any state-changing event
        self._dirty = False

        self.lines_seen = 0
        self.lines_dropped = 0
        self.events_seen = 0

    def feed(self, event: Event) -> Optional[Match]:
        """
        Apply one event.

        Returns:
            The completed Match when ``event`` is ShutdownGame, otherwise None
        """
        self.events_seen += 1
        kind = event.kind

        if isinstance(kind, ClientInfoChanged):
            self.current.add_player(kind.id, kind.nickname)
            self._dirty = True
        elif isinstance(kind, Kill):
            self.current.apply_kill(kind)
            self._dirty = True
        elif isinstance(kind, ShutdownGame):
            return self._close()
        # InitGame and Irrelevant leave the accumulator untouched
        return None

    def _close(self) -> Match:
        finished, self.current = self.current, Match()
        self._dirty = False
        self.completed.append(finished)
        logger.debug(f"Match {len(self.completed)} closed with {finished.total_kills} kills")
        return finished

    def consume(self, text: str) -> 'MatchAggregator':
        """Parse and apply every line of ``text`` in order."""
        for _, event in iter_events(text):
            self.lines_seen += 1
            if event is None:
                self.lines_dropped += 1
                continue
            self.feed(event)
        return self

    def finish(self) -> List[Match]:
        """
        End the input and return all completed matches in input order.
        """
        if self._dirty:
            if self.flush_trailing:
                logger.info("Log ended without ShutdownGame; keeping the trailing match")
                self._close()
            else:
                logger.warning(
                    f"Log ended without ShutdownGame; discarding trailing match "
                    f"with {self.current.total_kills} kills"
                )
                self.current = Match()
                self._dirty = False
        return list(self.completed)


def parse_matches(text: str, flush_trailing: bool = False) -> List[Match]:
    """
    Parse a whole log into completed matches.

    Args:
        text: Complete log text
        flush_trailing: Emit a final match that was never closed by ShutdownGame

    Returns:
        Completed matches in input order
    """
    return MatchAggregator(flush_trailing=flush_trailing).consume(text).finish()
