"""
Quake Log Line Parser

A small recursive-descent parser over a single forward cursor. Each log line
is parsed independently into at most one Event; lines that do not match the
grammar yield None and are skipped by callers.

Line grammar (whitespace-tolerant where noted):

    [ws] HOUR ':' MINUTE [ws] NAME ':' [ws] PAYLOAD

    Kill:                   KILLER ' ' VICTIM ' ' CAUSE ':' <free text>
    ClientUserinfoChanged:  [ws] ID [ws] ['n'] ['\\'] NICKNAME '\\' <key/values>
    InitGame / ShutdownGame: payload ignored
    anything else:          Irrelevant
"""

import logging
from typing import Any, Callable, Iterator, Optional, Tuple

from .events import (
    ClientInfoChanged, DeathCause, Event, EventKind, InitGame, Irrelevant,
    Kill, ShutdownGame, UnknownDeathCause,
)

logger = logging.getLogger(__name__)

__all__ = ['LineParser', 'parse_line', 'iter_events', 'MAX_UINT']

MAX_UINT = 2 ** 32 - 1
MAX_DIGITS = len(str(MAX_UINT))

DIGITS = frozenset("0123456789")


def is_digit(char: str) -> bool:
    return char in DIGITS


def is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def is_whitespace(char: str) -> bool:
    return char.isspace()


class LineParser:
    """
    Cursor-based parser for one log line.

    Every primitive either consumes input and returns a value, or returns None
    and leaves the line to be rejected by its caller. Text results are slices
    of the input line.
    """

    def __init__(self, line: str):
        self.line = line
        self.position = 0

    # Primitives

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it."""
        if self.position < len(self.line):
            return self.line[self.position]
        return None

    def advance(self) -> Optional[str]:
        """Consume and return the next character."""
        char = self.peek()
        if char is not None:
            self.position += 1
        return char

    def skip_while(self, predicate: Callable[[str], bool]) -> None:
        while True:
            char = self.peek()
            if char is None or not predicate(char):
                return
            self.position += 1

    def expect(self, expected: str) -> Optional[str]:
        """Consume ``expected`` if it is the next character."""
        if self.peek() == expected:
            return self.advance()
        return None

    def splice(self, rule: Callable[['LineParser'], Any]) -> Optional[str]:
        """
        Run ``rule`` and return the text it consumed.

        Returns None when the rule returns None.
        """
        start = self.position
        if rule(self) is None:
            return None
        return self.line[start:self.position]

    def accumulate(self, predicate: Callable[[str], bool]) -> str:
        """Consume the maximal run of characters matching ``predicate``."""
        def run(parser):
            parser.skip_while(predicate)
            return True
        return self.splice(run)

    def skip_whitespace(self) -> None:
        self.skip_while(is_whitespace)

    # Grammar rules

    def number(self) -> Optional[int]:
        digits = self.accumulate(is_digit)
        if not digits:
            return None
        # Longer runs can never fit in 32 bits; int() also caps string length
        if len(digits.lstrip('0')) > MAX_DIGITS:
            return None
        value = int(digits)
        if value > MAX_UINT:
            return None
        return value

    def timestamp(self) -> Optional[Tuple[int, int]]:
        hour = self.number()
        if hour is None or self.expect(':') is None:
            return None
        minute = self.number()
        if minute is None:
            return None
        return hour, minute

    def event_name(self) -> Optional[str]:
        name = self.accumulate(is_alpha)
        if not name or self.expect(':') is None:
            return None
        return name

    def kill(self) -> Optional[Kill]:
        killer = self.number()
        if killer is None or self.expect(' ') is None:
            return None
        victim = self.number()
        if victim is None or self.expect(' ') is None:
            return None
        ordinal = self.number()
        if ordinal is None or self.expect(':') is None:
            return None
        try:
            cause = DeathCause.decode(ordinal)
        except UnknownDeathCause:
            return None
        # The "X killed Y by MOD_..." text after the colon is redundant
        return Kill(killer=killer, victim=victim, cause=cause)

    def client_info_changed(self) -> Optional[ClientInfoChanged]:
        self.skip_whitespace()
        player_id = self.number()
        if player_id is None:
            return None
        self.skip_whitespace()
        # Both markers are optional so userinfo format drift does not drop the line
        self.expect('n')
        self.expect('\\')
        nickname = self.accumulate(lambda char: char != '\\')
        if not nickname:
            return None
        return ClientInfoChanged(id=player_id, nickname=nickname)

    def parse(self) -> Optional[Event]:
        self.skip_whitespace()
        timestamp = self.timestamp()
        if timestamp is None:
            return None
        self.skip_whitespace()
        name = self.event_name()
        if name is None:
            return None
        self.skip_whitespace()

        kind: Optional[EventKind]
        if name == "Kill":
            kind = self.kill()
        elif name == "ClientUserinfoChanged":
            kind = self.client_info_changed()
        elif name == "InitGame":
            kind = InitGame()
        elif name == "ShutdownGame":
            kind = ShutdownGame()
        else:
            kind = Irrelevant()

        if kind is None:
            return None
        return Event(timestamp=timestamp, kind=kind)


def split_lines(text: str) -> Iterator[str]:
    """Split on '\\n' only, dropping a trailing '\\r' and a final empty line."""
    lines = text.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith('\r') else line


def parse_line(line: str) -> Optional[Event]:
    """
    Parse one log line.

    Args:
        line: A single line of the log, with or without its line terminator

    Returns:
        The parsed Event, or None if the line is not a well-formed event
    """
    return LineParser(line).parse()


def iter_events(text: str) -> Iterator[Tuple[int, Optional[Event]]]:
    """
    Parse every line of a log in order.

    Yields ``(line_number, event)`` pairs for every non-blank line, 1-based.
    ``event`` is None for lines that were dropped so callers can count them.
    """
    for line_num, line in enumerate(split_lines(text), 1):
        if not line.strip():
            continue
        event = parse_line(line)
        if event is None:
            logger.debug(f"Dropping unparseable line {line_num}: {line!r}")
        yield line_num, event
