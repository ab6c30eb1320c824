"""
Quake Log Events

Typed events reconstructed from single lines of a Quake server log, and the
closed vocabulary of death causes ("means of death") reported by Kill lines.

The integer value of every DeathCause member is the ordinal written by the
server on Kill lines, so the values are spelled out explicitly and must never
be renumbered.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

__all__ = [
    'WORLD_ID', 'DeathCause', 'UnknownDeathCause',
    'InitGame', 'ClientInfoChanged', 'Kill', 'ShutdownGame', 'Irrelevant',
    'EventKind', 'Event',
]

# Killer id the server uses for environmental deaths (falling, lava, trigger_hurt...)
WORLD_ID = 1022

LABEL_PREFIX = "MOD_"


class UnknownDeathCause(ValueError):
    """Raised when an ordinal or label does not name a DeathCause."""

    def __init__(self, value):
        super().__init__(f"Unknown means of death: {value!r}")
        self.value = value


class DeathCause(IntEnum):
    """Means of death, encoded with the server's ordinals."""

    UNKNOWN = 0
    SHOTGUN = 1
    GAUNTLET = 2
    MACHINEGUN = 3
    GRENADE = 4
    GRENADE_SPLASH = 5
    ROCKET = 6
    ROCKET_SPLASH = 7
    PLASMA = 8
    PLASMA_SPLASH = 9
    RAILGUN = 10
    LIGHTNING = 11
    BFG = 12
    BFG_SPLASH = 13
    WATER = 14
    SLIME = 15
    LAVA = 16
    CRUSH = 17
    TELEFRAG = 18
    FALLING = 19
    SUICIDE = 20
    TARGET_LASER = 21
    TRIGGER_HURT = 22
    GRAPPLE = 23

    @classmethod
    def decode(cls, ordinal: int) -> 'DeathCause':
        """
        Decode a wire ordinal.

        Args:
            ordinal: Ordinal as written on a Kill line

        Returns:
            The matching DeathCause

        Raises:
            UnknownDeathCause: If the ordinal is outside 0..23
        """
        try:
            return cls(ordinal)
        except ValueError:
            raise UnknownDeathCause(ordinal) from None

    @classmethod
    def from_label(cls, label: str) -> 'DeathCause':
        """Inverse of ``label``: ``"MOD_ROCKET"`` -> ``DeathCause.ROCKET``."""
        if not label.startswith(LABEL_PREFIX):
            raise UnknownDeathCause(label)
        try:
            return cls[label[len(LABEL_PREFIX):]]
        except KeyError:
            raise UnknownDeathCause(label) from None

    @property
    def label(self) -> str:
        return f"{LABEL_PREFIX}{self.name}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class InitGame:
    """Match start marker."""


@dataclass(frozen=True)
class ClientInfoChanged:
    """A player's nickname (re)binding."""
    id: int
    nickname: str


@dataclass(frozen=True)
class Kill:
    killer: int
    victim: int
    cause: DeathCause

    @property
    def by_world(self) -> bool:
        return self.killer == WORLD_ID


@dataclass(frozen=True)
class ShutdownGame:
    """Match end marker."""


@dataclass(frozen=True)
class Irrelevant:
    """A well-formed log line whose event is not modelled."""


EventKind = Union[InitGame, ClientInfoChanged, Kill, ShutdownGame, Irrelevant]


@dataclass(frozen=True)
class Event:
    timestamp: Tuple[int, int]
    kind: EventKind
