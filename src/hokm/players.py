"""
Seat occupants.

An occupant is either a Human (identified by user id) or a Bot (identified by
its seat). Hands are stored under the occupant's owner key: the user id for a
human, ``bot_<seat>`` for a bot.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

NUM_SEATS = 4
BOT_PREFIX = "bot_"


class PlayerKind(str, Enum):
    EMPTY = "empty"
    HUMAN = "human"
    BOT = "bot"


@dataclass(frozen=True)
class Human:
    user_id: str

    @property
    def key(self) -> str:
        return self.user_id


@dataclass(frozen=True)
class Bot:
    seat: int

    @property
    def key(self) -> str:
        return f"{BOT_PREFIX}{self.seat}"

    @property
    def display_name(self) -> str:
        return f"BOT_{self.seat}"


Identity = Union[Human, Bot]


def identity_from_key(key: str) -> Identity:
    """Inverse of ``identity.key``. ``bot_<n>`` with a numeric suffix is a Bot."""
    if key.startswith(BOT_PREFIX) and key[len(BOT_PREFIX):].isdigit():
        return Bot(int(key[len(BOT_PREFIX):]))
    return Human(key)


@dataclass
class Player:
    """One seat of a room and whoever sits in it."""

    seat: int
    identity: Optional[Identity] = None
    display_name: Optional[str] = None
    kind: PlayerKind = PlayerKind.EMPTY
    connected: bool = False

    def is_empty(self) -> bool:
        return self.kind == PlayerKind.EMPTY or self.identity is None

    def is_reclaimable(self) -> bool:
        """A human seat whose occupant dropped can be taken over by a new joiner."""
        return self.kind == PlayerKind.HUMAN and not self.connected

    @property
    def owner_key(self) -> str | None:
        return self.identity.key if self.identity is not None else None

    def seat_human(self, user_id: str, display_name: str | None = None) -> None:
        self.identity = Human(user_id)
        self.display_name = display_name or user_id
        self.kind = PlayerKind.HUMAN
        self.connected = True

    def seat_bot(self) -> None:
        bot = Bot(self.seat)
        self.identity = bot
        self.display_name = bot.display_name
        self.kind = PlayerKind.BOT
        self.connected = True


def empty_seats() -> list[Player]:
    return [Player(seat=i) for i in range(NUM_SEATS)]
