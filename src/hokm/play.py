"""
Trick-taking: trump designators and the trick winner.
Trump beats everything; otherwise the highest card of the led suit wins.
No follow-suit rule is enforced, so off-suit cards simply cannot win.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Sequence, Union

from .deck import Card, Suit, SUIT_NAMES
from .errors import InvalidTrump


class TrumpMode(str, Enum):
    """Non-suit trump designators. None of them matches a card suit."""
    STANDARD = "STANDARD"
    SERS = "SERS"
    NERS = "NERS"


Trump = Union[Suit, TrumpMode]


class Play(NamedTuple):
    """One card put on the table. ``at`` is an ISO-8601 UTC timestamp."""
    seat: int
    card: Card
    at: str | None = None


_TRUMP_ALIASES: dict[str, Trump] = {}
for _s in Suit:
    _TRUMP_ALIASES[_s.value] = _s
    _TRUMP_ALIASES[SUIT_NAMES[_s]] = _s
    _TRUMP_ALIASES[SUIT_NAMES[_s] + "s"] = _s
for _m in TrumpMode:
    _TRUMP_ALIASES[_m.value.lower()] = _m


def parse_trump(value: object) -> Trump:
    """
    Accept "c"/"d"/"h"/"s", suit names ("heart", "Hearts") or STANDARD/SERS/NERS.
    Anything else raises InvalidTrump.
    """
    if isinstance(value, (Suit, TrumpMode)):
        return value
    if not isinstance(value, str):
        raise InvalidTrump(f"Invalid trump: {value!r}")
    trump = _TRUMP_ALIASES.get(value.strip().lower())
    if trump is None:
        raise InvalidTrump(f"Invalid trump: {value!r}")
    return trump


def trump_token(trump: Trump | None) -> str | None:
    """Canonical stored form: suit code or mode name."""
    return trump.value if trump is not None else None


def trump_suit(trump: Trump | None) -> Suit | None:
    return trump if isinstance(trump, Suit) else None


def lead_suit(trick: Sequence[Play] | Sequence[tuple[int, Card]]) -> Suit | None:
    if not trick:
        return None
    return trick[0][1].suit


def _beats(card: Card, best: Card, led: Suit, trump: Suit | None) -> bool:
    """True if card takes the trick away from best."""
    if trump is not None and card.suit == trump:
        if best.suit != trump:
            return True
        return card.value > best.value
    if trump is not None and best.suit == trump:
        return False
    if card.suit == best.suit:
        return card.value > best.value
    if card.suit == led and best.suit != led:
        return True
    return False


def trick_winner(
    trick: Sequence[Play] | Sequence[tuple[int, Card]],
    trump: Trump | None = None,
) -> int | None:
    """
    Seat that wins the trick, reducing left to right from the first play.
    Returns None for an empty trick.
    """
    if not trick:
        return None
    led = trick[0][1].suit
    trump_s = trump_suit(trump)
    best_seat = trick[0][0]
    best_card = trick[0][1]
    for play in trick[1:]:
        seat, card = play[0], play[1]
        if _beats(card, best_card, led, trump_s):
            best_seat = seat
            best_card = card
    return best_seat
