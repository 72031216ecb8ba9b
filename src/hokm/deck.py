"""
Hokm deck: 52 cards (4 suits × 13 ranks).
Cards travel as tokens like "10_h" or "a_s": lowercase rank, underscore, suit code.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


class Suit(str, Enum):
    """Clubs, Diamonds, Hearts, Spades. Value is the one-letter wire code."""
    CLUBS = "c"
    DIAMONDS = "d"
    HEARTS = "h"
    SPADES = "s"


SUIT_NAMES = {
    Suit.CLUBS: "club",
    Suit.DIAMONDS: "diamond",
    Suit.HEARTS: "heart",
    Suit.SPADES: "spade",
}

# Ascending order: 2 lowest, Ace highest.
RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "j", "q", "k", "a")

_FACE_VALUES = {"j": 11, "q": 12, "k": 13, "a": 14}


def rank_value(rank: str) -> int:
    """
    Strength of a rank token: 2..10 face value, J=11, Q=12, K=13, A=14.
    Unknown tokens are worth 0 so trick evaluation stays total.
    """
    token = str(rank).lower()
    if token in _FACE_VALUES:
        return _FACE_VALUES[token]
    try:
        return int(token)
    except ValueError:
        return 0


@dataclass(frozen=True)
class Card:
    """A single card, e.g. Card("10", Suit.HEARTS)."""

    rank: str
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Unknown suit: {self.suit!r}")

    @property
    def value(self) -> int:
        return rank_value(self.rank)

    @classmethod
    def parse(cls, token: str) -> "Card":
        """Build a card from its wire token ("k_h"). Raises ValueError on malformed input."""
        if not isinstance(token, str) or "_" not in token:
            raise ValueError(f"Malformed card token: {token!r}")
        rank, _, suit = token.lower().partition("_")
        if rank not in RANKS:
            raise ValueError(f"Unknown rank in card token: {token!r}")
        try:
            return cls(rank=rank, suit=Suit(suit))
        except ValueError:
            raise ValueError(f"Unknown suit in card token: {token!r}") from None

    def __str__(self) -> str:
        return f"{self.rank}_{self.suit.value}"

    def __repr__(self) -> str:
        return str(self)


def make_deck_52() -> list[Card]:
    """Build a full 52-card deck in rank-major order (order is irrelevant before shuffling)."""
    deck: list[Card] = []
    for rank in RANKS:
        for s in Suit:
            deck.append(Card(rank=rank, suit=s))
    return deck


def shuffle(deck: list[Card], rng: random.Random | None = None) -> list[Card]:
    """
    Fisher–Yates shuffle in place: walk i from the last index down to 1 and swap
    with a uniformly drawn j in [0, i]. Returns the same list for chaining.
    """
    if rng is None:
        rng = random.Random()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randrange(i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def parse_cards(tokens: list[str]) -> list[Card]:
    return [Card.parse(t) for t in tokens]


def card_tokens(cards: list[Card]) -> list[str]:
    return [str(c) for c in cards]
