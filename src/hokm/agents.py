"""
Bot policies and the generic policy interface.

The ``BotPolicy`` protocol is what the table calls when a bot has to play:
``choose_card(hand, trick) -> card``. Policies only pick a card; the table then
plays it exactly like a human play, so no policy can bypass hand membership.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, Sequence

from .deck import Card, Suit
from .play import Play, lead_suit


class BotPolicy(Protocol):
    """Chooses which card a bot puts on the table."""

    def choose_card(self, hand: Sequence[Card], trick: Sequence[Play]) -> Card:
        """
        Return a card from ``hand`` given the plays already in the current trick.

        ``hand`` is never empty; the caller reports BotNoCards before asking.
        """


@dataclass
class GreedyBot:
    """
    Baseline greedy heuristic, no lookahead.

    Following a lead: the highest card of the led suit if it holds one, else its
    first card. Leading: its first card. It never tries to trump in.
    """

    def choose_card(self, hand: Sequence[Card], trick: Sequence[Play]) -> Card:
        if not hand:
            raise ValueError("No cards available for GreedyBot")
        led = lead_suit(trick)
        chosen = 0
        if led is not None:
            best_idx = -1
            best_val = -1
            for i, c in enumerate(hand):
                if c.suit == led and c.value > best_val:
                    best_val = c.value
                    best_idx = i
            if best_idx >= 0:
                chosen = best_idx
        return hand[chosen]

    def choose_trump(self, hand: Sequence[Card]) -> Suit:
        """Longest suit in hand; ties go to the stronger suit, then canonical suit order."""
        order = list(Suit)

        def strength(s: Suit) -> tuple[int, int, int]:
            cards = [c for c in hand if c.suit == s]
            return (len(cards), sum(c.value for c in cards), -order.index(s))

        return max(order, key=strength)


@dataclass
class RandomBot:
    """
    Plays a uniformly random card from its hand.

    Usage:
        bot = RandomBot(seed=42)
        card = bot.choose_card(hand, trick)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose_card(self, hand: Sequence[Card], trick: Sequence[Play]) -> Card:
        if not hand:
            raise ValueError("No cards available for RandomBot")
        return self._rng.choice(list(hand))


__all__ = ["BotPolicy", "GreedyBot", "RandomBot"]
