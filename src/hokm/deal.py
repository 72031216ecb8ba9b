"""
Distribution (deal) for 4 seats.
First 8 rounds go to the pending reserve (released once trump is chosen),
then 5 rounds form the opening hands. 4 × (8 + 5) = 52, so nothing is left over.
"""
from __future__ import annotations

import random
from typing import NamedTuple

from .deck import Card, make_deck_52, shuffle
from .players import NUM_SEATS

PENDING_ROUNDS = 8
OPENING_ROUNDS = 5


class Deal(NamedTuple):
    """Result of a deal. Lists can be mutated for play."""
    hands: tuple[list[Card], list[Card], list[Card], list[Card]]  # opening hands by seat
    pending: dict[int, list[Card]]  # seat -> reserve
    residual: list[Card]  # undealt remainder, bookkeeping only
    hakim: int  # 0..3


def deal_hokm(deck: list[Card] | None = None, rng: random.Random | None = None) -> Deal:
    """
    Shuffle and deal round-robin: seat 0, 1, 2, 3 one card at a time.
    The hakim is drawn uniformly among the four seats.
    """
    if deck is None:
        deck = make_deck_52()
    if rng is None:
        rng = random.Random()
    deck = list(deck)
    shuffle(deck, rng)

    pending: dict[int, list[Card]] = {seat: [] for seat in range(NUM_SEATS)}
    for _ in range(PENDING_ROUNDS):
        for seat in range(NUM_SEATS):
            if deck:
                pending[seat].append(deck.pop(0))

    hands: list[list[Card]] = [[], [], [], []]
    for _ in range(OPENING_ROUNDS):
        for seat in range(NUM_SEATS):
            if deck:
                hands[seat].append(deck.pop(0))

    hakim = rng.randrange(NUM_SEATS)
    return Deal(
        hands=(hands[0], hands[1], hands[2], hands[3]),
        pending=pending,
        residual=deck,
        hakim=hakim,
    )


def next_seat(seat: int) -> int:
    """Play goes 0 -> 1 -> 2 -> 3 -> 0."""
    return (seat + 1) % NUM_SEATS
