"""
Hand ledger: cards held by each owner in a room.

Removing a card is the only legality check for a play; any card in hand may be
played, there is no suit-following rule.
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from .deck import Card
from .errors import CardNotInHand, HandNotFound


class HandLedger:
    """Owner key -> list of cards. Remembers which owners changed since the last save."""

    def __init__(self, hands: Dict[str, List[Card]] | None = None) -> None:
        self._hands: Dict[str, List[Card]] = {k: list(v) for k, v in (hands or {}).items()}
        self.dirty: set[str] = set()

    def has(self, owner: str) -> bool:
        return owner in self._hands

    def get(self, owner: str) -> List[Card]:
        if owner not in self._hands:
            raise HandNotFound(f"No hand for {owner}")
        return self._hands[owner]

    def owners(self) -> List[str]:
        return list(self._hands.keys())

    def deal(self, owner: str, cards: Iterable[Card]) -> None:
        self._hands[owner] = list(cards)
        self.dirty.add(owner)

    def remove(self, owner: str, card: Card) -> None:
        hand = self.get(owner)
        if card not in hand:
            raise CardNotInHand(f"Card {card} not in hand of {owner}")
        hand.remove(card)
        self.dirty.add(owner)

    def append(self, owner: str, cards: Iterable[Card]) -> None:
        self._hands.setdefault(owner, []).extend(cards)
        self.dirty.add(owner)

    def as_dict(self) -> Dict[str, List[Card]]:
        return {k: list(v) for k, v in self._hands.items()}

    def total_cards(self) -> int:
        return sum(len(h) for h in self._hands.values())
