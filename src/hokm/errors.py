"""
Error taxonomy shared by the table, the store and the request layer.

Every error carries a stable ``kind`` string that the request layer reports
back to callers (e.g. ``{"error": "card_not_in_hand", ...}``).
"""
from __future__ import annotations


class HokmError(Exception):
    """Base class for all game-level failures. Terminal for the current operation."""

    kind = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class BadRequest(HokmError):
    kind = "bad_request"


class RoomNotFound(HokmError):
    kind = "room_not_found"


class SlotNotFound(HokmError):
    kind = "slot_not_found"


class RoomFull(HokmError):
    kind = "room_full"


class HandNotFound(HokmError):
    kind = "hand_not_found"


class CardNotInHand(HokmError):
    kind = "card_not_in_hand"


class InvalidTrump(HokmError):
    kind = "invalid_trump"


class WrongPhase(HokmError):
    kind = "wrong_phase"


class BotNoHand(HokmError):
    kind = "bot_no_hand"


class BotNoCards(HokmError):
    kind = "bot_no_cards"


class StoreError(HokmError):
    """Opaque failure raised by a state store; may leave a room partially updated."""

    kind = "store_error"


__all__ = [
    "HokmError",
    "BadRequest",
    "RoomNotFound",
    "SlotNotFound",
    "RoomFull",
    "HandNotFound",
    "CardNotInHand",
    "InvalidTrump",
    "WrongPhase",
    "BotNoHand",
    "BotNoCards",
    "StoreError",
]
