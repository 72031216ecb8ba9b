"""
State stores: where rooms live between requests.

A store keeps four kinds of records per room (room, seats, hands keyed by owner,
current trick) as the JSON-compatible dicts defined in ``hokm.persistence``.
Stores are not locked; ``hokm.service`` serialises access per room.

- MemoryStore: process-local dicts, handy for tests and simulations.
- JsonFileStore: one directory per room holding room.json, players.json,
  hands.json and trick.json.
"""
from __future__ import annotations

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol

from .deck import Card
from .errors import HokmError, StoreError
from .game import Room
from .persistence import (
    hand_from_list,
    hand_to_list,
    player_from_dict,
    player_to_dict,
    room_from_dict,
    room_to_dict,
    trick_from_list,
    trick_to_list,
)
from .play import Play
from .players import NUM_SEATS, Player, empty_seats

ROOM_JSON = "room.json"
PLAYERS_JSON = "players.json"
HANDS_JSON = "hands.json"
TRICK_JSON = "trick.json"


class StateStore(Protocol):
    """Per-room persistence used by the request layer."""

    def load_room(self, room_id: str) -> Optional[Room]:
        """Return the room, or None if it does not exist."""

    def save_room(self, room: Room) -> None:
        ...

    def load_players(self, room_id: str) -> List[Player]:
        """All four seats in seat order."""

    def save_player(self, room_id: str, player: Player) -> None:
        ...

    def load_hand(self, room_id: str, owner: str) -> Optional[List[Card]]:
        """Cards held by ``owner``, or None if the owner has no hand in this room."""

    def save_hand(self, room_id: str, owner: str, cards: List[Card]) -> None:
        ...

    def load_hands(self, room_id: str) -> Dict[str, List[Card]]:
        ...

    def load_trick(self, room_id: str) -> List[Play]:
        ...

    def save_trick(self, room_id: str, plays: List[Play]) -> None:
        ...


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Turn I/O and decoding failures into StoreError."""
    try:
        yield
    except StoreError:
        raise
    except (HokmError, OSError, ValueError, KeyError, TypeError) as exc:
        raise StoreError(f"{action} failed: {exc}") from exc


def _players_from_records(records: List[Dict[str, Any]]) -> List[Player]:
    players = empty_seats()
    for d in records:
        p = player_from_dict(d)
        if 0 <= p.seat < NUM_SEATS:
            players[p.seat] = p
    return players


class MemoryStore:
    """Dict-backed store. Records are serialised so callers never share objects with it."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Dict[str, Any]] = {}
        self._players: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self._hands: Dict[str, Dict[str, List[str]]] = {}
        self._tricks: Dict[str, List[Dict[str, Any]]] = {}

    def load_room(self, room_id: str) -> Optional[Room]:
        d = self._rooms.get(room_id)
        if d is None:
            return None
        with _store_errors(f"load room {room_id}"):
            return room_from_dict(d)

    def save_room(self, room: Room) -> None:
        self._rooms[room.id] = room_to_dict(room)

    def load_players(self, room_id: str) -> List[Player]:
        with _store_errors(f"load players of {room_id}"):
            return _players_from_records(list(self._players.get(room_id, {}).values()))

    def save_player(self, room_id: str, player: Player) -> None:
        self._players.setdefault(room_id, {})[player.seat] = player_to_dict(player)

    def load_hand(self, room_id: str, owner: str) -> Optional[List[Card]]:
        tokens = self._hands.get(room_id, {}).get(owner)
        if tokens is None:
            return None
        with _store_errors(f"load hand {owner} of {room_id}"):
            return hand_from_list(tokens)

    def save_hand(self, room_id: str, owner: str, cards: List[Card]) -> None:
        self._hands.setdefault(room_id, {})[owner] = hand_to_list(cards)

    def load_hands(self, room_id: str) -> Dict[str, List[Card]]:
        with _store_errors(f"load hands of {room_id}"):
            return {owner: hand_from_list(t) for owner, t in self._hands.get(room_id, {}).items()}

    def load_trick(self, room_id: str) -> List[Play]:
        with _store_errors(f"load trick of {room_id}"):
            return trick_from_list(self._tricks.get(room_id))

    def save_trick(self, room_id: str, plays: List[Play]) -> None:
        self._tricks[room_id] = trick_to_list(plays)


class JsonFileStore:
    """
    Directory-backed store: ``<root>/<room_id>/{room,players,hands,trick}.json``.

    Each file is rewritten whole through a temporary file and ``os.replace``.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _room_dir(self, room_id: str) -> Path:
        if not room_id or room_id in (".", "..") or Path(room_id).name != room_id:
            raise StoreError(f"Unusable room id for file store: {room_id!r}")
        return self.root / room_id

    def _read(self, room_id: str, filename: str, default: Any) -> Any:
        path = self._room_dir(room_id) / filename
        with _store_errors(f"read {path}"):
            if not path.exists():
                return default
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)

    def _write(self, room_id: str, filename: str, data: Any) -> None:
        room_dir = self._room_dir(room_id)
        path = room_dir / filename
        with _store_errors(f"write {path}"):
            room_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, path)

    def load_room(self, room_id: str) -> Optional[Room]:
        d = self._read(room_id, ROOM_JSON, None)
        if d is None:
            return None
        with _store_errors(f"decode room {room_id}"):
            return room_from_dict(d)

    def save_room(self, room: Room) -> None:
        self._write(room.id, ROOM_JSON, room_to_dict(room))

    def load_players(self, room_id: str) -> List[Player]:
        records = self._read(room_id, PLAYERS_JSON, [])
        with _store_errors(f"decode players of {room_id}"):
            return _players_from_records(records)

    def save_player(self, room_id: str, player: Player) -> None:
        records = [r for r in self._read(room_id, PLAYERS_JSON, []) if r.get("slot") != player.seat]
        records.append(player_to_dict(player))
        records.sort(key=lambda r: r.get("slot", 0))
        self._write(room_id, PLAYERS_JSON, records)

    def load_hand(self, room_id: str, owner: str) -> Optional[List[Card]]:
        tokens = self._read(room_id, HANDS_JSON, {}).get(owner)
        if tokens is None:
            return None
        with _store_errors(f"decode hand {owner} of {room_id}"):
            return hand_from_list(tokens)

    def save_hand(self, room_id: str, owner: str, cards: List[Card]) -> None:
        hands = self._read(room_id, HANDS_JSON, {})
        hands[owner] = hand_to_list(cards)
        self._write(room_id, HANDS_JSON, hands)

    def load_hands(self, room_id: str) -> Dict[str, List[Card]]:
        hands = self._read(room_id, HANDS_JSON, {})
        with _store_errors(f"decode hands of {room_id}"):
            return {owner: hand_from_list(t) for owner, t in hands.items()}

    def load_trick(self, room_id: str) -> List[Play]:
        d = self._read(room_id, TRICK_JSON, {})
        with _store_errors(f"decode trick of {room_id}"):
            return trick_from_list(d.get("plays"))

    def save_trick(self, room_id: str, plays: List[Play]) -> None:
        self._write(room_id, TRICK_JSON, {"room_id": room_id, "plays": trick_to_list(plays)})


__all__ = ["StateStore", "MemoryStore", "JsonFileStore"]
