"""
Request layer: typed requests in, result dicts out.

Every operation runs under its room's lock for the whole load → compute → save
sequence, so two plays can never both see a three-card trick and two joiners
can never take the same seat. Rooms do not share locks and run in parallel.

Two entry points:
- ``GameService.handle(request)`` takes a request dataclass, returns a result
  dict and raises ``HokmError`` on failure.
- ``GameService.dispatch(op, body)`` takes an operation name and a raw dict
  payload and always returns a dict (``{"error": kind, "message": ...}`` on
  failure).
"""
from __future__ import annotations

import logging
import random
import threading
import uuid
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .agents import BotPolicy, GreedyBot
from .config import HokmConfig
from .deck import Card, card_tokens
from .errors import BadRequest, HokmError, RoomNotFound
from .game import HokmTable, PlayResult
from .hands import HandLedger
from .persistence import player_to_dict, room_to_dict, scores_to_dict, trick_to_list
from .play import trump_token
from .players import BOT_PREFIX, Bot
from .store import MemoryStore, StateStore

logger = logging.getLogger(__name__)


# ---- requests ----


@dataclass(frozen=True)
class CreateRoomRequest:
    target_tricks: Optional[int] = None
    trump_mode: Optional[str] = None
    room_id: Optional[str] = None
    room_name: str = ""


@dataclass(frozen=True)
class JoinRoomRequest:
    room_id: str
    user_id: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class StartDealRequest:
    room_id: str


@dataclass(frozen=True)
class KickPlayerRequest:
    room_id: str
    seat: int


@dataclass(frozen=True)
class SetTrumpRequest:
    room_id: str
    trump: str


@dataclass(frozen=True)
class PlayCardRequest:
    room_id: str
    seat: int
    card: Card


@dataclass(frozen=True)
class BotPlayRequest:
    room_id: str
    seat: int


@dataclass(frozen=True)
class GetStateRequest:
    room_id: str


Request = Union[
    CreateRoomRequest,
    JoinRoomRequest,
    StartDealRequest,
    KickPlayerRequest,
    SetTrumpRequest,
    PlayCardRequest,
    BotPlayRequest,
    GetStateRequest,
]


# ---- payload parsing ----


def _field(body: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if body.get(name) is not None:
            return body[name]
    return None


def _require_str(body: Mapping[str, Any], *names: str) -> str:
    value = _field(body, *names)
    if not isinstance(value, str) or not value.strip():
        raise BadRequest(f"Missing or invalid field: {names[0]}")
    return value


def _optional_str(body: Mapping[str, Any], *names: str) -> Optional[str]:
    value = _field(body, *names)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f"Invalid field: {names[0]}")
    return value


def _require_int(body: Mapping[str, Any], *names: str) -> int:
    value = _field(body, *names)
    if value is None:
        raise BadRequest(f"Missing field: {names[0]}")
    return _as_int(value, names[0])


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise BadRequest(f"Invalid integer for {name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid integer for {name}: {value!r}") from None


def _parse_create(body: Mapping[str, Any]) -> CreateRoomRequest:
    target = _field(body, "target_tricks", "targetTricks")
    target_tricks = _as_int(target, "target_tricks") if target is not None else None
    if target_tricks is not None and target_tricks < 1:
        raise BadRequest(f"target_tricks must be positive, got {target_tricks}")
    return CreateRoomRequest(
        target_tricks=target_tricks,
        trump_mode=_optional_str(body, "trump_mode", "trumpMode"),
        room_id=_optional_str(body, "id", "roomId", "room_id"),
        room_name=_optional_str(body, "room_name", "roomName") or "",
    )


def _parse_join(body: Mapping[str, Any]) -> JoinRoomRequest:
    user_id = _require_str(body, "userId", "user_id")
    if user_id.startswith(BOT_PREFIX):
        raise BadRequest(f"User ids may not start with {BOT_PREFIX!r}")
    return JoinRoomRequest(
        room_id=_require_str(body, "roomId", "room_id"),
        user_id=user_id,
        display_name=_optional_str(body, "displayName", "display_name"),
    )


def _parse_play(body: Mapping[str, Any]) -> PlayCardRequest:
    token = _require_str(body, "card")
    try:
        card = Card.parse(token)
    except ValueError as exc:
        raise BadRequest(str(exc)) from None
    return PlayCardRequest(
        room_id=_require_str(body, "roomId", "room_id"),
        seat=_require_int(body, "slot", "seat"),
        card=card,
    )


def _parse_trump(body: Mapping[str, Any]) -> SetTrumpRequest:
    trump = _field(body, "trump")
    if trump is None:
        raise BadRequest("Missing field: trump")
    # Non-string values are left for the table to reject as invalid_trump.
    return SetTrumpRequest(room_id=_require_str(body, "roomId", "room_id"), trump=trump)


_PARSERS: Dict[str, Callable[[Mapping[str, Any]], Request]] = {
    "create_room": _parse_create,
    "join_room": _parse_join,
    "start_deal": lambda b: StartDealRequest(room_id=_require_str(b, "roomId", "room_id")),
    "kick_player": lambda b: KickPlayerRequest(
        room_id=_require_str(b, "roomId", "room_id"),
        seat=_require_int(b, "slot", "seat"),
    ),
    "set_trump": _parse_trump,
    "play_card": _parse_play,
    "bot_play": lambda b: BotPlayRequest(
        room_id=_require_str(b, "roomId", "room_id"),
        seat=_require_int(b, "bot_slot", "slot", "seat"),
    ),
    "get_room_state": lambda b: GetStateRequest(room_id=_require_str(b, "roomId", "room_id")),
}

OPERATIONS = tuple(_PARSERS)


def parse_request(op: str, body: Mapping[str, Any] | None) -> Request:
    """Validate a raw payload for operation ``op`` into its request dataclass."""
    parser = _PARSERS.get(op)
    if parser is None:
        raise BadRequest(f"Unknown operation: {op!r}")
    if body is None:
        body = {}
    if not isinstance(body, Mapping):
        raise BadRequest("Request body must be an object")
    return parser(body)


# ---- results ----


def play_result_to_dict(result: PlayResult) -> Dict[str, Any]:
    out: Dict[str, Any] = {"ok": True}
    if result.trick_complete:
        out["winnerSlot"] = result.winner_seat
        out["team_scores"] = scores_to_dict(result.team_scores)
        out["finished"] = result.finished
        out["winner_team"] = result.winner_team.value if result.winner_team is not None else None
    return out


# ---- service ----


class GameService:
    """
    Runs requests against a state store.

    Usage:
        service = GameService(MemoryStore())
        room_id = service.handle(CreateRoomRequest(target_tricks=7))["roomId"]
        service.dispatch("join_room", {"roomId": room_id, "userId": "u1"})
    """

    def __init__(
        self,
        store: StateStore | None = None,
        config: HokmConfig | None = None,
        rng: random.Random | None = None,
        policy: BotPolicy | None = None,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self.config = config or HokmConfig()
        self.store: StateStore = store if store is not None else MemoryStore()
        self.rng = rng or random.Random(self.config.seed)
        self.policy: BotPolicy = policy or GreedyBot()
        self.clock = clock
        # Entries vanish once no request holds the lock.
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()
        self._handlers: Dict[type, Callable[[Any], Dict[str, Any]]] = {
            CreateRoomRequest: self.create_room,
            JoinRoomRequest: self.join_room,
            StartDealRequest: self.start_deal,
            KickPlayerRequest: self.kick_player,
            SetTrumpRequest: self.set_trump,
            PlayCardRequest: self.play_card,
            BotPlayRequest: self.bot_play,
            GetStateRequest: self.get_state,
        }

    def room_lock(self, room_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[room_id] = lock
            return lock

    def handle(self, request: Request) -> Dict[str, Any]:
        handler = self._handlers.get(type(request))
        if handler is None:
            raise BadRequest(f"Unsupported request: {type(request).__name__}")
        logger.debug("Handling %s", request)
        return handler(request)

    def dispatch(self, op: str, body: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        """Parse and run one operation; HokmErrors come back as an error dict."""
        try:
            return self.handle(parse_request(op, body))
        except HokmError as exc:
            logger.warning("%s failed: %s (%s)", op, exc.kind, exc.message)
            return exc.to_dict()

    # ---- load / save ----

    def _load_table(self, room_id: str) -> HokmTable:
        room = self.store.load_room(room_id)
        if room is None:
            raise RoomNotFound(f"Room {room_id} not found")
        players = self.store.load_players(room_id)
        owners: list[str] = []
        for p in players:
            if p.owner_key is not None:
                owners.append(p.owner_key)
            bot_key = Bot(p.seat).key
            if bot_key not in owners:
                owners.append(bot_key)
        hands: Dict[str, list[Card]] = {}
        for owner in owners:
            cards = self.store.load_hand(room_id, owner)
            if cards is not None:
                hands[owner] = cards
        trick = self.store.load_trick(room_id)
        return HokmTable(room, players=players, hands=HandLedger(hands), trick=trick)

    def _save_table(self, table: HokmTable, trick: bool = True) -> None:
        room_id = table.room.id
        for seat in sorted(table.dirty_seats):
            self.store.save_player(room_id, table.players[seat])
        table.dirty_seats.clear()
        for owner in sorted(table.hands.dirty):
            self.store.save_hand(room_id, owner, table.hands.get(owner))
        table.hands.dirty.clear()
        if trick:
            self.store.save_trick(room_id, table.trick)
        self.store.save_room(table.room)

    # ---- operations ----

    def create_room(self, req: CreateRoomRequest) -> Dict[str, Any]:
        room_id = req.room_id or str(uuid.uuid4())
        with self.room_lock(room_id):
            if self.store.load_room(room_id) is not None:
                raise BadRequest(f"Room {room_id} already exists")
            table = HokmTable.create(
                target_tricks=req.target_tricks or self.config.default_target_tricks,
                trump_mode=req.trump_mode or self.config.default_trump_mode,
                room_id=room_id,
                name=req.room_name,
            )
            self._save_table(table)
        return {"ok": True, "roomId": room_id}

    def join_room(self, req: JoinRoomRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            seat = table.join(req.user_id, req.display_name)
            self._save_table(table, trick=False)
        return {"ok": True, "slot": seat, "roomId": req.room_id}

    def start_deal(self, req: StartDealRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            hakim = table.start_deal(self.rng)
            self._save_table(table)
        return {"ok": True, "hakim_index": hakim}

    def kick_player(self, req: KickPlayerRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            table.kick(req.seat)
            self._save_table(table, trick=False)
        return {"ok": True}

    def set_trump(self, req: SetTrumpRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            trump = table.set_trump(req.trump)
            self._save_table(table, trick=False)
        return {"ok": True, "trump": trump_token(trump)}

    def play_card(self, req: PlayCardRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            result = table.play_card(req.seat, req.card, now=self.clock)
            self._save_table(table)
        return play_result_to_dict(result)

    def bot_play(self, req: BotPlayRequest) -> Dict[str, Any]:
        with self.room_lock(req.room_id):
            table = self._load_table(req.room_id)
            result = table.bot_play(req.seat, self.policy, now=self.clock)
            self._save_table(table)
        return {"ok": True, "chosen": str(result.card), "result": play_result_to_dict(result)}

    def get_state(self, req: GetStateRequest) -> Dict[str, Any]:
        """Read-only snapshot: room record, seats, every hand in the room, current trick."""
        with self.room_lock(req.room_id):
            room = self.store.load_room(req.room_id)
            if room is None:
                raise RoomNotFound(f"Room {req.room_id} not found")
            players = self.store.load_players(req.room_id)
            hands = self.store.load_hands(req.room_id)
            trick = self.store.load_trick(req.room_id)
        return {
            "room": room_to_dict(room),
            "players": [player_to_dict(p) for p in players],
            "hands": {owner: card_tokens(cards) for owner, cards in sorted(hands.items())},
            "trick": {"room_id": req.room_id, "plays": trick_to_list(trick)},
        }


__all__ = [
    "BotPlayRequest",
    "CreateRoomRequest",
    "GameService",
    "GetStateRequest",
    "JoinRoomRequest",
    "KickPlayerRequest",
    "OPERATIONS",
    "PlayCardRequest",
    "Request",
    "SetTrumpRequest",
    "StartDealRequest",
    "parse_request",
    "play_result_to_dict",
]
