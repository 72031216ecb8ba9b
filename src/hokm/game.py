"""
Room orchestration: seats → deal → trump → tricks → finish.

A ``HokmTable`` is the whole mutable state of one room (room record, seats,
hand ledger, current trick). Its methods are the game operations; they raise
``HokmError`` subclasses before mutating anything whenever the failure can be
detected up front. Callers are responsible for serialising access per room.
"""
from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

from .agents import BotPolicy, GreedyBot
from .deal import deal_hokm, next_seat
from .deck import Card
from .errors import BadRequest, BotNoCards, BotNoHand, RoomFull, SlotNotFound, WrongPhase
from .hands import HandLedger
from .play import Play, Trump, TrumpMode, parse_trump, trick_winner, trump_token
from .players import NUM_SEATS, Bot, Player, PlayerKind, empty_seats

logger = logging.getLogger(__name__)

DEFAULT_TARGET_TRICKS = 7
TRICK_SIZE = 4


class Phase(str, Enum):
    """Phases only move forward; a new deal is the one way back to the start."""
    WAITING = "waiting"
    CHOOSING_HAKIM = "choosing_hakim"
    PLAYING = "playing"
    FINISHED = "finished"


class Team(str, Enum):
    A = "teamA"
    B = "teamB"


def team_of(seat: int) -> Team:
    """Seats 0 and 1 play for Team A, seats 2 and 3 for Team B."""
    return Team.A if seat in (0, 1) else Team.B


@dataclass
class TeamScores:
    """Tricks won by each team in the current deal."""

    team_a: int = 0
    team_b: int = 0

    def add_trick(self, team: Team) -> None:
        if team == Team.A:
            self.team_a += 1
        else:
            self.team_b += 1

    def get(self, team: Team) -> int:
        return self.team_a if team == Team.A else self.team_b

    def leader_at(self, target: int) -> Team | None:
        """Team that has reached ``target``, if any."""
        if self.team_a >= target:
            return Team.A
        if self.team_b >= target:
            return Team.B
        return None

    def total(self) -> int:
        return self.team_a + self.team_b


@dataclass
class Room:
    """Room record. ``deck`` and ``pending`` are only meaningful around a deal."""

    id: str
    name: str = ""
    target_tricks: int = DEFAULT_TARGET_TRICKS
    trump_mode: Trump = TrumpMode.STANDARD
    phase: Phase = Phase.WAITING
    hakim_index: Optional[int] = None
    current_turn_index: int = 0
    trump: Optional[Trump] = None
    team_scores: TeamScores = field(default_factory=TeamScores)
    last_trick_winner: Optional[int] = None
    winner_team: Optional[Team] = None
    winner_time: Optional[str] = None
    deck: List[Card] = field(default_factory=list)
    pending: Dict[int, List[Card]] = field(default_factory=dict)

    def effective_trump(self) -> Trump:
        return self.trump if self.trump is not None else self.trump_mode


@dataclass
class PlayResult:
    """Outcome of one play. Trick fields are set only when the play completed a trick."""

    seat: int
    card: Card
    trick_complete: bool = False
    winner_seat: Optional[int] = None
    team_scores: Optional[TeamScores] = None
    finished: bool = False
    winner_team: Optional[Team] = None


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HokmTable:
    """Mutable state of one room: record, seats, hands and the trick in progress."""

    def __init__(
        self,
        room: Room,
        players: List[Player] | None = None,
        hands: HandLedger | None = None,
        trick: List[Play] | None = None,
    ) -> None:
        self.room = room
        self.players: List[Player] = players if players is not None else empty_seats()
        self.hands = hands if hands is not None else HandLedger()
        self.trick: List[Play] = list(trick or [])
        self.dirty_seats: set[int] = set()

    # ---- creation / seating ----

    @classmethod
    def create(
        cls,
        target_tricks: int = DEFAULT_TARGET_TRICKS,
        trump_mode: Trump | str = TrumpMode.STANDARD,
        room_id: str | None = None,
        name: str = "",
    ) -> "HokmTable":
        """
        New room in ``waiting`` with four empty seats. No shuffling yet.
        Any positive ``target_tricks`` is accepted; 3, 5 and 7 are the usual values.
        """
        if int(target_tricks) < 1:
            raise BadRequest(f"target_tricks must be positive, got {target_tricks}")
        room = Room(
            id=room_id or str(uuid.uuid4()),
            name=name,
            target_tricks=int(target_tricks),
            trump_mode=parse_trump(trump_mode),
        )
        table = cls(room)
        table.dirty_seats.update(range(NUM_SEATS))
        logger.info("Created room %s (target=%d, mode=%s)", room.id, room.target_tricks, trump_token(room.trump_mode))
        return table

    def player(self, seat: int) -> Player:
        if not isinstance(seat, int) or not 0 <= seat < len(self.players):
            raise SlotNotFound(f"Seat {seat} does not exist")
        return self.players[seat]

    def seat_of(self, user_id: str) -> int | None:
        """Seat held by human ``user_id``, connected or not."""
        for p in self.players:
            if p.kind == PlayerKind.HUMAN and p.owner_key == user_id:
                return p.seat
        return None

    def join(self, user_id: str, display_name: str | None = None) -> int:
        """
        Seat a human: the seat they already hold, else first empty seat, else
        first disconnected human seat. Connected humans and bots are never
        displaced and a user never holds two seats.
        """
        own = self.seat_of(user_id)
        if own is not None:
            p = self.players[own]
            if not p.connected or (display_name and display_name != p.display_name):
                p.seat_human(user_id, display_name or p.display_name)
                self.dirty_seats.add(own)
            logger.info("%s rejoined room %s at seat %d", user_id, self.room.id, own)
            return own

        chosen: Player | None = None
        for p in self.players:
            if p.is_empty():
                chosen = p
                break
        if chosen is None:
            for p in self.players:
                if p.is_reclaimable():
                    chosen = p
                    break
        if chosen is None:
            raise RoomFull(f"Room {self.room.id} is full")
        chosen.seat_human(user_id, display_name)
        self.dirty_seats.add(chosen.seat)
        logger.info("%s joined room %s at seat %d", user_id, self.room.id, chosen.seat)
        return chosen.seat

    def kick(self, seat: int) -> None:
        """Replace whoever sits at ``seat`` with that seat's bot, holding an empty hand."""
        p = self.player(seat)
        p.seat_bot()
        self.hands.deal(p.owner_key, [])
        self.dirty_seats.add(seat)
        logger.info("Seat %d of room %s handed to %s", seat, self.room.id, p.owner_key)

    def disconnect(self, seat: int) -> None:
        """Mark a human seat as dropped so a later joiner can reclaim it."""
        p = self.player(seat)
        if p.kind == PlayerKind.HUMAN:
            p.connected = False
            self.dirty_seats.add(seat)

    def owner_of(self, seat: int) -> str:
        p = self.player(seat)
        if p.is_empty():
            raise SlotNotFound(f"Seat {seat} is not assigned")
        return p.owner_key

    # ---- deal / trump ----

    def start_deal(self, rng: random.Random | None = None) -> int:
        """
        Fill empty seats with bots, deal, draw the hakim and reset the score.
        Re-dealing an ongoing room discards the previous hands.
        """
        rng = rng or random.Random()
        for p in self.players:
            if p.is_empty():
                p.seat_bot()
                self.dirty_seats.add(p.seat)

        deal = deal_hokm(rng=rng)
        for seat, hand in enumerate(deal.hands):
            self.hands.deal(self.players[seat].owner_key, hand)

        room = self.room
        room.deck = list(deal.residual)
        room.pending = {seat: list(cards) for seat, cards in deal.pending.items()}
        room.phase = Phase.CHOOSING_HAKIM
        room.hakim_index = deal.hakim
        room.current_turn_index = deal.hakim
        room.trump = None
        room.last_trick_winner = None
        room.winner_team = None
        room.winner_time = None
        room.team_scores = TeamScores()
        self.trick = []
        logger.info("Dealt room %s, hakim is seat %d", room.id, deal.hakim)
        return deal.hakim

    def set_trump(self, trump: Trump | str) -> Trump:
        """Fix the trump, release every pending reserve into its seat's hand and start play."""
        chosen = parse_trump(trump)
        room = self.room
        if room.phase != Phase.CHOOSING_HAKIM:
            raise WrongPhase(f"Cannot choose trump during {room.phase.value}")
        room.trump = chosen
        room.phase = Phase.PLAYING
        for seat in range(NUM_SEATS):
            owner = self.players[seat].owner_key or Bot(seat).key
            self.hands.append(owner, room.pending.get(seat, []))
        room.pending = {}
        logger.info("Room %s trump set to %s by hakim seat %s", room.id, trump_token(chosen), room.hakim_index)
        return chosen

    # ---- play ----

    def current_player(self) -> int:
        return self.room.current_turn_index

    def play_card(self, seat: int, card: Card, now: Callable[[], str] | None = None) -> PlayResult:
        """
        Play ``card`` from the hand of whoever sits at ``seat``.

        Hand membership is the only check. The turn always advances by one; once
        the trick holds four plays it is scored and the winner leads next.
        """
        owner = self.owner_of(seat)
        self.hands.remove(owner, card)
        stamp = (now or _utc_now)()
        self.trick.append(Play(seat=seat, card=card, at=stamp))

        room = self.room
        room.current_turn_index = next_seat(room.current_turn_index)
        result = PlayResult(seat=seat, card=card)

        if len(self.trick) >= TRICK_SIZE:
            winner = trick_winner(self.trick, room.effective_trump())
            self.trick = []
            room.team_scores.add_trick(team_of(winner))
            room.last_trick_winner = winner
            room.current_turn_index = winner
            result.trick_complete = True
            result.winner_seat = winner
            result.team_scores = TeamScores(room.team_scores.team_a, room.team_scores.team_b)
            logger.debug(
                "Room %s trick to seat %d (teamA=%d, teamB=%d)",
                room.id, winner, room.team_scores.team_a, room.team_scores.team_b,
            )

            leader = room.team_scores.leader_at(room.target_tricks)
            if leader is not None and room.phase != Phase.FINISHED:
                room.phase = Phase.FINISHED
                room.winner_team = leader
                room.winner_time = stamp
                result.finished = True
                result.winner_team = leader
                logger.info("Room %s finished, %s wins", room.id, leader.value)
        return result

    def bot_play(
        self,
        seat: int,
        policy: BotPolicy | None = None,
        now: Callable[[], str] | None = None,
    ) -> PlayResult:
        """Let the bot at ``seat`` pick a card and play it like any other play."""
        owner = Bot(seat).key
        if not self.hands.has(owner):
            raise BotNoHand(f"No hand for {owner}")
        hand = self.hands.get(owner)
        if not hand:
            raise BotNoCards(f"{owner} has no cards left")
        policy = policy or GreedyBot()
        card = policy.choose_card(list(hand), list(self.trick))
        return self.play_card(seat, card, now=now)

    # ---- views ----

    def hand_of(self, seat: int) -> List[Card]:
        return list(self.hands.get(self.owner_of(seat)))

    def cards_in_play(self) -> List[Card]:
        """Every card currently tracked: hands, pending reserves, trick and residual deck."""
        cards: List[Card] = []
        for p in self.players:
            if p.owner_key is not None and self.hands.has(p.owner_key):
                cards.extend(self.hands.get(p.owner_key))
        for reserve in self.room.pending.values():
            cards.extend(reserve)
        cards.extend(play.card for play in self.trick)
        cards.extend(self.room.deck)
        return cards


__all__ = [
    "DEFAULT_TARGET_TRICKS",
    "HokmTable",
    "Phase",
    "PlayResult",
    "Room",
    "Team",
    "TeamScores",
    "team_of",
]
