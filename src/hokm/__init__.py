"""Hokm game engine and room server (4 seats, teams 0+1 vs 2+3)."""

__version__ = "0.1.0"

from .deck import Card, Suit, RANKS, make_deck_52, rank_value, shuffle
from .deal import deal_hokm, Deal, PENDING_ROUNDS, OPENING_ROUNDS
from .errors import (
    HokmError,
    BadRequest,
    RoomNotFound,
    SlotNotFound,
    RoomFull,
    HandNotFound,
    CardNotInHand,
    InvalidTrump,
    WrongPhase,
    BotNoHand,
    BotNoCards,
    StoreError,
)
from .hands import HandLedger
from .players import Bot, Human, Player, PlayerKind
from .play import Play, TrumpMode, parse_trump, trick_winner
from .agents import BotPolicy, GreedyBot, RandomBot
from .game import HokmTable, Phase, PlayResult, Room, Team, TeamScores, team_of
from .store import JsonFileStore, MemoryStore, StateStore
from .config import HokmConfig, load_config
from .service import GameService, parse_request
