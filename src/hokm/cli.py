"""
Command-line interface for running Hokm rooms and bot simulations.

Usage examples (after ``pip install -e .``):

    hokm --store-dir rooms create-room --target-tricks 7
    hokm --store-dir rooms join-room ROOM_ID --user-id alice
    hokm --store-dir rooms start-deal ROOM_ID
    hokm --store-dir rooms set-trump ROOM_ID h
    hokm --store-dir rooms play-card ROOM_ID --slot 0 --card 10_h
    hokm simulate --games 20 --seed 1
"""
from __future__ import annotations

import argparse
import json
import logging
import random
from collections import Counter
from typing import Any, Dict, Optional

from .agents import GreedyBot, RandomBot
from .config import HokmConfig, load_config
from .deck import parse_cards
from .game import DEFAULT_TARGET_TRICKS
from .service import (
    BotPlayRequest,
    CreateRoomRequest,
    GameService,
    GetStateRequest,
    SetTrumpRequest,
    StartDealRequest,
)
from .store import JsonFileStore, MemoryStore

DEFAULT_STORE_DIR = "hokm_rooms"
MAX_PLAYS_PER_DEAL = 52


def _print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2), flush=True)


def _file_service(args: argparse.Namespace) -> GameService:
    cfg: HokmConfig = args.config
    store_dir = args.store_dir or cfg.store_dir or DEFAULT_STORE_DIR
    return GameService(JsonFileStore(store_dir), config=cfg)


def _run_op(args: argparse.Namespace, op: str, body: Dict[str, Any]) -> int:
    result = _file_service(args).dispatch(op, body)
    _print_json(result)
    return 1 if "error" in result else 0


def _add_room_parsers(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("create-room", help="Create a room with four empty seats.")
    p.add_argument("--room-id", type=str, default=None, help="Room id (generated if omitted).")
    p.add_argument("--name", type=str, default="", help="Display name of the room.")
    p.add_argument("--target-tricks", type=int, default=None, help="Tricks needed to win (3, 5 or 7 by convention).")
    p.add_argument("--trump-mode", type=str, default=None, help="STANDARD, SERS or NERS.")
    p.set_defaults(
        func=lambda a: _run_op(a, "create_room", {
            "id": a.room_id,
            "room_name": a.name,
            "target_tricks": a.target_tricks,
            "trump_mode": a.trump_mode,
        })
    )

    p = subparsers.add_parser("join-room", help="Seat a human player.")
    p.add_argument("room_id", type=str)
    p.add_argument("--user-id", type=str, required=True)
    p.add_argument("--display-name", type=str, default=None)
    p.set_defaults(
        func=lambda a: _run_op(a, "join_room", {
            "roomId": a.room_id,
            "userId": a.user_id,
            "displayName": a.display_name,
        })
    )

    p = subparsers.add_parser("start-deal", help="Fill empty seats with bots and deal.")
    p.add_argument("room_id", type=str)
    p.set_defaults(func=lambda a: _run_op(a, "start_deal", {"roomId": a.room_id}))

    p = subparsers.add_parser("kick", help="Replace a seat's occupant with a bot.")
    p.add_argument("room_id", type=str)
    p.add_argument("--slot", type=int, required=True)
    p.set_defaults(func=lambda a: _run_op(a, "kick_player", {"roomId": a.room_id, "slot": a.slot}))

    p = subparsers.add_parser("set-trump", help="Choose trump (c, d, h, s, STANDARD, SERS, NERS).")
    p.add_argument("room_id", type=str)
    p.add_argument("trump", type=str)
    p.set_defaults(func=lambda a: _run_op(a, "set_trump", {"roomId": a.room_id, "trump": a.trump}))

    p = subparsers.add_parser("play-card", help="Play a card token such as 10_h from a seat.")
    p.add_argument("room_id", type=str)
    p.add_argument("--slot", type=int, required=True)
    p.add_argument("--card", type=str, required=True)
    p.set_defaults(
        func=lambda a: _run_op(a, "play_card", {"roomId": a.room_id, "slot": a.slot, "card": a.card})
    )

    p = subparsers.add_parser("bot-play", help="Let the bot at a seat play one card.")
    p.add_argument("room_id", type=str)
    p.add_argument("--slot", type=int, required=True)
    p.set_defaults(func=lambda a: _run_op(a, "bot_play", {"roomId": a.room_id, "bot_slot": a.slot}))

    p = subparsers.add_parser("state", help="Print the room snapshot.")
    p.add_argument("room_id", type=str)
    p.set_defaults(func=lambda a: _run_op(a, "get_room_state", {"roomId": a.room_id}))


def simulate_game(
    service: GameService,
    target_tricks: int = DEFAULT_TARGET_TRICKS,
    trump: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Play one bot-only deal to the end and return the final room record.

    Without an explicit trump the hakim bot picks its longest suit.
    """
    room_id = service.handle(CreateRoomRequest(target_tricks=target_tricks))["roomId"]
    hakim = service.handle(StartDealRequest(room_id=room_id))["hakim_index"]
    if trump is None:
        state = service.handle(GetStateRequest(room_id=room_id))
        hand = parse_cards(state["hands"][f"bot_{hakim}"])
        trump = GreedyBot().choose_trump(hand).value
    service.handle(SetTrumpRequest(room_id=room_id, trump=trump))

    for _ in range(MAX_PLAYS_PER_DEAL):
        state = service.handle(GetStateRequest(room_id=room_id))
        room = state["room"]
        if room["phase"] == "finished":
            break
        seat = room["current_turn_index"]
        if not state["hands"].get(f"bot_{seat}"):
            break
        service.handle(BotPlayRequest(room_id=room_id, seat=seat))
    return service.handle(GetStateRequest(room_id=room_id))["room"]


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play bot-only games in memory and report team wins.",
    )
    parser.add_argument("--games", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--target-tricks", type=int, default=None, help="Tricks needed to win a game.")
    parser.add_argument("--trump", type=str, default=None, help="Fixed trump; default lets the hakim bot choose.")
    parser.add_argument(
        "--policy",
        choices=("greedy", "random"),
        default="greedy",
        help="Card policy used by every bot.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for deals and random bots.")
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> int:
    cfg: HokmConfig = args.config
    seed = args.seed if args.seed is not None else cfg.seed
    policy = RandomBot(seed=seed) if args.policy == "random" else GreedyBot()
    service = GameService(MemoryStore(), config=cfg, rng=random.Random(seed), policy=policy)
    target = args.target_tricks or cfg.default_target_tricks

    wins: Counter = Counter()
    for game in range(1, args.games + 1):
        room = simulate_game(service, target_tricks=target, trump=args.trump)
        scores = room["team_scores"]
        winner = room["winner_team"] or "none"
        wins[winner] += 1
        print(
            f"[game {game}/{args.games}] hakim={room['hakim_index']} trump={room['trump']} "
            f"teamA={scores['teamA']} teamB={scores['teamB']} winner={winner}",
            flush=True,
        )
    print(f"Team wins over {args.games} games: teamA={wins['teamA']} teamB={wins['teamB']} unfinished={wins['none']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hokm", description="Hokm rooms and bot simulations.")
    parser.add_argument("--config", type=str, default=None, help="JSON config file (HOKM_* variables override it).")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level, e.g. DEBUG or INFO.")
    parser.add_argument("--store-dir", type=str, default=None, help="Directory of the JSON room store.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_room_parsers(subparsers)
    _add_simulate_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    if args.log_level:
        cfg.log_level = args.log_level.upper()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.config = cfg
    if hasattr(args, "func"):
        return int(args.func(args) or 0)
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
