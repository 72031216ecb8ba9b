"""
Record schemas for the state store.

Converts rooms, seats, hands and tricks to and from JSON-compatible dicts.
Cards are stored as their wire tokens ("10_h"); enums as their values.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .deck import Card, card_tokens, parse_cards
from .game import DEFAULT_TARGET_TRICKS, Phase, Room, Team, TeamScores
from .play import Play, parse_trump, trump_token
from .players import Player, PlayerKind, identity_from_key

SCHEMA_VERSION = 1


def scores_to_dict(scores: TeamScores) -> Dict[str, int]:
    return {"teamA": scores.team_a, "teamB": scores.team_b}


def scores_from_dict(d: Dict[str, Any] | None) -> TeamScores:
    d = d if isinstance(d, dict) else {}
    return TeamScores(team_a=int(d.get("teamA") or 0), team_b=int(d.get("teamB") or 0))


def play_to_dict(play: Play) -> Dict[str, Any]:
    return {"slot": play.seat, "card": str(play.card), "at": play.at}


def play_from_dict(d: Dict[str, Any]) -> Play:
    return Play(seat=int(d["slot"]), card=Card.parse(d["card"]), at=d.get("at"))


def trick_to_list(plays: List[Play]) -> List[Dict[str, Any]]:
    return [play_to_dict(p) for p in plays]


def trick_from_list(items: List[Dict[str, Any]] | None) -> List[Play]:
    return [play_from_dict(d) for d in (items or [])]


def room_to_dict(room: Room) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "id": room.id,
        "room_name": room.name,
        "target_tricks": room.target_tricks,
        "trump_mode": trump_token(room.trump_mode),
        "phase": room.phase.value,
        "hakim_index": room.hakim_index,
        "current_turn_index": room.current_turn_index,
        "trump": trump_token(room.trump),
        "team_scores": scores_to_dict(room.team_scores),
        "last_trick_winner": room.last_trick_winner,
        "winner_team": room.winner_team.value if room.winner_team is not None else None,
        "winner_time": room.winner_time,
        "deck": card_tokens(room.deck),
        "pending": {str(seat): card_tokens(cards) for seat, cards in room.pending.items()},
    }


def room_from_dict(d: Dict[str, Any]) -> Room:
    trump = d.get("trump")
    winner = d.get("winner_team")
    hakim = d.get("hakim_index")
    target = d.get("target_tricks")
    last = d.get("last_trick_winner")
    return Room(
        id=d["id"],
        name=d.get("room_name") or "",
        target_tricks=int(target) if target is not None else DEFAULT_TARGET_TRICKS,
        trump_mode=parse_trump(d.get("trump_mode") or "STANDARD"),
        phase=Phase(d.get("phase", Phase.WAITING.value)),
        hakim_index=int(hakim) if hakim is not None else None,
        current_turn_index=int(d.get("current_turn_index") or 0),
        trump=parse_trump(trump) if trump is not None else None,
        team_scores=scores_from_dict(d.get("team_scores")),
        last_trick_winner=int(last) if last is not None else None,
        winner_team=Team(winner) if winner else None,
        winner_time=d.get("winner_time"),
        deck=parse_cards(d.get("deck") or []),
        pending={int(seat): parse_cards(cards) for seat, cards in (d.get("pending") or {}).items()},
    )


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "slot": player.seat,
        "user_id": player.owner_key,
        "display_name": player.display_name,
        "type": player.kind.value,
        "connected": player.connected,
    }


def player_from_dict(d: Dict[str, Any]) -> Player:
    user_id = d.get("user_id")
    kind = PlayerKind(d.get("type") or PlayerKind.EMPTY.value)
    return Player(
        seat=int(d["slot"]),
        identity=identity_from_key(user_id) if user_id and kind != PlayerKind.EMPTY else None,
        display_name=d.get("display_name"),
        kind=kind,
        connected=bool(d.get("connected", False)),
    )


def hand_to_list(cards: List[Card]) -> List[str]:
    return card_tokens(cards)


def hand_from_list(tokens: List[str] | None) -> List[Card]:
    return parse_cards(tokens or [])


__all__ = [
    "SCHEMA_VERSION",
    "hand_from_list",
    "hand_to_list",
    "play_from_dict",
    "play_to_dict",
    "player_from_dict",
    "player_to_dict",
    "room_from_dict",
    "room_to_dict",
    "scores_from_dict",
    "scores_to_dict",
    "trick_from_list",
    "trick_to_list",
]
