"""Tests for store record schemas."""
import random

from hokm.deck import Card
from hokm.game import HokmTable, Phase, Team, TeamScores
from hokm.persistence import (
    SCHEMA_VERSION,
    play_from_dict,
    play_to_dict,
    player_from_dict,
    player_to_dict,
    room_from_dict,
    room_to_dict,
    scores_from_dict,
    scores_to_dict,
    trick_from_list,
    trick_to_list,
)
from hokm.play import Play, TrumpMode
from hokm.players import Bot, Human, Player, PlayerKind


def _dealt_table() -> HokmTable:
    table = HokmTable.create(target_tricks=5, trump_mode="NERS", room_id="r1", name="table one")
    table.join("alice")
    table.start_deal(random.Random(10))
    return table


def test_room_round_trip_after_deal():
    room = _dealt_table().room
    d = room_to_dict(room)
    assert d["schema_version"] == SCHEMA_VERSION
    assert d["phase"] == "choosing_hakim"
    assert d["trump_mode"] == "NERS"
    assert d["team_scores"] == {"teamA": 0, "teamB": 0}
    assert sorted(d["pending"]) == ["0", "1", "2", "3"]
    assert all(isinstance(t, str) for t in d["pending"]["0"])

    restored = room_from_dict(d)
    assert restored == room


def test_room_round_trip_finished():
    table = _dealt_table()
    room = table.room
    room.trump = table.set_trump("d")
    room.team_scores = TeamScores(5, 2)
    room.phase = Phase.FINISHED
    room.winner_team = Team.A
    room.winner_time = "2026-01-01T00:00:00+00:00"
    room.last_trick_winner = 1
    d = room_to_dict(room)
    assert d["trump"] == "d"
    assert d["winner_team"] == "teamA"
    assert room_from_dict(d) == room


def test_room_from_minimal_record():
    room = room_from_dict({"id": "bare"})
    assert room.id == "bare"
    assert room.phase == Phase.WAITING
    assert room.trump_mode == TrumpMode.STANDARD
    assert room.target_tricks == 7
    assert room.team_scores == TeamScores(0, 0)
    assert room.pending == {}


def test_player_round_trip():
    human = Player(seat=0, identity=Human("alice"), display_name="Alice", kind=PlayerKind.HUMAN, connected=False)
    bot = Player(seat=2, identity=Bot(2), display_name="BOT_2", kind=PlayerKind.BOT, connected=True)
    empty = Player(seat=3)
    assert player_to_dict(bot) == {
        "slot": 2,
        "user_id": "bot_2",
        "display_name": "BOT_2",
        "type": "bot",
        "connected": True,
    }
    for p in (human, bot, empty):
        assert player_from_dict(player_to_dict(p)) == p


def test_trick_round_trip():
    plays = [Play(seat=1, card=Card.parse("k_h"), at="t0"), Play(seat=2, card=Card.parse("10_s"), at="t1")]
    items = trick_to_list(plays)
    assert items[0] == {"slot": 1, "card": "k_h", "at": "t0"}
    assert trick_from_list(items) == plays
    assert trick_from_list(None) == []
    assert play_from_dict(play_to_dict(plays[1])) == plays[1]


def test_scores_tolerate_missing_fields():
    assert scores_from_dict(None) == TeamScores(0, 0)
    assert scores_from_dict({"teamA": 3}) == TeamScores(3, 0)
    assert scores_to_dict(TeamScores(1, 2)) == {"teamA": 1, "teamB": 2}


def test_room_target_tricks_kept_as_given():
    table = HokmTable.create(target_tricks=1, room_id="r1")
    assert room_from_dict(room_to_dict(table.room)).target_tricks == 1
    assert room_from_dict({"id": "r2", "target_tricks": 11}).target_tricks == 11
    assert room_from_dict({"id": "r3", "target_tricks": None}).target_tricks == 7
