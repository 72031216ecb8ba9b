"""Tests for the in-memory and JSON-directory state stores."""
from pathlib import Path

import pytest

from hokm.deck import parse_cards
from hokm.errors import StoreError
from hokm.game import HokmTable, Phase
from hokm.play import Play
from hokm.players import Human, Player, PlayerKind
from hokm.store import HANDS_JSON, ROOM_JSON, JsonFileStore, MemoryStore


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "rooms")


def test_missing_room_and_defaults(store):
    assert store.load_room("nope") is None
    players = store.load_players("nope")
    assert [p.seat for p in players] == [0, 1, 2, 3]
    assert all(p.is_empty() for p in players)
    assert store.load_hand("nope", "alice") is None
    assert store.load_hands("nope") == {}
    assert store.load_trick("nope") == []


def test_room_round_trip(store):
    room = HokmTable.create(target_tricks=3, room_id="r1").room
    store.save_room(room)
    assert store.load_room("r1") == room

    room.phase = Phase.CHOOSING_HAKIM
    store.save_room(room)
    assert store.load_room("r1").phase == Phase.CHOOSING_HAKIM


def test_players_saved_per_seat(store):
    store.save_player("r1", Player(seat=2, identity=Human("bob"), display_name="Bob", kind=PlayerKind.HUMAN, connected=True))
    players = store.load_players("r1")
    assert players[2].owner_key == "bob"
    assert players[2].display_name == "Bob"
    assert players[0].is_empty()

    store.save_player("r1", Player(seat=2))
    assert store.load_players("r1")[2].is_empty()


def test_hands_keyed_by_owner(store):
    store.save_hand("r1", "alice", parse_cards(["2_c", "a_h"]))
    store.save_hand("r1", "bot_1", [])
    assert store.load_hand("r1", "alice") == parse_cards(["2_c", "a_h"])
    assert store.load_hand("r1", "bot_1") == []
    assert store.load_hand("r1", "bot_2") is None
    assert store.load_hands("r1") == {"alice": parse_cards(["2_c", "a_h"]), "bot_1": []}


def test_trick_round_trip(store):
    plays = [Play(seat=0, card=parse_cards(["q_s"])[0], at="t0")]
    store.save_trick("r1", plays)
    assert store.load_trick("r1") == plays
    store.save_trick("r1", [])
    assert store.load_trick("r1") == []


def test_rooms_are_isolated(store):
    store.save_hand("r1", "alice", parse_cards(["2_c"]))
    assert store.load_hand("r2", "alice") is None


def test_memory_store_does_not_alias_objects():
    store = MemoryStore()
    room = HokmTable.create(room_id="r1").room
    store.save_room(room)
    room.phase = Phase.FINISHED
    assert store.load_room("r1").phase == Phase.WAITING

    hand = parse_cards(["2_c"])
    store.save_hand("r1", "alice", hand)
    store.load_hand("r1", "alice").clear()
    assert store.load_hand("r1", "alice") == hand


def test_json_store_layout(tmp_path: Path):
    store = JsonFileStore(tmp_path)
    store.save_room(HokmTable.create(room_id="r1").room)
    store.save_hand("r1", "alice", parse_cards(["2_c"]))
    assert (tmp_path / "r1" / ROOM_JSON).exists()
    assert (tmp_path / "r1" / HANDS_JSON).exists()
    assert not list((tmp_path / "r1").glob("*.tmp"))


def test_json_store_corrupt_file_is_store_error(tmp_path: Path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "r1").mkdir()
    (tmp_path / "r1" / ROOM_JSON).write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        store.load_room("r1")


def test_json_store_bad_record_is_store_error(tmp_path: Path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "r1").mkdir()
    (tmp_path / "r1" / ROOM_JSON).write_text('{"id": "r1", "trump": "x"}', encoding="utf-8")
    with pytest.raises(StoreError):
        store.load_room("r1")


@pytest.mark.parametrize("room_id", ["", "..", "a/b", "../escape"])
def test_json_store_rejects_path_like_ids(tmp_path: Path, room_id):
    with pytest.raises(StoreError):
        JsonFileStore(tmp_path).load_room(room_id)
