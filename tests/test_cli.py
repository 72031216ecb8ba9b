import json

import pytest

from hokm.cli import main

HOKM_VARS = ("HOKM_TARGET_TRICKS", "HOKM_TRUMP_MODE", "HOKM_STORE_DIR", "HOKM_LOG_LEVEL", "HOKM_SEED")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in HOKM_VARS:
        monkeypatch.delenv(name, raising=False)


def _run(capsys, *argv) -> tuple[int, dict]:
    code = main(list(argv))
    out = capsys.readouterr().out
    return code, json.loads(out)


def test_room_commands_share_a_store_dir(tmp_path, capsys):
    store = str(tmp_path)
    code, out = _run(capsys, "--store-dir", store, "create-room", "--room-id", "r1", "--target-tricks", "3")
    assert code == 0
    assert out == {"ok": True, "roomId": "r1"}

    code, out = _run(capsys, "--store-dir", store, "join-room", "r1", "--user-id", "alice")
    assert code == 0
    assert out["slot"] == 0

    code, out = _run(capsys, "--store-dir", store, "start-deal", "r1")
    assert code == 0
    hakim = out["hakim_index"]

    code, out = _run(capsys, "--store-dir", store, "set-trump", "r1", "spades")
    assert code == 0
    assert out["trump"] == "s"

    code, out = _run(capsys, "--store-dir", store, "state", "r1")
    assert code == 0
    assert out["room"]["phase"] == "playing"
    assert out["room"]["hakim_index"] == hakim
    assert out["room"]["target_tricks"] == 3
    assert len(out["hands"]["alice"]) == 13

    code, out = _run(capsys, "--store-dir", store, "bot-play", "r1", "--slot", "2")
    assert code == 0
    assert out["ok"]


def test_errors_exit_nonzero(tmp_path, capsys):
    code, out = _run(capsys, "--store-dir", str(tmp_path), "join-room", "nope", "--user-id", "alice")
    assert code == 1
    assert out["error"] == "room_not_found"

    _run(capsys, "--store-dir", str(tmp_path), "create-room", "--room-id", "r1")
    code, out = _run(capsys, "--store-dir", str(tmp_path), "play-card", "r1", "--slot", "0", "--card", "zz")
    assert code == 1
    assert out["error"] == "bad_request"


def test_simulate_reports_team_wins(capsys):
    assert main(["simulate", "--games", "2", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    lines = out.strip().splitlines()
    assert lines[0].startswith("[game 1/2]")
    assert "Team wins over 2 games" in lines[-1]
    assert "unfinished=0" in lines[-1]


def test_simulate_with_random_policy_and_fixed_trump(capsys):
    assert main(["simulate", "--games", "1", "--seed", "4", "--policy", "random", "--trump", "h", "--target-tricks", "3"]) == 0
    out = capsys.readouterr().out
    assert "trump=h" in out
    assert "unfinished=0" in out
