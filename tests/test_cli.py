"""Tests for the headless runner."""
import json

from roomfire.cli import main


def test_summary(capsys):
    assert main(["--seed", "1", "--seconds", "10"]) == 0
    out = capsys.readouterr().out
    assert "seed           1" in out
    assert "outcome" in out
    assert "fires spawned" in out


def test_json_snapshot(capsys):
    assert main(["--seed", "2", "--seconds", "5", "--json"]) == 0
    snap = json.loads(capsys.readouterr().out)
    assert snap["seed"] == 2
    assert snap["tick"] == 100
    assert snap["active_fires"] == len(snap["fires"])


def test_hose_puts_out_a_lone_fire(tmp_path, capsys):
    path = tmp_path / "calm.json"
    path.write_text(json.dumps({
        "room": {"type": "rect", "min": [0, 0], "max": [10, 10]},
        "fire": {"spread_chance": 0.0},
        "thermal": {"background_heating": False},
    }))
    assert main(["--config", str(path), "--seed", "3", "--hose", "0.5",
                 "--seconds", "10", "--json"]) == 0
    snap = json.loads(capsys.readouterr().out)
    assert snap["outcome"] == "extinguished"
    assert snap["active_fires"] == 0


def test_bad_config_exits_2(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"spread": {"max_fires": 0}}))
    assert main(["--config", str(path)]) == 2
    assert "max_fires" in capsys.readouterr().err


def test_start_outside_room_exits_2(capsys):
    assert main(["--start", "500", "500", "--seconds", "1"]) == 2
    assert "cannot start fire" in capsys.readouterr().err


def test_wrongly_typed_config_exits_2(tmp_path, capsys):
    path = tmp_path / "typo.json"
    path.write_text(json.dumps({"spread": {"max_fires": "3"}}))
    assert main(["--config", str(path)]) == 2
    assert "Invalid config value" in capsys.readouterr().err
