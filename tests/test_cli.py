"""
Tests for the simulation CLI.
"""

import sys

import pytest

from cashflow.cli import main, simulate_game
from cashflow.data import JsonSnapshotStore


def test_simulation_stops_at_turn_limit():
    snapshot = simulate_game(num_players=2, seed=5, verbose=False, max_turns=30)

    assert snapshot.turn_number == 30
    assert not snapshot.is_over


def test_simulation_is_reproducible():
    first = simulate_game(num_players=3, agent_type="random", seed=11, verbose=False, max_turns=20)
    second = simulate_game(num_players=3, agent_type="random", seed=11, verbose=False, max_turns=20)

    def summary(snapshot):
        return [(p.cash, p.position, p.rat_race.passive_income) for p in snapshot.players]

    assert summary(first) == summary(second)


def test_simulation_saves_game(tmp_path):
    path = tmp_path / "sim.json"

    snapshot = simulate_game(num_players=2, seed=5, verbose=False, max_turns=10, save_path=str(path))

    assert JsonSnapshotStore(path).load().turn_number == snapshot.turn_number


def test_stop_on_fast_track_declares_winner():
    snapshot = simulate_game(num_players=2, seed=5, verbose=False, max_turns=2000, stop_on_fast_track=True)

    if snapshot.is_over:
        winner = snapshot.get_player(snapshot.winner_id)
        assert winner.on_fast_track
    else:
        assert not any(p.on_fast_track for p in snapshot.players)


def test_main_prints_summary(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["cashflow-sim", "--players", "2", "--seed", "3", "--max-turns", "5"])

    main()

    out = capsys.readouterr().out
    assert "Starting game with 2 players using greedy agents" in out
    assert "TURN LIMIT REACHED" in out


def test_resume_continues_saved_game(tmp_path):
    path = str(tmp_path / "sim.json")
    simulate_game(num_players=2, seed=5, verbose=False, max_turns=5, save_path=path)

    snapshot = simulate_game(num_players=2, seed=5, verbose=False, max_turns=10, save_path=path, resume=True)

    assert snapshot.turn_number == 10


def test_resume_without_save_starts_new_game(tmp_path, capsys):
    path = str(tmp_path / "missing.json")

    snapshot = simulate_game(num_players=2, seed=5, verbose=True, max_turns=3, save_path=path, resume=True)

    assert snapshot.turn_number == 3
    assert "Starting game with 2 players" in capsys.readouterr().out


def test_main_resumes_saved_game(tmp_path, monkeypatch, capsys):
    path = str(tmp_path / "sim.json")
    simulate_game(num_players=2, seed=5, verbose=False, max_turns=4, save_path=path)
    monkeypatch.setattr(sys, "argv", ["cashflow-sim", "--save", path, "--resume", "--max-turns", "6"])

    main()

    assert "Resuming game at turn 4 using greedy agents" in capsys.readouterr().out


def test_main_resume_requires_save(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["cashflow-sim", "--resume"])

    with pytest.raises(SystemExit):
        main()
