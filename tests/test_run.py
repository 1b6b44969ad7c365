"""
Tests for the command-line driver
"""

import inspect

from run import main, parse_args, play


def test_parse_args_defaults():
    args = parse_args([])
    assert args.doors is None and args.trials is None
    assert not args.play
    assert args.verbose == 0


def test_batch_run_prints_stats(capsys):
    assert main(["--trials", "300", "--seed", "1", "--doors", "5", "--prizes", "2"]) == 0
    out = capsys.readouterr().out
    assert "--- Simulating 300 games ---" in out
    assert "--- Using 2 prizes and 5 doors ---" in out
    assert "Stay: won" in out and "Switch: won" in out


def test_invalid_settings_exit_code(capsys):
    assert main(["--doors", "3", "--prizes", "2"]) == 2
    assert "insufficient_switch_choice" in capsys.readouterr().out

    assert main(["--doors", "lots"]) == 2
    assert "not_a_number" in capsys.readouterr().out


def test_empty_batch_is_rejected(capsys):
    assert main(["--trials", "0"]) == 2
    assert "at least 1 game" in capsys.readouterr().out


def test_manual_play_from_stdin(monkeypatch, capsys):
    answers = iter(["1", "1", "n"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr("montyhall.asyncio.sleep", _no_sleep)
    assert main(["--play", "--seed", "2"]) == 0
    out = capsys.readouterr().out
    assert "Pick one of the 3 doors" in out
    assert "Games: 1" in out
    assert "You stayed and" in out


async def _no_sleep(delay):
    return None


def test_manual_play_is_a_plain_function():
    """Reading stdin happens outside any event loop; only the host's pause is async."""
    assert not inspect.iscoroutinefunction(play)
