"""
Tests for board generation, the host's reveal rule and single batch trials
"""

from itertools import combinations

import numpy as np
import pytest

from montyhall import (
    Board, GameConfig, NoOpenableDoor, Strategy,
    choose_reveal, generate_board, play_trial,
)

CONFIGS = [GameConfig(3, 1), GameConfig(4, 2), GameConfig(5, 3), GameConfig(10, 1), GameConfig(10, 8)]

# Chi-square critical values at p = 0.001
CHI2_CRITICAL = {3: 16.266, 5: 20.515}


def _chi2(counts):
    counts = np.asarray(counts, dtype=float)
    expected = counts.sum() / len(counts)
    return ((counts - expected) ** 2 / expected).sum()


@pytest.mark.parametrize("config", CONFIGS)
def test_board_has_exact_prize_count(config):
    rng = np.random.default_rng(1)
    for _ in range(500):
        board = generate_board(config, rng)
        assert len(board) == config.doors
        assert board.prizes.sum() == config.prizes
        assert (~board.prizes).sum() == config.doors - config.prizes
        assert not board.opened.any() and not board.selected.any()


def test_board_subsets_are_uniform():
    """Each of the C(4, 2) prize placements turns up equally often."""
    rng = np.random.default_rng(2)
    config = GameConfig(4, 2)
    subsets = {subset: 0 for subset in combinations(range(4), 2)}
    for _ in range(12000):
        board = generate_board(config, rng)
        subsets[tuple(int(idx) for idx in np.flatnonzero(board.prizes))] += 1
    assert all(subsets.values())
    assert _chi2(list(subsets.values())) < CHI2_CRITICAL[5]


def test_door_views():
    board = Board([False, True, False])
    board.selected[0] = True
    board.opened[2] = True
    assert board[1].has_prize and not board[1].is_open
    assert board.doors[0].is_selected
    assert board.doors[2].is_open
    assert board.picked() == 0
    assert Board([False, False, True]).picked() is None


@pytest.mark.parametrize("config", CONFIGS)
def test_host_never_opens_pick_or_prize(config):
    rng = np.random.default_rng(3)
    for _ in range(300):
        board = generate_board(config, rng)
        for picked in range(config.doors):
            opened = choose_reveal(board, picked, rng)
            assert opened != picked
            assert not board.prizes[opened]


def test_host_opens_goat_when_pick_holds_a_prize():
    board = Board([True, True, False, False])
    rng = np.random.default_rng(4)
    assert {choose_reveal(board, 0, rng) for _ in range(200)} == {2, 3}


def test_host_choice_is_uniform():
    """Chi-square over 12,000 reveals with four eligible doors."""
    board = Board([False, False, True, False, False, False])
    rng = np.random.default_rng(5)
    counts = np.zeros(6, dtype=int)
    for _ in range(12000):
        counts[choose_reveal(board, 0, rng)] += 1
    assert counts[0] == 0 and counts[2] == 0
    assert _chi2(counts[[1, 3, 4, 5]]) < CHI2_CRITICAL[3]


def test_no_openable_door_is_raised():
    """Only reachable with a board no GameConfig allows."""
    with pytest.raises(NoOpenableDoor):
        choose_reveal(Board([True, False, True]), 1)


def test_trial_scores_both_strategies():
    rng = np.random.default_rng(6)
    stay, switch = play_trial(GameConfig(3, 1), rng)
    assert stay.strategy == Strategy.STAY
    assert switch.strategy == Strategy.SWITCH
    # With one prize behind three doors exactly one of the two wins
    for _ in range(1000):
        stay, switch = play_trial(GameConfig(3, 1), rng)
        assert stay.won != switch.won


def test_trial_switch_can_win_after_prize_pick():
    """With several prizes, switching away from a prize may still find another one."""
    rng = np.random.default_rng(7)
    both = 0
    for _ in range(2000):
        stay, switch = play_trial(GameConfig(5, 3), rng)
        both += stay.won and switch.won
    assert both > 0


def test_trials_are_reproducible_with_a_seed():
    config = GameConfig(7, 2)
    rng_a, rng_b = np.random.default_rng(9), np.random.default_rng(9)
    assert [play_trial(config, rng_a) for _ in range(200)] == \
        [play_trial(config, rng_b) for _ in range(200)]
