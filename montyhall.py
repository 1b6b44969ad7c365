import asyncio
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum

import numpy as np


MIN_DOORS = 3
MIN_PRIZES = 1
MIN_SWITCH_CHOICE = 2


class ValidationErrorKind(str, Enum):
    NOT_A_NUMBER = "not_a_number"
    TOO_FEW_DOORS = "too_few_doors"
    TOO_FEW_PRIZES = "too_few_prizes"
    TOO_MANY_PRIZES = "too_many_prizes"
    INSUFFICIENT_SWITCH_CHOICE = "insufficient_switch_choice"


class ConfigError(ValueError):
    """A rejected (doors, prizes) pair; `kind` says which rule failed"""

    def __init__(self, kind, message=None):
        super().__init__(message or kind.value)
        self.kind = kind


class NoOpenableDoor(RuntimeError):
    """The host has nothing to open, which a valid GameConfig rules out"""


@dataclass(frozen=True)
class GameConfig:
    doors: int = 3
    prizes: int = 1

    def __post_init__(self):
        # Rules are checked in order, first failure wins
        if self.doors < MIN_DOORS:
            raise ConfigError(ValidationErrorKind.TOO_FEW_DOORS,
                              f"need at least {MIN_DOORS} doors, got {self.doors}")
        if self.prizes < MIN_PRIZES:
            raise ConfigError(ValidationErrorKind.TOO_FEW_PRIZES,
                              f"need at least {MIN_PRIZES} prize, got {self.prizes}")
        if self.prizes >= self.doors:
            raise ConfigError(ValidationErrorKind.TOO_MANY_PRIZES,
                              f"{self.prizes} prizes do not fit behind {self.doors} doors")
        if self.doors - self.prizes < MIN_SWITCH_CHOICE:
            raise ConfigError(ValidationErrorKind.INSUFFICIENT_SWITCH_CHOICE,
                              f"{self.doors} doors - {self.prizes} prizes leaves no door to switch to")


def _parse_count(value):
    if isinstance(value, bool):
        raise ConfigError(ValidationErrorKind.NOT_A_NUMBER, f"not a number: {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(ValidationErrorKind.NOT_A_NUMBER, f"not a number: {value!r}") from None


def validate(doors_text, prizes_text):
    """Turn raw door/prize inputs (text or ints) into a GameConfig

    Raises ConfigError whose `kind` is the first rule that failed.
    """
    doors = _parse_count(doors_text)
    prizes = _parse_count(prizes_text)
    return GameConfig(doors, prizes)


# A read-only view of one door, as the UI layer sees it
Door = namedtuple("Door", ["has_prize", "is_open", "is_selected"])


class Board:
    """Prize placement plus per-door open/selected flags, kept as numpy masks"""

    def __init__(self, prizes):
        self.prizes = np.asarray(prizes, dtype=bool)
        self.opened = np.zeros(len(self.prizes), dtype=bool)
        self.selected = np.zeros(len(self.prizes), dtype=bool)

    def __len__(self):
        return len(self.prizes)

    def __getitem__(self, idx):
        return Door(bool(self.prizes[idx]), bool(self.opened[idx]), bool(self.selected[idx]))

    def __iter__(self):
        return (self[idx] for idx in range(len(self)))

    @property
    def doors(self):
        return list(self)

    def picked(self):
        """Index of the selected door, or None"""
        idxs = np.flatnonzero(self.selected)
        return int(idxs[0]) if len(idxs) else None


def generate_board(config, rng=None):
    """Place config.prizes prizes behind config.doors doors, uniformly at random"""
    rng = rng or np.random.default_rng()
    prizes = np.zeros(config.doors, dtype=bool)
    # N objects, choose k without replacement
    prizes[rng.choice(config.doors, config.prizes, replace=False)] = True
    return Board(prizes)


def choose_reveal(board, picked, rng=None):
    """Host opens a random door that is neither the player's pick nor a prize"""
    rng = rng or np.random.default_rng()
    options = [idx for idx, prize in enumerate(board.prizes)
               if not prize and idx != picked]
    if not options:
        raise NoOpenableDoor(f"no goat left to reveal on {len(board)} doors with pick {picked}")
    return options[rng.integers(len(options))]


class Strategy(str, Enum):
    STAY = "stay"
    SWITCH = "switch"


Outcome = namedtuple("Outcome", ["strategy", "won"])


@dataclass
class Stats:
    wins: int = 0
    losses: int = 0

    @property
    def total(self):
        return self.wins + self.losses

    @property
    def win_rate(self):
        return self.wins / self.total if self.total else 0.0

    def record(self, won):
        if won:
            self.wins += 1
        else:
            self.losses += 1


def new_stats():
    return {strategy: Stats() for strategy in Strategy}


def play_trial(config, rng=None):
    """One batch trial, scored under both strategies from the same board

    The host-open-then-switch step always runs, even when the first pick
    already holds a prize: with several prizes the switch can land on another.
    """
    rng = rng or np.random.default_rng()
    board = generate_board(config, rng)
    choice = int(rng.integers(config.doors))
    opened = choose_reveal(board, choice, rng)
    options = [idx for idx in range(config.doors) if idx not in (choice, opened)]
    switch = options[rng.integers(len(options))]
    return (Outcome(Strategy.STAY, bool(board.prizes[choice])),
            Outcome(Strategy.SWITCH, bool(board.prizes[switch])))


class GameState(str, Enum):
    INITIAL = "initial"
    PICKED = "picked"
    REVEALED = "revealed"
    FINISHED = "finished"


class OutcomeKind(str, Enum):
    AWAITING_PICK = "awaiting_pick"
    HOST_THINKING = "host_thinking"
    AWAITING_FINAL = "awaiting_final"
    WON_STAYING = "won_staying"
    WON_SWITCHING = "won_switching"
    LOST_STAYING = "lost_staying"
    LOST_SWITCHING = "lost_switching"


class ManualGame:
    def __init__(self, config=None, rng=None, verbose=0):
        """One player's sequence of hand-played games on a fixed configuration
        config: GameConfig, defaults to the classic 3 doors / 1 prize
        rng: our random number generator, the numpy default is quite good (PCG64)
        verbose: set to 1 for some informational output
        """
        self.config = config or GameConfig()
        self.rng = rng or np.random.default_rng()
        self.verbose = verbose

        # Per-strategy tallies survive reset(); a new ManualGame starts from zero
        self.stats = new_stats()
        self.initialize_state()

    def initialize_state(self):
        self.board = generate_board(self.config, self.rng)
        self.state = GameState.INITIAL
        self.initial_pick = None
        self.final_pick = None
        self.last = None

    @property
    def stay_wins(self):
        return self.stats[Strategy.STAY].wins

    @property
    def switch_wins(self):
        return self.stats[Strategy.SWITCH].wins

    @property
    def total(self):
        return sum(stats.total for stats in self.stats.values())

    @property
    def outcome(self):
        if self.state == GameState.INITIAL:
            return OutcomeKind.AWAITING_PICK
        if self.state == GameState.PICKED:
            return OutcomeKind.HOST_THINKING
        if self.state == GameState.REVEALED:
            return OutcomeKind.AWAITING_FINAL
        return {
            (Strategy.STAY, True): OutcomeKind.WON_STAYING,
            (Strategy.SWITCH, True): OutcomeKind.WON_SWITCHING,
            (Strategy.STAY, False): OutcomeKind.LOST_STAYING,
            (Strategy.SWITCH, False): OutcomeKind.LOST_SWITCHING,
        }[self.last]

    def _in_range(self, idx):
        if isinstance(idx, bool) or not isinstance(idx, (int, np.integer)):
            return False
        return 0 <= idx < len(self.board)

    def pick(self, idx):
        if self.state != GameState.INITIAL or not self._in_range(idx):
            return
        self.board.selected[idx] = True
        self.initial_pick = int(idx)
        self.state = GameState.PICKED
        if self.verbose:
            print(f"Player picks door {idx}")

    def reveal(self):
        """Host opens a goat door; fires once the UI's thinking delay has elapsed"""
        if self.state != GameState.PICKED:
            return
        opened = choose_reveal(self.board, self.board.picked(), self.rng)
        self.board.opened[:] = False
        self.board.opened[opened] = True
        self.state = GameState.REVEALED
        if self.verbose:
            print(f"Host opens door {opened}")

    async def host_turn(self, delay=1.0):
        await asyncio.sleep(delay)
        self.reveal()

    def finalize(self, idx):
        if (self.state != GameState.REVEALED or not self._in_range(idx)
                or self.board.opened[idx]):
            return
        strategy = Strategy.SWITCH if idx != self.initial_pick else Strategy.STAY
        won = bool(self.board.prizes[idx])
        self.stats[strategy].record(won)
        self.last = Outcome(strategy, won)
        self.final_pick = int(idx)

        # Full reveal, only the final choice stays selected
        self.board.opened[:] = True
        self.board.selected[:] = False
        self.board.selected[idx] = True
        self.state = GameState.FINISHED
        if self.verbose:
            print(f"Player {'switches' if strategy == Strategy.SWITCH else 'stays'} "
                  f"on door {idx} and {'wins' if won else 'loses'}")

    def reset(self):
        if self.state != GameState.FINISHED:
            return
        self.initialize_state()
