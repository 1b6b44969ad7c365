import argparse
import asyncio
import copy

import numpy as np

from montyhall import ConfigError, GameState, OutcomeKind
from session import Session

config = {
    'trials': 10000,
    # 0 to 100: the batch pauses (100 - speed) ms at each 1% of progress
    'speed': 100,
    'rules': {
        'doors': 3,
        'prizes': 1,
    },
    'seed': None,
    'verbose': 0,
}

MESSAGES = {
    OutcomeKind.AWAITING_PICK: "Pick one of the {doors} doors",
    OutcomeKind.HOST_THINKING: "The host is opening a door...",
    OutcomeKind.AWAITING_FINAL: "Pick your door again to stay, or another closed door to switch",
    OutcomeKind.WON_STAYING: "You stayed and won!",
    OutcomeKind.WON_SWITCHING: "You switched and won!",
    OutcomeKind.LOST_STAYING: "You stayed and lost.",
    OutcomeKind.LOST_SWITCHING: "You switched and lost.",
}


def header(session, trials):
    print(f"\n--- Simulating {trials} games ---")
    print(f"--- Using {session.config.prizes} prizes and {session.config.doors} doors ---")


def pstats(batch):
    if batch.stopped:
        print(f"Stopped at {100 * batch.progress:.0f}%")
    for name, stats in [('Stay', batch.stay), ('Switch', batch.switch)]:
        print(f"{name}: won {stats.wins} / {stats.total} for {100 * stats.win_rate:.1f}%")
    print(' '.join('o' if marker == 'win' else 'x' for marker in batch.trace))


def pdoors(game):
    cells = []
    for idx, door in enumerate(game.board, 1):
        face = ('$' if door.has_prize else 'g') if door.is_open else str(idx)
        cells.append(f"[{face}]" if door.is_selected else f" {face} ")
    print(' '.join(cells))


async def simulate(session, trials, speed):
    header(session, trials)

    def on_progress(batch):
        print(f"\r{100 * batch.progress:5.1f}%", end='', flush=True)

    batch = await session.start_simulation(trials, speed, on_progress)
    print()
    pstats(batch)
    return batch


def play(session):
    """Interactive manual game on stdin; doors are numbered from 1"""
    game = session.game
    while True:
        print(MESSAGES[game.outcome].format(doors=game.config.doors))
        pdoors(game)
        if game.state == GameState.FINISHED:
            print(f"Games: {game.total}  stay wins: {game.stay_wins}  "
                  f"switch wins: {game.switch_wins}")
            if input("Play again? [y/N] ").strip().lower() != 'y':
                return
            game.reset()
            continue
        answer = input("> ").strip()
        if not answer.isdigit():
            continue
        idx = int(answer) - 1
        if game.state == GameState.INITIAL:
            game.pick(idx)
            if game.state == GameState.PICKED:
                print(MESSAGES[game.outcome])
                asyncio.run(game.host_turn())
        else:
            game.finalize(idx)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generalized Monty Hall simulator")
    parser.add_argument("--doors", type=str, help="Number of doors")
    parser.add_argument("--prizes", type=str, help="Number of prizes")
    parser.add_argument("--trials", type=int, help="Games in the batch simulation")
    parser.add_argument("--speed", type=int, help="Animation speed, 0 (slow) to 100")
    parser.add_argument("--seed", type=int, help="Seed for a reproducible run")
    parser.add_argument("--play", action="store_true", help="Play manually instead")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    curr_config = copy.deepcopy(config)
    for key in ['doors', 'prizes']:
        if getattr(args, key) is not None:
            curr_config['rules'][key] = getattr(args, key)
    for key in ['trials', 'speed', 'seed']:
        if getattr(args, key) is not None:
            curr_config[key] = getattr(args, key)
    curr_config['verbose'] = args.verbose or curr_config['verbose']

    session = Session(rng=np.random.default_rng(curr_config['seed']),
                      verbose=curr_config['verbose'])
    try:
        session.apply(curr_config['rules']['doors'], curr_config['rules']['prizes'])
    except ConfigError as exc:
        print(f"Invalid settings ({exc.kind.value}): {exc}")
        return 2
    if curr_config['trials'] < 1:
        print(f"Invalid settings: need at least 1 game, got {curr_config['trials']}")
        return 2

    if args.play:
        play(session)
    else:
        asyncio.run(simulate(session, curr_config['trials'], curr_config['speed']))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
