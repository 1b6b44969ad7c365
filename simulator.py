import asyncio
import math
from collections import deque

import numpy as np

from montyhall import Strategy, new_stats, play_trial


TRACE_CAPACITY = 300
REPORT_STEPS = 100
MAX_SPEED = 100


def delay_for_speed(speed):
    """Seconds to pause at each report point: speed 100 never waits, speed 0 waits 0.1s"""
    speed = min(max(int(speed), 0), MAX_SPEED)
    return (MAX_SPEED - speed) / 1000


def sample_every(trials):
    return math.ceil(trials / TRACE_CAPACITY)


def report_every(trials):
    return math.ceil(trials / REPORT_STEPS)


class BatchRun:
    """Everything one batch produces; a new run never shares these with an old one"""

    def __init__(self, config, trials, delay=0.0):
        if trials < 1:
            raise ValueError(f"trial count must be at least 1, got {trials}")
        self.config = config
        self.trials = int(trials)
        self.delay = delay

        self.stats = new_stats()
        self.trace = deque(maxlen=TRACE_CAPACITY)
        self.completed = 0
        self.progress = 0.0
        self.stopped = False
        self.finished = False

    @property
    def stay(self):
        return self.stats[Strategy.STAY]

    @property
    def switch(self):
        return self.stats[Strategy.SWITCH]

    def stop(self):
        self.stopped = True


class BatchSimulator:
    def __init__(self, rng=None, verbose=0):
        """Runs batches of independent trials, one active run at a time
        rng: our random number generator, the numpy default is quite good (PCG64)
        verbose: set to 1 for start/stop output, 2 for every report point
        """
        self.rng = rng or np.random.default_rng()
        self.verbose = verbose
        self.current = None
        self.task = None

    @property
    def running(self):
        return self.current is not None and not self.current.finished

    @property
    def progress(self):
        return self.current.progress if self.current else 0.0

    @property
    def stay(self):
        return self.current.stay if self.current else new_stats()[Strategy.STAY]

    @property
    def switch(self):
        return self.current.switch if self.current else new_stats()[Strategy.SWITCH]

    @property
    def trace(self):
        return list(self.current.trace) if self.current else []

    def _begin(self, config, trials, speed):
        # The new run becomes current before anything is awaited, so stop() always reaches it
        self.stop()
        batch = BatchRun(config, trials, delay_for_speed(speed))
        self.current = batch
        if self.verbose:
            print(f"--- Simulating {batch.trials} games with {config.prizes} prizes "
                  f"and {config.doors} doors ---")
        return batch

    async def run(self, config, trials, speed=MAX_SPEED, on_progress=None):
        """Simulate `trials` games, yielding to the event loop at each report point

        on_progress: optional callable(BatchRun), invoked at every report point
        Returns the BatchRun, complete or stopped early.
        """
        batch = self._begin(config, trials, speed)
        return await self._loop(batch, on_progress)

    def start(self, config, trials, speed=MAX_SPEED, on_progress=None):
        """Schedule a run as a task on the running event loop; the task's result is the BatchRun"""
        batch = self._begin(config, trials, speed)
        self.task = asyncio.get_running_loop().create_task(self._loop(batch, on_progress))
        return self.task

    def stop(self):
        if self.running:
            self.current.stop()

    async def _loop(self, batch, on_progress):
        sample_step = sample_every(batch.trials)
        report_step = report_every(batch.trials)
        try:
            for idx in range(1, batch.trials + 1):
                # Cancellation is only honoured between trials
                if batch.stopped:
                    batch.progress = batch.completed / batch.trials
                    if self.verbose:
                        print(f"Stopped after {batch.completed} / {batch.trials} games")
                    break

                stay, switch = play_trial(batch.config, self.rng)
                batch.stats[stay.strategy].record(stay.won)
                batch.stats[switch.strategy].record(switch.won)
                batch.completed = idx

                if idx % sample_step == 0:
                    batch.trace.append("win" if stay.won else "loss")

                if idx % report_step == 0:
                    batch.progress = idx / batch.trials
                    if self.verbose > 1:
                        print(f"{100 * batch.progress:.0f}%: stay {batch.stay.wins} "
                              f"/ switch {batch.switch.wins} wins of {idx}")
                    if on_progress:
                        on_progress(batch)
                    await asyncio.sleep(batch.delay)
            else:
                batch.progress = 1.0
        finally:
            batch.finished = True
        return batch
