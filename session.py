import numpy as np

from montyhall import GameConfig, ManualGame, validate
from simulator import BatchSimulator


class Session:
    """The active configuration with its manual game and batch simulator

    Applying a configuration throws both away and starts over, so statistics
    never mix boards of different shapes.
    """

    def __init__(self, config=None, rng=None, verbose=0):
        self.rng = rng or np.random.default_rng()
        self.verbose = verbose
        self.config = config or GameConfig()
        self.initialize_state()

    def initialize_state(self):
        self.game = ManualGame(self.config, rng=self.rng, verbose=self.verbose)
        self.simulator = BatchSimulator(rng=self.rng, verbose=self.verbose)

    def apply(self, doors_text, prizes_text):
        """Validate and switch to a new configuration

        On ConfigError the current configuration and its statistics stay in place.
        """
        config = validate(doors_text, prizes_text)
        self.simulator.stop()
        self.config = config
        self.initialize_state()
        if self.verbose:
            print(f"Using {config.prizes} prizes and {config.doors} doors")
        return config

    def start_simulation(self, trials, speed=100, on_progress=None):
        return self.simulator.start(self.config, trials, speed, on_progress)

    def stop_simulation(self):
        self.simulator.stop()
