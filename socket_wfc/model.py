from typing import Any, Dict, Optional, Union

import numpy as np

from .catalog import Catalog
from .config import ModelSettings, resolve_settings
from .grid import Grid, SolveStatus


class Model:
    """
    Owns the settings, the random source and the current grid of a solve.

    ``setup()`` (re)starts from scratch: it re-seeds the random source when a
    seed is configured, so restarting a seeded model reproduces the same grid.
    With ``restart_on_contradiction`` a contradiction throws the grid away and
    builds a new one from the continuing random stream, up to ``max_restarts``
    times; after that the contradiction is final.
    """

    def __init__(self, catalog: Catalog,
                 options: Optional[Union[ModelSettings, Dict[str, Any]]] = None) -> None:
        self.catalog = catalog
        if isinstance(options, ModelSettings):
            self.settings = resolve_settings(options.to_dict())
        else:
            self.settings = resolve_settings(options)
        self.rng = np.random.default_rng(self.settings.seed)
        self.restarts = 0
        self.grid: Optional[Grid] = None
        self.setup()

    def _new_grid(self) -> Grid:
        return Grid(
            self.catalog,
            self.settings.width,
            self.settings.height,
            rng=self.rng,
            propagation=self.settings.propagation,
        )

    def setup(self) -> Grid:
        if self.settings.seed is not None:
            self.rng = np.random.default_rng(self.settings.seed)
        self.restarts = 0
        self.grid = self._new_grid()
        return self.grid

    @property
    def status(self) -> SolveStatus:
        return self.grid.status

    @property
    def finished(self) -> bool:
        return self.grid.finished

    def _maybe_restart(self) -> None:
        while (self.grid.contradiction and self.settings.restart_on_contradiction
               and self.restarts < self.settings.max_restarts):
            self.restarts += 1
            self.grid = self._new_grid()

    def step(self) -> SolveStatus:
        self._maybe_restart()
        status = self.grid.step()
        if status is SolveStatus.CONTRADICTION:
            self._maybe_restart()
        return self.grid.status

    def run(self, max_steps: Optional[int] = None) -> SolveStatus:
        """Step until the solve finishes or ends in a final contradiction"""
        steps = 0
        self._maybe_restart()
        while self.grid.status is SolveStatus.RUNNING:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
        return self.grid.status
