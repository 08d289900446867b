from collections import deque
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .catalog import Catalog
from .cell import Cell
from .errors import EmptyCatalogError
from .sockets import EDGE_OFFSETS, Edge, connects

DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10

PROPAGATION_MODES = ("sweep", "worklist")


class SolveStatus(Enum):
    RUNNING = "running"
    FINISHED = "finished"
    CONTRADICTION = "contradiction"


class Grid:
    """
    A width x height grid of cells driven from fully undetermined to fully
    collapsed, one ``step()`` at a time.

    Construction collapses one random cell and propagates, so a new grid is
    already partly resolved. A contradiction (a cell with no tile left) halts
    the solve: ``status`` becomes CONTRADICTION, ``finished`` stays False and
    later steps do nothing. Restarting means building a new grid.
    """

    def __init__(self, catalog: Catalog, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 rng=None, seed: Optional[int] = None, propagation: str = "sweep") -> None:
        """
        Args:
            catalog: Tile variants every cell starts with
            width: Grid width in cells
            height: Grid height in cells
            rng: Random source with ``integers(high)``; a numpy Generator by default
            seed: Seed for the default random source, ignored when ``rng`` is given
            propagation: "sweep" rescans the whole grid until nothing changes,
                         "worklist" only revisits neighbours of narrowed cells
        """
        if len(catalog) == 0:
            raise EmptyCatalogError("Cannot build a grid from an empty catalog")
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"Grid {name} must be a positive integer, got {value!r}")
        if propagation not in PROPAGATION_MODES:
            raise ValueError(f"Unknown propagation mode '{propagation}', expected one of {PROPAGATION_MODES}")

        self.catalog = catalog
        self.width = int(width)
        self.height = int(height)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.propagation = propagation

        self.finished = False
        self.contradiction = False
        self.contradiction_at: Optional[Tuple[int, int]] = None
        # (x, y, tile index) of every collapse, seed included
        self.history: List[Tuple[int, int, int]] = []

        # wave[y, x, i] = True if tile i is still possible at (x, y)
        self.wave = np.ones((self.height, self.width, len(catalog)), dtype=bool)
        self.cells = [
            [Cell(catalog, self.rng, self.wave[y, x]) for x in range(self.width)]
            for y in range(self.height)
        ]
        self._settled = False

        x = int(self.rng.integers(self.width))
        y = int(self.rng.integers(self.height))
        self._collapse(x, y)
        self.propagate((x, y))

    @property
    def status(self) -> SolveStatus:
        if self.contradiction:
            return SolveStatus.CONTRADICTION
        if self.finished:
            return SolveStatus.FINISHED
        return SolveStatus.RUNNING

    def get(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return self.cells[y][x]

    def neighbors(self, x: int, y: int) -> Iterator[Tuple[Edge, int, int]]:
        """Existing neighbours of (x, y) as (edge, nx, ny), in TOP, RIGHT, BOTTOM, LEFT order"""
        for edge in Edge:
            dx, dy = EDGE_OFFSETS[edge]
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield edge, nx, ny

    def _collapse(self, x: int, y: int) -> None:
        cell = self.cells[y][x]
        cell.collapse()
        self.history.append((x, y, cell.resolved_index()))

    def _constrain(self, x: int, y: int) -> bool:
        """Narrow (x, y) against each of its neighbours; True if anything was removed"""
        cell = self.cells[y][x]
        changed = False
        for edge, nx, ny in self.neighbors(x, y):
            if cell.constrain(self.cells[ny][nx], edge):
                changed = True
        return changed

    def propagate(self, origin: Optional[Tuple[int, int]] = None) -> None:
        """
        Narrow every cell against its neighbours until nothing changes, then
        record a contradiction if some cell was left without tiles.

        Args:
            origin: The cell that just collapsed. The sweep ignores it and
                    rescans everything; the worklist starts from its neighbours.
        """
        if self.propagation == "worklist":
            self._propagate_worklist(origin)
        else:
            self._propagate_sweep()
        self._settled = True
        self._check_contradiction()

    def _propagate_sweep(self) -> None:
        constrained = True
        while constrained:
            constrained = False
            for y in range(self.height):
                for x in range(self.width):
                    if self._constrain(x, y):
                        constrained = True

    def _propagate_worklist(self, origin: Optional[Tuple[int, int]]) -> None:
        if origin is None or not self._settled:
            # Nothing is known to be consistent yet
            pending = [(x, y) for y in range(self.height) for x in range(self.width)]
        else:
            pending = [(nx, ny) for _, nx, ny in self.neighbors(*origin)]

        queue = deque(pending)
        queued = set(pending)
        while queue:
            x, y = queue.popleft()
            queued.discard((x, y))
            if not self._constrain(x, y):
                continue
            for _, nx, ny in self.neighbors(x, y):
                if (nx, ny) not in queued:
                    queued.add((nx, ny))
                    queue.append((nx, ny))

    def _check_contradiction(self) -> None:
        if self.contradiction:
            return
        empty = np.argwhere(~self.wave.any(axis=2))
        if len(empty) > 0:
            y, x = empty[0]
            self.contradiction = True
            self.contradiction_at = (int(x), int(y))

    def find_lowest_entropy_cell(self) -> Tuple[Cell, int, int]:
        """
        Find the uncollapsed cell with the lowest entropy, first in row-major
        order on ties. If every cell is collapsed the returned cell is
        collapsed as well, which is how callers detect completion.

        Returns:
            Tuple[Cell, int, int]: (cell, x, y)
        """
        cell_x, cell_y = 0, 0
        entropy = float('inf')
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                if cell.is_collapsed():
                    continue
                e = cell.entropy()
                if e < entropy:
                    entropy = e
                    cell_x, cell_y = x, y
        return self.cells[cell_y][cell_x], cell_x, cell_y

    def step(self) -> SolveStatus:
        """
        Collapse the lowest entropy cell and propagate.

        Returns:
            SolveStatus: RUNNING while cells remain, FINISHED once every cell is
                         collapsed, CONTRADICTION once some cell has no tile left
        """
        if self.status is not SolveStatus.RUNNING:
            return self.status

        cell, x, y = self.find_lowest_entropy_cell()
        if cell.is_collapsed():
            self.finished = True
            return self.status

        if cell.entropy() < 0:
            self.contradiction = True
            self.contradiction_at = (x, y)
            return self.status

        self._collapse(x, y)
        self.propagate((x, y))
        return self.status

    def run(self, max_steps: Optional[int] = None) -> SolveStatus:
        """Step until the grid finishes or hits a contradiction (or ``max_steps`` runs out)"""
        steps = 0
        while self.status is SolveStatus.RUNNING:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
        return self.status

    def get_wave_state(self) -> np.ndarray:
        """Copy of the wave, shape (height, width, num_tiles)"""
        return self.wave.copy()

    def num_collapsed(self) -> int:
        return int(np.sum(self.wave.sum(axis=2) == 1))

    def resolved_keys(self) -> List[List[Optional[str]]]:
        """Tile key of every collapsed cell, None where the cell is undecided"""
        return [
            [cell.resolved_variant().key if cell.is_collapsed() else None for cell in row]
            for row in self.cells
        ]

    def mismatches(self) -> List[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Pairs of adjacent collapsed cells whose shared edge does not match"""
        bad = []
        for y in range(self.height):
            for x in range(self.width):
                cell = self.cells[y][x]
                if not cell.is_collapsed():
                    continue
                # RIGHT and BOTTOM only, so each pair is checked once
                for edge in (Edge.RIGHT, Edge.BOTTOM):
                    dx, dy = EDGE_OFFSETS[edge]
                    nx, ny = x + dx, y + dy
                    if nx >= self.width or ny >= self.height:
                        continue
                    other = self.cells[ny][nx]
                    if other.is_collapsed() and not connects(
                            cell.resolved_variant(), edge, other.resolved_variant()):
                        bad.append(((x, y), (nx, ny)))
        return bad

    def __repr__(self) -> str:
        return (f"Grid({self.width}x{self.height}, collapsed={self.num_collapsed()}, "
                f"status={self.status.value})")
