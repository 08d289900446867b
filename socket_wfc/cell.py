from typing import List, Optional

import numpy as np

from .catalog import Catalog, TileVariant
from .errors import ContradictionError, NotCollapsedError


class Cell:
    """
    One grid location and the tile variants it could still become.

    The domain is a boolean row over catalog indices. When the cell belongs
    to a grid the row is a view into the grid's wave array.
    """

    def __init__(self, catalog: Catalog, rng, domain: Optional[np.ndarray] = None) -> None:
        self.catalog = catalog
        self.rng = rng
        if domain is None:
            domain = np.ones(len(catalog), dtype=bool)
        self._domain = domain

    @property
    def domain(self) -> np.ndarray:
        return self._domain

    def constrain(self, other: "Cell", edge: int) -> bool:
        """
        Drop every variant that has no partner left in ``other`` across ``edge``.

        Only this cell is narrowed; ``other`` is read as is.

        Returns:
            bool: True if at least one variant was removed
        """
        if self.is_collapsed():
            return False

        supported = self.catalog.compatibility[edge][:, other._domain].any(axis=1)
        unreachable = self._domain & ~supported
        if not unreachable.any():
            return False

        self._domain[unreachable] = False
        return True

    def entropy(self) -> int:
        return int(np.count_nonzero(self._domain)) - 1

    def is_collapsed(self) -> bool:
        return self.entropy() == 0

    def indices(self) -> np.ndarray:
        return np.flatnonzero(self._domain)

    def possibilities(self) -> List[TileVariant]:
        """Remaining variants, in catalog order"""
        return [self.catalog[i] for i in self.indices()]

    def collapse(self) -> TileVariant:
        """Pick one remaining variant uniformly at random and keep only that one"""
        choices = self.indices()
        if len(choices) == 0:
            raise ContradictionError("Cannot collapse a cell with no possible tiles")

        chosen = int(choices[int(self.rng.integers(len(choices)))])
        self._domain[:] = False
        self._domain[chosen] = True
        return self.catalog[chosen]

    def resolved_index(self) -> int:
        if not self.is_collapsed():
            raise NotCollapsedError(f"Cell is not collapsed ({self.entropy() + 1} possible tiles)")
        return int(self.indices()[0])

    def resolved_variant(self) -> TileVariant:
        return self.catalog[self.resolved_index()]

    def __repr__(self) -> str:
        return f"Cell(entropy={self.entropy()})"
