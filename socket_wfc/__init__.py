"""Wave Function Collapse over tiles with edge sockets."""

from .catalog import Catalog, PlainTile, SpriteTile, TileVariant, load_catalog
from .cell import Cell
from .config import ModelSettings, load_settings, resolve_settings
from .errors import (
    CatalogError,
    ContradictionError,
    EmptyCatalogError,
    NotCollapsedError,
    WFCError,
)
from .grid import Grid, SolveStatus
from .model import Model
from .sockets import Edge, Socket, connects, opposite

__version__ = "0.1.0"
