class WFCError(Exception):
    """Base class for solver errors"""


class CatalogError(WFCError, ValueError):
    """Malformed tileset or spritesheet data"""


class EmptyCatalogError(CatalogError):
    """A grid cannot be built from a catalog without tile variants"""


class NotCollapsedError(WFCError, LookupError):
    """A cell's tile was read before the cell collapsed"""


class ContradictionError(WFCError, RuntimeError):
    """A cell has no tile variant left to choose from"""
