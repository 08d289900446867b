from enum import IntEnum
from typing import Tuple, Union

Token = Union[int, float, str]
Socket = Tuple[Token, Token, Token]


class Edge(IntEnum):
    """Tile edges, clockwise from the top. Values index a tile's sockets."""
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


# Neighbour offsets (dx, dy) in edge order
EDGE_OFFSETS = {
    Edge.TOP: (0, -1),
    Edge.RIGHT: (1, 0),
    Edge.BOTTOM: (0, 1),
    Edge.LEFT: (-1, 0),
}


def opposite(edge: int) -> Edge:
    """Get the opposite edge (0-3)"""
    return Edge((edge + 2) % 4)


def sockets_match(socket: Socket, other: Socket) -> bool:
    """
    Two sockets face each other across a shared edge, so one of them is read
    in reverse: (start, middle, end) matches (end, middle, start).
    """
    start, middle, end = socket
    other_start, other_middle, other_end = other
    return start == other_end and middle == other_middle and end == other_start


def connects(tile, edge: int, other, other_edge: int = None) -> bool:
    """
    Check whether ``tile`` can sit next to ``other`` across ``edge``.

    Args:
        tile: Tile variant exposing ``sockets`` indexed by edge
        edge: Edge of ``tile`` that faces ``other``
        other: Neighbouring tile variant
        other_edge: Edge of ``other`` facing back, always ``opposite(edge)``

    Returns:
        bool: True if the shared edge reads the same from both sides
    """
    if other_edge is None:
        other_edge = opposite(edge)
    elif other_edge != opposite(edge):
        raise ValueError(f"Edge {other_edge} does not face edge {edge}")
    return sockets_match(tile.sockets[edge], other.sockets[other_edge])
