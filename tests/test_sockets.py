import itertools

import pytest

from conftest import make_catalog
from socket_wfc import Edge, connects, opposite
from socket_wfc.sockets import sockets_match


def test_opposite():
    assert opposite(Edge.TOP) == Edge.BOTTOM
    assert opposite(Edge.RIGHT) == Edge.LEFT
    assert opposite(Edge.BOTTOM) == Edge.TOP
    assert opposite(Edge.LEFT) == Edge.RIGHT
    assert opposite(3) == Edge.RIGHT


def test_shared_edge_is_read_reversed():
    assert sockets_match((1, 2, 3), (3, 2, 1))
    assert not sockets_match((1, 2, 3), (1, 2, 3))
    assert sockets_match((4, 4, 4), (4, 4, 4))


def test_connects_compares_against_opposite_edge():
    catalog = make_catalog(
        ("a.png", [(9, 9, 9), (1, 2, 3), (9, 9, 9), (9, 9, 9)]),
        ("b.png", [(8, 8, 8), (8, 8, 8), (8, 8, 8), (3, 2, 1)]),
        ("c.png", [(3, 2, 1), (3, 2, 1), (3, 2, 1), (1, 2, 3)]),
    )
    a, b, c = catalog
    assert connects(a, Edge.RIGHT, b, Edge.LEFT)
    assert connects(b, Edge.LEFT, a, Edge.RIGHT)
    # c's left edge is not reversed relative to a's right edge
    assert not connects(a, Edge.RIGHT, c, Edge.LEFT)
    assert not connects(a, Edge.TOP, b, Edge.BOTTOM)


def test_connects_defaults_to_opposite_edge():
    a, b = make_catalog(("a.png", (1, 2, 1)), ("b.png", (1, 2, 1)))
    for edge in Edge:
        assert connects(a, edge, b)


def test_connects_rejects_edges_that_do_not_face():
    a, b = make_catalog(("a.png", (0, 0, 0)), ("b.png", (0, 0, 0)))
    with pytest.raises(ValueError):
        connects(a, Edge.TOP, b, Edge.LEFT)


def test_tokens_compare_by_exact_value():
    catalog = make_catalog(
        ("road.png", ("grass", "road", "grass")),
        ("grass.png", ("grass", "grass", "grass")),
        ("one.png", (1, 1, 1)),
        ("one_str.png", ("1", "1", "1")),
    )
    road, grass, one, one_str = catalog
    assert connects(road, Edge.TOP, road, Edge.BOTTOM)
    assert not connects(road, Edge.TOP, grass, Edge.BOTTOM)
    assert not connects(one, Edge.LEFT, one_str, Edge.RIGHT)


def test_compatibility_is_symmetric(pipes):
    asymmetric = make_catalog(
        ("p.png", [(0, 1, 2), (2, 1, 0), ("x", "y", "x"), (1, 1, 0)]),
        ("q.png", [(2, 1, 0), (0, 1, 2), ("x", "y", "x"), (0, 1, 1)]),
        ("r.png", [(0, 0, 0), (1, 1, 0), (0, 1, 1), ("x", "y", "x")]),
    )
    for catalog in (pipes, asymmetric):
        for a, b in itertools.product(catalog, repeat=2):
            for edge in Edge:
                assert connects(a, edge, b, opposite(edge)) == connects(b, opposite(edge), a, edge)
