import numpy as np
import pytest

from conftest import make_catalog
from socket_wfc import Cell, ContradictionError, Edge, NotCollapsedError


@pytest.fixture
def land_sea():
    return make_catalog(
        ("land.png", (0, 0, 0)),
        ("sea.png", (1, 1, 1)),
        ("coast.png", [(0, 0, 0), (0, 0, 1), (1, 1, 1), (1, 0, 0)]),
    )


def cell_with(catalog, rng, *keys):
    domain = np.zeros(len(catalog), dtype=bool)
    for key in keys:
        domain[catalog.index(key)] = True
    return Cell(catalog, rng, domain)


def test_new_cell_can_be_anything(land_sea):
    cell = Cell(land_sea, np.random.default_rng(0))
    assert cell.entropy() == 2
    assert not cell.is_collapsed()
    assert cell.possibilities() == list(land_sea)


def test_constrain_removes_unsupported_tiles(land_sea):
    rng = np.random.default_rng(0)
    cell = Cell(land_sea, rng)
    below = cell_with(land_sea, rng, "sea.png")

    assert cell.constrain(below, Edge.BOTTOM)
    assert [tile.key for tile in cell.possibilities()] == ["sea.png", "coast.png"]
    # Nothing more to remove against the same neighbour
    assert not cell.constrain(below, Edge.BOTTOM)


def test_constrain_only_narrows_self(land_sea):
    rng = np.random.default_rng(0)
    cell = Cell(land_sea, rng)
    other = cell_with(land_sea, rng, "land.png", "sea.png")
    cell.constrain(other, Edge.LEFT)
    assert other.entropy() == 1


def test_collapsed_cell_ignores_constraints(land_sea):
    rng = np.random.default_rng(0)
    cell = cell_with(land_sea, rng, "land.png")
    empty = cell_with(land_sea, rng)
    assert not cell.constrain(empty, Edge.TOP)
    assert cell.resolved_variant().key == "land.png"


def test_empty_neighbour_empties_cell(land_sea):
    rng = np.random.default_rng(0)
    cell = Cell(land_sea, rng)
    assert cell.constrain(cell_with(land_sea, rng), Edge.RIGHT)
    assert cell.entropy() == -1
    assert not cell.is_collapsed()


def test_domain_never_grows(land_sea):
    rng = np.random.default_rng(7)
    cell = Cell(land_sea, rng)
    size = cell.entropy() + 1
    for _ in range(50):
        neighbour = Cell(land_sea, rng, rng.random(len(land_sea)) < 0.7)
        cell.constrain(neighbour, Edge(int(rng.integers(4))))
        assert cell.entropy() + 1 <= size
        size = cell.entropy() + 1


def test_collapse_keeps_one_remaining_tile(land_sea, first_choice_rng):
    cell = cell_with(land_sea, first_choice_rng, "sea.png", "coast.png")
    chosen = cell.collapse()
    assert chosen.key == "sea.png"
    assert cell.is_collapsed()
    assert cell.entropy() == 0
    assert cell.resolved_variant() is chosen
    assert first_choice_rng.draws == [2]


def test_collapse_is_uniform_over_remaining(land_sea):
    rng = np.random.default_rng(3)
    seen = set()
    for _ in range(60):
        seen.add(cell_with(land_sea, rng, "land.png", "coast.png").collapse().key)
    assert seen == {"land.png", "coast.png"}


def test_collapse_empty_cell(land_sea):
    cell = cell_with(land_sea, np.random.default_rng(0))
    with pytest.raises(ContradictionError):
        cell.collapse()


def test_resolved_variant_requires_collapse(land_sea):
    cell = Cell(land_sea, np.random.default_rng(0))
    with pytest.raises(NotCollapsedError):
        cell.resolved_variant()
    with pytest.raises(LookupError):
        cell_with(land_sea, np.random.default_rng(0)).resolved_variant()
