import os
from pathlib import Path

import pytest

# pygame must not try to open a real display or audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from socket_wfc import Catalog, PlainTile, load_catalog

TILESETS = Path(__file__).resolve().parent.parent / "data" / "tilesets"


class FirstChoiceRng:
    """Random source that always picks the first option"""

    def __init__(self):
        self.draws = []

    def integers(self, high):
        self.draws.append(high)
        return 0


def make_catalog(*tiles, size=8):
    """
    Build a plain catalog from (image, sockets) pairs. ``sockets`` is either a
    single socket used on all four edges or a list of four.
    """
    variants = []
    for image, sockets in tiles:
        if len(sockets) == 3 and not isinstance(sockets[0], (list, tuple)):
            sockets = [sockets] * 4
        variants.append(PlainTile(image, tuple(tuple(s) for s in sockets)))
    return Catalog(size, variants)


@pytest.fixture
def pipes_path():
    return TILESETS / "pipes" / "tileset.json"


@pytest.fixture
def pipes(pipes_path):
    return load_catalog(str(pipes_path))


@pytest.fixture
def pipes_sprite_path():
    return TILESETS / "pipes-sprite" / "spritesheet.json"


@pytest.fixture
def single():
    """One tile that matches itself on every edge"""
    return make_catalog(("blank.png", (0, 0, 0)))


@pytest.fixture
def twins():
    """Two tiles that match each other and themselves everywhere"""
    return make_catalog(("a.png", (0, 0, 0)), ("b.png", (0, 0, 0)))


@pytest.fixture
def checker():
    """Two tiles that only fit next to each other, never next to themselves"""
    return make_catalog(("black.png", (0, 0, 1)), ("white.png", (1, 0, 0)))


@pytest.fixture
def incompatible():
    """Two tiles that never fit next to anything"""
    return make_catalog(("left.png", (0, 0, 1)), ("right.png", (0, 0, 2)))


@pytest.fixture
def first_choice_rng():
    return FirstChoiceRng()
