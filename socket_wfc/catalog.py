import json
import os
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from .errors import CatalogError
from .sockets import Edge, Socket, connects, opposite

Sockets = Tuple[Socket, Socket, Socket, Socket]


@dataclass(frozen=True)
class PlainTile:
    """A tile with its own image file"""
    image: str
    sockets: Sockets

    @property
    def key(self) -> str:
        return self.image


@dataclass(frozen=True)
class SpriteTile:
    """A tile cut out of a shared sprite sheet at ``offset`` (pixels)"""
    id: str
    offset: Tuple[int, int]
    sockets: Sockets

    @property
    def key(self) -> str:
        return self.id


TileVariant = Union[PlainTile, SpriteTile]


def _parse_sockets(raw: Any, name: str) -> Sockets:
    """Validate and convert raw socket data into a 4-tuple of 3-tuples"""
    if not isinstance(raw, (list, tuple)) or len(raw) != 4:
        raise CatalogError(f"Tile '{name}' must have exactly 4 sockets, got {raw!r}")

    sockets = []
    for edge, socket in zip(Edge, raw):
        if not isinstance(socket, (list, tuple)) or len(socket) != 3:
            raise CatalogError(
                f"Tile '{name}' {edge.name} socket must have 3 tokens, got {socket!r}"
            )
        for token in socket:
            # bools are Reals but never socket tokens
            if isinstance(token, bool) or not isinstance(token, (Real, str)):
                raise CatalogError(
                    f"Tile '{name}' {edge.name} socket token {token!r} is not a number or string"
                )
        sockets.append(tuple(socket))
    return tuple(sockets)


class Catalog:
    """
    Immutable, ordered collection of tile variants shared by every cell.

    Cells refer to variants by index. The pairwise edge compatibility of all
    variants is computed once here so that narrowing a cell is a table lookup.
    """

    def __init__(self, size: int, variants: List[TileVariant],
                 image: Optional[str] = None, root: Optional[str] = None) -> None:
        """
        Args:
            size: Tile size in pixels
            variants: Tile variants, all of the same shape
            image: Sprite sheet image (sprite sheets only)
            root: Directory image references are relative to
        """
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise CatalogError(f"Tile size must be a positive integer, got {size!r}")

        shapes = {type(variant) for variant in variants}
        if len(shapes) > 1:
            raise CatalogError("Catalog mixes plain tiles and sprites")
        if shapes == {SpriteTile} and not image:
            raise CatalogError("Sprite tiles need a sprite sheet image")
        if shapes == {PlainTile} and image is not None:
            raise CatalogError("Plain tiles have their own images, not a sprite sheet")

        self.size = size
        self.image = image
        self.root = root
        self._variants = tuple(variants)

        self._index: Dict[str, int] = {}
        for i, variant in enumerate(self._variants):
            if variant.key in self._index:
                raise CatalogError(f"Duplicate tile '{variant.key}'")
            self._index[variant.key] = i

        self.compatibility = self._init_compatibility()
        self.compatibility.flags.writeable = False

    def _init_compatibility(self) -> np.ndarray:
        """compatibility[edge, i, j] = variant i accepts variant j across edge"""
        n = len(self._variants)
        compatibility = np.zeros((4, n, n), dtype=bool)
        for edge in Edge:
            for i, tile in enumerate(self._variants):
                for j, other in enumerate(self._variants):
                    compatibility[edge, i, j] = connects(tile, edge, other, opposite(edge))
        return compatibility

    @property
    def variants(self) -> Tuple[TileVariant, ...]:
        return self._variants

    @property
    def keys(self) -> List[str]:
        return [variant.key for variant in self._variants]

    @property
    def is_spritesheet(self) -> bool:
        return self.image is not None

    def index(self, variant: Union[TileVariant, str]) -> int:
        """Index of a variant, looked up by the variant itself or its key"""
        key = variant if isinstance(variant, str) else variant.key
        try:
            return self._index[key]
        except KeyError:
            raise KeyError(f"Unknown tile '{key}'") from None

    def __len__(self) -> int:
        return len(self._variants)

    def __iter__(self) -> Iterator[TileVariant]:
        return iter(self._variants)

    def __getitem__(self, i: int) -> TileVariant:
        return self._variants[i]

    def __repr__(self) -> str:
        kind = "spritesheet" if self.is_spritesheet else "tileset"
        return f"Catalog({kind}, size={self.size}, variants={len(self)})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], root: Optional[str] = None) -> "Catalog":
        """
        Build a catalog from tileset or spritesheet data.

        Tilesets look like ``{"size": 32, "tiles": [{"image", "sockets"}]}``,
        spritesheets like ``{"size": 32, "image": "sheet.png",
        "sprites": [{"id", "offset", "sockets"}]}``.
        """
        if not isinstance(data, dict):
            raise CatalogError(f"Catalog data must be an object, got {type(data).__name__}")

        size = data.get("size")
        if size and isinstance(data.get("tiles"), list):
            variants = []
            for i, entry in enumerate(data["tiles"]):
                if not isinstance(entry, dict) or "image" not in entry:
                    raise CatalogError(f"Tile {i} has no image")
                image = str(entry["image"])
                variants.append(PlainTile(image, _parse_sockets(entry.get("sockets"), image)))
            return cls(size, variants, root=root)

        if size and isinstance(data.get("sprites"), list):
            if not data.get("image"):
                raise CatalogError("Spritesheet has no image")
            variants = []
            for i, entry in enumerate(data["sprites"]):
                if not isinstance(entry, dict) or "id" not in entry:
                    raise CatalogError(f"Sprite {i} has no id")
                sprite_id = str(entry["id"])
                offset = entry.get("offset")
                if not isinstance(offset, (list, tuple)) or len(offset) != 2:
                    raise CatalogError(f"Sprite '{sprite_id}' offset must be [x, y], got {offset!r}")
                variants.append(SpriteTile(
                    sprite_id,
                    (int(offset[0]), int(offset[1])),
                    _parse_sockets(entry.get("sockets"), sprite_id),
                ))
            return cls(size, variants, image=str(data["image"]), root=root)

        raise CatalogError("Catalog data needs a size and either 'tiles' or 'image' and 'sprites'")


def load_catalog(input_data: Union[str, os.PathLike, Dict[str, Any]]) -> Catalog:
    """
    Load a catalog from a JSON file path or an already parsed dictionary.

    Image references of a file-based catalog are resolved relative to the
    directory of the JSON file.
    """
    if isinstance(input_data, dict):
        return Catalog.from_dict(input_data)

    with open(input_data, 'r') as f:
        data = json.load(f)
    return Catalog.from_dict(data, root=os.path.dirname(os.path.abspath(input_data)))
