import os
import random
from typing import Dict, Optional, Tuple

import pygame

from .catalog import Catalog, SpriteTile, TileVariant
from .config import Tint
from .grid import Grid

BACKGROUND_COLOR = (190, 120, 12)
CONTRADICTION_COLOR = (255, 0, 0)

# Actions returned by WFCRenderer.handle_events
QUIT = "quit"
RESTART = "restart"
TOGGLE_TINT = "toggle_tint"


class WFCRenderer:
    """
    Pygame renderer for a solving grid. Draws collapsed cells only, so the
    picture fills in as the solve progresses.
    """

    def __init__(self,
                 catalog: Catalog,
                 image_dir: Optional[str] = None,
                 tint: Tint = False,
                 background_color: Tuple[int, int, int] = BACKGROUND_COLOR,
                 rng: Optional[random.Random] = None):
        """
        Args:
            catalog: Catalog whose tiles will be drawn
            image_dir: Directory holding the tile images or sprite sheet,
                       defaults to the catalog's own directory
            tint: False for none, True for a random colour, or an RGB triple
            background_color: RGB color behind undecided cells
            rng: Random source for the random tint
        """
        if not pygame.get_init():
            pygame.init()

        self.catalog = catalog
        self.tile_size = catalog.size
        self.image_dir = image_dir if image_dir is not None else (catalog.root or "")
        self.background_color = background_color
        self.rng = rng or random.Random()
        self.screen: Optional[pygame.Surface] = None

        self.font = None
        self._sheet: Optional[pygame.Surface] = None
        self.tile_images: Dict[str, pygame.Surface] = {}
        self._tinted: Dict[str, pygame.Surface] = {}
        self.set_tint(tint)

    def set_tint(self, tint: Tint) -> None:
        """Pick the tint colour; a random one is drawn each time this is called with True"""
        if tint is True:
            self.tint_color = (self.rng.randrange(256), self.rng.randrange(256), self.rng.randrange(256))
        elif tint:
            self.tint_color = tuple(tint)
        else:
            self.tint_color = None
        self._tinted.clear()

    def open_window(self, width: int, height: int, caption: str = "Wave Function Collapse") -> pygame.Surface:
        """Open a window sized for a width x height grid"""
        self.screen = pygame.display.set_mode((width * self.tile_size, height * self.tile_size))
        pygame.display.set_caption(caption)
        return self.screen

    def _image_path(self, name: str) -> str:
        return os.path.normpath(os.path.join(self.image_dir, name))

    def _load(self, path: str) -> Optional[pygame.Surface]:
        try:
            return pygame.image.load(path)
        except (pygame.error, FileNotFoundError):
            print(f"Failed to load image: {path}")
            return None

    def _create_placeholder(self, name: str) -> pygame.Surface:
        """Create a placeholder image for tiles with missing images"""
        surf = pygame.Surface((self.tile_size, self.tile_size))
        surf.fill((200, 200, 200))

        if self.font is None:
            pygame.font.init()
            self.font = pygame.font.Font(None, max(10, self.tile_size // 3))
        text = self.font.render(name, True, (0, 0, 0))
        surf.blit(text, text.get_rect(center=(self.tile_size // 2, self.tile_size // 2)))

        pygame.draw.rect(surf, (100, 100, 100), (0, 0, self.tile_size, self.tile_size), 1)
        return surf

    def _sprite(self, tile: SpriteTile) -> Optional[pygame.Surface]:
        if self._sheet is None:
            self._sheet = self._load(self._image_path(self.catalog.image))
            if self._sheet is None:
                return None
        x, y = tile.offset
        rect = pygame.Rect(x, y, self.tile_size, self.tile_size)
        if not self._sheet.get_rect().contains(rect):
            print(f"Sprite '{tile.id}' at {tile.offset} is outside the sprite sheet")
            return None
        return self._sheet.subsurface(rect).copy()

    def image(self, tile: TileVariant) -> pygame.Surface:
        """Image for a tile, loaded on first use and cached by key"""
        if tile.key not in self.tile_images:
            if isinstance(tile, SpriteTile):
                image = self._sprite(tile)
            else:
                image = self._load(self._image_path(tile.image))
            if image is None:
                image = self._create_placeholder(os.path.splitext(os.path.basename(tile.key))[0])
            elif image.get_size() != (self.tile_size, self.tile_size):
                image = pygame.transform.scale(image, (self.tile_size, self.tile_size))
            self.tile_images[tile.key] = image

        if self.tint_color is None:
            return self.tile_images[tile.key]
        if tile.key not in self._tinted:
            tinted = self.tile_images[tile.key].copy()
            tinted.fill(self.tint_color, special_flags=pygame.BLEND_RGB_MULT)
            self._tinted[tile.key] = tinted
        return self._tinted[tile.key]

    def draw(self, grid: Grid, surface: Optional[pygame.Surface] = None) -> pygame.Surface:
        """
        Draw the grid's collapsed cells at (x * tile_size, y * tile_size).

        Args:
            grid: Grid to draw
            surface: Target surface, defaults to the window

        Returns:
            The surface that was drawn to
        """
        if surface is None:
            if self.screen is None:
                self.open_window(grid.width, grid.height)
            surface = self.screen

        surface.fill(self.background_color)
        for y in range(grid.height):
            for x in range(grid.width):
                cell = grid.get(x, y)
                position = (x * self.tile_size, y * self.tile_size)
                if cell.is_collapsed():
                    surface.blit(self.image(cell.resolved_variant()), position)
                elif cell.entropy() < 0:
                    pygame.draw.rect(surface, CONTRADICTION_COLOR, (*position, self.tile_size, self.tile_size))
        return surface

    def handle_events(self) -> Optional[str]:
        """
        Handle Pygame events.

        Returns:
            QUIT, RESTART, TOGGLE_TINT or None
        """
        action = None
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return QUIT
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return QUIT
                if event.key == pygame.K_SPACE:
                    action = RESTART
                elif event.key == pygame.K_c:
                    action = TOGGLE_TINT
        return action

    def close(self):
        """Close the renderer"""
        pygame.quit()
