"""Game state: player, map, textures and the error type of the program."""

from __future__ import annotations

from dataclasses import dataclass, field

WIDTH = 1280
HEIGHT = 720
BLOCK = 64
PI = 3.141592654

KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_LEFT = 0xFF51
KEY_RIGHT = 0xFF53
KEY_ESC = 0xFF1B


class CubError(Exception):
    """A fatal error: carries the message to print and the exit code."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


@dataclass
class Player:
    """Position (in grid cells, or pixels once placed), heading and held keys."""

    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0
    key_up: bool = False
    key_down: bool = False
    key_left: bool = False
    key_right: bool = False
    left_rotate: bool = False
    right_rotate: bool = False

    def place_in_block(self) -> None:
        """Move from cell coordinates to the pixel centre of that cell."""
        self.x = (self.x + 1) * BLOCK - BLOCK / 2.0
        self.y = (self.y + 1) * BLOCK - BLOCK / 2.0
        self.key_up = False
        self.key_down = False
        self.key_left = False
        self.key_right = False
        self.left_rotate = False
        self.right_rotate = False


@dataclass
class GameMap:
    """The map grid, one string per row."""

    grid: list[str] = field(default_factory=list)

    @property
    def lines(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return max((len(row) for row in self.grid), default=0)

    def cell(self, x: int, y: int) -> str:
        """Return the character at row ``x``, column ``y``."""
        if x < 0 or y < 0 or x >= len(self.grid) or y >= len(self.grid[x]):
            raise IndexError(f"cell ({x}, {y}) is outside the map")
        return self.grid[x][y]


@dataclass
class Texture:
    """A wall texture: its file path and row-major 0xRRGGBB pixels."""

    path: str = ""
    width: int = 0
    height: int = 0
    pixels: list[int] = field(default_factory=list)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x``, row ``y``."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            raise IndexError(f"pixel ({x}, {y}) is outside the texture")
        return self.pixels[y * self.width + x]


def _unset_color() -> list[int]:
    return [-1, -1, -1]


@dataclass
class Game:
    """Everything the scene file describes plus the player."""

    north: Texture = field(default_factory=Texture)
    south: Texture = field(default_factory=Texture)
    west: Texture = field(default_factory=Texture)
    east: Texture = field(default_factory=Texture)
    floor_color: list[int] = field(default_factory=_unset_color)
    ceiling_color: list[int] = field(default_factory=_unset_color)
    map: GameMap = field(default_factory=GameMap)
    player: Player = field(default_factory=Player)