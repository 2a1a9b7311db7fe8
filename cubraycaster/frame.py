"""The frame buffer and the textured wall projection."""

from __future__ import annotations

import math
import os
import sys
from array import array

from PIL import Image

from .models import BLOCK, HEIGHT, WIDTH, CubError, Game, Player, Texture
from .raycast import Orientation, Ray, fixed_distance

BORDER_COLOR = 0x474747
_MIN_DISTANCE = 1e-6


class Frame:
    """A grid of 0xRRGGBB pixels."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        self.width = width
        self.height = height
        self.pixels = array("I", [0]) * (width * height)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set a pixel; points outside the frame are ignored."""
        if x >= self.width or y >= self.height or x < 0 or y < 0:
            return
        self.pixels[y * self.width + x] = color & 0xFFFFFF

    def get_pixel(self, x: int, y: int) -> int:
        """Return the colour of a pixel."""
        if x >= self.width or y >= self.height or x < 0 or y < 0:
            raise IndexError(f"pixel ({x}, {y}) is outside the frame")
        return self.pixels[y * self.width + x]

    def clear(self, color: int = 0) -> None:
        """Fill the whole frame with one colour."""
        self.pixels = array("I", [color & 0xFFFFFF]) * (self.width * self.height)

    def draw_square(self, x: int, y: int, size: int, color: int) -> None:
        """Draw a filled square with a grey one-pixel border."""
        for i in range(size):
            for j in range(size):
                inside = 0 < i < size - 1 and 0 < j < size - 1
                self.put_pixel(x + j, y + i, color if inside else BORDER_COLOR)

    def to_bgra(self) -> bytes:
        """The pixels as 32-bit BGRA bytes, row by row."""
        data = array("I", self.pixels)
        if sys.byteorder == "big":
            data.byteswap()
        return data.tobytes()


def convert_color(rgb) -> int:
    """Pack an ``(r, g, b)`` triple into 0xRRGGBB."""
    return ((rgb[0] << 16) & 0xFF0000) + ((rgb[1] << 8) & 0x00FF00) + (rgb[2] & 0xFF)


def texture_x(texture: Texture, ray: Ray) -> int:
    """Column of the texture that the ray's hit point falls on."""
    if ray.orientation in (Orientation.EAST, Orientation.WEST):
        coord = ray.y
    else:
        coord = ray.x
    cell = math.trunc(coord / BLOCK)
    wall_x = math.trunc(coord - cell * BLOCK)
    tex_x = wall_x * (texture.width // BLOCK)
    if ray.orientation in (Orientation.EAST, Orientation.NORTH):
        tex_x = texture.width - tex_x - 1
    return tex_x


def choose_texture(game: Game, ray: Ray) -> Texture:
    """The texture for the wall side the ray hit."""
    return {
        Orientation.NORTH: game.north,
        Orientation.SOUTH: game.south,
        Orientation.WEST: game.west,
    }.get(ray.orientation, game.east)


def _wall_height(player: Player, ray: Ray) -> float:
    dist = fixed_distance(player, ray.x, ray.y)
    if abs(dist) < _MIN_DISTANCE:
        dist = math.copysign(_MIN_DISTANCE, dist)
    return (BLOCK / dist) * (WIDTH // 2)


def texture_y(player: Player, texture: Texture, ray: Ray) -> tuple[float, float]:
    """Return the first texture row and the row step per screen pixel."""
    height = _wall_height(player, ray)
    step = 1.0 * texture.height / height
    draw_start = (HEIGHT - height) / 2
    return (draw_start - HEIGHT / 2.0 + height / 2.0) * step, step


def load_texture(path: str | os.PathLike[str]) -> Texture:
    """Read an image file into a texture."""
    try:
        with Image.open(path) as img:
            rgb = img.convert("RGB")
            width, height = rgb.size
            data = rgb.tobytes()
    except (OSError, ValueError) as exc:
        raise CubError(f"Error\nFailed to load texture {os.fspath(path)}", 1) from exc
    pixels = [
        (r << 16) | (g << 8) | b for r, g, b in zip(data[0::3], data[1::3], data[2::3])
    ]
    return Texture(path=os.fspath(path), width=width, height=height, pixels=pixels)


def _paint(frame: Frame, column: int, start: int, end: int, color: int) -> None:
    for row in range(max(start, 0), min(end, frame.height)):
        frame.put_pixel(column, row, color)


def _paint_wall(
    game: Game, frame: Frame, ray: Ray, start: int, end: int, column: int
) -> None:
    texture = choose_texture(game, ray)
    if not texture.pixels:
        return
    tex_x = texture_x(texture, ray)
    tex_pos, step = texture_y(game.player, texture, ray)
    first = max(start, 0)
    last = min(end, frame.height)
    tex_pos += step * (first - start)
    mask = texture.height - 1
    for row in range(first, last):
        tex_y = int(tex_pos) & mask
        tex_pos += step
        if 0 <= tex_x < texture.width and 0 <= tex_y < texture.height:
            frame.put_pixel(column, row, texture.pixel(tex_x, tex_y))


def draw_column(game: Game, frame: Frame, ray: Ray, column: int) -> None:
    """Draw ceiling, textured wall and floor for one screen column."""
    height = _wall_height(game.player, ray)
    wall_start = math.trunc((HEIGHT - height) / 2)
    wall_end = math.trunc(wall_start + height)
    _paint(frame, column, 0, wall_start, convert_color(game.ceiling_color))
    _paint_wall(game, frame, ray, wall_start, wall_end, column)
    _paint(frame, column, wall_end - 1, HEIGHT, convert_color(game.floor_color))