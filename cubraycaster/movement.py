"""Player rotation and wall-aware translation."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from .models import BLOCK, PI, Game, GameMap

_FLOOR = "0"
_MARGIN = 20
_REFERENCE_STAMP = 0.0


def rotate_player(player, speed: float) -> None:
    """Turn the player by ``speed`` radians per held key, wrapping to 0..2π."""
    if player.left_rotate:
        player.angle -= speed
    if player.right_rotate:
        player.angle += speed
    if player.angle > 2 * PI:
        player.angle -= 2 * PI
    if player.angle < 0:
        player.angle += 2 * PI


def _grid(
    pos: float, angle: float, trig: Callable[[float], float]
) -> tuple[int, int, int]:
    offset = -_MARGIN if trig(angle) < 0 else _MARGIN
    return (
        math.trunc(pos / BLOCK),
        math.trunc((pos + offset) / BLOCK),
        math.trunc((pos - offset) / BLOCK),
    )


def _is_floor(game_map: GameMap, x: int, y: int) -> bool:
    grid = game_map.grid
    return 0 <= x < len(grid) and 0 <= y < len(grid[x]) and grid[x][y] == _FLOOR


def translate_vertical(game: Game, speed: float) -> None:
    """Move forwards or backwards, each axis only if it stays on floor."""
    player = game.player
    angle = player.angle
    x_pos, x_add, x_sub = _grid(player.x, angle, math.cos)
    y_pos, y_add, y_sub = _grid(player.y, angle, math.sin)
    if player.key_up:
        if _is_floor(game.map, x_add, y_pos):
            player.x += math.cos(angle) * speed
        if _is_floor(game.map, x_pos, y_add):
            player.y += math.sin(angle) * speed
    if player.key_down:
        if _is_floor(game.map, x_sub, y_pos):
            player.x -= math.cos(angle) * speed
        if _is_floor(game.map, x_pos, y_sub):
            player.y -= math.sin(angle) * speed


def _strafe(game: Game, angle: float, speed: float) -> None:
    player = game.player
    x_pos, x_add, _ = _grid(player.x, angle, math.cos)
    y_pos, y_add, _ = _grid(player.y, angle, math.sin)
    if _is_floor(game.map, x_add, y_pos):
        player.x += math.cos(angle) * speed
    if _is_floor(game.map, x_pos, y_add):
        player.y += math.sin(angle) * speed


def translate_horizontal(game: Game, speed: float) -> None:
    """Strafe left or right, each axis only if it stays on floor."""
    player = game.player
    if player.key_left:
        _strafe(game, player.angle - PI / 2, speed)
    if player.key_right:
        _strafe(game, player.angle + PI / 2, speed)


def elapsed_modifier() -> int:
    """Milliseconds since the reference stamp, or 1 outside the range 1..5."""
    elapsed = int((time.time() - _REFERENCE_STAMP) * 1000)
    if elapsed <= 0 or elapsed > 5:
        return 1
    return elapsed