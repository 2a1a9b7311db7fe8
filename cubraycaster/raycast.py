"""Ray casting against the map grid: wall intersections and distances."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .models import BLOCK, PI, GameMap, Player


class Orientation(Enum):
    """The side of a wall a ray hit."""

    NORTH = 0
    SOUTH = 1
    WEST = 2
    EAST = 3


@dataclass
class Ray:
    """Where a ray ended, its heading and the wall side it hit."""

    x: float
    y: float
    angle: float
    orientation: Orientation


def distance(x: float, y: float) -> float:
    """Length of the vector ``(x, y)``."""
    return math.sqrt(x * x + y * y)


def fixed_distance(player: Player, x: float, y: float) -> float:
    """Distance to ``(x, y)`` projected on the player's heading (no fish-eye)."""
    delta_x = x - player.x
    delta_y = y - player.y
    angle = math.atan2(delta_y, delta_x) - player.angle
    return distance(delta_x, delta_y) * math.cos(angle)


def hits_wall(px: float, py: float, game_map: GameMap) -> bool:
    """True when the pixel point lies in a wall cell or outside the map."""
    if not (math.isfinite(px) and math.isfinite(py)):
        return True
    x = math.trunc(px / BLOCK)
    y = math.trunc(py / BLOCK)
    if x >= game_map.lines or y >= game_map.cols:
        return True
    row = game_map.grid[x]
    if y >= len(row):
        return True
    return row[y] == "1"


def _neg_inv_tan(angle: float) -> float:
    tangent = math.tan(angle)
    if tangent == 0:
        return -math.copysign(math.inf, tangent)
    return -1 / tangent


def _march(
    game_map: GameMap, x: float, y: float, x_step: float, y_step: float
) -> tuple[float, float]:
    while x >= 0 and y >= 0:
        if hits_wall(x, y, game_map):
            break
        x += x_step
        y += y_step
    return x, y


def horizontal_intersection(game_map: GameMap, player: Player, angle: float) -> Ray:
    """Follow the ray across horizontal grid lines until it hits a wall."""
    arc_tan = _neg_inv_tan(angle)
    base = math.floor(player.y / BLOCK) * BLOCK
    if 0 < angle < PI:
        y = base + BLOCK
        orientation = Orientation.NORTH
        y_step = float(BLOCK)
    else:
        y = base - 1
        orientation = Orientation.SOUTH
        y_step = float(-BLOCK)
    x = (player.y - y) * arc_tan + player.x
    x_step = -y_step * arc_tan
    x, y = _march(game_map, x, y, x_step, y_step)
    return Ray(x, y, angle, orientation)


def vertical_intersection(game_map: GameMap, player: Player, angle: float) -> Ray:
    """Follow the ray across vertical grid lines until it hits a wall."""
    base = math.floor(player.x / BLOCK) * BLOCK
    if PI / 2 < angle < (3 * PI) / 2:
        x = base - 1
        orientation = Orientation.EAST
        x_step = float(-BLOCK)
    else:
        x = base + BLOCK
        orientation = Orientation.WEST
        x_step = float(BLOCK)
    neg_tan = -math.tan(angle)
    y = player.y + (player.x - x) * neg_tan
    y_step = -x_step * neg_tan
    x, y = _march(game_map, x, y, x_step, y_step)
    return Ray(x, y, angle, orientation)


def nearest_hit(game_map: GameMap, player: Player, angle: float) -> Ray:
    """Cast a ray at ``angle`` and return the closer of the two intersections."""
    if angle > 2 * PI:
        angle -= 2 * PI
    if angle < 0:
        angle += 2 * PI
    h_ray = horizontal_intersection(game_map, player, angle)
    v_ray = vertical_intersection(game_map, player, angle)
    h_dist = distance(h_ray.x - player.x, h_ray.y - player.y)
    v_dist = distance(v_ray.x - player.x, v_ray.y - player.y)
    if h_dist > v_dist:
        return v_ray
    return h_ray


def line_points(x0: float, y0: float, x1: float, y1: float) -> Iterator[tuple[int, int]]:
    """Yield the integer points of a Bresenham line, both ends included."""
    x, y = int(x0), int(y0)
    target_x, target_y = int(x1), int(y1)
    dx = abs(target_x - x)
    dy = -abs(target_y - y)
    step_x = 1 if x < target_x else -1
    step_y = 1 if y < target_y else -1
    err = dx + dy
    while True:
        yield x, y
        if x == target_x and y == target_y:
            return
        if 2 * err >= dy:
            err += dy
            x += step_x
        if 2 * err <= dx:
            err += dx
            y += step_y