"""Reading and validating ``.cub`` scene files."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, MutableSequence, Sequence

from .models import CubError, Game, Player
from .textutils import (
    file_exists,
    in_str,
    is_all_space,
    is_digit,
    read_lines,
    read_text,
    split,
    split_keep,
    split_whitespace,
)

WALL = "1"
FLOOR = "0"
SPACE = " "

NORTH_RAD = 1.570
SOUTH_RAD = 4.710
EAST_RAD = 3.140
WEST_RAD = 0.0

_PLAYER_CHARS = "NSEW"
_MAP_CHARS = frozenset(WALL + FLOOR + SPACE + _PLAYER_CHARS)
_HEADER_KEYS = ("NO", "F", "SO", "C", "WE", "EA")
_ANGLES = {"N": NORTH_RAD, "S": SOUTH_RAD, "E": EAST_RAD, "W": WEST_RAD}
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

COLOR_ERROR = "Error\nInvalid floor/ceiling color format"


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def check_ext(path: str | None) -> bool:
    """True when ``path`` names a file (not a bare ``.cub``) ending in ``.cub``."""
    if not path or len(path) <= 4:
        return False
    start = len(path) - 4
    if path[start - 1] == "/":
        return False
    return path[start:] == ".cub"


def parse_color(text: str, color: MutableSequence[int]) -> bool:
    """Fill ``color`` from an ``R,G,B`` string; False if invalid or already set."""
    rgb = split(text, ",")
    if len(rgb) != 3 or any(channel != -1 for channel in color):
        return False
    for i, part in enumerate(rgb):
        color[i] = _atoi(part)
        if color[i] < 0 or color[i] > 255 or not is_digit(part):
            return False
    return True


def _set_path(game: Game, key: str, value: str) -> bool:
    textures = {
        "NO": game.north,
        "SO": game.south,
        "WE": game.west,
        "EA": game.east,
    }
    texture = textures.get(key)
    if texture is None:
        return True
    if texture.path:
        return False
    texture.path = value
    return True


def parse_paths(lines: Iterable[str], game: Game) -> bool:
    """Read the texture paths; False when one of them is given twice."""
    for line in lines:
        words = split_whitespace(line)
        if len(words) == 2 and not _set_path(game, words[0], words[1]):
            return False
    return True


def parse_colors(lines: Iterable[str], game: Game) -> bool:
    """Read the floor and ceiling colours, raising on a malformed one."""
    for line in lines:
        words = split_whitespace(line)
        if len(words) != 2:
            continue
        key, value = words
        if line.count(",") != 2 and key in ("F", "C"):
            raise CubError(COLOR_ERROR, 1)
        if key == "F" and not parse_color(value, game.floor_color):
            raise CubError(COLOR_ERROR, 1)
        if key == "C" and not parse_color(value, game.ceiling_color):
            raise CubError(COLOR_ERROR, 1)
    return True


def check_paths(game: Game) -> None:
    """Raise unless every texture file can be opened."""
    for name, texture in (
        ("North", game.north),
        ("South", game.south),
        ("West", game.west),
        ("East", game.east),
    ):
        if not file_exists(texture.path):
            raise CubError(f"Error\n{name} wall texture file does not exist", 1)


def map_is_last(text: str) -> bool:
    """True when the file text ends with a map line."""
    if not text:
        return False
    last = len(text) - 1
    if text[last] in _MAP_CHARS:
        return True
    return last > 1 and text[last - 1] != "\n" and text[last] == "\n"


def _is_header(line: str) -> bool:
    words = split_whitespace(line)
    if len(words) == 2:
        return any(in_str(words[0], key) for key in _HEADER_KEYS)
    return bool(line) and is_all_space(line)


def strip_header(lines: Iterable[str]) -> list[str]:
    """Drop the texture/colour lines and blank-only lines, keeping the map."""
    return [line for line in lines if not _is_header(line)]


def check_map_block(lines: Sequence[str]) -> list[str]:
    """Check the map is one unbroken block and return it.

    Leading newlines are removed from the first map line.  Raises when the
    map is interrupted by an empty line or is missing.
    """
    result = list(lines)
    started = False
    for y, line in enumerate(result):
        has_cells = WALL in line or FLOOR in line
        if has_cells and not started:
            line = line.lstrip("\n")
            result[y] = line
            started = True
            has_cells = WALL in line or FLOOR in line
        if started and (line.count("\n") > 1 or not has_cells):
            raise CubError("Error\nInvalid map, contains newline", 0)
    if not started:
        raise CubError("Error\nMap not found", 0)
    return result


def check_map_characters(lines: Iterable[str]) -> None:
    """Raise on the first character not allowed in a map line."""
    for y, line in enumerate(lines):
        for j, ch in enumerate(line):
            if ch not in _MAP_CHARS and ch != "\n":
                raise CubError(
                    f"Error\nMap, invalid:{ord(ch)}({ch}) L:{y} C:{j}", 0
                )


def transpose(lines: Sequence[str]) -> list[str]:
    """Swap rows and columns, padding short lines and newlines with spaces."""
    width = max((len(line) for line in lines), default=0)
    return [
        "".join(
            line[x] if x < len(line) and line[x] != "\n" else SPACE
            for line in lines
        )
        for x in range(width)
    ]


def load_map(game: Game, lines: Sequence[str]) -> None:
    """Store the transposed map lines in ``game``."""
    game.map.grid = transpose(lines)


def orientation_angle(ch: str) -> float:
    """Return the starting heading for a player character."""
    try:
        return _ANGLES[ch]
    except KeyError:
        raise ValueError(f"not a player character: {ch!r}") from None


def find_player(game: Game) -> bool:
    """Locate the player, replace it with floor and set position and heading."""
    grid = game.map.grid
    for y, row in enumerate(grid):
        for x, ch in enumerate(row):
            if ch in _PLAYER_CHARS:
                grid[y] = row[:x] + FLOOR + row[x + 1 :]
                game.player.x = y
                game.player.y = x
                game.player.angle = orientation_angle(ch)
                return True
    return False


def count_players(game: Game) -> int:
    """Number of player characters in the map."""
    return sum(row.count(ch) for row in game.map.grid for ch in _PLAYER_CHARS)


def valid_characters(game: Game) -> bool:
    """True when the map holds only walls, floors, spaces and players."""
    return all(ch in _MAP_CHARS for row in game.map.grid for ch in row)


def _at(grid: Sequence[str], y: int, x: int) -> str:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return ""


def up(grid: Sequence[str], y: int, x: int) -> str:
    """The cell above, or an empty string at the edge."""
    if y == 0:
        return ""
    return _at(grid, y - 1, x)


def down(grid: Sequence[str], y: int, x: int) -> str:
    """The cell below, or an empty string at the edge."""
    if y + 1 >= len(grid):
        return ""
    return _at(grid, y + 1, x)


def left(grid: Sequence[str], y: int, x: int) -> str:
    """The cell to the left, or an empty string at the edge."""
    if x == 0:
        return ""
    return _at(grid, y, x - 1)


def right(grid: Sequence[str], y: int, x: int) -> str:
    """The cell to the right, or an empty string at the edge."""
    if x + 1 >= len(grid[y]):
        return ""
    return _at(grid, y, x + 1)


def _neighbours(grid: Sequence[str], y: int, x: int) -> tuple[str, str, str, str]:
    return up(grid, y, x), down(grid, y, x), left(grid, y, x), right(grid, y, x)


def player_in_map(game: Game) -> bool:
    """False when the player stands next to empty space."""
    player: Player = game.player
    return SPACE not in _neighbours(game.map.grid, int(player.x), int(player.y))


def is_closed(grid: Sequence[str]) -> bool:
    """True when no floor cell touches the edge or empty space."""
    for y, row in enumerate(grid):
        for x, ch in enumerate(row):
            if ch != FLOOR:
                continue
            if any(n in ("", SPACE) for n in _neighbours(grid, y, x)):
                return False
    return True


def _check_params(path: str, game: Game) -> None:
    if not check_ext(path):
        raise CubError("Error\nInvalid file extension. Expected .cub", 1)
    if not file_exists(path):
        raise CubError("Error\nFailed to open file", 1)
    lines = read_lines(path)
    if not parse_paths(lines, game):
        raise CubError("Error\nInvalid texture path format", 1)
    parse_colors(lines, game)
    check_paths(game)


def _read_map(path: str, game: Game) -> None:
    text = read_text(path)
    if not map_is_last(text):
        raise CubError("Error\nMap must be the last element in the file", 0)
    lines = check_map_block(strip_header(split_keep(text, "\n")))
    check_map_characters(lines)
    load_map(game, lines)


def _check_map(game: Game) -> None:
    if not valid_characters(game):
        raise CubError("Error:\nInvalid characters in the map", 0)
    if count_players(game) != 1:
        raise CubError("Error:\nThere must be exactly one player in the map", 0)
    if not find_player(game):
        raise CubError("Error:\nPlayer not found in the map", 0)
    if not player_in_map(game):
        raise CubError("Error:\nPlayer is not in a valid position", 0)
    if not is_closed(game.map.grid):
        raise CubError("Error:\nThe map is not closed", 0)


def parse(path: str | os.PathLike[str], game: Game | None = None) -> Game:
    """Read and validate a scene file, filling and returning ``game``."""
    if game is None:
        game = Game()
    path = os.fspath(path)
    _check_params(path, game)
    _read_map(path, game)
    _check_map(game)
    return game