"""Command-line entry point, input handling and the per-frame render loop."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .frame import Frame, draw_column, load_texture
from .models import (
    HEIGHT,
    KEY_A,
    KEY_D,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_W,
    PI,
    WIDTH,
    CubError,
    Game,
    Player,
)
from .movement import (
    elapsed_modifier,
    rotate_player,
    translate_horizontal,
    translate_vertical,
)
from .parsing import parse
from .raycast import Ray, nearest_hit

USAGE = "Error:\nUsage: ./cubo3D <map.cub>"

_KEY_FLAGS = {
    KEY_W: "key_up",
    KEY_S: "key_down",
    KEY_A: "key_left",
    KEY_D: "key_right",
    KEY_LEFT: "left_rotate",
    KEY_RIGHT: "right_rotate",
}


def handle_key(player: Player, key: int, pressed: bool) -> bool:
    """Update the held-key flags; return True when the game should close."""
    flag = _KEY_FLAGS.get(key)
    if flag is not None:
        setattr(player, flag, pressed)
    return key == KEY_ESC and not pressed


def move_player(game: Game, modifier: int) -> None:
    """Rotate and move the player, scaled by the elapsed-time modifier."""
    speed = int(0.2 * modifier + 3)
    angle_speed = 0.03 * modifier
    rotate_player(game.player, angle_speed)
    translate_vertical(game, speed)
    translate_horizontal(game, speed)


def cast_column(game: Game, frame: Frame, angle: float, column: int) -> Ray:
    """Cast one ray and draw its screen column; return the ray that was drawn."""
    ray = nearest_hit(game.map, game.player, angle)
    draw_column(game, frame, ray, column)
    return ray


def render_frame(game: Game, frame: Frame) -> None:
    """Clear the frame and draw one ray per column across a 60° field of view."""
    frame.clear(0)
    offset = PI / 3 / frame.width
    angle = game.player.angle - PI / 6
    for column in range(frame.width):
        cast_column(game, frame, angle, column)
        angle += offset


def summary(game: Game) -> str:
    """Describe the parsed scene: player, map size and texture paths."""
    player = game.player
    return "\n".join(
        (
            f"Player position: x = {player.x:f}, y = {player.y:f}, "
            f"angle = {player.angle:f}",
            f"Map size: lines = {game.map.lines}, cols = {game.map.cols}",
            f"North texture: {game.north.path}",
            f"South texture: {game.south.path}",
            f"West texture: {game.west.path}",
            f"East texture: {game.east.path}",
        )
    )


def _load_textures(game: Game) -> bool:
    ok = True
    for name, attr in (
        ("north", "north"),
        ("south", "south"),
        ("west", "west"),
        ("east", "east"),
    ):
        current = getattr(game, attr)
        try:
            setattr(game, attr, load_texture(current.path))
        except CubError:
            print(f"Error\nFailed to load {name} texture")
            ok = False
    return ok


def _run_window(game: Game) -> int:
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    import pygame
    from PIL import Image

    keymap = {
        pygame.K_w: KEY_W,
        pygame.K_s: KEY_S,
        pygame.K_a: KEY_A,
        pygame.K_d: KEY_D,
        pygame.K_LEFT: KEY_LEFT,
        pygame.K_RIGHT: KEY_RIGHT,
        pygame.K_ESCAPE: KEY_ESC,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("Game")
        frame = Frame(WIDTH, HEIGHT)
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return 0
                if event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    key = keymap.get(event.key)
                    if key is None:
                        continue
                    pressed = event.type == pygame.KEYDOWN
                    if handle_key(game.player, key, pressed):
                        return 0
            move_player(game, elapsed_modifier())
            render_frame(game, frame)
            image = Image.frombuffer(
                "RGB", (frame.width, frame.height), frame.to_bgra(), "raw", "BGRX", 0, 1
            )
            rgb = image.tobytes()
            surface = pygame.image.frombuffer(rgb, (frame.width, frame.height), "RGB")
            screen.blit(surface, (0, 0))
            pygame.display.flip()
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the scene file given on the command line and run the game."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE)
        return 2
    game = Game()
    try:
        parse(args[0], game)
    except CubError as exc:
        print(exc.message)
        return exc.exit_code
    if not _load_textures(game):
        return 0
    print(summary(game))
    game.player.place_in_block()
    return _run_window(game)