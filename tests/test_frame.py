import pytest
from PIL import Image

from cubraycaster.frame import (
    Frame,
    choose_texture,
    convert_color,
    draw_column,
    load_texture,
    texture_x,
    texture_y,
)
from cubraycaster.models import HEIGHT, CubError, Game, Player, Texture
from cubraycaster.raycast import Orientation, Ray


def _solid(color: int, size: int = 64) -> Texture:
    return Texture(path="", width=size, height=size, pixels=[color] * (size * size))


def test_put_get_round_trip():
    frame = Frame(4, 3)
    frame.put_pixel(2, 1, 0x123456)
    assert frame.get_pixel(2, 1) == 0x123456
    assert frame.get_pixel(1, 2) == 0


def test_put_pixel_masks_to_24_bits():
    frame = Frame(2, 2)
    frame.put_pixel(0, 0, 0x1ABCDEF)
    assert frame.get_pixel(0, 0) == 0xABCDEF


def test_put_pixel_outside_is_ignored():
    frame = Frame(3, 3)
    frame.put_pixel(-1, 0, 0xFF0000)
    frame.put_pixel(3, 0, 0xFF0000)
    frame.put_pixel(0, 3, 0xFF0000)
    assert all(p == 0 for p in frame.pixels)


def test_get_pixel_outside_raises():
    frame = Frame(3, 3)
    with pytest.raises(IndexError):
        frame.get_pixel(3, 0)


def test_clear_fills_everything():
    frame = Frame(5, 4)
    frame.put_pixel(1, 1, 0x00FF00)
    frame.clear(0xFF0000)
    assert set(frame.pixels) == {0xFF0000}
    assert len(frame.to_bgra()) == 5 * 4 * 4


def test_draw_square_border_and_fill():
    frame = Frame(8, 8)
    frame.draw_square(1, 1, 4, 0x00FF00)
    assert frame.get_pixel(1, 1) == 0x474747
    assert frame.get_pixel(4, 2) == 0x474747
    assert frame.get_pixel(2, 2) == 0x00FF00
    assert frame.get_pixel(0, 0) == 0


def test_convert_color():
    assert convert_color([255, 0, 0]) == 0xFF0000
    assert convert_color([1, 2, 3]) == 0x010203
    assert convert_color([-1, -1, -1]) == 0xFFFFFF


@pytest.mark.parametrize("coord", [70.0, 130.5, 200.0, 255.0])
def test_texture_x_flips_for_north(coord):
    tex = _solid(0)
    south = texture_x(tex, Ray(coord, 0.0, 0.0, Orientation.SOUTH))
    north = texture_x(tex, Ray(coord, 0.0, 0.0, Orientation.NORTH))
    assert 0 <= south < tex.width
    assert north == tex.width - 1 - south


def test_texture_x_vertical_walls_use_y():
    tex = _solid(0)
    west = texture_x(tex, Ray(999.0, 100.0, 0.0, Orientation.WEST))
    east = texture_x(tex, Ray(5.0, 100.0, 0.0, Orientation.EAST))
    assert east == tex.width - 1 - west


def test_choose_texture():
    game = Game()
    assert choose_texture(game, Ray(0, 0, 0, Orientation.NORTH)) is game.north
    assert choose_texture(game, Ray(0, 0, 0, Orientation.SOUTH)) is game.south
    assert choose_texture(game, Ray(0, 0, 0, Orientation.WEST)) is game.west
    assert choose_texture(game, Ray(0, 0, 0, Orientation.EAST)) is game.east


def test_texture_y_step_grows_with_distance():
    player = Player(x=0, y=0, angle=0)
    tex = _solid(0)
    start_near, step_near = texture_y(player, tex, Ray(50, 0, 0, Orientation.WEST))
    _, step_far = texture_y(player, tex, Ray(100, 0, 0, Orientation.WEST))
    assert start_near == pytest.approx(0, abs=1e-6)
    assert step_far == pytest.approx(2 * step_near)


def test_load_texture(tmp_path):
    path = tmp_path / "wall.png"
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((1, 0), (0, 0, 255))
    img.save(path)
    tex = load_texture(path)
    assert (tex.width, tex.height) == (2, 1)
    assert tex.pixel(0, 0) == 0xFF0000
    assert tex.pixel(1, 0) == 0x0000FF


def test_load_texture_missing(tmp_path):
    with pytest.raises(CubError):
        load_texture(tmp_path / "missing.xpm")


def _game() -> Game:
    game = Game(player=Player(x=160, y=160, angle=0))
    game.ceiling_color = [10, 20, 30]
    game.floor_color = [40, 50, 60]
    for tex in (game.north, game.south, game.west, game.east):
        tex.width = tex.height = 64
        tex.pixels = [0x123456] * (64 * 64)
    return game


def test_draw_column_layers():
    game = _game()
    frame = Frame()
    draw_column(game, frame, Ray(256, 160, 0, Orientation.WEST), 5)
    assert frame.get_pixel(5, 0) == convert_color(game.ceiling_color)
    assert frame.get_pixel(5, HEIGHT - 1) == convert_color(game.floor_color)
    assert frame.get_pixel(5, HEIGHT // 2) == 0x123456
    assert frame.get_pixel(6, HEIGHT // 2) == 0


def test_draw_column_close_wall_fills_column():
    game = _game()
    frame = Frame()
    draw_column(game, frame, Ray(161, 160, 0, Orientation.WEST), 0)
    assert frame.get_pixel(0, 0) == 0x123456
    assert frame.get_pixel(0, HEIGHT - 1) == 0x123456