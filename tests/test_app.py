import pytest
from PIL import Image

from cubraycaster.app import (
    USAGE,
    cast_column,
    handle_key,
    main,
    move_player,
    render_frame,
    summary,
)
from cubraycaster.frame import Frame, convert_color
from cubraycaster.models import (
    HEIGHT,
    KEY_A,
    KEY_D,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_W,
    Game,
    GameMap,
    Player,
    Texture,
)

WALL_COLOR = 0x123456


def _texture():
    return Texture(path="wall.xpm", width=64, height=64, pixels=[WALL_COLOR] * 4096)


def _room_game():
    game = Game()
    game.map = GameMap(["11111", "10001", "10001", "10001", "11111"])
    game.player = Player(x=160.0, y=160.0, angle=0.0)
    for attr in ("north", "south", "west", "east"):
        setattr(game, attr, _texture())
    game.floor_color = [10, 20, 30]
    game.ceiling_color = [40, 50, 60]
    return game


@pytest.mark.parametrize(
    "key,flag",
    [
        (KEY_W, "key_up"),
        (KEY_S, "key_down"),
        (KEY_A, "key_left"),
        (KEY_D, "key_right"),
        (KEY_LEFT, "left_rotate"),
        (KEY_RIGHT, "right_rotate"),
    ],
)
def test_handle_key_press_and_release(key, flag):
    player = Player()
    assert handle_key(player, key, True) is False
    assert getattr(player, flag) is True
    assert handle_key(player, key, False) is False
    assert getattr(player, flag) is False


def test_escape_release_requests_close():
    player = Player()
    assert handle_key(player, KEY_ESC, True) is False
    assert handle_key(player, KEY_ESC, False) is True


def test_unknown_key_changes_nothing():
    player = Player()
    assert handle_key(player, 42, True) is False
    assert player == Player()


def test_move_player_rotates_right():
    game = _room_game()
    game.player.angle = 1.0
    game.player.right_rotate = True
    move_player(game, 1)
    assert game.player.angle == pytest.approx(1.03)


def test_move_player_forward_uses_integer_speed():
    game = Game()
    game.map = GameMap(["111", "101", "111"])
    game.player = Player(x=96.0, y=96.0, angle=0.0, key_up=True)
    move_player(game, 1)
    assert game.player.x == pytest.approx(99.0)
    assert game.player.y == pytest.approx(96.0)


def test_move_player_without_keys_stays():
    game = _room_game()
    move_player(game, 3)
    assert (game.player.x, game.player.y, game.player.angle) == (160.0, 160.0, 0.0)


def test_cast_column_draws_ceiling_wall_floor():
    game = _room_game()
    frame = Frame(4, HEIGHT)
    ray = cast_column(game, frame, 0.0, 2)
    assert ray.x > game.player.x
    assert frame.get_pixel(2, 0) == convert_color(game.ceiling_color)
    assert frame.get_pixel(2, HEIGHT - 1) == convert_color(game.floor_color)
    assert frame.get_pixel(2, HEIGHT // 2) == WALL_COLOR
    assert frame.get_pixel(0, 0) == 0


def test_render_frame_fills_every_column():
    game = _room_game()
    frame = Frame(32, HEIGHT)
    frame.clear(0xFFFFFF)
    render_frame(game, frame)
    for column in range(frame.width):
        assert frame.get_pixel(column, 0) == convert_color(game.ceiling_color)
        assert frame.get_pixel(column, HEIGHT - 1) == convert_color(game.floor_color)
        assert frame.get_pixel(column, HEIGHT // 2) == WALL_COLOR


def test_summary_lists_scene():
    game = Game()
    game.map = GameMap(["111", "1N1", "101", "111"])
    game.player = Player(x=1, y=2, angle=1.570)
    game.north.path = "n.xpm"
    game.south.path = "s.xpm"
    game.west.path = "w.xpm"
    game.east.path = "e.xpm"
    lines = summary(game).splitlines()
    assert lines[0] == "Player position: x = 1.000000, y = 2.000000, angle = 1.570000"
    assert lines[1] == "Map size: lines = 4, cols = 3"
    assert lines[2:] == [
        "North texture: n.xpm",
        "South texture: s.xpm",
        "West texture: w.xpm",
        "East texture: e.xpm",
    ]


def test_main_usage(capsys):
    assert main([]) == 2
    assert USAGE in capsys.readouterr().out


def test_main_bad_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert "Invalid file extension. Expected .cub" in capsys.readouterr().out


def _write_scene(tmp_path, texture, map_lines):
    header = "".join(f"{key} {texture}\n" for key in ("NO", "SO", "WE", "EA"))
    body = header + "F 10,20,30\nC 40,50,60\n\n" + "\n".join(map_lines) + "\n"
    scene = tmp_path / "scene.cub"
    scene.write_text(body)
    return scene


def test_main_unclosed_map(tmp_path, capsys):
    texture = tmp_path / "wall.png"
    Image.new("RGB", (64, 64), (1, 2, 3)).save(texture)
    scene = _write_scene(tmp_path, texture, ["1111", "1N00", "1111"])
    assert main([str(scene)]) == 0
    assert "The map is not closed" in capsys.readouterr().out


def test_main_unloadable_texture(tmp_path, capsys):
    texture = tmp_path / "wall.xpm"
    texture.write_text("not an image")
    scene = _write_scene(tmp_path, texture, ["1111", "1N01", "1111"])
    assert main([str(scene)]) == 0
    out = capsys.readouterr().out
    assert "Failed to load north texture" in out
    assert "Failed to load east texture" in out