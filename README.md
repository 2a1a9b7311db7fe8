# cubraycaster

A small first-person raycaster. It reads a `.cub` scene file and checks that
the scene is well formed. It then opens a 1280×720 window titled "Game", where
you can walk around the map. Walls are drawn with textures. The floor and
ceiling are drawn in flat colours.

## Installing

```
pip install .
```

The window and keyboard input use `pygame`. Textures are loaded with `pillow`,
so a texture can be any image format that Pillow can open.

## Running

```
cubraycaster path/to/scene.cub
```

Controls:

| Key         | Action              |
|-------------|---------------------|
| W / S       | move forward / back |
| A / D       | strafe left / right |
| ← / →       | turn                |
| Esc         | quit (on release)   |

Closing the window also quits.

Before the window opens, the program loads the four textures. It then prints
the player's start position (in map cells) and angle, the map size, and the
four texture paths.

## The `.cub` format

A scene file must end in `.cub`, and the map must come last in it. Before the
map, the file holds these elements, one per line, in any order:

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE` and `EA` name the wall textures. Each may appear only once,
  and each file must exist and load as an image. Textures render best when
  they are 64 pixels wide (or a multiple of 64) and their height is a power of
  two.
- `F` (floor) and `C` (ceiling) are RGB colours. A colour line holds exactly
  two commas, each colour is given once, and each of its three components is
  made only of digits and lies in the range 0–255.

The map uses these characters:

- `1` for a wall
- `0` for open floor
- a space for empty space outside the map
- `N`, `S`, `E` or `W` for the player's start cell and facing

There must be exactly one player, and the player may not stand next to a
space. Every floor cell must be enclosed, so a `0` may not touch a space or
the edge of the map. The map may not contain blank lines.

Example:

```
111111
100101
1010N1
111111
```

## Errors and exit status

An invalid scene makes the program print a message that starts with `Error`
and stop before opening a window. The exit status depends on the kind of
error:

- A wrong number of arguments prints a usage line and exits with status 2.
- Problems with the file name, with reading the file, or with the texture and
  colour lines exit with status 1.
- Problems in the map itself exit with status 0. This covers a map that is
  not last, blank lines, bad characters, a wrong player count, a badly placed
  player, or an open map.
- A texture that exists but cannot be loaded as an image also exits with
  status 0.

## Using it as a library

- `cubraycaster.parsing.parse(path, game=None)` reads and validates a scene
  file and returns a `cubraycaster.models.Game`. It raises
  `cubraycaster.models.CubError` when the file is invalid. The error carries
  `message` and `exit_code`.
- `cubraycaster.frame.load_texture(path)` reads an image into a
  `cubraycaster.models.Texture`.
- `Player.place_in_block()` moves the player from map-cell coordinates to the
  pixel centre of that cell. The ray casting and movement functions expect
  pixel coordinates.
- `cubraycaster.raycast.nearest_hit(game_map, player, angle)` returns the
  `Ray` where a ray first meets a wall.
  `cubraycaster.raycast.line_points(x0, y0, x1, y1)` yields the points of a
  Bresenham line.
- `cubraycaster.app.render_frame(game, frame)` draws one frame into a
  `cubraycaster.frame.Frame`, a grid of `0xRRGGBB` pixels.
  `Frame.to_bgra()` returns the frame as 32-bit BGRA bytes.
- `cubraycaster.app.handle_key(player, key, pressed)` and
  `cubraycaster.app.move_player(game, modifier)` apply input and movement.
  `cubraycaster.app.summary(game)` returns the text printed at start-up.

## What it does not do

The package draws only the first-person view. It has no overhead map view, no
sprites, doors or sound, and no mouse look.