# canis

A small 3D renderer for block worlds. It reads a level map made of numbered
tiles, builds the scene from cube, plant and fire models, lights it with one
directional light and four point lights, wraps it in a skybox and lets you fly
through it with a first-person camera. Fire tiles play a looping 31-frame
sprite animation and flicker in height.

Rendering uses OpenGL 3.3 through pyglet; images are decoded with Pillow and
the matrix maths uses NumPy.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running

Start the viewer from a directory that contains an `assets/` folder:

```
canis
```

The command takes no options besides `--help`. It exits with status 1 and
prints `file not found at: assets/maps/level.map` when the level is missing.

The viewer expects these files under `assets/`:

- `project.canis` – optional settings (see below)
- `maps/level.map` – the level
- `models/cube.obj`, `models/plants.obj`, `models/fire.obj`
- `textures/glass.png`, `grass.png`, `blue_orchid.png`, `oak_planks.png`,
  `house.png`, `grass_block_side.png`, `grass_block_top.png`,
  `dirt_bottom.png`, `bricks.png`, `container2_specular.png`
- `textures/fire_textures/fire_1.png` … `fire_31.png`
- `textures/lowpoly-skybox/skybox_{left,right,up,down,front,back}.png`
- `shaders/hello_shader.{vs,fs}`, `block_flat.{vs,fs}`, `fire_shader.{vs,fs}`,
  `skybox.{vs,fs}`

### Controls

| Input        | Action                          |
|--------------|---------------------------------|
| W / S        | move forward / backward         |
| A / D        | strafe left / right             |
| mouse        | look around (while locked)      |
| Escape       | lock or release the mouse       |

The mouse starts locked. Pitch is clamped to ±89° so the view never flips.
Closing the window ends the program.

## Settings file

`assets/project.canis` is a list of whitespace-separated `key value` pairs.
Unknown words are skipped, missing keys keep their defaults, and reading stops
at the first value that cannot be read. A missing file leaves every default in
place.

```
fullscreen false
width 1280
heigth 800
volume 1.0
use_frame_limit false
frame_limit 60
override_seed false
seed 0
log true
```

Note that the key for the window height is spelled `heigth` in the file; it is
stored in `ProjectConfig.height`. `volume` is clamped to the range 0.0–1.5.
Messages from `canis.debug` (`log`, `warning`, `error`, `fatal_error`) are only
printed when `log` is `true`.

## Level maps

A map is a stream of whitespace-separated integers. `-1` starts a new row,
`-2` starts a new layer; every other number is a tile in the current row.
Reading stops at the first token that is not an integer. A tile at layer `y`,
row `x`, column `z` is placed at position `(x, y, z)`.

| Code | Tile                                  |
|------|---------------------------------------|
| 0    | empty                                 |
| 1    | glass                                 |
| 2    | grass                                 |
| 3    | oak planks                            |
| 4    | dirt (separate top, side, bottom)     |
| 5    | bricks                                |
| 6    | flower                                |
| 7    | fire (animated)                       |
| 8    | house block                           |

Before the scene is built, rows 5–9 and columns 15–19 of the second layer are
re-planted at random: grass with chance 0.4, a flower with chance 0.3,
otherwise empty. Two extra fires are placed at `(5, 1, 5)` and `(3, 1, 7)`.

## Using the pieces as a library

The non-graphical parts work without a window:

```python
import random

from canis.config import parse_config
from canis.objfile import parse_obj
from canis.camera import Camera, CameraMovement
from canis.input_manager import InputManager, KeyEvent
from canis.app import load_map, randomize_grass_and_flowers

config = parse_config("width 1920 heigth 1080 log true")
print(config.width, config.height)

camera = Camera()
camera.process_keyboard(CameraMovement.FORWARD, 0.016)
camera.process_mouse_movement(10.0, -5.0)
view = camera.get_view_matrix()

positions, uvs, normals = parse_obj(open("assets/models/cube.obj").read())

inputs = InputManager()
inputs.update(1280, 800, [KeyEvent(ord("w"), True)])
assert inputs.get_key(ord("w")) and inputs.just_pressed_key(ord("w"))

level = load_map("assets/maps/level.map")
randomize_grass_and_flowers(level, 5, 10, 15, 20, rng=random.Random(1))
```

Other modules:

- `canis.transform` – 4×4 matrix helpers (`translate`, `rotate`, `scale`,
  `perspective`, `look_at`) and the `Transform` dataclass whose `matrix()`
  gives translate · rotate x · rotate y · rotate z · scale.
- `canis.frame_rate.FrameRateManager` – measures frame times, averages the
  frame rate over the last 60 frames and sleeps to hold a target rate; the
  clock and sleep functions can be passed in.
- `canis.objfile` – `parse_obj`, `load_obj` and `load_obj_vertices` for
  triangulated OBJ files whose faces use `v/vt/vn`; V coordinates are negated.
  Unreadable input raises `ObjFormatError`.
- `canis.input_manager.InputManager` – turns event objects (`KeyEvent`,
  `MouseMotionEvent`, `MouseButtonEvent`, `ControllerDeviceEvent`,
  `ControllerButtonEvent`, `QuitEvent`) into per-frame key, click and
  controller queries.
- `canis.world` – `World`, `Entity`, `PointLight`, `DirectionalLight` and
  `skybox_faces`. Entities and lights are stored by copy; an entity's `update`
  callback runs on every `World.update`.
- `canis.graphics`, `canis.shader`, `canis.model`, `canis.window` – texture
  loading, shader programs (`ShaderError` on failure), OBJ meshes uploaded as
  vertex arrays, and the pyglet window. These need an OpenGL context.

## What it does not do

- There is no in-scene editor or entity picker; entities can only be changed
  from code.
- The window produces keyboard, mouse and close events only. `InputManager`
  understands game controllers, but nothing in the package opens a controller
  or reads one, so controller input must be fed in by the caller.
- No sound is played; the `volume` setting is read but not used.
- `use_frame_limit`, `frame_limit`, `override_seed` and `seed` are read into
  the configuration but the viewer always targets 60 frames per second and
  seeds the vegetation at random.