"""Voxel scene: loads a layered block map, spawns it into a world and runs the frame loop."""

from __future__ import annotations

import argparse
import dataclasses
import math
import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from canis import graphics
from canis.config import get_config, init
from canis.debug import log
from canis.frame_rate import FrameRateManager
from canis.input_manager import InputManager
from canis.model import load_model
from canis.shader import Shader
from canis.transform import Transform
from canis.window import Window, WindowFlags
from canis.world import DirectionalLight, Entity, PointLight, World

LevelMap = list[list[list[int]]]

MAP_PATH = "assets/maps/level.map"
SKYBOX_PATH = "assets/textures/lowpoly-skybox/"
WINDOW_TITLE = "Hello Graphics"
TARGET_FPS = 60

FIRE_FRAME_COUNT = 31
FIRE_ANIM_SPEED = 0.05

EMPTY = 0
GLASS = 1
GRASS = 2
OAK_PLANK = 3
DIRT = 4
BRICK = 5
FLOWER = 6
FIRE = 7
HOUSE = 8

NEW_ROW = -1
NEW_LAYER = -2

_SPACE = re.compile(r"\s*")
_INT = re.compile(r"[+-]?\d+")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1
_UINT_RANGE = 2**32


def _integers(text: str):
    """Yield leading integers from text, stopping at the first token that is not one."""
    pos = 0
    while True:
        start = _SPACE.match(text, pos).end()
        match = _INT.match(text, start)
        if match is None:
            return
        value = int(match.group())
        if not _INT_MIN <= value <= _INT_MAX:
            return
        pos = match.end()
        yield value


def load_map(path: str | Path) -> LevelMap:
    """Read a map of layers of rows of block codes.

    -1 starts a new row and -2 a new layer; reading stops at the first
    token that is not an integer.
    """
    text = Path(path).read_text()
    level_map: LevelMap = [[[]]]
    for number in _integers(text):
        if number == NEW_LAYER:
            level_map.append([[]])
        elif number == NEW_ROW:
            level_map[-1].append([])
        else:
            level_map[-1][-1].append(number % _UINT_RANGE)
    return level_map


def randomize_grass_and_flowers(
    level_map: LevelMap,
    start_y: int,
    end_y: int,
    start_x: int,
    end_x: int,
    grass_chance: float = 0.4,
    flower_chance: float = 0.3,
    rng: random.Random | None = None,
) -> None:
    """Fill a region of the second layer with grass, flowers or nothing at random.

    Raises ValueError if the map has no second layer or the region lies outside it.
    """
    if (
        len(level_map) < 2
        or len(level_map[1]) < end_y
        or not level_map[1]
        or len(level_map[1][0]) < end_x
    ):
        raise ValueError("Map is not properly loaded or specified region is out of bounds.")
    rng = rng if rng is not None else random.Random()
    layer = level_map[1]

    for y in range(start_y, end_y):
        for x in range(start_x, end_x):
            if not (0 <= y < len(layer) and 0 <= x < len(layer[y])):
                continue
            value = rng.random()
            if value < grass_chance:
                layer[y][x] = GRASS
                log(f"Placed grass at [1][{y}][{x}]")
            elif value < grass_chance + flower_chance:
                layer[y][x] = FLOWER
                log(f"Placed flower at [1][{y}][{x}]")
            else:
                layer[y][x] = EMPTY
                log(f"Left empty at [1][{y}][{x}]")


def setup_random_vegetation(level_map: LevelMap, rng: random.Random | None = None) -> None:
    """Scatter grass and flowers over the 5x5 patch of the second layer."""
    try:
        randomize_grass_and_flowers(level_map, 5, 10, 15, 20, 0.4, 0.3, rng)
    except ValueError as exc:
        log(f"Error: {exc}")


def spawn_lights(world: World) -> None:
    """Add the default directional light and four point lights."""
    world.spawn_directional_light(DirectionalLight())

    light = PointLight(
        position=(0.0, 0.0, 0.0),
        ambient=(0.2, 0.2, 0.2),
        diffuse=(0.5, 0.5, 0.5),
        specular=(1.0, 1.0, 1.0),
        constant=1.0,
        linear=0.09,
        quadratic=0.032,
    )
    world.spawn_point_light(light)

    for position, ambient in (
        ((0.0, 0.0, 1.0), (4.0, 0.0, 0.0)),
        ((-2.0, -2.0, -2.0), (0.0, 4.0, 0.0)),
        ((2.0, 2.0, 2.0), (0.0, 0.0, 4.0)),
    ):
        light = dataclasses.replace(light, position=position, ambient=ambient)
        world.spawn_point_light(light)


def rotate(world: World, entity: Entity, delta_time: float) -> None:
    """Per-frame update for static blocks; leaves the entity as it is."""


@dataclass
class FireAnimation:
    """Shared flip-book animation for every fire entity."""

    textures: list[Any] = field(default_factory=list)
    frame_count: int = FIRE_FRAME_COUNT
    speed: float = FIRE_ANIM_SPEED
    timer: float = 0.0
    current_frame: int = 0

    def advance(self, delta_time: float) -> int:
        """Add elapsed time and step at most one frame; return the current frame."""
        self.timer += delta_time
        if self.timer >= self.speed:
            self.timer -= self.speed
            self.current_frame = (self.current_frame + 1) % self.frame_count
            log(f"Fire animation frame: {self.current_frame}")
        return self.current_frame

    def animate(self, world: Any, entity: Entity, delta_time: float) -> None:
        """Show the current frame on the entity and make it flicker in height."""
        entity.albedo = self.textures[self.current_frame]
        flicker = 0.9 + 0.1 * math.sin(world.time() * 10.0)
        entity.transform.scale = np.array([1.0, flicker, 1.0])


def _build_shader(vertex: str, fragment: str, attributes: Sequence[str],
                  uniforms: dict[str, bool | int | float]) -> Shader:
    shader = Shader()
    shader.compile(vertex, fragment)
    for name in attributes:
        shader.add_attribute(name)
    shader.link()
    with shader:
        for name, value in uniforms.items():
            if isinstance(value, bool):
                shader.set_bool(name, value)
            elif isinstance(value, int):
                shader.set_int(name, value)
            else:
                shader.set_float(name, value)
    return shader


def _load_fire_textures() -> list[graphics.GLTexture]:
    textures = []
    for frame in range(1, FIRE_FRAME_COUNT + 1):
        path = f"assets/textures/fire_textures/fire_{frame}.png"
        texture = graphics.load_image_gl(path, True)
        if texture.id == 0:
            log(f"Failed to load fire texture: {path}")
        else:
            log(f"Successfully loaded fire texture: {path}")
        textures.append(texture)
    return textures


def _spawn_map(world: World, level_map: LevelMap, blocks: dict[int, Entity]) -> None:
    for y, layer in enumerate(level_map):
        for x, row in enumerate(layer):
            for z, code in enumerate(row):
                template = blocks.get(code)
                if template is not None:
                    world.spawn(dataclasses.replace(
                        template, transform=Transform(position=(float(x), float(y), float(z)))
                    ))


def main(argv: Sequence[str] | None = None) -> int:
    """Open the window, build the scene and run until the window is closed."""
    argparse.ArgumentParser(prog="canis", description="Render the block scene.").parse_args(argv)

    init()
    config = get_config()

    with InputManager() as input_manager:
        frame_rate = FrameRateManager(TARGET_FPS)

        window = Window()
        window.mouse_lock(True)
        flags = WindowFlags.FULLSCREEN if config.fullscreen else 0
        window.create(WINDOW_TITLE, config.width, config.height, flags)

        world = World(window, input_manager, SKYBOX_PATH)
        spawn_lights(world)

        graphics.enable_alpha_channel()
        graphics.enable_depth_test()

        material = {"MATERIAL.diffuse": 0, "MATERIAL.specular": 1, "MATERIAL.shininess": 64.0}
        shader = _build_shader(
            "assets/shaders/hello_shader.vs", "assets/shaders/hello_shader.fs",
            ["aPosition"], {**material, "WIND": False},
        )
        grass_shader = _build_shader(
            "assets/shaders/hello_shader.vs", "assets/shaders/hello_shader.fs",
            ["aPosition"], {**material, "WIND": True, "WINDEFFECT": 0.2},
        )
        flat_shader = _build_shader(
            "assets/shaders/block_flat.vs", "assets/shaders/block_flat.fs",
            ["aPosition", "aNormal", "aTexCoords"],
            {"uSideTex": 0, "uTopTex": 1, "uBottomTex": 2, "MATERIAL.shininess": 64.0},
        )
        fire_shader = _build_shader(
            "assets/shaders/fire_shader.vs", "assets/shaders/fire_shader.fs",
            ["aPosition", "aNormal", "aUV"],
            {"MATERIAL.diffuse": 0, "MATERIAL.specular": 1, "MATERIAL.shininess": 32.0},
        )

        glass = graphics.load_image_gl("assets/textures/glass.png", True)
        grass = graphics.load_image_gl("assets/textures/grass.png", False)
        flower = graphics.load_image_gl("assets/textures/blue_orchid.png", False)
        oak_plank = graphics.load_image_gl("assets/textures/oak_planks.png", True)
        house = graphics.load_image_gl("assets/textures/house.png", True)
        dirt_side = graphics.load_image_gl("assets/textures/grass_block_side.png", False)
        dirt_top = graphics.load_image_gl("assets/textures/grass_block_top.png", False)
        dirt_bottom = graphics.load_image_gl("assets/textures/dirt_bottom.png", False)
        brick = graphics.load_image_gl("assets/textures/bricks.png", True)
        specular = graphics.load_image_gl("assets/textures/container2_specular.png", True)

        fire = FireAnimation(textures=_load_fire_textures())

        cube_model = load_model("assets/models/cube.obj")
        grass_model = load_model("assets/models/plants.obj")
        fire_model = load_model("assets/models/fire.obj")

        try:
            level_map = load_map(MAP_PATH)
        except OSError:
            print(f"file not found at: {MAP_PATH} ")
            return 1
        setup_random_vegetation(level_map)

        def block(tag: str, albedo: Any, model: Any, block_shader: Shader,
                  update: Any = None, top: Any = specular, bottom: Any = None) -> Entity:
            return Entity(tag=tag, albedo=albedo, specular=top, emission=bottom,
                          model=model, shader=block_shader, update=update)

        blocks = {
            GLASS: block("glass", glass, cube_model, shader),
            GRASS: block("grass", grass, grass_model, grass_shader, rotate),
            OAK_PLANK: block("oakplank", oak_plank, cube_model, shader, rotate),
            DIRT: block("dirt", dirt_side, cube_model, flat_shader, top=dirt_top, bottom=dirt_bottom),
            BRICK: block("brick", brick, cube_model, shader, rotate),
            FLOWER: block("flower", flower, grass_model, grass_shader, rotate),
            FIRE: block("fire", fire.textures[0], fire_model, fire_shader, fire.animate),
            HOUSE: block("house", house, cube_model, shader, rotate),
        }
        _spawn_map(world, level_map, blocks)

        for position in ((5.0, 1.0, 5.0), (3.0, 1.0, 7.0)):
            world.spawn(dataclasses.replace(blocks[FIRE], transform=Transform(position=position)))

        while input_manager.update(config.width, config.height, window.poll_events()):
            delta_time = frame_rate.start_frame()
            graphics.clear_buffer(graphics.COLOR_BUFFER_BIT | graphics.DEPTH_BUFFER_BIT)
            fire.advance(delta_time)
            world.update(delta_time)
            world.draw(delta_time)
            window.swap_buffer()
            frame_rate.end_frame()

    return 0