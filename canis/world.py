"""Scene of entities and lights, with a fly camera and a skybox."""

from __future__ import annotations

import copy
import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np

from canis import graphics
from canis.camera import Camera, CameraMovement
from canis.model import draw as draw_model
from canis.model import load_model
from canis.shader import Shader
from canis.transform import Transform, perspective
from canis.window import KEY_A, KEY_D, KEY_ESCAPE, KEY_S, KEY_W

SKYBOX_VERTEX_SHADER = "assets/shaders/skybox.vs"
SKYBOX_FRAGMENT_SHADER = "assets/shaders/skybox.fs"
SKYBOX_MODEL = "assets/models/cube.obj"
NUMBER_OF_POINT_LIGHTS = 4
ENTITY_UPDATE_STEP = 0.1

_SKYBOX_FACES = ("left", "right", "up", "down", "front", "back")


def _vec3(value) -> np.ndarray:
    return np.array(value, dtype=float).reshape(3)


@dataclass
class DirectionalLight:
    """Light shining from a direction everywhere in the scene."""

    direction: np.ndarray = field(default_factory=lambda: np.full(3, -1.0))
    ambient: np.ndarray = field(default_factory=lambda: np.full(3, 0.05))
    diffuse: np.ndarray = field(default_factory=lambda: np.full(3, 0.8))
    specular: np.ndarray = field(default_factory=lambda: np.full(3, 0.5))

    def __post_init__(self) -> None:
        for name in ("direction", "ambient", "diffuse", "specular"):
            setattr(self, name, _vec3(getattr(self, name)))


@dataclass
class PointLight:
    """Light radiating from a point, fading with distance."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    ambient: np.ndarray = field(default_factory=lambda: np.zeros(3))
    diffuse: np.ndarray = field(default_factory=lambda: np.zeros(3))
    specular: np.ndarray = field(default_factory=lambda: np.zeros(3))
    constant: float = 0.0
    linear: float = 0.0
    quadratic: float = 0.0

    def __post_init__(self) -> None:
        for name in ("position", "ambient", "diffuse", "specular"):
            setattr(self, name, _vec3(getattr(self, name)))


@dataclass
class Entity:
    """A drawable object in the world.

    update, if set, is called each frame as update(world, entity, delta_time).
    """

    active: bool = True
    name: str = ""
    tag: str = ""
    transform: Transform = field(default_factory=Transform)
    model: Any = None
    shader: Any = None
    color: np.ndarray = field(default_factory=lambda: np.ones(3))
    albedo: Any = None
    specular: Any = None
    emission: Any = None
    update: Optional[Callable[["World", "Entity", float], None]] = None


def skybox_faces(skybox_path: str | Path) -> list[str]:
    """Paths of the six skybox images, in cube map face order."""
    return [f"{skybox_path}skybox_{face}.png" for face in _SKYBOX_FACES]


@dataclass
class _Skybox:
    shader: Shader
    texture_id: int
    model: Any


class World:
    """Holds entities and lights, moves the camera and draws the scene."""

    def __init__(self, window: Any, input_manager: Any, skybox_path: str | Path) -> None:
        self._window = window
        self._input_manager = input_manager
        self._skybox_path = skybox_path
        self._skybox: _Skybox | None = None
        self._camera = Camera(position=(0.0, 0.0, -3.0))
        self.directional_light = DirectionalLight()
        self._entities: list[Entity] = []
        self._point_lights: list[PointLight] = []
        self._total_time = 0.0

    def _load_skybox(self) -> _Skybox:
        gl = graphics._gl()
        shader = Shader()
        shader.compile(SKYBOX_VERTEX_SHADER, SKYBOX_FRAGMENT_SHADER)
        shader.add_attribute("aPosition")
        shader.link()
        shader.use()
        shader.set_int("SKYBOX", 0)
        shader.unuse()
        texture_id = graphics.load_image_to_cubemap(skybox_faces(self._skybox_path), gl.GL_RGBA)
        return _Skybox(shader, texture_id, load_model(SKYBOX_MODEL))

    def update(self, delta_time: float) -> None:
        """Advance time, move the camera and run entity update callbacks."""
        self._total_time += delta_time
        self._update_camera_movement(delta_time)
        for entity in self._entities:
            if entity.update is not None:
                entity.update(self, entity, ENTITY_UPDATE_STEP)

    def draw(self, delta_time: float) -> None:
        """Draw every active entity, then the skybox."""
        gl = graphics._gl()
        if self._skybox is None:
            self._skybox = self._load_skybox()
        projection = perspective(
            math.radians(45.0),
            self._window.screen_width / self._window.screen_height,
            0.01,
            100.0,
        )
        view = self._camera.get_view_matrix()

        for entity in self._entities:
            if not entity.active:
                continue
            shader = entity.shader
            shader.use()
            shader.set_vec3("COLOR", entity.color)
            shader.set_vec3("VIEWPOS", self._camera.position)
            shader.set_int("NUMBEROFPOINTLIGHTS", NUMBER_OF_POINT_LIGHTS)
            shader.set_float("TIME", self._total_time)
            self._update_lights(shader)

            gl.glActiveTexture(gl.GL_TEXTURE0)
            gl.glBindTexture(gl.GL_TEXTURE_2D, entity.albedo.id)
            gl.glActiveTexture(gl.GL_TEXTURE1)
            gl.glBindTexture(gl.GL_TEXTURE_2D, entity.specular.id)

            shader.set_mat4("VIEW", view)
            shader.set_mat4("PROJECTION", projection)
            shader.set_mat4("TRANSFORM", entity.transform.matrix())
            draw_model(entity.model)
            shader.unuse()

        skybox = self._skybox
        gl.glDepthFunc(gl.GL_LEQUAL)
        skybox.shader.use()
        rotation_only = np.identity(4)
        rotation_only[:3, :3] = np.asarray(view)[:3, :3]
        skybox.shader.set_mat4("VIEW", rotation_only)
        skybox.shader.set_mat4("PROJECTION", projection)
        gl.glActiveTexture(gl.GL_TEXTURE0)
        gl.glBindTexture(gl.GL_TEXTURE_CUBE_MAP, skybox.texture_id)
        draw_model(skybox.model)
        skybox.shader.unuse()
        gl.glDepthFunc(gl.GL_LESS)

    def spawn(self, entity: Entity) -> Entity:
        """Add a copy of the entity; shared resources stay shared."""
        stored = dataclasses.replace(
            entity,
            transform=copy.deepcopy(entity.transform),
            color=np.array(entity.color, dtype=float),
        )
        self._entities.append(stored)
        return stored

    def spawn_point_light(self, light: PointLight) -> None:
        """Add a copy of the point light."""
        self._point_lights.append(copy.deepcopy(light))

    def spawn_directional_light(self, light: DirectionalLight) -> None:
        """Replace the directional light with a copy of light."""
        self.directional_light = copy.deepcopy(light)

    def get_entity(self, index: int) -> Entity:
        """The entity at index."""
        return self._entities[index]

    def entities(self) -> list[Entity]:
        """All entities in spawn order."""
        return self._entities

    def get_entity_with_tag(self, tag: str) -> Entity | None:
        """The first entity with the tag, or None."""
        return next((entity for entity in self._entities if entity.tag == tag), None)

    def get_entities_with_tag(self, tag: str) -> list[Entity]:
        """Every entity with the tag."""
        return [entity for entity in self._entities if entity.tag == tag]

    def get_point_light(self, position) -> PointLight | None:
        """The first point light at exactly position, or None."""
        target = _vec3(position)
        return next(
            (light for light in self._point_lights if np.array_equal(light.position, target)),
            None,
        )

    def time(self) -> float:
        """Seconds accumulated by update."""
        return self._total_time

    def camera(self) -> Camera:
        """The world's camera."""
        return self._camera

    def _update_lights(self, shader: Any) -> None:
        light = self.directional_light
        shader.set_vec3("DIRECTIONALLIGHT.direction", light.direction)
        shader.set_vec3("DIRECTIONALLIGHT.ambient", light.ambient)
        shader.set_vec3("DIRECTIONALLIGHT.diffuse", light.diffuse)
        shader.set_vec3("DIRECTIONALLIGHT.specular", light.specular)
        for i, point in enumerate(self._point_lights):
            prefix = f"POINTLIGHTS[{i}]"
            shader.set_vec3(f"{prefix}.position", point.position)
            shader.set_vec3(f"{prefix}.ambient", point.ambient)
            shader.set_vec3(f"{prefix}.diffuse", point.diffuse)
            shader.set_vec3(f"{prefix}.specular", point.specular)
            shader.set_float(f"{prefix}.constant", point.constant)
            shader.set_float(f"{prefix}.linear", point.linear)
            shader.set_float(f"{prefix}.quadratic", point.quadratic)

    def _update_camera_movement(self, delta_time: float) -> None:
        keys = self._input_manager
        for key, direction in (
            (KEY_W, CameraMovement.FORWARD),
            (KEY_S, CameraMovement.BACKWARD),
            (KEY_A, CameraMovement.LEFT),
            (KEY_D, CameraMovement.RIGHT),
        ):
            if keys.get_key(key):
                self._camera.process_keyboard(direction, delta_time)

        if self._window.mouse_locked():
            rel_x, rel_y = keys.mouse_rel
            self._camera.process_mouse_movement(rel_x, -rel_y, True)

        if keys.just_pressed_key(KEY_ESCAPE):
            self._window.mouse_lock(not self._window.mouse_locked())