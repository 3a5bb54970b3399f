import numpy as np
import pytest

from canis.input_manager import InputManager, KeyEvent, MouseMotionEvent
from canis.window import KEY_ESCAPE, KEY_W, Window
from canis.world import DirectionalLight, Entity, PointLight, World, skybox_faces


def make_world(locked=False):
    window = Window()
    window.mouse_lock(locked)
    inputs = InputManager()
    world = World(window, inputs, "assets/textures/lowpoly-skybox/")
    return world, window, inputs


class RecordingShader:
    def __init__(self):
        self.values = {}

    def set_vec3(self, name, value):
        self.values[name] = tuple(value)

    def set_float(self, name, value):
        self.values[name] = value


def test_skybox_faces_order():
    faces = skybox_faces("sky/")
    assert faces[0] == "sky/skybox_left.png"
    assert faces[-1] == "sky/skybox_back.png"
    assert [f.split("_")[-1] for f in faces] == [
        "left.png", "right.png", "up.png", "down.png", "front.png", "back.png",
    ]


def test_spawn_stores_a_copy():
    world, _, _ = make_world()
    entity = Entity(tag="glass")
    entity.transform.position[:] = (1.0, 2.0, 3.0)
    world.spawn(entity)
    entity.transform.position[0] = 9.0
    entity.tag = "changed"
    stored = world.get_entity(0)
    assert stored.tag == "glass"
    assert list(stored.transform.position) == [1.0, 2.0, 3.0]
    assert len(world.entities()) == 1


def test_spawn_shares_resources():
    world, _, _ = make_world()
    model = object()
    stored = world.spawn(Entity(model=model))
    assert stored.model is model


def test_entities_by_tag():
    world, _, _ = make_world()
    world.spawn(Entity(tag="fire", name="a"))
    world.spawn(Entity(tag="grass", name="b"))
    world.spawn(Entity(tag="fire", name="c"))
    assert world.get_entity_with_tag("fire").name == "a"
    assert [e.name for e in world.get_entities_with_tag("fire")] == ["a", "c"]
    assert world.get_entity_with_tag("brick") is None
    assert world.get_entities_with_tag("brick") == []


def test_get_point_light_by_position():
    world, _, _ = make_world()
    light = PointLight(position=(0.0, 0.0, 1.0), constant=1.0)
    world.spawn_point_light(light)
    light.position = np.array([2.0, 2.0, 2.0])
    found = world.get_point_light((0.0, 0.0, 1.0))
    assert found is not None and found.constant == 1.0
    assert world.get_point_light((2.0, 2.0, 2.0)) is None


def test_directional_light_defaults_and_replace():
    world, _, _ = make_world()
    assert list(world.directional_light.direction) == [-1.0, -1.0, -1.0]
    world.spawn_directional_light(DirectionalLight(direction=(0.0, -1.0, 0.0)))
    assert list(world.directional_light.direction) == [0.0, -1.0, 0.0]


def test_update_accumulates_time_and_calls_entities():
    world, _, _ = make_world()
    calls = []
    world.spawn(Entity(update=lambda w, e, dt: calls.append((w, e.tag, dt))))
    world.spawn(Entity(tag="static"))
    world.update(0.25)
    world.update(0.5)
    assert world.time() == pytest.approx(0.75)
    assert calls == [(world, "", 0.1), (world, "", 0.1)]


def test_held_forward_key_moves_camera():
    world, _, inputs = make_world()
    start = world.camera().position.copy()
    inputs.update(800, 600, [KeyEvent(KEY_W, True)])
    world.update(0.5)
    position = world.camera().position
    assert position[2] > start[2]
    assert position[0] == pytest.approx(start[0])
    assert position[1] == pytest.approx(start[1])


def test_escape_toggles_mouse_lock():
    world, window, inputs = make_world(locked=False)
    inputs.update(800, 600, [KeyEvent(KEY_ESCAPE, True)])
    world.update(0.0)
    assert window.mouse_locked() is True


def test_mouse_turns_camera_only_when_locked():
    world, _, inputs = make_world(locked=False)
    inputs.update(800, 600, [MouseMotionEvent(0, 0, 20, 0)])
    world.update(0.0)
    assert world.camera().yaw == 90.0

    locked_world, _, locked_inputs = make_world(locked=True)
    locked_inputs.update(800, 600, [MouseMotionEvent(0, 0, 20, 0)])
    locked_world.update(0.0)
    assert locked_world.camera().yaw > 90.0


def test_update_lights_sets_uniforms():
    world, _, _ = make_world()
    world.spawn_point_light(PointLight(constant=1.0))
    world.spawn_point_light(PointLight(position=(2.0, 2.0, 2.0), quadratic=0.5))
    shader = RecordingShader()
    world._update_lights(shader)
    assert shader.values["DIRECTIONALLIGHT.direction"] == (-1.0, -1.0, -1.0)
    assert shader.values["POINTLIGHTS[0].constant"] == 1.0
    assert shader.values["POINTLIGHTS[1].position"] == (2.0, 2.0, 2.0)
    assert shader.values["POINTLIGHTS[1].quadratic"] == 0.5
    assert "POINTLIGHTS[2].position" not in shader.values