"""Keyboard, mouse and game controller state tracked from frame to frame."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag, auto
from typing import Any, Iterable, Protocol, Union

from canis.debug import log

AXIS_MAX = 32767.0
BUTTON_COUNT = 15


class InputDevice(Enum):
    """Kind of device that produced the most recent input."""

    MOUSE = auto()
    KEYBOARD = auto()
    GAMEPAD = auto()


class ControllerButton(IntFlag):
    """Bit masks of game controller buttons."""

    A = 1
    B = 2
    X = 4
    Y = 8
    BACK = 16
    GUIDE = 32
    START = 64
    LEFTSTICK = 128
    RIGHTSTICK = 256
    LEFTSHOULDER = 512
    RIGHTSHOULDER = 1024
    DPAD_UP = 2048
    DPAD_DOWN = 4096
    DPAD_LEFT = 8192
    DPAD_RIGHT = 16384


class ControllerAxis(IntEnum):
    """Analogue axes read from a game controller."""

    LEFTX = 0
    LEFTY = 1
    RIGHTX = 2
    RIGHTY = 3
    TRIGGERLEFT = 4
    TRIGGERRIGHT = 5


class MouseButton(IntEnum):
    """Mouse buttons."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class _ControllerHandle(Protocol):
    def get_button(self, index: int) -> bool: ...

    def get_axis(self, axis: ControllerAxis) -> int: ...


@dataclass
class GameControllerData:
    """Snapshot of a controller's sticks, triggers and buttons."""

    left_stick: tuple[float, float] = (0.0, 0.0)
    right_stick: tuple[float, float] = (0.0, 0.0)
    left_trigger: float = 0.0
    right_trigger: float = 0.0
    buttons: int = 0


@dataclass
class GameController:
    """A connected controller with its current and previous state."""

    controller: Any = None
    index: int = 0
    current_data: GameControllerData = field(default_factory=GameControllerData)
    old_data: GameControllerData = field(default_factory=GameControllerData)
    dead_zone: float = 0.15
    last_buttons_pressed: int = 0


@dataclass(frozen=True)
class QuitEvent:
    """The application was asked to close."""


@dataclass(frozen=True)
class MouseMotionEvent:
    """Mouse moved to (x, y) by (xrel, yrel); y counts down from the top."""

    x: float
    y: float
    xrel: float = 0.0
    yrel: float = 0.0


@dataclass(frozen=True)
class KeyEvent:
    """A key went down (pressed) or up."""

    key: int
    pressed: bool


@dataclass(frozen=True)
class MouseButtonEvent:
    """A mouse button went down (pressed) or up."""

    button: MouseButton
    pressed: bool


@dataclass(frozen=True)
class ControllerDeviceEvent:
    """A controller was connected or disconnected.

    On connection, controller is the opened device handle, or None if it
    could not be opened.
    """

    which: int
    connected: bool
    controller: Any = None


@dataclass(frozen=True)
class ControllerButtonEvent:
    """A controller button went down."""

    which: int
    button: int


Event = Union[
    QuitEvent,
    MouseMotionEvent,
    KeyEvent,
    MouseButtonEvent,
    ControllerDeviceEvent,
    ControllerButtonEvent,
]


def _dead_zone(value: float, dead_zone: float, sign: float = 1.0) -> float:
    return 0.0 if abs(value) < dead_zone else sign * value


def _close(handle: Any) -> None:
    closer = getattr(handle, "close", None)
    if callable(closer):
        closer()


class InputManager:
    """Collects input events each frame and answers queries about them."""

    def __init__(self) -> None:
        self.mouse: tuple[float, float] = (0.0, 0.0)
        self.mouse_rel: tuple[float, float] = (0.0, 0.0)
        self._key_events: list[tuple[int, bool]] = []
        self._last_known: dict[int, bool] = {}
        self._held_keys: set[int] = set()
        self._controllers: list[GameController] = []
        self._left_click = False
        self._right_click = False
        self._was_left_click = False
        self._was_right_click = False
        self._last_device = InputDevice.MOUSE

    def __enter__(self) -> InputManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        while self._controllers:
            _close(self._controllers.pop(0).controller)

    def update(self, screen_width: int, screen_height: int, events: Iterable[Event] = ()) -> bool:
        """Process this frame's events; return False when a quit was requested."""
        self._swap_maps()
        self.mouse_rel = (0.0, 0.0)

        for event in events:
            if isinstance(event, QuitEvent):
                return False
            if isinstance(event, MouseMotionEvent):
                self.mouse = (float(event.x), float(screen_height - event.y))
                self.mouse_rel = (float(event.xrel), float(event.yrel))
                self._last_device = InputDevice.MOUSE
            elif isinstance(event, KeyEvent):
                self._key_events.append((event.key, event.pressed))
                if event.pressed:
                    self._held_keys.add(event.key)
                    self._last_device = InputDevice.KEYBOARD
                else:
                    self._held_keys.discard(event.key)
            elif isinstance(event, MouseButtonEvent):
                if event.button == MouseButton.LEFT:
                    self._left_click = event.pressed
                elif event.button == MouseButton.RIGHT:
                    self._right_click = event.pressed
            elif isinstance(event, ControllerDeviceEvent):
                if event.connected:
                    self._on_controller_connected(event)
                else:
                    self._on_controller_disconnected(event)
            elif isinstance(event, ControllerButtonEvent):
                self._last_device = InputDevice.GAMEPAD

        for pad in self._controllers:
            if pad.controller:
                self._poll_controller(pad)
        return True

    def _poll_controller(self, pad: GameController) -> None:
        handle: _ControllerHandle = pad.controller
        pad.old_data = copy.copy(pad.current_data)

        buttons = 0
        for i in range(BUTTON_COUNT):
            if handle.get_button(i):
                buttons |= 1 << i
        if buttons:
            pad.last_buttons_pressed = buttons

        def axis(which: ControllerAxis) -> float:
            return handle.get_axis(which) / AXIS_MAX

        dz = pad.dead_zone
        left = (_dead_zone(axis(ControllerAxis.LEFTX), dz), _dead_zone(axis(ControllerAxis.LEFTY), dz, -1.0))
        right = (_dead_zone(axis(ControllerAxis.RIGHTX), dz), _dead_zone(axis(ControllerAxis.RIGHTY), dz, -1.0))
        pad.current_data = GameControllerData(
            left_stick=left,
            right_stick=right,
            left_trigger=axis(ControllerAxis.TRIGGERLEFT),
            right_trigger=axis(ControllerAxis.TRIGGERRIGHT),
            buttons=buttons,
        )

        if left != (0.0, 0.0) or right != (0.0, 0.0):
            self._last_device = InputDevice.GAMEPAD
            pad.last_buttons_pressed = 0

    def _swap_maps(self) -> None:
        self._was_left_click = self._left_click
        self._was_right_click = self._right_click
        for key, value in self._key_events:
            self._last_known[key] = value
        self._key_events.clear()

    def _first_event(self, key_id: int) -> bool | None:
        return next((value for key, value in self._key_events if key == key_id), None)

    def _on_controller_connected(self, event: ControllerDeviceEvent) -> None:
        if event.controller:
            self._controllers.append(GameController(controller=event.controller, index=event.which))
            log("Game Controller Connected")

    def _on_controller_disconnected(self, event: ControllerDeviceEvent) -> None:
        for position, pad in enumerate(self._controllers):
            if pad.index == event.which:
                _close(pad.controller)
                del self._controllers[position]
                log("Game Controller Disconnected")
                return

    def _controller(self, controller_id: int) -> GameController | None:
        if 0 <= controller_id < len(self._controllers):
            return self._controllers[controller_id]
        return None

    def get_key(self, key_id: int) -> bool:
        """Whether the key is currently held down."""
        return key_id in self._held_keys

    def just_pressed_key(self, key_id: int) -> bool:
        """Whether the key went down this frame after being up."""
        return bool(self._first_event(key_id)) and not self._last_known.get(key_id, False)

    def just_released_key(self, key_id: int) -> bool:
        """Whether the key went up this frame."""
        return self._first_event(key_id) is False

    def get_button(self, controller_id: int, button_id: int) -> bool:
        """Whether any of the given buttons is held on the controller."""
        pad = self._controller(controller_id)
        return pad is not None and bool(pad.current_data.buttons & button_id)

    def just_pressed_button(self, controller_id: int, button_id: int) -> bool:
        """Whether the buttons went down this frame."""
        pad = self._controller(controller_id)
        return (
            pad is not None
            and bool(pad.current_data.buttons & button_id)
            and not pad.old_data.buttons & button_id
        )

    def just_released_button(self, controller_id: int, button_id: int) -> bool:
        """Whether the buttons went up this frame."""
        pad = self._controller(controller_id)
        return (
            pad is not None
            and not pad.current_data.buttons & button_id
            and bool(pad.old_data.buttons & button_id)
        )

    def last_buttons_pressed(self, controller_id: int, button_id: int) -> bool:
        """Whether the buttons were part of the most recent button press."""
        pad = self._controller(controller_id)
        return pad is not None and bool(pad.last_buttons_pressed & button_id)

    def get_left_stick(self, controller_id: int) -> tuple[float, float]:
        """Left stick position, y pointing up."""
        pad = self._controller(controller_id)
        return pad.current_data.left_stick if pad else (0.0, 0.0)

    def get_right_stick(self, controller_id: int) -> tuple[float, float]:
        """Right stick position, y pointing up."""
        pad = self._controller(controller_id)
        return pad.current_data.right_stick if pad else (0.0, 0.0)

    def get_left_trigger(self, controller_id: int) -> float:
        """Left trigger value."""
        pad = self._controller(controller_id)
        return pad.current_data.left_trigger if pad else 0.0

    def get_right_trigger(self, controller_id: int) -> float:
        """Right trigger value."""
        pad = self._controller(controller_id)
        return pad.current_data.right_trigger if pad else 0.0

    def left_click(self) -> bool:
        """Whether the left mouse button is held."""
        return self._left_click

    def left_click_released(self) -> bool:
        """Whether the left mouse button went up this frame."""
        return not self._left_click and self._was_left_click

    def just_left_clicked(self) -> bool:
        """Whether the left mouse button went down this frame."""
        return self._left_click and not self._was_left_click

    def right_click(self) -> bool:
        """Whether the right mouse button is held."""
        return self._right_click

    def right_click_released(self) -> bool:
        """Whether the right mouse button went up this frame."""
        return not self._right_click and self._was_right_click

    def just_right_clicked(self) -> bool:
        """Whether the right mouse button went down this frame."""
        return self._right_click and not self._was_right_click

    def last_device_type(self) -> InputDevice:
        """Kind of device that produced the most recent input."""
        return self._last_device