"""Application window with an OpenGL 3.3 context and event collection."""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Callable

from canis import graphics
from canis.debug import fatal_error, log
from canis.input_manager import (
    Event,
    KeyEvent,
    MouseButton,
    MouseButtonEvent,
    MouseMotionEvent,
    QuitEvent,
)

KEY_A = ord("a")
KEY_D = ord("d")
KEY_S = ord("s")
KEY_W = ord("w")
KEY_ESCAPE = 0xFF1B

_MOUSE_BUTTONS = {1: MouseButton.LEFT, 2: MouseButton.MIDDLE, 4: MouseButton.RIGHT}

_ICON_ROWS = (
    ".....rrrrrr.....",
    "...rrrrwwrrrr...",
    "..rrrrrwwrrrrr..",
    ".rrrrrwwwwrrrrr.",
    ".rwwrrwwwwrrrrr.",
    "rrwwwrwwwwrrrwrr",
    "rwwwwrrwwrrrwwwr",
    "rwwwwrrrrrrwwwwr",
    "rrwwrrwwwrrwwwwr",
    "rrrrrwwwwwrrwwrr",
    "rrrrwwwwwwrrrrrr",
    ".rrrwwwwwwwrrrr.",
    ".rrrwwwwwwwrrrr.",
    "..rrrwwwwwrrrr..",
    "...rrrwwwrrrr...",
    ".....rrrrrr.....",
)
_ICON_COLOURS = {
    ".": (0xFF, 0xFF, 0xFF, 0x00),
    "r": (0x44, 0x33, 0x55, 0xFF),
    "w": (0xFF, 0xFF, 0xFF, 0xFF),
}
ICON_SIZE = 16


class WindowFlags(IntFlag):
    """Options for creating a window."""

    FULLSCREEN = 1
    BORDERLESS = 16


def _icon_pixels() -> bytes:
    """RGBA pixels of the window icon, top row first."""
    return bytes(channel for row in _ICON_ROWS for cell in row for channel in _ICON_COLOURS[cell])


def _open_pyglet_window(name: str, width: int | None, height: int | None,
                        fullscreen: bool, borderless: bool) -> Any:
    """Open a pyglet window with a 3.3 context, icon, blending and no vsync."""
    import pyglet
    from pyglet.gl import gl_info

    config = pyglet.gl.Config(
        double_buffer=True, depth_size=24, stencil_size=8, major_version=3, minor_version=3
    )
    style = pyglet.window.Window.WINDOW_STYLE_BORDERLESS if borderless else None
    options: dict[str, Any] = {
        "caption": name, "fullscreen": fullscreen, "style": style,
        "config": config, "vsync": False,
    }
    if not fullscreen:
        options["width"] = width
        options["height"] = height
    native = pyglet.window.Window(**options)
    native.set_icon(pyglet.image.ImageData(ICON_SIZE, ICON_SIZE, "RGBA", _icon_pixels(),
                                           pitch=-ICON_SIZE * 4))

    gl = graphics._gl()
    log(f"*** OpenGL Version: {gl_info.get_version_string()} ***")
    gl.glClearColor(0.05, 0.05, 0.05, 1.0)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
    return native


WindowFactory = Callable[[str, "int | None", "int | None", bool, bool], Any]


class Window:
    """A window whose input arrives as input-manager events.

    Key ids in the events are pyglet key symbols; mouse y counts from the top.
    """

    def __init__(self, factory: WindowFactory | None = None) -> None:
        self._factory = factory or _open_pyglet_window
        self.native: Any = None
        self.screen_width = 0
        self.screen_height = 0
        self.fps = 0.0
        self._fullscreen = False
        self._mouse_locked = False
        self._events: list[Event] = []

    def _require_native(self) -> Any:
        if self.native is None:
            raise RuntimeError("window has not been created")
        return self.native

    def create(self, name: str, width: int | None, height: int | None, flags: int = 0) -> None:
        """Open the window with the given size and WindowFlags."""
        fullscreen = bool(flags & WindowFlags.FULLSCREEN)
        borderless = bool(flags & WindowFlags.BORDERLESS)
        if fullscreen:
            self._fullscreen = True
        try:
            native = self._factory(name, width, height, fullscreen, borderless)
        except Exception:
            fatal_error("Window could not be created")
            raise
        self.native = native
        self.screen_width = width if width is not None else native.width
        self.screen_height = height if height is not None else native.height
        native.push_handlers(
            on_key_press=self._on_key_press,
            on_key_release=self._on_key_release,
            on_mouse_motion=self._on_mouse_motion,
            on_mouse_drag=self._on_mouse_drag,
            on_mouse_press=self._on_mouse_press,
            on_mouse_release=self._on_mouse_release,
            on_close=self._on_close,
        )
        if self._mouse_locked:
            native.set_exclusive_mouse(True)

    def create_fullscreen(self, name: str) -> None:
        """Open a fullscreen window the size of the screen."""
        self._fullscreen = True
        self.create(name, None, None, WindowFlags.FULLSCREEN)

    def set_window_name(self, name: str) -> None:
        """Change the window title."""
        self._require_native().set_caption(name)

    def swap_buffer(self) -> None:
        """Show the frame that was drawn."""
        self._require_native().flip()

    def mouse_lock(self, locked: bool) -> None:
        """Capture the mouse and hide it (locked) or release it."""
        self._mouse_locked = bool(locked)
        if self.native is not None:
            self.native.set_exclusive_mouse(self._mouse_locked)

    def mouse_locked(self) -> bool:
        """Whether the mouse is captured."""
        return self._mouse_locked

    def toggle_fullscreen(self) -> None:
        """Switch between fullscreen and windowed."""
        native = self._require_native()
        self._fullscreen = not self._fullscreen
        native.set_fullscreen(self._fullscreen)

    def fullscreen(self) -> bool:
        """Whether the window is fullscreen."""
        return self._fullscreen

    def poll_events(self) -> list[Event]:
        """Dispatch pending window events and return them as input events."""
        self._require_native().dispatch_events()
        events, self._events = self._events, []
        return events

    def _on_key_press(self, symbol: int, modifiers: int) -> bool:
        self._events.append(KeyEvent(symbol, True))
        return True

    def _on_key_release(self, symbol: int, modifiers: int) -> bool:
        self._events.append(KeyEvent(symbol, False))
        return True

    def _on_mouse_motion(self, x: float, y: float, dx: float, dy: float) -> None:
        self._events.append(MouseMotionEvent(x, self.native.height - y, dx, -dy))

    def _on_mouse_drag(self, x: float, y: float, dx: float, dy: float,
                       buttons: int, modifiers: int) -> None:
        self._on_mouse_motion(x, y, dx, dy)

    def _on_mouse_press(self, x: float, y: float, button: int, modifiers: int) -> None:
        if button in _MOUSE_BUTTONS:
            self._events.append(MouseButtonEvent(_MOUSE_BUTTONS[button], True))

    def _on_mouse_release(self, x: float, y: float, button: int, modifiers: int) -> None:
        if button in _MOUSE_BUTTONS:
            self._events.append(MouseButtonEvent(_MOUSE_BUTTONS[button], False))

    def _on_close(self) -> bool:
        self._events.append(QuitEvent())
        return True