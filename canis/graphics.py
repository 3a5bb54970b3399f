"""Render state switches and texture loading."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from PIL import Image

from canis.debug import error

COLOR_BUFFER_BIT = 0x00004000
DEPTH_BUFFER_BIT = 0x00000100

_GL: Any = None


def _gl() -> Any:
    """Return the OpenGL binding, loading it on first use."""
    global _GL
    if _GL is None:
        from pyglet import gl

        _GL = gl
    return _GL


def _generate(generator: Callable[..., Any]) -> int:
    """Ask a glGen* function for one new object name and return it."""
    handle = _gl().GLuint(0)
    generator(1, handle)
    return handle.value


def _float_array(values: Sequence[float]) -> Any:
    """Pack numbers into an array of GL floats."""
    gl = _gl()
    items = [float(value) for value in values]
    return (gl.GLfloat * len(items))(*items)


def _query_int(query: Callable[..., Any], name: int, parameter: int) -> int:
    """Read one integer parameter of a GL object through a glGet*iv function."""
    result = _gl().GLint(0)
    query(name, parameter, result)
    return result.value


def _info_log(getter: Callable[..., Any], name: int, length: int) -> str:
    """Read the info log of a shader or program."""
    gl = _gl()
    buffer = (gl.GLchar * max(length, 1))()
    getter(name, length, None, buffer)
    return buffer.value.decode(errors="replace")


@dataclass
class GLTexture:
    """An OpenGL texture name and the size of its image."""

    id: int = 0
    width: int = 0
    height: int = 0


def enable_depth_test() -> None:
    """Turn on depth testing."""
    gl = _gl()
    gl.glEnable(gl.GL_DEPTH_TEST)


def enable_alpha_channel() -> None:
    """Turn on the alpha capability."""
    gl = _gl()
    gl.glEnable(gl.GL_ALPHA)


def clear_buffer(buffer_bit: int) -> None:
    """Clear the buffers selected by buffer_bit."""
    _gl().glClear(buffer_bit)


def _decode(raw: bytes, mode: str, flip: bool) -> tuple[int, int, bytes] | None:
    """Decode image bytes into (width, height, pixels), or None if unreadable."""
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image = image.convert(mode)
            if flip:
                image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            return image.width, image.height, image.tobytes()
    except (OSError, ValueError):
        return None


def _read_pixels(path: str | Path, mode: str, flip: bool) -> tuple[int, int, bytes] | None:
    try:
        raw = Path(path).read_bytes()
    except OSError:
        return None
    return _decode(raw, mode, flip)


def load_image_gl(
    path: str | Path,
    wrap: bool = True,
    source_format: int | None = None,
    image_format: int | None = None,
) -> GLTexture:
    """Load an image file into a new 2D texture, flipped so row 0 is the bottom."""
    gl = _gl()
    if source_format is None:
        source_format = gl.GL_RGBA
    if image_format is None:
        image_format = gl.GL_RGBA

    texture = GLTexture(id=_generate(gl.glGenTextures))
    gl.glBindTexture(gl.GL_TEXTURE_2D, texture.id)

    try:
        raw = Path(path).read_bytes()
    except OSError:
        error(f"Failed to open file at path : {path}")
    else:
        pixels = _decode(raw, "RGBA", flip=True)
        if pixels is None:
            print(f"Failed to load texture {path}")
        else:
            texture.width, texture.height, data = pixels
            gl.glTexImage2D(
                gl.GL_TEXTURE_2D, 0, source_format, texture.width, texture.height,
                0, image_format, gl.GL_UNSIGNED_BYTE, data,
            )

    wrap_mode = gl.GL_REPEAT if wrap else gl.GL_CLAMP_TO_EDGE
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, wrap_mode)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, wrap_mode)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR_MIPMAP_NEAREST)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
    gl.glGenerateMipmap(gl.GL_TEXTURE_2D)
    gl.glBindTexture(gl.GL_TEXTURE_2D, 0)
    return texture


def load_image_to_cubemap(faces: Iterable[str | Path], source_format: int | None = None) -> int:
    """Load six face images into a cube map texture and return its name.

    Faces go to +X, -X, +Y, -Y, +Z, -Z in order and are not flipped.
    """
    gl = _gl()
    if source_format is None:
        source_format = gl.GL_RGBA
    mode = "RGB" if source_format == gl.GL_RGB else "RGBA"

    texture_id = _generate(gl.glGenTextures)
    gl.glBindTexture(gl.GL_TEXTURE_CUBE_MAP, texture_id)

    for offset, face in enumerate(faces):
        pixels = _read_pixels(face, mode, flip=False)
        if pixels is None:
            error(f"Cubemap texture failed to load at path: {face}")
            continue
        width, height, data = pixels
        gl.glTexImage2D(
            gl.GL_TEXTURE_CUBE_MAP_POSITIVE_X + offset, 0, source_format, width, height,
            0, source_format, gl.GL_UNSIGNED_BYTE, data,
        )

    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_WRAP_S, gl.GL_CLAMP_TO_EDGE)
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_WRAP_T, gl.GL_CLAMP_TO_EDGE)
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_WRAP_R, gl.GL_CLAMP_TO_EDGE)
    return texture_id