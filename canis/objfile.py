"""Reader for the simple triangulated Wavefront OBJ files the engine uses."""

from __future__ import annotations

import re
from pathlib import Path

from canis.debug import error, fatal_error

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

_SPACE = re.compile(r"\s*")
_WORD = re.compile(r"\S+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_CORNER = r"\s*([+-]?\d+)/\s*([+-]?\d+)/\s*([+-]?\d+)"
_FACE = re.compile(_CORNER * 3)


class ObjFormatError(ValueError):
    """Raised when OBJ text cannot be read by this parser."""


class _Reader:
    """Cursor over OBJ text reading words, numbers and whole lines."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _skip_space(self) -> int:
        return _SPACE.match(self._text, self._pos).end()

    def word(self) -> str | None:
        match = _WORD.match(self._text, self._skip_space())
        if match is None:
            return None
        self._pos = match.end()
        return match.group()

    def floats(self, count: int, header: str) -> list[float]:
        values = []
        for _ in range(count):
            match = _FLOAT.match(self._text, self._skip_space())
            if match is None:
                raise ObjFormatError(f"expected {count} numbers after '{header}'")
            self._pos = match.end()
            values.append(float(match.group()))
        return values

    def face(self) -> list[int]:
        match = _FACE.match(self._text, self._pos)
        if match is None:
            raise ObjFormatError(
                "File can't be read by our simple parser :-( Try exporting with other options"
            )
        self._pos = match.end()
        return [int(group) for group in match.groups()]

    def skip_line(self) -> None:
        end = self._text.find("\n", self._pos)
        self._pos = len(self._text) if end == -1 else end + 1


def _pick(items: list, index: int, kind: str):
    if not 1 <= index <= len(items):
        raise ObjFormatError(f"{kind} index {index} out of range")
    return items[index - 1]


def parse_obj(text: str) -> tuple[list[Vec3], list[Vec2], list[Vec3]]:
    """Parse OBJ text into per-corner positions, texture coordinates and normals.

    Texture coordinates have their V component negated.
    """
    vertices: list[Vec3] = []
    tex_coords: list[Vec2] = []
    vertex_normals: list[Vec3] = []
    corners: list[tuple[int, int, int]] = []

    reader = _Reader(text)
    while (header := reader.word()) is not None:
        if header == "v":
            x, y, z = reader.floats(3, header)
            vertices.append((x, y, z))
        elif header == "vt":
            u, v = reader.floats(2, header)
            tex_coords.append((u, -v))
        elif header == "vn":
            x, y, z = reader.floats(3, header)
            vertex_normals.append((x, y, z))
        elif header == "f":
            numbers = reader.face()
            corners.extend(zip(numbers[0::3], numbers[1::3], numbers[2::3]))
        else:
            reader.skip_line()

    positions = [_pick(vertices, v, "vertex") for v, _, _ in corners]
    uvs = [_pick(tex_coords, t, "texture coordinate") for _, t, _ in corners]
    normals = [_pick(vertex_normals, n, "normal") for _, _, n in corners]
    return positions, uvs, normals


def load_obj(path: str | Path) -> tuple[list[Vec3], list[Vec2], list[Vec3]]:
    """Read and parse an OBJ file."""
    try:
        text = Path(path).read_text()
    except OSError:
        fatal_error(f"Can not open model: {path}")
        raise
    return parse_obj(text)


def load_obj_vertices(path: str | Path) -> list[float]:
    """Interleaved position, uv, normal floats; empty if the file cannot be parsed."""
    try:
        positions, uvs, normals = load_obj(path)
    except ObjFormatError as exc:
        error(str(exc))
        return []
    return [
        value
        for position, uv, normal in zip(positions, uvs, normals)
        for value in (*position, *uv, *normal)
    ]