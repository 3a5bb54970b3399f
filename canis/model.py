"""Triangle meshes loaded from OBJ files and uploaded as vertex arrays."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from canis import graphics
from canis.debug import fatal_error
from canis.objfile import ObjFormatError, load_obj

FLOATS_PER_VERTEX = 8
FLOAT_SIZE = 4


@dataclass
class Model:
    """Mesh data and the vertex array and buffer that hold it on the GPU."""

    path: str = ""
    vao: int = 0
    vbo: int = 0
    vertices: list[float] = field(default_factory=list)
    positions: list[tuple[float, float, float]] = field(default_factory=list)
    uvs: list[tuple[float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)


def interleave(positions: Sequence, normals: Sequence, uvs: Sequence) -> list[float]:
    """Flatten to position xyz, normal xyz, uv per vertex."""
    if not len(positions) == len(normals) == len(uvs):
        raise ValueError("positions, normals and uvs must have the same length")
    return [
        float(value)
        for position, normal, uv in zip(positions, normals, uvs)
        for value in (*position, *normal, *uv)
    ]


def load_model(path: str | Path) -> Model:
    """Load an OBJ file and upload it as a vertex array."""
    try:
        positions, uvs, normals = load_obj(path)
    except ObjFormatError:
        fatal_error(f"Failed to load model at path {path}")
        raise

    model = Model(path=str(path), positions=positions, uvs=uvs, normals=normals)
    model.vertices = interleave(positions, normals, uvs)

    gl = graphics._gl()
    model.vao = graphics._generate(gl.glGenVertexArrays)
    model.vbo = graphics._generate(gl.glGenBuffers)

    gl.glBindVertexArray(model.vao)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, model.vbo)
    data = graphics._float_array(model.vertices)
    gl.glBufferData(gl.GL_ARRAY_BUFFER, FLOAT_SIZE * len(model.vertices), data, gl.GL_STATIC_DRAW)

    stride = FLOATS_PER_VERTEX * FLOAT_SIZE
    for location, size, offset in ((0, 3, 0), (1, 3, 3), (2, 2, 6)):
        gl.glVertexAttribPointer(location, size, gl.GL_FLOAT, gl.GL_FALSE, stride, offset * FLOAT_SIZE)
        gl.glEnableVertexAttribArray(location)

    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, 0)
    gl.glBindVertexArray(0)
    return model


def draw(model: Model) -> None:
    """Draw the model's triangles."""
    gl = graphics._gl()
    gl.glBindVertexArray(model.vao)
    gl.glDrawArrays(gl.GL_TRIANGLES, 0, len(model.vertices) // FLOATS_PER_VERTEX)
    gl.glBindVertexArray(0)