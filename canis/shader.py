"""GLSL program built from a vertex and a fragment shader file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np

from canis import graphics


class ShaderError(RuntimeError):
    """Raised when a shader cannot be created, compiled, linked or queried."""


def _components(args: tuple, size: int) -> list[float]:
    values = np.asarray(args[0] if len(args) == 1 else args, dtype=float).ravel()
    if values.size != size:
        raise ValueError(f"expected {size} components, got {values.size}")
    return [float(value) for value in values]


def _column_major(mat, size: int) -> Any:
    values = np.asarray(mat, dtype=float)
    if values.shape != (size, size):
        raise ValueError(f"expected a {size}x{size} matrix, got shape {values.shape}")
    return graphics._float_array(values.flatten(order="F"))


class Shader:
    """A shader program with attribute binding and uniform setters."""

    def __init__(self) -> None:
        self._linked = False
        self._program_id = 0
        self._vertex_id = 0
        self._fragment_id = 0
        self._attribute_count = 0

    def __enter__(self) -> Shader:
        self.use()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unuse()

    def compile(self, vertex_path: str | Path, fragment_path: str | Path) -> None:
        """Create the program and compile both shader files."""
        gl = graphics._gl()
        self._vertex_id = gl.glCreateShader(gl.GL_VERTEX_SHADER)
        if not self._vertex_id:
            raise ShaderError("Vertex shader failed to be created!")
        self._fragment_id = gl.glCreateShader(gl.GL_FRAGMENT_SHADER)
        if not self._fragment_id:
            raise ShaderError("Fragment shader failed to be created!")
        self._program_id = gl.glCreateProgram()
        self._compile_file(vertex_path, self._vertex_id)
        self._compile_file(fragment_path, self._fragment_id)

    def _compile_file(self, path: str | Path, shader_id: int) -> None:
        gl = graphics._gl()
        try:
            code = Path(path).read_bytes()
        except OSError as exc:
            raise ShaderError(f'Unable to open file "{path}"') from exc

        text = (gl.GLchar * (len(code) + 1)).from_buffer_copy(code + b"\0")
        pointer_type = gl.glShaderSource.argtypes[2]._type_
        gl.glShaderSource(shader_id, 1, (pointer_type * 1)(text), None)
        gl.glCompileShader(shader_id)

        status = graphics._query_int(gl.glGetShaderiv, shader_id, gl.GL_COMPILE_STATUS)
        if status == gl.GL_FALSE:
            length = graphics._query_int(gl.glGetShaderiv, shader_id, gl.GL_INFO_LOG_LENGTH)
            message = graphics._info_log(gl.glGetShaderInfoLog, shader_id, length)
            gl.glDeleteShader(shader_id)
            raise ShaderError(f"Shader {path} failed to compile\nOpengl Error: {message}")

    def link(self) -> None:
        """Link the compiled shaders into the program; does nothing once linked."""
        if self._linked:
            return
        gl = graphics._gl()
        gl.glAttachShader(self._program_id, self._vertex_id)
        gl.glAttachShader(self._program_id, self._fragment_id)
        gl.glLinkProgram(self._program_id)

        status = graphics._query_int(gl.glGetProgramiv, self._program_id, gl.GL_LINK_STATUS)
        if status == gl.GL_FALSE:
            length = graphics._query_int(gl.glGetProgramiv, self._program_id, gl.GL_INFO_LOG_LENGTH)
            message = graphics._info_log(gl.glGetProgramInfoLog, self._program_id, length)
            gl.glDeleteProgram(self._program_id)
            raise ShaderError(f"Shader failed to link!\nOpengl Error: {message}")

        self._linked = True
        gl.glDetachShader(self._program_id, self._vertex_id)
        gl.glDetachShader(self._program_id, self._fragment_id)
        gl.glDeleteShader(self._vertex_id)
        gl.glDeleteShader(self._fragment_id)

    def add_attribute(self, name: str) -> None:
        """Bind the next attribute location to name."""
        graphics._gl().glBindAttribLocation(self._program_id, self._attribute_count, name.encode())
        self._attribute_count += 1

    def use(self) -> None:
        """Make the program current and enable its attribute arrays."""
        gl = graphics._gl()
        gl.glUseProgram(self._program_id)
        for index in range(self._attribute_count):
            gl.glEnableVertexAttribArray(index)

    def unuse(self) -> None:
        """Make no program current."""
        graphics._gl().glUseProgram(0)

    def get_uniform_location(self, name: str) -> int:
        """Location of a uniform; raises ShaderError if it does not exist."""
        location = self._location(name)
        if location == -1:
            raise ShaderError(f"Uniform {name} not found in shader!")
        return location

    def _location(self, name: str) -> int:
        return graphics._gl().glGetUniformLocation(self._program_id, name.encode())

    def set_bool(self, name: str, value: bool) -> None:
        graphics._gl().glUniform1i(self._location(name), int(bool(value)))

    def set_int(self, name: str, value: int) -> None:
        graphics._gl().glUniform1i(self._location(name), int(value))

    def set_float(self, name: str, value: float) -> None:
        graphics._gl().glUniform1f(self._location(name), float(value))

    def set_vec2(self, name: str, *args) -> None:
        """Set a vec2 from one vector or two numbers."""
        graphics._gl().glUniform2f(self._location(name), *_components(args, 2))

    def set_vec3(self, name: str, *args) -> None:
        """Set a vec3 from one vector or three numbers."""
        graphics._gl().glUniform3f(self._location(name), *_components(args, 3))

    def set_vec4(self, name: str, *args) -> None:
        """Set a vec4 from one vector or four numbers."""
        graphics._gl().glUniform4f(self._location(name), *_components(args, 4))

    def set_mat2(self, name: str, mat) -> None:
        gl = graphics._gl()
        gl.glUniformMatrix2fv(self._location(name), 1, gl.GL_FALSE, _column_major(mat, 2))

    def set_mat3(self, name: str, mat) -> None:
        gl = graphics._gl()
        gl.glUniformMatrix3fv(self._location(name), 1, gl.GL_FALSE, _column_major(mat, 3))

    def set_mat4(self, name: str, mat) -> None:
        gl = graphics._gl()
        gl.glUniformMatrix4fv(self._location(name), 1, gl.GL_FALSE, _column_major(mat, 4))

    def is_linked(self) -> bool:
        """Whether the program linked successfully."""
        return self._linked

    def program_id(self) -> int:
        """The OpenGL program name."""
        return self._program_id