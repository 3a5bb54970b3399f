import numpy as np
import pytest

from canis import graphics
from canis.shader import Shader, ShaderError
from canis.transform import translate


class _Array(list):
    def __init__(self, *items):
        super().__init__(items)
        self.value = b""

    @classmethod
    def from_buffer_copy(cls, data):
        array = cls(*data)
        array.value = bytes(data).split(b"\0")[0]
        return array


class _ValueType(type):
    def __mul__(cls, size):
        return type(f"{cls.__name__}Array", (_Array,), {"size": size})


class _Value(metaclass=_ValueType):
    def __init__(self, value=0):
        self.value = value


class _PointerToPointer:
    _type_ = _Value


class FakeGL:
    GL_FALSE = 0
    GL_TRUE = 1
    GLint = _Value
    GLuint = _Value
    GLfloat = _Value
    GLchar = _Value

    def __init__(self):
        self.calls = []
        self._constants = {}
        self._names = {}
        self._next_id = 1
        self.params = {}
        self.info_log = b""
        self.returns = {}

    def __getattr__(self, name):
        if name.startswith("GL_"):
            if name not in self._constants:
                value = 0x1000 + 0x100 * len(self._constants)
                self._constants[name] = value
                self._names[value] = name
            return self._constants[name]
        if name.startswith("gl"):
            def call(*args):
                self.calls.append((name, args))
                if name.startswith("glCreate"):
                    value = self._next_id
                    self._next_id += 1
                    return value
                if name.endswith("iv") and name.startswith("glGet"):
                    args[2].value = self.params.get(self._names[args[1]], 1)
                if name.endswith("InfoLog"):
                    args[3].value = self.info_log
                return self.returns.get(name, 0)
            call.argtypes = (_Value, _Value, _PointerToPointer, _Value)
            return call
        raise AttributeError(name)

    def named(self, name):
        return [args for called, args in self.calls if called == name]


@pytest.fixture
def fake(monkeypatch):
    gl = FakeGL()
    monkeypatch.setattr(graphics, "_GL", gl)
    return gl


@pytest.fixture
def files(tmp_path):
    vertex = tmp_path / "a.vs"
    fragment = tmp_path / "a.fs"
    vertex.write_bytes(b"vertex code")
    fragment.write_bytes(b"fragment code")
    return vertex, fragment


def test_compile_sends_file_sources(fake, files):
    shader = Shader()
    shader.compile(*files)
    sources = [args[2][0].value for args in fake.named("glShaderSource")]
    assert sources == [b"vertex code", b"fragment code"]
    assert shader.program_id() == 3


def test_compile_missing_file(fake, files, tmp_path):
    with pytest.raises(ShaderError, match="Unable to open file"):
        Shader().compile(tmp_path / "nope.vs", files[1])


def test_compile_failure_reports_log(fake, files):
    fake.params["GL_COMPILE_STATUS"] = 0
    fake.params["GL_INFO_LOG_LENGTH"] = 64
    fake.info_log = b"syntax error"
    with pytest.raises(ShaderError, match="syntax error"):
        Shader().compile(*files)
    assert fake.named("glDeleteShader") == [(1,)]


def test_create_shader_failure(fake, files, monkeypatch):
    shader = Shader()
    monkeypatch.setattr(fake, "_next_id", 0)
    with pytest.raises(ShaderError, match="Vertex shader failed to be created!"):
        shader.compile(*files)


def test_link_once(fake, files):
    shader = Shader()
    shader.compile(*files)
    assert not shader.is_linked()
    shader.link()
    shader.link()
    assert shader.is_linked()
    assert len(fake.named("glLinkProgram")) == 1
    assert fake.named("glDetachShader") == [(3, 1), (3, 2)]


def test_link_failure(fake, files):
    shader = Shader()
    shader.compile(*files)
    fake.params["GL_LINK_STATUS"] = 0
    fake.params["GL_INFO_LOG_LENGTH"] = 64
    fake.info_log = b"bad link"
    with pytest.raises(ShaderError, match="bad link"):
        shader.link()
    assert not shader.is_linked()
    assert fake.named("glDeleteProgram") == [(3,)]


def test_attributes_and_use(fake, files):
    shader = Shader()
    shader.compile(*files)
    program = shader.program_id()
    assert program == 3
    shader.add_attribute("aPosition")
    shader.add_attribute("aNormal")
    assert fake.named("glBindAttribLocation") == [(program, 0, b"aPosition"), (program, 1, b"aNormal")]
    with shader:
        pass
    assert fake.named("glEnableVertexAttribArray") == [(0,), (1,)]
    assert fake.named("glUseProgram") == [(program,), (0,)]


def test_missing_uniform_raises(fake, files):
    shader = Shader()
    shader.compile(*files)
    fake.returns["glGetUniformLocation"] = -1
    with pytest.raises(ShaderError, match="Uniform COLOR not found"):
        shader.get_uniform_location("COLOR")


def test_vector_forms_agree(fake):
    shader = Shader()
    fake.returns["glGetUniformLocation"] = 5
    location = shader.get_uniform_location("COLOR")
    assert location == 5
    shader.set_vec3("COLOR", np.array([0.2, 0.5, 1.0]))
    shader.set_vec3("COLOR", 0.2, 0.5, 1.0)
    first, second = fake.named("glUniform3f")
    assert first == second == (location, 0.2, 0.5, 1.0)


def test_vector_wrong_size(fake):
    with pytest.raises(ValueError):
        Shader().set_vec4("V", 1.0, 2.0)


def test_scalar_setters(fake):
    shader = Shader()
    fake.returns["glGetUniformLocation"] = 7
    location = shader.get_uniform_location("WIND")
    assert location == 7
    shader.set_bool("WIND", True)
    shader.set_int("MATERIAL.diffuse", 1)
    shader.set_float("MATERIAL.shininess", 64)
    assert fake.named("glUniform1i") == [(location, 1), (location, 1)]
    assert fake.named("glUniform1f") == [(location, 64.0)]


def test_mat4_is_column_major(fake):
    shader = Shader()
    matrix = translate(np.identity(4), (1.0, 2.0, 3.0))
    assert list(matrix[:3, 3]) == [1.0, 2.0, 3.0]
    shader.set_mat4("TRANSFORM", matrix)
    (args,) = fake.named("glUniformMatrix4fv")
    assert args[2] == fake.GL_FALSE
    assert list(args[3])[12:15] == [1.0, 2.0, 3.0]


def test_mat3_rejects_wrong_shape(fake):
    with pytest.raises(ValueError):
        Shader().set_mat3("M", np.identity(4))