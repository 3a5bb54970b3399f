import pytest

from canis import graphics
from canis.model import Model, draw, interleave, load_model
from canis.objfile import ObjFormatError

TRIANGLE = """\
v 0 0 0
v 1 0 0
v 0 1 0
vt 0 0
vt 1 0
vt 0 1
vn 0 0 1
f 1/1/1 2/2/1 3/3/1
"""


class _Array(list):
    def __init__(self, *items):
        super().__init__(items)
        self.value = b""


class _ValueType(type):
    def __mul__(cls, size):
        return type(f"{cls.__name__}Array", (_Array,), {"size": size})


class _Value(metaclass=_ValueType):
    def __init__(self, value=0):
        self.value = value


class FakeGL:
    GL_FALSE = 0
    GL_TRUE = 1
    GLuint = _Value
    GLfloat = _Value

    def __init__(self):
        self.calls = []
        self._constants = {}
        self._next_id = 1

    def __getattr__(self, name):
        if name.startswith("GL_"):
            return self._constants.setdefault(name, 0x1000 + 0x100 * len(self._constants))
        if name.startswith("gl"):
            def call(*args):
                self.calls.append((name, args))
                if name.startswith("glGen") and name != "glGenerateMipmap":
                    args[1].value = self._next_id
                    self._next_id += 1
                return 0
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
def triangle_file(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text(TRIANGLE)
    return path


def test_interleave_order():
    result = interleave([(1, 2, 3)], [(4, 5, 6)], [(7, 8)])
    assert result == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]


def test_interleave_length_mismatch():
    with pytest.raises(ValueError):
        interleave([(1, 2, 3)], [], [(7, 8)])


def test_load_model_vertices(fake, triangle_file):
    model = load_model(triangle_file)
    assert model.path == str(triangle_file)
    assert len(model.vertices) == 24
    assert model.vertices[:8] == [0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0]
    assert model.vertices[16:24] == [0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0, -1.0]
    assert (model.vao, model.vbo) == (1, 2)


def test_load_model_uploads_buffer(fake, triangle_file):
    model = load_model(triangle_file)
    (args,) = fake.named("glBufferData")
    assert args[1] == 4 * len(model.vertices)
    assert list(args[2]) == model.vertices
    pointers = [(a[0], a[1], a[4], a[5]) for a in fake.named("glVertexAttribPointer")]
    assert pointers == [(0, 3, 32, 0), (1, 3, 32, 12), (2, 2, 32, 24)]


def test_draw_counts_vertices(fake, triangle_file):
    model = load_model(triangle_file)
    fake.calls.clear()
    draw(model)
    assert fake.named("glDrawArrays") == [(fake.GL_TRIANGLES, 0, 3)]
    assert fake.named("glBindVertexArray") == [(model.vao,), (0,)]


def test_draw_empty_model(fake):
    model = Model()
    assert (model.vao, model.vertices) == (0, [])
    draw(model)
    assert fake.named("glDrawArrays") == [(fake.GL_TRIANGLES, 0, 0)]
    assert fake.named("glBindVertexArray") == [(model.vao,), (0,)]


def test_load_model_bad_format(fake, tmp_path):
    path = tmp_path / "quad.obj"
    path.write_text("v 0 0 0\nf 1 2 3\n")
    with pytest.raises(ObjFormatError):
        load_model(path)


def test_load_model_missing_file(fake, tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "missing.obj")