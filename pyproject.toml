[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canis"
version = "0.1.0"
description = "A small block-world 3D renderer with a free-fly camera, lights, a skybox and animated fire sprites"
requires-python = ">=3.10"
keywords = ["opengl", "3d", "rendering", "voxel", "camera", "obj", "pyglet"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pyglet",
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
canis = "canis.app:main"

[tool.hatch.build.targets.wheel]
packages = ["canis"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
