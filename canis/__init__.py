"""Block-world 3D renderer: level maps, a fly camera, lights, a skybox and fire sprites."""

__version__ = "0.1.0"