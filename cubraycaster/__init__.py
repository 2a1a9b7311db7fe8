"""A textured grid raycaster: .cub scene parsing, ray casting and a pygame window."""

__version__ = "0.1.0"
__all__ = ["__version__"]