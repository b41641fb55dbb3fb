"""Archive assembly for generated starter kits."""

from .assembler import assemble, normalize_path

__all__ = ["assemble", "normalize_path"]
