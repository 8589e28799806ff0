"""Output module for writing rendered images.

Components:
    export: Gamma correction, 8-bit quantization, PPM and Pillow writers
"""

from src.pathtracer.output.export import save_png, save_ppm, to_uint8, write_ppm

__all__ = [
    "to_uint8",
    "write_ppm",
    "save_ppm",
    "save_png",
]
