"""Serializers for jigsnap outputs."""

from .stl import write_stl, stl_bytes, read_stl_bytes
from .svg import flat_path_to_svg
from .dxf import flat_path_to_dxf

__all__ = ['write_stl', 'stl_bytes', 'read_stl_bytes', 'flat_path_to_svg', 'flat_path_to_dxf']
