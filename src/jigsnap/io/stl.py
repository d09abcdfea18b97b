"""Binary STL serialization of jig meshes.

Layout: an 80 byte ASCII header, a little-endian ``uint32`` triangle count,
then one 50 byte record per triangle (normal and three vertices as twelve
little-endian ``float32`` values, followed by a ``uint16`` attribute word
that is always zero).
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, List, Sequence

from jigsnap.errors import MeshGenerationError
from jigsnap.mesh import JigMesh, Triangle

_HEADER_SIZE = 80
_COUNT_STRUCT = struct.Struct('<I')
_STRUCT_TRIANGLE = struct.Struct('<12fH')
RECORD_SIZE = _STRUCT_TRIANGLE.size

DEFAULT_HEADER = 'jigsnap binary STL'

# ASCII STL starts with this keyword; binary headers must not
_ASCII_MARKER = b'solid'
_HEADER_PREFIX = b'jigsnap '


def _header(name: str) -> bytes:
    header = name.encode('ascii', errors='replace')
    if header.lstrip().lower().startswith(_ASCII_MARKER):
        header = _HEADER_PREFIX + header
    return header[:_HEADER_SIZE].ljust(_HEADER_SIZE, b' ')


def _triangles(obj) -> Sequence[Triangle]:
    if isinstance(obj, JigMesh):
        return obj.triangles
    return list(obj)


def write_stl(obj, stream: BinaryIO, *, name: str = DEFAULT_HEADER) -> int:
    """Write ``obj`` (a :class:`JigMesh` or iterable of triangles) to ``stream``.

    Returns the number of triangles written.  A ``name`` starting with
    ``solid`` is prefixed so readers do not mistake the file for ASCII STL.

    Raises:
        MeshGenerationError: if there are no triangles to write.
    """

    triangles = _triangles(obj)
    if not triangles:
        raise MeshGenerationError("refusing to write an STL without triangles")

    stream.write(_header(name))
    stream.write(_COUNT_STRUCT.pack(len(triangles)))

    for tri in triangles:
        data = _STRUCT_TRIANGLE.pack(
            *tri.normal,
            *tri.v0,
            *tri.v1,
            *tri.v2,
            0,
        )
        stream.write(data)
    return len(triangles)


def stl_bytes(obj, *, name: str = DEFAULT_HEADER) -> bytes:
    """Return the binary STL encoding of ``obj``."""

    buf = io.BytesIO()
    write_stl(obj, buf, name=name)
    return buf.getvalue()


def expected_size(triangle_count: int) -> int:
    return _HEADER_SIZE + _COUNT_STRUCT.size + RECORD_SIZE * triangle_count


def read_stl_bytes(data: bytes) -> List[Triangle]:
    """Parse binary STL data back into triangles.

    The declared count must match the payload exactly; truncated or padded
    buffers are rejected rather than partially read.
    """
    if len(data) < _HEADER_SIZE + _COUNT_STRUCT.size:
        raise ValueError("Invalid binary STL: file too small")

    tri_count = _COUNT_STRUCT.unpack_from(data, _HEADER_SIZE)[0]
    if len(data) != expected_size(tri_count):
        raise ValueError(
            f"Invalid binary STL: header declares {tri_count} triangles "
            f"but payload holds {len(data) - _HEADER_SIZE - _COUNT_STRUCT.size} bytes")

    triangles = []
    offset = _HEADER_SIZE + _COUNT_STRUCT.size
    for _ in range(tri_count):
        values = _STRUCT_TRIANGLE.unpack_from(data, offset)
        normal = (values[0], values[1], values[2])
        v0 = (values[3], values[4], values[5])
        v1 = (values[6], values[7], values[8])
        v2 = (values[9], values[10], values[11])
        triangles.append(Triangle(normal=normal, v0=v0, v1=v1, v2=v2))
        offset += RECORD_SIZE

    return triangles


__all__ = ['write_stl', 'stl_bytes', 'read_stl_bytes', 'expected_size', 'RECORD_SIZE']
