"""DXF rendering of :class:`jigsnap.flatpath.FlatPath` drawings.

Cut geometry (border and cutout) goes on the ``PATHS`` layer, alignment
marks and the scale bar on ``DOCUMENTATION``.  DXF is y-up, so the
drawing's y axis is flipped on the way out to keep the cutout the same way
round as in the photograph.
"""

from __future__ import annotations

import io

import ezdxf
from ezdxf.enums import TextEntityAlignment

from jigsnap.flatpath import FlatPath


def _xy(p):
    return (float(p[0]), -float(p[1]))


def new_document():
    # setup=False avoids creating default blocks (like _CLOSEDFILLED) that
    # contain SOLID entities unsupported by some CAD programs (e.g., FreeCAD)
    doc = ezdxf.new(dxfversion='R2010', setup=False)
    doc.header['$MEASUREMENT'] = 1  # metric
    doc.header['$INSUNITS'] = 4  # millimeters
    doc.layers.new('PATHS', dxfattribs={'color': 7})  # white
    doc.layers.new('DOCUMENTATION', dxfattribs={'color': 2})  # yellow
    return doc


def flat_path_to_dxf(flat: FlatPath) -> str:
    """Return the DXF document text for ``flat``."""

    doc = new_document()
    msp = doc.modelspace()

    msp.add_lwpolyline([_xy(p) for p in flat.border], close=True,
                       dxfattribs={'layer': 'PATHS'})
    msp.add_lwpolyline([_xy(p) for p in flat.cutout], close=True,
                       dxfattribs={'layer': 'PATHS'})

    for mark in flat.crosshairs:
        for start, end in mark:
            msp.add_line(_xy(start), _xy(end), dxfattribs={'layer': 'DOCUMENTATION'})

    start, end = flat.scale_bar
    msp.add_line(_xy(start), _xy(end), dxfattribs={'layer': 'DOCUMENTATION'})
    label_at = ((start[0] + end[0]) / 2.0, start[1] - 1.0)
    msp.add_text(flat.scale_label,
                 dxfattribs={'layer': 'DOCUMENTATION', 'height': 2.0}).set_placement(
                     _xy(label_at), align=TextEntityAlignment.BOTTOM_CENTER)

    stream = io.StringIO()
    doc.write(stream)
    return stream.getvalue()


__all__ = ['flat_path_to_dxf', 'new_document']
