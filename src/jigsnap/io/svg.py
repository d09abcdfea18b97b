"""SVG rendering of :class:`jigsnap.flatpath.FlatPath` drawings.

The document is sized in millimetres and its view box matches the border,
so one user unit is one millimetre when the file is imported into laser
cutter software.
"""

from __future__ import annotations

import io

import svgwrite

from jigsnap.flatpath import FlatPath

BORDER_STYLE = {'fill': 'none', 'stroke': '#333333', 'stroke_width': 0.5}
CUT_STYLE = {'fill': 'none', 'stroke': '#06b6d4', 'stroke_width': 0.3}
MARK_STYLE = {'stroke': '#666666', 'stroke_width': 0.5}


def _path_data(points) -> str:
    cmds = []
    for i, p in enumerate(points):
        cmds.append(f"{'M' if i == 0 else 'L'} {p[0]:.3f} {p[1]:.3f}")
    return ' '.join(cmds) + ' Z'


def flat_path_to_svg(flat: FlatPath) -> str:
    """Return the SVG document text for ``flat``."""

    left, top = flat.origin
    dwg = svgwrite.Drawing(size=(f'{flat.width:.1f}mm', f'{flat.height:.1f}mm'),
                           profile='full')
    dwg.viewbox(round(left, 3), round(top, 3), round(flat.width, 3), round(flat.height, 3))

    dwg.add(dwg.rect(insert=(left, top), size=(flat.width, flat.height),
                     id='jig-border', **BORDER_STYLE))

    marks = dwg.add(dwg.g(id='crosshairs'))
    for mark in flat.crosshairs:
        for start, end in mark:
            marks.add(dwg.line(start=start, end=end, **MARK_STYLE))

    dwg.add(dwg.path(d=_path_data(flat.cutout), id='cutout', **CUT_STYLE))

    start, end = flat.scale_bar
    bar = dwg.add(dwg.g(id='scale-bar'))
    bar.add(dwg.line(start=start, end=end, **MARK_STYLE))
    bar.add(dwg.text(flat.scale_label,
                     insert=((start[0] + end[0]) / 2.0, start[1] - 1.0),
                     font_size=2, text_anchor='middle', fill='#666666'))

    buf = io.StringIO()
    dwg.write(buf, pretty=True)
    return buf.getvalue()


__all__ = ['flat_path_to_svg']
