# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Rasterization of strokes, shapes and images into float buffers

Geometry is drawn as 8-bit coverage masks with Pillow's ImageDraw, then
composited into premultiplied float buffers with the operators in
`minipaint.compositeops`.

"""

## Imports

import logging

import numpy as np
from PIL import Image
from PIL import ImageDraw

from . import compositeops
from . import helpers

logger = logging.getLogger(__name__)


## Constants

#: Interpolated points per stroke segment when smoothing
SMOOTHING_STEPS = 8

#: Shape types understood by render_shape()
RECT_SHAPE = "rect"
ELLIPSE_SHAPE = "ellipse"
LINE_SHAPE = "line"
SHAPE_TYPES = (RECT_SHAPE, ELLIPSE_SHAPE, LINE_SHAPE)


## Curve helpers


def spline_4p(t, p_1, p0, p1, p2):
    """Interpolated point using a Catmull-Rom spline

    :param float t: Time parameter, between 0.0 and 1.0
    :param numpy.array p_1: Point p[-1]
    :param numpy.array p0: Point p[0]
    :param numpy.array p1: Point p[1]
    :param numpy.array p2: Point p[2]
    :returns: Interpolated point, between p0 and p1
    :rtype: numpy.array

    >>> pts = [np.array(p, dtype=float) for p in [(0, 0), (0, 0), (10, 0), (10, 0)]]
    >>> spline_4p(0.0, *pts).tolist()
    [0.0, 0.0]
    >>> spline_4p(1.0, *pts).tolist()
    [10.0, 0.0]

    """
    return (
        t*((2-t)*t - 1) * p_1 +
        (t*t*(3*t - 5) + 2) * p0 +
        t*((4 - 3*t)*t + 1) * p1 +
        (t-1)*t*t * p2
    ) / 2.0


def spline_iter(tuples, double_first=True, double_last=True):
    """Converts a list of control point tuples to interpolatable arrays

    :param list tuples: Sequence of tuples of floats
    :param bool double_first: Repeat 1st point, putting it in the result
    :param bool double_last: Repeat last point, putting it in the result
    :returns: Iterator producing (p-1, p0, p1, p2)

    """
    cint = [None, None, None, None]
    if double_first:
        cint[0:3] = cint[1:4]
        cint[3] = np.array(tuples[0], dtype=float)
    for ctrlpt in tuples:
        cint[0:3] = cint[1:4]
        cint[3] = np.array(ctrlpt, dtype=float)
        if not any((a is None) for a in cint):
            yield cint
    if double_last:
        cint[0:3] = cint[1:4]
        cint[3] = np.array(tuples[-1], dtype=float)
        yield cint


def smooth_points(pairs, steps=SMOOTHING_STEPS):
    """Catmull-Rom interpolation through a list of (x, y) points

    The curve passes through every input point.

    >>> smooth_points([(0, 0), (10, 0)], steps=2)
    [(0.0, 0.0), (5.0, 0.0), (10.0, 0.0)]

    """
    if len(pairs) < 2:
        return [tuple(float(c) for c in p) for p in pairs]
    out = []
    for p_1, p0, p1, p2 in spline_iter(pairs):
        for i in range(steps):
            t = i / float(steps)
            x, y = spline_4p(t, p_1, p0, p1, p2)
            out.append((float(x), float(y)))
    last = pairs[-1]
    out.append((float(last[0]), float(last[1])))
    return out


## Coverage masks


def _new_mask(width, height):
    return Image.new("L", (int(width), int(height)), 0)


def _mask_to_coverage(mask):
    return np.asarray(mask, dtype=np.float32) / 255.0


def _draw_polyline(draw, pairs, width):
    """Polyline with round caps and joins"""
    width = max(1, int(round(width)))
    r = width / 2.0
    if len(pairs) > 1:
        draw.line(pairs, fill=255, width=width, joint="curve")
    for (x, y) in (pairs[0], pairs[-1]):
        draw.ellipse([x - r, y - r, x + r, y + r], fill=255)


def stroke_coverage(stroke, width, height, smoothing=False):
    """Coverage mask for a stroke, as a (h, w) float array in [0, 1]"""
    mask = _new_mask(width, height)
    pairs = stroke.get_point_pairs()
    if pairs:
        if smoothing:
            pairs = smooth_points(pairs)
        _draw_polyline(ImageDraw.Draw(mask), pairs, stroke.size)
    return _mask_to_coverage(mask)


def render_strokes(buf, strokes, smoothing=False):
    """Draws strokes into a buffer, in order, in place

    Paint strokes go on top with source-over. Erase strokes punch
    transparency through whatever is already in `buf`.

    """
    height, width = buf.shape[:2]
    for stroke in strokes:
        coverage = stroke_coverage(stroke, width, height, smoothing)
        if stroke.is_eraser:
            compositeops.destination_out(buf, coverage, stroke.opacity)
        else:
            rgb = helpers.parse_color(stroke.color)
            compositeops.source_over_color(buf, coverage, rgb,
                                           stroke.opacity)


def shape_coverage(shape_type, geometry, stroke_width, width, height):
    """Fill and outline coverage masks for a vector shape

    :param str shape_type: One of SHAPE_TYPES
    :param dict geometry: Absolute geometry, see `ShapeLayer.get_geometry()`
    :returns: (fill, outline), either possibly None

    """
    stroke_width = max(0, int(round(stroke_width)))
    fill = None
    outline = None
    if shape_type == LINE_SHAPE:
        pts = geometry["points"]
        pairs = [(pts[i], pts[i+1]) for i in range(0, len(pts) - 1, 2)]
        if pairs and stroke_width > 0:
            outline = _new_mask(width, height)
            _draw_polyline(ImageDraw.Draw(outline), pairs, stroke_width)
        if outline is not None:
            outline = _mask_to_coverage(outline)
        return (None, outline)
    if shape_type == RECT_SHAPE:
        x, y = geometry["x"], geometry["y"]
        box = [x, y, x + geometry["width"], y + geometry["height"]]
        drawfunc = "rectangle"
    elif shape_type == ELLIPSE_SHAPE:
        cx, cy = geometry["x"], geometry["y"]
        rx, ry = geometry["radius_x"], geometry["radius_y"]
        box = [cx - rx, cy - ry, cx + rx, cy + ry]
        drawfunc = "ellipse"
    else:
        raise ValueError("Unknown shape type %r" % (shape_type,))
    # Outlines are centred on the geometry's edge
    half = stroke_width / 2.0
    outer = [box[0] - half, box[1] - half, box[2] + half, box[3] + half]
    fill = _new_mask(width, height)
    getattr(ImageDraw.Draw(fill), drawfunc)(box, fill=255)
    if stroke_width > 0:
        outline = _new_mask(width, height)
        getattr(ImageDraw.Draw(outline), drawfunc)(
            outer, outline=255, width=stroke_width,
        )
    return (
        _mask_to_coverage(fill),
        _mask_to_coverage(outline) if outline is not None else None,
    )


def render_shape(buf, shape_type, geometry, stroke_color, stroke_width,
                 fill_color=None, opacity=1.0):
    """Draws a filled and/or outlined shape into a buffer, in place"""
    height, width = buf.shape[:2]
    fill, outline = shape_coverage(shape_type, geometry, stroke_width,
                                   width, height)
    if fill is not None and fill_color is not None:
        rgb = helpers.parse_color(fill_color)
        compositeops.source_over_color(buf, fill, rgb, opacity)
    if outline is not None and stroke_color is not None:
        rgb = helpers.parse_color(stroke_color)
        compositeops.source_over_color(buf, outline, rgb, opacity)


## Images


def scale_pixels(pixels, width, height):
    """Resamples uint8 RGBA pixels to a new display size"""
    width = max(1, int(round(width)))
    height = max(1, int(round(height)))
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return pixels
    image = Image.fromarray(np.ascontiguousarray(pixels))
    image = image.resize((width, height), Image.BILINEAR)
    return np.asarray(image, dtype=np.uint8)


def paste_pixels(buf, pixels, x, y, width=None, height=None):
    """Composites RGBA pixels into a buffer at an offset, in place

    Pixels falling outside the buffer are clipped.

    >>> buf = compositeops.new_buffer(4, 4)
    >>> px = np.full((2, 2, 4), 255, dtype=np.uint8)
    >>> paste_pixels(buf, px, 3, -1)
    >>> compositeops.buffer_to_rgba8(buf)[..., 3].tolist()
    [[0, 0, 0, 255], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]

    """
    if width is None:
        width = pixels.shape[1]
    if height is None:
        height = pixels.shape[0]
    pixels = scale_pixels(pixels, width, height)
    x = int(round(x))
    y = int(round(y))
    bh, bw = buf.shape[:2]
    ph, pw = pixels.shape[:2]
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(bw, x + pw), min(bh, y + ph)
    if x1 <= x0 or y1 <= y0:
        return
    src = compositeops.buffer_from_rgba8(
        pixels[y0 - y:y1 - y, x0 - x:x1 - x],
    )
    compositeops.composite(buf[y0:y1, x0:x1], src)
