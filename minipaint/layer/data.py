# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Data layer classes: raster, image and shape layers"""


## Imports

import logging
from gettext import gettext as _

import numpy as np

from minipaint import helpers
from minipaint import draw
from minipaint.errors import UnsupportedOperation
from . import core

logger = logging.getLogger(__name__)


## Constants

#: Smallest width, height or radius a resize may produce
MIN_DIMENSION = 5.0


## Helper functions


def _frozen_pixels(pixels):
    """Read-only uint8 RGBA copy of an array"""
    pixels = np.array(pixels, dtype=np.uint8, copy=True)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError("Expected an RGBA array, got shape %r"
                         % (pixels.shape,))
    pixels.setflags(write=False)
    return pixels


def _scaled_dimension(dim, transient, scale):
    """New absolute size, never below the minimum

    >>> _scaled_dimension(100, 1.0, 0.001)
    5.0
    >>> _scaled_dimension(100, 2.0, 1.5)
    300.0

    """
    return max(MIN_DIMENSION, float(dim) * transient * float(scale))


## Class defs


class RasterLayer (core.LayerBase):
    """A drawing layer, holding only freehand strokes

    Raster layers cover the whole canvas. They cannot be moved or
    resized, and filters do not apply to them.

    """

    KIND = "raster"

    #TRANSLATORS: Default name for new drawing layers
    DEFAULT_NAME = _("Layer")
    TYPE_DESCRIPTION = _("Drawing Layer")


class _TransformableLayer (core.LayerBase):
    """Layer with movable, resizable base content

    The transient scale factors are set during an interactive resize
    and folded into the absolute size by resize().

    """

    def __init__(self, scale_x=1.0, scale_y=1.0, **kwargs):
        super(_TransformableLayer, self).__init__(**kwargs)
        self.scale_x = float(scale_x)
        self.scale_y = float(scale_y)

    def set_transient_scale(self, scale_x, scale_y):
        self.scale_x = float(scale_x)
        self.scale_y = float(scale_y)
        self._content_changed()

    def move_to(self, x, y):
        x, y = float(x), float(y)
        if (x, y) == (self.x, self.y):
            return False
        self.x, self.y = x, y
        self._content_changed()
        return True

    def resize(self, scale_x, scale_y):
        self._resize(float(scale_x), float(scale_y))
        self.scale_x = 1.0
        self.scale_y = 1.0
        self._content_changed()
        return True

    def _resize(self, scale_x, scale_y):
        raise NotImplementedError


class ImageLayer (_TransformableLayer):
    """A layer holding an imported bitmap

    The pixel buffer is a read-only uint8 RGBA array. Filters replace it
    wholesale with set_pixels(). The display size may differ from the
    buffer's own size after a resize: the buffer is resampled when
    rendered.

    """

    KIND = "image"

    #TRANSLATORS: Default name for imported image layers
    DEFAULT_NAME = _("Image")
    TYPE_DESCRIPTION = _("Image Layer")

    def __init__(self, pixels=None, width=None, height=None, **kwargs):
        super(ImageLayer, self).__init__(**kwargs)
        if pixels is None:
            pixels = np.zeros((1, 1, 4), dtype=np.uint8)
        self._pixels = _frozen_pixels(pixels)
        h, w = self._pixels.shape[:2]
        self.width = float(width if width is not None else w)
        self.height = float(height if height is not None else h)

    @property
    def pixels(self):
        return self._pixels

    def set_pixels(self, pixels):
        """Replaces the pixel buffer, keeping the display size"""
        self._pixels = _frozen_pixels(pixels)
        self._content_changed()

    def get_base_bbox(self):
        return helpers.Rect.new_from_bounds(
            self.x, self.y,
            self.x + self.width * self.scale_x,
            self.y + self.height * self.scale_y,
        )

    def _resize(self, scale_x, scale_y):
        self.width = _scaled_dimension(self.width, self.scale_x, scale_x)
        self.height = _scaled_dimension(self.height, self.scale_y, scale_y)
        logger.debug("Resized %r to %0.1fx%0.1f",
                     self, self.width, self.height)

    def render_base(self, buf, dx=0, dy=0):
        draw.paste_pixels(
            buf, self._pixels,
            self.x - dx, self.y - dy,
            self.width * self.scale_x,
            self.height * self.scale_y,
        )

    def _new_snapshot(self):
        return ImageLayerSnapshot(self)


class ShapeLayer (_TransformableLayer):
    """A layer holding one vector shape

    Rectangles are positioned by their top-left corner, ellipses by
    their centre. Line points are relative to the layer position.

    """

    KIND = "shape"

    #TRANSLATORS: Default name for new shape layers
    DEFAULT_NAME = _("Shape")
    TYPE_DESCRIPTION = _("Shape Layer")

    def __init__(self, shape_type=draw.RECT_SHAPE, width=100, height=100,
                 radius_x=50, radius_y=50, points=(0, 0, 100, 0),
                 stroke="#000000", stroke_width=2, fill=None, **kwargs):
        super(ShapeLayer, self).__init__(**kwargs)
        if shape_type not in draw.SHAPE_TYPES:
            raise ValueError("Unknown shape type %r" % (shape_type,))
        self.shape_type = shape_type
        self.width = float(width)
        self.height = float(height)
        self.radius_x = float(radius_x)
        self.radius_y = float(radius_y)
        self.points = tuple(float(p) for p in points)
        self.stroke = helpers.color_to_hex(helpers.parse_color(stroke))
        self.stroke_width = max(0.0, float(stroke_width))
        if fill is not None:
            fill = helpers.color_to_hex(helpers.parse_color(fill))
        self.fill = fill

    def get_geometry(self, dx=0, dy=0):
        """Absolute geometry, with any transient scale applied

        >>> s = ShapeLayer("line", x=10, y=20, points=(0, 0, 100, 50))
        >>> s.scale_x = 0.5
        >>> s.get_geometry()["points"]
        (10.0, 20.0, 60.0, 70.0)

        """
        x = self.x - dx
        y = self.y - dy
        if self.shape_type == draw.RECT_SHAPE:
            return {
                "x": x, "y": y,
                "width": self.width * self.scale_x,
                "height": self.height * self.scale_y,
            }
        elif self.shape_type == draw.ELLIPSE_SHAPE:
            return {
                "x": x, "y": y,
                "radius_x": self.radius_x * self.scale_x,
                "radius_y": self.radius_y * self.scale_y,
            }
        pts = list(self.points)
        pts[0::2] = [x + px * self.scale_x for px in pts[0::2]]
        pts[1::2] = [y + py * self.scale_y for py in pts[1::2]]
        return {"x": x, "y": y, "points": tuple(pts)}

    def get_base_bbox(self):
        geom = self.get_geometry()
        r = self.stroke_width / 2.0
        if self.shape_type == draw.RECT_SHAPE:
            x0, y0 = geom["x"], geom["y"]
            x1, y1 = x0 + geom["width"], y0 + geom["height"]
        elif self.shape_type == draw.ELLIPSE_SHAPE:
            x0 = geom["x"] - geom["radius_x"]
            y0 = geom["y"] - geom["radius_y"]
            x1 = geom["x"] + geom["radius_x"]
            y1 = geom["y"] + geom["radius_y"]
        else:
            pts = geom["points"]
            if not pts:
                return helpers.Rect()
            x0, x1 = min(pts[0::2]), max(pts[0::2])
            y0, y1 = min(pts[1::2]), max(pts[1::2])
        return helpers.Rect.new_from_bounds(x0 - r, y0 - r, x1 + r, y1 + r)

    def _resize(self, scale_x, scale_y):
        if self.shape_type == draw.RECT_SHAPE:
            self.width = _scaled_dimension(self.width, self.scale_x, scale_x)
            self.height = _scaled_dimension(self.height, self.scale_y,
                                            scale_y)
        elif self.shape_type == draw.ELLIPSE_SHAPE:
            self.radius_x = _scaled_dimension(self.radius_x, self.scale_x,
                                              scale_x)
            self.radius_y = _scaled_dimension(self.radius_y, self.scale_y,
                                              scale_y)
        else:
            pts = list(self.points)
            pts[0::2] = self._scale_axis(pts[0::2], self.scale_x * scale_x)
            pts[1::2] = self._scale_axis(pts[1::2], self.scale_y * scale_y)
            self.points = tuple(pts)

    @staticmethod
    def _scale_axis(coords, scale):
        """Scales one axis of the line's points about the layer origin

        The axis extent is floored like other dimensions. A flat axis
        has nothing to scale.

        >>> ShapeLayer._scale_axis([0.0, 100.0], 0.001)
        [0.0, 5.0]
        >>> ShapeLayer._scale_axis([0.0, 0.0], 3.0)
        [0.0, 0.0]

        """
        if not coords:
            return coords
        extent = max(coords) - min(coords)
        if extent == 0:
            return list(coords)
        factor = _scaled_dimension(extent, 1.0, scale) / extent
        return [c * factor for c in coords]

    def render_base(self, buf, dx=0, dy=0):
        draw.render_shape(
            buf, self.shape_type, self.get_geometry(dx, dy),
            self.stroke, self.stroke_width, self.fill,
        )

    def _new_snapshot(self):
        return ShapeLayerSnapshot(self)


## Snapshots


class ImageLayerSnapshot (core.LayerBaseSnapshot):
    """Snapshot of an image layer. The pixel array is shared."""

    def __init__(self, layer):
        super(ImageLayerSnapshot, self).__init__(layer)
        self.pixels = layer.pixels
        self.width = layer.width
        self.height = layer.height
        self.scale_x = layer.scale_x
        self.scale_y = layer.scale_y

    def restore_to_layer(self, layer):
        layer._pixels = self.pixels
        layer.width = self.width
        layer.height = self.height
        layer.scale_x = self.scale_x
        layer.scale_y = self.scale_y
        super(ImageLayerSnapshot, self).restore_to_layer(layer)

    def _data(self):
        data = super(ImageLayerSnapshot, self)._data()
        pixels = data.pop("pixels")
        data["pixels"] = (pixels.shape, pixels.tobytes())
        return data


class ShapeLayerSnapshot (core.LayerBaseSnapshot):

    _FIELDS = ("shape_type", "width", "height", "radius_x", "radius_y",
               "points", "stroke", "stroke_width", "fill",
               "scale_x", "scale_y")

    def __init__(self, layer):
        super(ShapeLayerSnapshot, self).__init__(layer)
        for field in self._FIELDS:
            setattr(self, field, getattr(layer, field))

    def restore_to_layer(self, layer):
        for field in self._FIELDS:
            setattr(layer, field, getattr(self, field))
        super(ShapeLayerSnapshot, self).restore_to_layer(layer)


## Layer factories


LAYER_CLASSES = {
    RasterLayer.KIND: RasterLayer,
    ImageLayer.KIND: ImageLayer,
    ShapeLayer.KIND: ShapeLayer,
}


def new_layer(kind, **props):
    """Constructs a layer of a given kind

    :raises UnsupportedOperation: if the kind is not known

    >>> new_layer("raster", name="Ink").name
    'Ink'
    >>> new_layer("group")
    Traceback (most recent call last):
    ...
    minipaint.errors.UnsupportedOperation: Unknown layer kind 'group'

    """
    try:
        cls = LAYER_CLASSES[kind]
    except KeyError:
        raise UnsupportedOperation("Unknown layer kind %r" % (kind,))
    return cls(**props)


def layer_from_snapshot(sshot):
    """Rebuilds a layer from a snapshot of it"""
    layer = LAYER_CLASSES[sshot.kind]()
    layer.load_snapshot(sshot)
    return layer
