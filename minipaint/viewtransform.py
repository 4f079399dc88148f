# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Canvas view transformation: pan and zoom

Pointer positions arrive in display (viewport) coordinates, and must be
mapped into model (canvas-local) coordinates before they are stored in
a stroke or used as a shape origin. The same mapping is used for every
event of a gesture.

>>> t = CanvasTransformation(translation_x=100, translation_y=50, scale=2)
>>> t.display_to_model(120, 70)
(10.0, 10.0)
>>> t.model_to_display(10, 10)
(120.0, 70.0)

"""

## Imports

import logging

logger = logging.getLogger(__name__)


## Constants

DEFAULT_ZOOM_STEP = 1.05


## Class defs


class CanvasTransformation (object):
    """Record of the canvas (view) transformation.

    Only translation and uniform scaling are supported.

    """

    def __init__(self, translation_x=0.0, translation_y=0.0, scale=1.0):
        super(CanvasTransformation, self).__init__()
        self.translation_x = float(translation_x)
        self.translation_y = float(translation_y)
        self._scale = 1.0
        self.scale = scale

    def _get_scale(self):
        return self._scale

    def _set_scale(self, scale):
        scale = float(scale)
        if not scale > 0:
            raise ValueError("View scale must be positive, got %r" % (scale,))
        self._scale = scale

    scale = property(_get_scale, _set_scale)

    def display_to_model(self, x, y):
        """Converts a display position to canvas-local coordinates"""
        return (
            (x - self.translation_x) / self._scale,
            (y - self.translation_y) / self._scale,
        )

    def model_to_display(self, x, y):
        """Converts canvas-local coordinates to a display position"""
        return (
            x * self._scale + self.translation_x,
            y * self._scale + self.translation_y,
        )

    def pan(self, dx, dy):
        """Scrolls the view by a display offset"""
        self.translation_x += dx
        self.translation_y += dy

    def zoom_at(self, x, y, direction, step=DEFAULT_ZOOM_STEP):
        """Zooms in or out, keeping a display point over the same place

        :param float x: Display x coordinate to zoom around
        :param float y: Display y coordinate to zoom around
        :param int direction: Positive to zoom in, negative to zoom out
        :param float step: Multiplicative zoom factor per step

        >>> t = CanvasTransformation()
        >>> before = t.display_to_model(40, 30)
        >>> t.zoom_at(40, 30, +1, step=2.0)
        >>> t.scale
        2.0
        >>> t.display_to_model(40, 30) == before
        True
        >>> t.zoom_at(0, 0, -1, step=2.0)
        >>> t.scale
        1.0

        """
        if not step > 0:
            raise ValueError("Zoom step must be positive, got %r" % (step,))
        if direction == 0:
            return
        mx, my = self.display_to_model(x, y)
        if direction > 0:
            self.scale = self._scale * step
        else:
            self.scale = self._scale / step
        self.translation_x = x - mx * self._scale
        self.translation_y = y - my * self._scale
        logger.debug("Zoomed to %0.3f around (%s, %s)", self._scale, x, y)

    def __repr__(self):
        return "<%s dx=%0.3f dy=%0.3f scale=%0.3f>" % (
            self.__class__.__name__,
            self.translation_x, self.translation_y,
            self.scale,
        )
