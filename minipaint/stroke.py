# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from . import helpers


PAINT_MODE = "paint"
ERASE_MODE = "erase"
STROKE_MODES = (PAINT_MODE, ERASE_MODE)


class Stroke (object):
    """Record of one continuous freehand gesture

    Points are stored as a flat sequence x0, y0, x1, y1, ... in
    canvas-local coordinates.

    A "finished" stroke object is immutable. While it is being recorded
    its point list grows, event by event. To modify an existing stroke,
    the old one must be replaced by a new Stroke instance.

    >>> s = Stroke.new_recording(10, 10, color="#FF0000", size=6)
    >>> s.record_point(20, 10)
    >>> s.stop_recording()
    >>> s.points
    (10.0, 10.0, 20.0, 10.0)
    >>> s.color, s.width, s.mode
    ('#ff0000', 6.0, 'paint')
    >>> s.record_point(30, 10)
    Traceback (most recent call last):
    ...
    AssertionError

    """

    def __init__(self, points=(), color="#000000", size=5.0, opacity=1.0,
                 mode=PAINT_MODE, id=None):
        """Initialize as a finished stroke"""
        super(Stroke, self).__init__()
        if mode not in STROKE_MODES:
            raise ValueError("Unknown stroke mode %r" % (mode,))
        self.id = id or helpers.new_id()
        self.color = helpers.color_to_hex(helpers.parse_color(color))
        self.size = max(0.0, float(size))
        self.opacity = helpers.clamp(float(opacity), 0.0, 1.0)
        self.mode = mode
        self.points = tuple(float(p) for p in points)
        self.finished = True

    @classmethod
    def new_recording(cls, x, y, **style):
        """New unfinished stroke, starting with one point"""
        stroke = cls(**style)
        stroke.finished = False
        stroke.points = [float(x), float(y)]
        return stroke

    @property
    def width(self):
        return self.size

    @property
    def is_eraser(self):
        return self.mode == ERASE_MODE

    def record_point(self, x, y):
        assert not self.finished
        self.points.extend((float(x), float(y)))

    def stop_recording(self):
        if self.finished:
            return
        self.points = tuple(self.points)
        self.finished = True

    def get_point_pairs(self):
        """The points as a list of (x, y) tuples"""
        pts = self.points
        return [(pts[i], pts[i+1]) for i in range(0, len(pts) - 1, 2)]

    def _key(self):
        return (self.id, tuple(self.points), self.color, self.size,
                self.opacity, self.mode, self.finished)

    def __eq__(self, other):
        if not isinstance(other, Stroke):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return "<Stroke %s %s %s n=%d%s>" % (
            self.id[:8], self.mode, self.color,
            len(self.points) // 2,
            "" if self.finished else " recording",
        )
