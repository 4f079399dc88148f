# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Small shared helpers: rectangles, clamping, colour parsing"""

## Imports

import math
import uuid


## Class defs


class Rect (object):
    """Representation of a rectangular area, in whole pixels.

    >>> a = Rect(0, 10, 5, 15)
    >>> b = Rect(2, 10, 1, 15)
    >>> a.contains(b)
    True
    >>> b.contains(a)
    False
    >>> u = Rect()
    >>> u.empty()
    True
    >>> u.expand_to_include_rect(a)
    >>> u.expand_to_include_rect(Rect(-3, 0, 2, 2))
    >>> u
    Rect(-3, 0, 8, 25)
    >>> Rect.new_from_bounds(0.5, 0.5, 2.25, 3.0)
    Rect(0, 0, 3, 3)

    """

    def __init__(self, x=0, y=0, w=0, h=0):
        """Initializes, with optional location and dimensions."""
        object.__init__(self)
        self.x = x
        self.y = y
        self.w = w
        self.h = h

    @classmethod
    def new_from_bounds(cls, x0, y0, x1, y1):
        """Smallest integer Rect covering a floating-point extent"""
        ix0 = int(math.floor(min(x0, x1)))
        iy0 = int(math.floor(min(y0, y1)))
        ix1 = int(math.ceil(max(x0, x1)))
        iy1 = int(math.ceil(max(y0, y1)))
        return cls(ix0, iy0, ix1 - ix0, iy1 - iy0)

    def __iter__(self):
        """Allows casting to tuples: always x, y, w, h."""
        return iter((self.x, self.y, self.w, self.h))

    def empty(self):
        """Returns true if the rectangle has zero area."""
        return self.w <= 0 or self.h <= 0

    def contains(self, other):
        """Returns true if this rectangle entirely contains another."""
        return (
            other.x >= self.x and
            other.y >= self.y and
            other.x + other.w <= self.x + self.w and
            other.y + other.h <= self.y + self.h
        )

    def __eq__(self, other):
        """Returns true if this rectangle is identical to another."""
        try:
            return tuple(self) == tuple(other)
        except TypeError:  # e.g. comparison to None
            return False

    def __ne__(self, other):
        return not self.__eq__(other)

    def expand_to_include_rect(self, other):
        """Grow in place to cover another rectangle too"""
        if other.empty():
            return
        if self.empty():
            self.x, self.y, self.w, self.h = tuple(other)
            return
        x0 = min(self.x, other.x)
        y0 = min(self.y, other.y)
        x1 = max(self.x + self.w, other.x + other.w)
        y1 = max(self.y + self.h, other.y + other.h)
        self.x, self.y, self.w, self.h = x0, y0, x1 - x0, y1 - y0

    def intersection(self, other):
        """Creates new Rect for the intersection with another

        If the rectangles do not intersect, None is returned

        >>> Rect(0, 0, 10, 10).intersection(Rect(5, -5, 20, 8))
        Rect(5, 0, 5, 3)
        >>> Rect(0, 0, 10, 10).intersection(Rect(10, 0, 5, 5)) is None
        True

        """
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        rx = min(self.x + self.w, other.x + other.w)
        ry = min(self.y + self.h, other.y + other.h)
        if rx <= x or ry <= y:
            return None
        return Rect(x, y, rx - x, ry - y)

    def __repr__(self):
        return 'Rect(%d, %d, %d, %d)' % (self.x, self.y, self.w, self.h)


## Utility functions


def clamp(x, lo, hi):
    """Limits a value to [lo, hi]. NaN becomes lo.

    >>> clamp(1.5, 0.0, 1.0), clamp(-2, 0, 1)
    (1.0, 0)
    >>> clamp(float("nan"), 0.0, 1.0)
    0.0

    """
    if x != x:
        return lo
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def new_id():
    """A fresh, never reused identifier for layers and strokes"""
    return uuid.uuid4().hex


def parse_color(color):
    """Parses a colour spec into an (r, g, b) tuple of ints

    :param color: "#rrggbb", "#rgb", or a 3-tuple of ints
    :rtype: tuple
    :raises ValueError: if the colour spec can't be understood

    >>> parse_color("#ff0000")
    (255, 0, 0)
    >>> parse_color("#0f0")
    (0, 255, 0)
    >>> parse_color((1, 2, 300))
    (1, 2, 255)
    >>> parse_color("red")
    Traceback (most recent call last):
    ...
    ValueError: Unrecognized colour 'red'

    """
    if isinstance(color, (tuple, list)):
        if len(color) != 3:
            raise ValueError("Unrecognized colour %r" % (color,))
        return tuple(int(clamp(int(c), 0, 255)) for c in color)
    spec = str(color).strip()
    if spec.startswith("#"):
        digits = spec[1:]
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        if len(digits) == 6:
            try:
                return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))
            except ValueError:
                pass
    raise ValueError("Unrecognized colour %r" % (color,))


def color_to_hex(rgb):
    """Formats an (r, g, b) tuple as "#rrggbb"

    >>> color_to_hex((255, 128, 0))
    '#ff8000'

    """
    return "#%02x%02x%02x" % tuple(rgb)


## Module testing


def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
