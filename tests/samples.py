# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Sample data shared by the tests"""

import numpy as np

from minipaint import pixbuf


def solid_pixels(width, height, rgba):
    """uint8 RGBA array filled with one colour"""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return pixels


def solid_png(width, height, rgba):
    """PNG data for an image filled with one colour"""
    return pixbuf.save_png(solid_pixels(width, height, rgba))


#: Not an image in any format Pillow knows
GARBAGE_DATA = b"this is not an image" * 16
