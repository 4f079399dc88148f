# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Destructive per-pixel colour filters for image layers

Every filter takes a uint8 RGBA array of shape (h, w, 4) and returns a
new array of the same shape. Alpha is passed through untouched.
Channel results are rounded half-to-even, then clamped to [0, 255].

>>> px = np.array([[[100, 150, 200, 77]]], dtype=np.uint8)
>>> grayscale(px).tolist()
[[[143, 143, 143, 77]]]
>>> invert(px).tolist()
[[[155, 105, 55, 77]]]
>>> dark = np.array([[[10, 20, 30, 255]]], dtype=np.uint8)
>>> sepia(dark).tolist()
[[[25, 22, 17, 255]]]

"""

## Imports

import logging
from gettext import gettext as _

import numpy as np

logger = logging.getLogger(__name__)


## Constants

#: Rec. 709 luma weights
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)

#: Rows are output R, G, B; columns are input R, G, B
SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
], dtype=np.float64)


## Filter functions


def _with_rgb(pixels, rgb):
    """New RGBA array from float RGB results and the original alpha"""
    out = np.empty(pixels.shape, dtype=np.uint8)
    out[..., :3] = np.clip(np.rint(rgb), 0, 255)
    out[..., 3] = pixels[..., 3]
    return out


def grayscale(pixels):
    """Luma grayscale: R = G = B = 0.2126R + 0.7152G + 0.0722B"""
    rgb = pixels[..., :3].astype(np.float64)
    v = rgb.dot(LUMA_WEIGHTS)
    return _with_rgb(pixels, np.repeat(v[..., np.newaxis], 3, axis=-1))


def sepia(pixels):
    """Classic sepia tone matrix"""
    rgb = pixels[..., :3].astype(np.float64)
    return _with_rgb(pixels, rgb.dot(SEPIA_MATRIX.T))


def invert(pixels):
    """Colour negative: 255 - c for each colour channel"""
    out = pixels.copy()
    out[..., :3] = 255 - pixels[..., :3]
    return out


#: Registry: filter name -> (function, UI label)
FILTERS = {
    "grayscale": (grayscale, _("Grayscale")),
    "sepia": (sepia, _("Sepia")),
    "invert": (invert, _("Invert")),
}


def get_filter_label(kind):
    return FILTERS[kind][1]


def apply_filter(pixels, kind):
    """Runs a named filter over an RGBA array

    :param numpy.ndarray pixels: uint8 RGBA, shape (h, w, 4)
    :param str kind: One of the keys of `FILTERS`
    :returns: A new filtered array
    :raises KeyError: if `kind` is not a known filter

    """
    func, label = FILTERS[kind]
    pixels = np.asarray(pixels, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError("Expected an RGBA array, got shape %r"
                         % (pixels.shape,))
    logger.debug("Applying %r to a %dx%d buffer",
                 kind, pixels.shape[1], pixels.shape[0])
    return func(pixels)
