# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Pixel compositing and blending on numpy arrays

Buffers handled here are float32 arrays of shape (h, w, 4) holding
premultiplied RGBA, with every component in [0, 1]. The blend functions
work on non-premultiplied colour, per channel, following the usual
separable blend mode definitions for compositing: blend first, then
composite with source-over.

"""

## Imports

import logging

import numpy as np

from . import modes

logger = logging.getLogger(__name__)


## Separable blend functions: B(Cb, Cs)


def blend_normal(cb, cs):
    return cs


def blend_multiply(cb, cs):
    """Multiply: darkens, white is neutral

    >>> float(blend_multiply(0.5, 0.5))
    0.25

    """
    return cb * cs


def blend_screen(cb, cs):
    """Screen: lightens, black is neutral

    >>> float(blend_screen(0.5, 0.5))
    0.75

    """
    return cb + cs - cb * cs


def blend_overlay(cb, cs):
    """Overlay: multiply or screen, depending on the backdrop

    >>> float(blend_overlay(0.25, 0.5))
    0.25
    >>> float(blend_overlay(0.75, 0.5))
    0.75
    >>> float(blend_overlay(1.0, 0.0))
    1.0

    """
    cb = np.asarray(cb, dtype=np.float32)
    cs = np.asarray(cs, dtype=np.float32)
    return np.where(
        cb <= 0.5,
        2.0 * cb * cs,
        1.0 - 2.0 * (1.0 - cb) * (1.0 - cs),
    )


BLEND_FUNCTIONS = {
    modes.NORMAL_MODE: blend_normal,
    modes.MULTIPLY_MODE: blend_multiply,
    modes.SCREEN_MODE: blend_screen,
    modes.OVERLAY_MODE: blend_overlay,
}
for mode in modes.STANDARD_MODES:
    assert mode in BLEND_FUNCTIONS


## Buffer helpers


def new_buffer(width, height):
    """A fully transparent premultiplied float buffer"""
    return np.zeros((int(height), int(width), 4), dtype=np.float32)


def unpremultiply(colors, alpha):
    """Divides premultiplied colour by alpha, giving 0 where alpha is 0"""
    out = np.zeros_like(colors)
    np.divide(colors, alpha, out=out, where=(alpha > 0))
    return out


def buffer_from_rgba8(pixels):
    """Converts a non-premultiplied uint8 RGBA array to a float buffer

    >>> px = np.array([[[255, 0, 0, 128]]], dtype=np.uint8)
    >>> buf = buffer_from_rgba8(px)
    >>> [round(float(c), 3) for c in buf[0, 0]]
    [0.502, 0.0, 0.0, 0.502]

    """
    buf = np.asarray(pixels, dtype=np.float32) / 255.0
    buf[..., :3] *= buf[..., 3:4]
    return buf


def buffer_to_rgba8(buf):
    """Converts a premultiplied float buffer to non-premultiplied uint8

    >>> px = np.array([[[200, 100, 50, 128]]], dtype=np.uint8)
    >>> buffer_to_rgba8(buffer_from_rgba8(px)).tolist()
    [[[200, 100, 50, 128]]]

    """
    alpha = np.clip(buf[..., 3:4], 0.0, 1.0)
    colors = np.clip(unpremultiply(buf[..., :3], alpha), 0.0, 1.0)
    out = np.empty(buf.shape, dtype=np.uint8)
    out[..., :3] = np.rint(colors * 255.0)
    out[..., 3:4] = np.rint(alpha * 255.0)
    return out


def fill_buffer(buf, rgb):
    """Fills a float buffer with an opaque colour, in place"""
    buf[..., :3] = np.asarray(rgb, dtype=np.float32) / 255.0
    buf[..., 3] = 1.0


## Compositing operators


def composite(dst, src, mode=modes.DEFAULT_MODE, opacity=1.0):
    """Composites `src` over `dst` in place, using a blend mode

    :param numpy.ndarray dst: Backdrop buffer, updated in place
    :param numpy.ndarray src: Source buffer, same shape
    :param str mode: Blend mode; unrecognized modes act as "normal"
    :param float opacity: Extra alpha multiplier for `src`

    >>> dst = new_buffer(1, 1)
    >>> fill_buffer(dst, (128, 128, 128))
    >>> src = new_buffer(1, 1)
    >>> fill_buffer(src, (255, 0, 0))
    >>> composite(dst, src, "multiply")
    >>> buffer_to_rgba8(dst).tolist()
    [[[128, 0, 0, 255]]]
    >>> composite(dst, src, "normal", opacity=0.0)
    >>> buffer_to_rgba8(dst).tolist()
    [[[128, 0, 0, 255]]]

    """
    func = BLEND_FUNCTIONS[modes.normalize_mode(mode)]
    opacity = float(opacity)
    src_a = src[..., 3:4] * opacity
    src_c = src[..., :3] * opacity
    dst_a = dst[..., 3:4]
    dst_c = dst[..., :3]
    if func is blend_normal:
        out_c = src_c + dst_c * (1.0 - src_a)
    else:
        cs = unpremultiply(src_c, src_a)
        cb = unpremultiply(dst_c, dst_a)
        blended = func(cb, cs)
        out_c = (
            src_c * (1.0 - dst_a)
            + dst_c * (1.0 - src_a)
            + src_a * dst_a * blended
        )
    out_a = src_a + dst_a * (1.0 - src_a)
    dst[..., :3] = out_c
    dst[..., 3:4] = out_a


def source_over_color(dst, coverage, rgb, opacity=1.0):
    """Paints a flat colour through a coverage mask, in place

    :param numpy.ndarray dst: Float buffer to paint into
    :param numpy.ndarray coverage: (h, w) float mask in [0, 1]
    :param tuple rgb: Colour, as 8-bit ints
    :param float opacity: Paint opacity multiplier

    """
    alpha = (coverage * float(opacity))[..., np.newaxis]
    color = np.asarray(rgb, dtype=np.float32) / 255.0
    dst[..., :3] = color * alpha + dst[..., :3] * (1.0 - alpha)
    dst[..., 3:4] = alpha + dst[..., 3:4] * (1.0 - alpha)


def destination_out(dst, coverage, opacity=1.0):
    """Punches transparency through a coverage mask, in place

    >>> buf = new_buffer(2, 1)
    >>> fill_buffer(buf, (0, 0, 255))
    >>> destination_out(buf, np.array([[1.0, 0.0]], dtype=np.float32))
    >>> buffer_to_rgba8(buf)[..., 3].tolist()
    [[0, 255]]

    """
    keep = 1.0 - (coverage * float(opacity))[..., np.newaxis]
    dst *= keep
