# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Image decoding and PNG encoding helpers

Pixel data is passed around as non-premultiplied uint8 RGBA numpy
arrays of shape (h, w, 4). Pillow does the decoding and encoding.

>>> px = np.zeros((2, 3, 4), dtype=np.uint8)
>>> px[..., 0] = 255
>>> px[..., 3] = 255
>>> decoded = load_from_bytes(save_png(px))
>>> decoded.shape
(2, 3, 4)
>>> decoded[0, 0].tolist()
[255, 0, 0, 255]

"""

## Imports

import io
import logging

import numpy as np
from PIL import Image

from .errors import DecodeFailure

logger = logging.getLogger(__name__)


## Constants

LOAD_CHUNK_SIZE = 64 * 1024


## Utility functions


def to_rgba_array(image):
    """Converts a PIL image to a uint8 RGBA array"""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def load_from_bytes(data):
    """Decode an image held in memory

    :param bytes data: Encoded image data (PNG, JPEG, ...)
    :rtype: numpy.ndarray
    :returns: RGBA pixels
    :raises DecodeFailure: if the data can't be decoded

    >>> load_from_bytes(b"not an image")
    Traceback (most recent call last):
    ...
    minipaint.errors.DecodeFailure: Cannot decode image data (12 bytes)

    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            pixels = to_rgba_array(image)
    except (IOError, OSError, ValueError, Image.DecompressionBombError):
        raise DecodeFailure("Cannot decode image data (%d bytes)"
                            % (len(data),))
    if pixels.ndim != 3 or 0 in pixels.shape:
        raise DecodeFailure("Decoded image is empty")
    logger.debug("Decoded %dx%d image", pixels.shape[1], pixels.shape[0])
    return pixels


def load_from_stream(fp, feedback_cb=None):
    """Load an image from an open file-like object

    :param fp: file-like object opened for reading
    :param callable feedback_cb: invoked to provide feedback to the user
    :rtype: numpy.ndarray

    """
    chunks = []
    while True:
        if feedback_cb is not None:
            feedback_cb()
        buf = fp.read(LOAD_CHUNK_SIZE)
        if not buf:
            break
        chunks.append(buf)
    return load_from_bytes(b"".join(chunks))


def load_from_file(filename, feedback_cb=None):
    """Load an image from a named file"""
    with open(filename, 'rb') as fp:
        return load_from_stream(fp, feedback_cb)


def save_png(pixels):
    """Encode RGBA pixels as PNG

    :param numpy.ndarray pixels: uint8 RGBA, shape (h, w, 4)
    :rtype: bytes

    """
    image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


## Module testing

def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod(optionflags=doctest.ELLIPSIS)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    _test()
