# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layer blend mode constants"""

from gettext import gettext as _


NORMAL_MODE = "normal"
MULTIPLY_MODE = "multiply"
SCREEN_MODE = "screen"
OVERLAY_MODE = "overlay"


#: Valid modes for all layers, in UI order
STANDARD_MODES = (NORMAL_MODE, MULTIPLY_MODE, SCREEN_MODE, OVERLAY_MODE)


#: The mode used for new layers, and in place of anything unrecognized
DEFAULT_MODE = NORMAL_MODE


#: UI strings (label, tooltip) for the layer modes
MODE_STRINGS = {
    NORMAL_MODE: (
        _("Normal"),
        _("The top layer only, without blending colors.")),
    MULTIPLY_MODE: (
        _("Multiply"),
        _("Similar to loading two slides into a projector and "
          "projecting the combined result.")),
    SCREEN_MODE: (
        _("Screen"),
        _("Like shining two separate slide projectors onto a screen "
          "simultaneously. This is the inverse of 'Multiply'.")),
    OVERLAY_MODE: (
        _("Overlay"),
        _("Overlays the backdrop with the top layer, preserving the "
          "backdrop's highlights and shadows.")),
}
for mode in STANDARD_MODES:
    assert mode in MODE_STRINGS


def is_valid_mode(mode):
    """True if `mode` is one of the standard blend modes

    >>> is_valid_mode("screen")
    True
    >>> is_valid_mode("source-over")
    False

    """
    return mode in STANDARD_MODES


def normalize_mode(mode):
    """Returns `mode` if valid, or the default mode otherwise

    >>> normalize_mode("multiply")
    'multiply'
    >>> normalize_mode(None)
    'normal'
    >>> normalize_mode("dissolve")
    'normal'

    """
    if is_valid_mode(mode):
        return mode
    return DEFAULT_MODE
