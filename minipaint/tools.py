# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Tool selection and brush settings for the current session"""

## Imports

import logging
from gettext import gettext as _

from . import helpers
from .observable import event

logger = logging.getLogger(__name__)


## Constants

BRUSH_TOOL = "brush"
ERASER_TOOL = "eraser"
RECT_TOOL = "rect"
ELLIPSE_TOOL = "ellipse"
LINE_TOOL = "line"

#: Tools which record freehand strokes
FREEHAND_TOOLS = (BRUSH_TOOL, ERASER_TOOL)

#: Tools which create shape layers. Names match the shape types.
SHAPE_TOOLS = (RECT_TOOL, ELLIPSE_TOOL, LINE_TOOL)

TOOL_LABELS = {
    BRUSH_TOOL: _("Brush"),
    ERASER_TOOL: _("Eraser"),
    RECT_TOOL: _("Rectangle"),
    ELLIPSE_TOOL: _("Ellipse"),
    LINE_TOOL: _("Line"),
}


## Class defs


class ToolSettings (object):
    """Current tool and brush settings, read by the input modes

    Values are validated as they are set. Colours are normalized to
    "#rrggbb", and opacity is clamped to [0, 1]. Nothing here is saved.

    >>> settings = ToolSettings()
    >>> settings.color = "#F00"
    >>> settings.color
    '#ff0000'
    >>> settings.opacity = 7
    >>> settings.opacity
    1.0
    >>> settings.tool = "lasso"
    Traceback (most recent call last):
    ...
    ValueError: Unknown tool 'lasso'

    """

    def __init__(self, tool=BRUSH_TOOL, color="#000000", size=6,
                 opacity=1.0):
        super(ToolSettings, self).__init__()
        self._tool = BRUSH_TOOL
        self._color = "#000000"
        self._size = 6.0
        self._opacity = 1.0
        self.tool = tool
        self.color = color
        self.size = size
        self.opacity = opacity

    @classmethod
    def new_from_config(cls, config):
        return cls(
            tool=config.get("brush.tool", BRUSH_TOOL),
            color=config.get("brush.color", "#000000"),
            size=config.get("brush.size", 6),
            opacity=config.get("brush.opacity", 1.0),
        )

    @property
    def tool(self):
        return self._tool

    @tool.setter
    def tool(self, tool):
        if tool not in TOOL_LABELS:
            raise ValueError("Unknown tool %r" % (tool,))
        if tool != self._tool:
            self._tool = tool
            self.changed("tool")

    @property
    def color(self):
        return self._color

    @color.setter
    def color(self, color):
        color = helpers.color_to_hex(helpers.parse_color(color))
        if color != self._color:
            self._color = color
            self.changed("color")

    @property
    def size(self):
        """Brush width, in canvas pixels"""
        return self._size

    @size.setter
    def size(self, size):
        size = float(size)
        if not size > 0:
            raise ValueError("Brush size must be positive, got %r" % (size,))
        if size != self._size:
            self._size = size
            self.changed("size")

    @property
    def opacity(self):
        return self._opacity

    @opacity.setter
    def opacity(self, opacity):
        opacity = float(opacity)
        if opacity != opacity:
            raise ValueError("Opacity must be a number, not NaN")
        opacity = helpers.clamp(opacity, 0.0, 1.0)
        if opacity != self._opacity:
            self._opacity = opacity
            self.changed("opacity")

    def is_freehand_tool(self):
        return self._tool in FREEHAND_TOOLS

    def is_shape_tool(self):
        return self._tool in SHAPE_TOOLS

    def get_stroke_style(self):
        """Keyword args for a new Stroke, from the current settings"""
        return dict(
            color=self._color,
            size=self._size,
            opacity=self._opacity,
            mode="erase" if self._tool == ERASER_TOOL else "paint",
        )

    @event
    def changed(self, name):
        """Event: a setting was changed"""

    def __repr__(self):
        return "<ToolSettings %s %s size=%0.1f opacity=%0.2f>" % (
            self._tool, self._color, self._size, self._opacity,
        )
