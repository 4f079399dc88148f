# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layers holding strokes, images and shapes, and the stack of them"""

from .core import LayerBase  # noqa: F401
from .core import LayerBaseSnapshot  # noqa: F401
from .data import RasterLayer  # noqa: F401
from .data import ImageLayer  # noqa: F401
from .data import ShapeLayer  # noqa: F401
from .data import new_layer  # noqa: F401
from .data import layer_from_snapshot  # noqa: F401
from .tree import RootLayerStack  # noqa: F401
from .tree import RootLayerStackSnapshot  # noqa: F401
