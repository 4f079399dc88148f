# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layer-stack editing and compositing engine for MiniPaint.

The document model lives in `minipaint.document`; it can be driven
without any GUI attached (see ``../tests/``).

"""

#: Version string, semantic versioning.
MINIPAINT_VERSION = "0.3.0-alpha"
