#!/usr/bin/env python3
# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Flatten images into a PNG with the MiniPaint compositor"""

import sys

from minipaint.main import main


if __name__ == '__main__':
    sys.exit(main())
