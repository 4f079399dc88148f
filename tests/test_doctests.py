# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Runs the doctests embedded in the library modules"""

# Imports:

import doctest
import importlib
import unittest


# Constants:

MODULES_WITH_DOCTESTS = [
    "minipaint.compositeops",
    "minipaint.config",
    "minipaint.document",
    "minipaint.draw",
    "minipaint.filters",
    "minipaint.helpers",
    "minipaint.history",
    "minipaint.idletask",
    "minipaint.layer.data",
    "minipaint.layer.tree",
    "minipaint.modes",
    "minipaint.observable",
    "minipaint.pixbuf",
    "minipaint.stroke",
    "minipaint.tools",
    "minipaint.viewtransform",
]


# Test cases:

class Doctests (unittest.TestCase):

    def test_modules(self):
        for name in MODULES_WITH_DOCTESTS:
            module = importlib.import_module(name)
            result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
            self.assertGreater(result.attempted, 0, name)
            self.assertEqual(result.failed, 0, name)
