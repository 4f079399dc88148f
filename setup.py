# This file is part of MiniPaint.

# Imports:

import os.path

from setuptools import setup


# Helper routines:

def get_version():
    """Reads the version string without importing the package"""
    init_py = os.path.join(os.path.dirname(__file__),
                           "minipaint", "__init__.py")
    with open(init_py) as fp:
        for line in fp:
            if line.startswith("MINIPAINT_VERSION"):
                return line.split("=", 1)[1].strip().strip("\"'")
    raise RuntimeError("MINIPAINT_VERSION not found in %s" % (init_py,))


# Setup script "main()":

setup(
    name='MiniPaint',
    version=get_version(),
    description='Layer stack editing and compositing engine for a '
                'simple raster and vector image editor.',
    license="GPLv2+",
    python_requires=">=3.8",

    packages=['minipaint', 'minipaint.layer'],
    install_requires=[
        "numpy",
        "Pillow>=9.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    scripts=[
        "minipaint-render.py",
    ],
    test_suite='tests',
)
