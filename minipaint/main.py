# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Command line entry point: flatten images into a PNG

Each image named on the command line is imported as a layer, stacked
in order, and the flattened stack is written out as a PNG.
"""

## Imports

import os
import re
import sys
import logging
from optparse import OptionParser

from . import MINIPAINT_VERSION
from . import config as userconfig
from . import filters
from . import modes
from .document import Document

logger = logging.getLogger(__name__)


## Logging classes


class ColorFormatter (logging.Formatter):
    """Minimal ANSI formatter, for use with non-Windows console logging."""

    BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)
    FG = 30
    BG = 40
    LEVELCOL = {
        "DEBUG": "\033[%02dm" % (FG+BLUE,),
        "INFO": "\033[%02dm" % (FG+GREEN,),
        "WARNING": "\033[%02dm" % (FG+YELLOW,),
        "ERROR": "\033[%02dm" % (FG+RED,),
        "CRITICAL": "\033[%02d;%02dm" % (FG+RED, BG+BLACK),
    }
    BOLD = "\033[01m"
    BOLDOFF = "\033[22m"
    RESET = "\033[0m"

    # Format placeholders in messages are highlighted
    _TOKEN_RE = re.compile(r'%r|%s|%\+?[0-9.]*d|%\+?[0-9.]*f')

    def _replace_bold(self, m):
        return self.BOLD + m.group(0) + self.BOLDOFF

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        if isinstance(record.msg, str):
            record.msg = self._TOKEN_RE.sub(self._replace_bold, record.msg)
        record.reset = self.RESET
        record.bold = self.BOLD
        record.boldOff = self.BOLDOFF
        record.levelCol = self.LEVELCOL.get(record.levelname, "")
        return super(ColorFormatter, self).format(record)


## Helper functions


def setup_logging(debug=False, stream=None):
    """Adds a console handler to the root logger"""
    if stream is None:
        stream = sys.stderr
    log_format = "%(levelname)s: %(name)s: %(message)s"
    console_handler = logging.StreamHandler(stream=stream)
    no_ansi_platforms = ["win32"]
    can_use_ansi_formatting = (
        (sys.platform not in no_ansi_platforms)
        and hasattr(stream, "isatty")
        and stream.isatty()
    )
    if can_use_ansi_formatting:
        log_format = (
            "%(levelCol)s%(levelname)s: "
            "%(bold)s%(name)s%(reset)s%(levelCol)s: "
            "%(message)s%(reset)s"
        )
        console_formatter = ColorFormatter(log_format)
    else:
        console_formatter = logging.Formatter(log_format)
    console_handler.setFormatter(console_formatter)
    root_logger = logging.getLogger()
    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if debug:
        logger.info("Debugging output enabled via --debug")
    return console_handler


def parsed_cmdline_arguments(argv):
    """Parse command line arguments and return result

    :return: (options, positional arguments)
    """
    parser = OptionParser('usage: %prog [options] -o OUT.png IMAGE...')
    parser.add_option(
        '-o',
        '--output',
        metavar='FILE',
        default=None,
        help='write the flattened PNG to FILE'
    )
    parser.add_option(
        '-c',
        '--config',
        metavar='FILE',
        default=None,
        help='read settings from a JSON FILE (or DIR/settings.json)'
    )
    parser.add_option(
        '--filter',
        metavar='KIND',
        choices=sorted(filters.FILTERS),
        default=None,
        help='apply a filter to each image: %s'
             % ", ".join(sorted(filters.FILTERS))
    )
    parser.add_option(
        '--blend',
        metavar='MODE',
        choices=list(modes.STANDARD_MODES),
        default=None,
        help='blend mode for each image: %s'
             % ", ".join(modes.STANDARD_MODES)
    )
    parser.add_option(
        '--opacity',
        metavar='X',
        type='float',
        default=None,
        help='opacity for each image, from 0 to 1'
    )
    parser.add_option(
        '--transparent',
        action="store_true",
        default=False,
        help='leave out the canvas background'
    )
    parser.add_option(
        '-d',
        '--debug',
        action="store_true",
        default=False,
        help='show debugging messages'
    )
    parser.add_option(
        "-V",
        '--version',
        action="store_true",
        help='print version information and exit'
    )
    options, args = parser.parse_args(argv)
    if not options.version:
        if not args:
            parser.error("no images to flatten")
        if not options.output:
            parser.error("an output file is required (-o)")
    return options, args


def _import_images(doc, paths):
    """Imports images one at a time, so layers stack in argument order"""
    for path in paths:
        try:
            with open(path, "rb") as fp:
                data = fp.read()
        except IOError as e:
            logger.error("Cannot read %r: %s", path, e)
            continue
        doc.import_image(data, name=os.path.basename(path))
        doc.finish_pending()
    return [l for l in doc.layer_stack if l.kind == "image"]


## Program launch


def main(argv=None):
    """Runs the flattening tool

    :param list argv: Arguments, excluding the program name
    :returns: exit status
    """
    if argv is None:
        argv = sys.argv[1:]
    options, args = parsed_cmdline_arguments(argv)
    if options.version:
        print("MiniPaint %s" % (MINIPAINT_VERSION,))
        return 0
    console_handler = setup_logging(debug=options.debug)

    settings = {}
    if options.config:
        settings = userconfig.get_json_config(options.config)
    doc = Document(settings)
    try:
        imported = _import_images(doc, args)
        if not imported:
            logger.error("None of the images could be imported")
            return 1
        for layer in imported:
            if options.filter:
                doc.apply_filter(layer.id, options.filter)
            if options.blend:
                doc.set_blend_mode(layer.id, options.blend)
            if options.opacity is not None:
                doc.set_opacity(layer.id, options.opacity)
        doc.finish_pending()
        if options.transparent:
            png = doc.export_png(background=None)
        else:
            png = doc.export_png()
        with open(options.output, "wb") as fp:
            fp.write(png)
        logger.info("Wrote %d layers to %r", len(doc.layer_stack),
                    options.output)
    finally:
        doc.cleanup()
        logging.getLogger().removeHandler(console_handler)
    return 0


if __name__ == '__main__':
    sys.exit(main())
