# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Editor settings: defaults, and an optional JSON settings file"""

import os
import json
import logging

logger = logging.getLogger(__name__)


SETTINGS_FILE_NAME = u'settings.json'


def get_json_config(conf_path):
    """Return user settings read from a settings file

    :param conf_path: Path to a JSON settings file, or to the directory
        containing settings.json
    :type conf_path: str
    :returns: Dict with settings, or the empty dict if the settings file
        cannot be found/read or parsed.
    """
    settingspath = conf_path
    if os.path.isdir(conf_path):
        settingspath = os.path.join(conf_path, SETTINGS_FILE_NAME)
    logger.debug("Reading settings from %r", settingspath)
    try:
        with open(settingspath, "rb") as fp:
            settings = json.loads(fp.read().decode("utf-8"))
    except IOError:
        logger.warning("Failed to load settings file: %s", settingspath)
    except ValueError as e:
        logger.warning("%s: %s", settingspath, str(e))
    else:
        if isinstance(settings, dict):
            return settings
        logger.warning("%s: expected a JSON object", settingspath)
    logger.warning("Failed to load settings: using defaults")
    return {}


def default_configuration():
    """Return the default settings

    >>> config = default_configuration()
    >>> config["canvas.width"], config["canvas.height"]
    (800, 600)

    """
    default_config = {
        # Export and display size of the canvas, in model pixels
        'canvas.width': 800,
        'canvas.height': 600,
        # Drawn under the bottom layer. None means transparent.
        'canvas.background': '#ffffff',

        'view.zoom_step': 1.05,

        # Number of undo steps kept. None for no limit.
        'history.max_size': None,

        # Initial tool settings
        'brush.tool': 'brush',
        'brush.color': '#000000',
        'brush.size': 6,
        'brush.opacity': 1.0,

        # New rectangles are this wide and tall. Ellipse radii are half
        # of it, and lines this long.
        'shape.default_size': 100,

        # Imported images are placed with their top left corner here
        'image.import_offset': (50, 50),

        # Draw freehand strokes as Catmull-Rom curves through their points
        'stroke.smoothing': False,
    }
    return default_config


def merged_configuration(user_config=None, conf_path=None):
    """Defaults, overlaid with user settings

    :param dict user_config: Settings to apply over the defaults
    :param str conf_path: Settings file to read, if any
    :rtype: dict

    Unknown keys are kept, but logged.

    >>> merged_configuration({"canvas.width": 320})["canvas.width"]
    320

    """
    config = default_configuration()
    overrides = {}
    if conf_path is not None:
        overrides.update(get_json_config(conf_path))
    if user_config:
        overrides.update(user_config)
    for key in overrides:
        if key not in config:
            logger.info("Unknown setting %r", key)
    config.update(overrides)
    return config
