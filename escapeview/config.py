"""
Viewer and snapshot settings.

Settings are read from a JSON file (by default the settings.json shipped
beside this module) and merged over DEFAULT_SETTINGS, so a settings file
only needs the keys it wants to change.
"""

import json
import os

from loguru import logger


DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    "window_width": 960,
    "window_height": 640,
    # Window pixels per evaluated cell in the live view
    "cell_size": 4,
    "screenshot_width": 4000,
    "screenshot_height": 4000,
    "img_dir": ".",
    "colorer": "Sunset",
    "blur": False,
}


def load_settings(path=None):
    """
    Load settings from a JSON file.

    Unknown keys are ignored. A missing or unreadable file falls back to
    the defaults with a warning.

    Returns:
        dict with every key of DEFAULT_SETTINGS
    """
    path = path or DEFAULT_SETTINGS_PATH
    settings = dict(DEFAULT_SETTINGS)
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return settings

    if not isinstance(loaded, dict):
        logger.warning(f"Ignoring settings in {path}: expected an object")
        return settings

    for key, value in loaded.items():
        if key in DEFAULT_SETTINGS:
            settings[key] = value
        else:
            logger.debug(f"Ignoring unknown setting {key!r} in {path}")
    return settings
