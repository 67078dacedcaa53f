"""Logging for the quicklook renderer.

Every quicklook logger writes to stderr with the format and level from
config and does not propagate, so a host application that configures the
root logger does not see each record twice.
"""

from __future__ import annotations

import logging
import sys

from config import LOG_LEVEL, LOG_FORMAT


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger, namespaced under 'quicklook'."""
    if name != 'quicklook' and not name.startswith('quicklook.'):
        name = f'quicklook.{name}'
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)
        logger.propagate = False
    return logger


# One logger per pipeline stage
decoder_logger = get_logger('decoder')
render_logger = get_logger('render')
plot_logger = get_logger('plot')
