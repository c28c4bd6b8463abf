"""
Logging Configuration
Console / file output for the 'discreet3ds' loggers.

Every module logs through logging.getLogger(__name__), so all records end
up under the 'discreet3ds' logger configured here. Useful levels:
    INFO    one summary line per decoded file
    WARNING chunk size mismatches, invalid meshes, missing colors
    DEBUG   every skipped unknown chunk and ignored track
"""
import logging
import sys
from typing import Optional, TextIO

_FORMAT = '%(asctime)s %(levelname)-7s [%(module)s] %(message)s'
_DATE_FORMAT = '%H:%M:%S'

# Marker attribute for handlers installed by setup_logging()
_OWNED = '_discreet3ds_handler'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach console (and optionally file) output to the 'discreet3ds' logger.

    Calling it again replaces the handlers installed by the previous call;
    handlers added by the application itself are left alone.

    Args:
        level: Threshold for the package logger and its handlers. Pass
            logging.DEBUG to list unknown chunks as they are skipped.
        log_file: Optional path; the file is overwritten on each call.
        stream: Console stream, sys.stdout when omitted.

    Returns:
        The configured 'discreet3ds' logger.
    """
    logger = logging.getLogger("discreet3ds")
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)
    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    logger.debug("Logging initialized at level %s", logging.getLevelName(level))
    return logger
