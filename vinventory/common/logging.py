# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os
import sys
import logging
from logging.handlers import RotatingFileHandler

from vinventory.common.misc import do_error_exit

logger_name = "vCenter-Inventory"

# additional debug levels below logging.DEBUG
DEBUG2 = 6  # matching details of lookups and skipped objects
DEBUG3 = 3  # dumps of all query results

log_levels = {
    "DEBUG3": DEBUG3,
    "DEBUG2": DEBUG2,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR
}

valid_log_levels = list(log_levels.keys())

log_file_max_size_in_mb = 10
log_file_max_rotation = 5

# leaves of a cluster can be processed by worker threads
log_format = '%(asctime)s - %(levelname)s [%(threadName)s]: %(message)s'


def _level_method(level):

    def log_at_level(self, message, *args, **kwargs):
        if self.isEnabledFor(level):
            self._log(level, message, args, **kwargs)

    return log_at_level


for _name, _level in [("DEBUG2", DEBUG2), ("DEBUG3", DEBUG3)]:
    logging.addLevelName(_level, _name)
    setattr(logging.Logger, _name.lower(), _level_method(_level))


def get_logger():
    """
    return the logger shared by all project files
    """

    return logging.getLogger(logger_name)


def _file_handler(log_file):
    """
    rotating log file handler, relative paths are relative to the project base directory
    """

    if not os.path.isabs(log_file):
        base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        log_file = os.path.join(base_dir, log_file)

    try:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        return RotatingFileHandler(
            filename=log_file,
            maxBytes=log_file_max_size_in_mb * 1024 * 1024,
            backupCount=log_file_max_rotation
        )
    except OSError as e:
        do_error_exit(f"Problems setting up log file '{log_file}': {e}")


def setup_logging(log_level=None, log_file=None):
    """
    Set up the project logger and return it

    Parameters
    ----------
    log_level: str
        one of 'valid_log_levels'
    log_file: str
        optional file to log to in addition to stdout

    Returns
    -------
    logging.Logger
    """

    if log_level is None or len(f"{log_level}") == 0:
        do_error_exit("log level undefined or empty. Check config please.")

    log_level = log_level.upper()

    numeric_log_level = log_levels.get(log_level)
    if numeric_log_level is None:
        do_error_exit(f"Passed invalid log level: {log_level}")

    logger = get_logger()
    logger.setLevel(numeric_log_level)

    handlers = list()

    if log_level == "DEBUG3":
        # root logger also prints pyVmomi debug output, project messages propagate to it
        logging.basicConfig(level=logging.DEBUG, format=log_format)
    else:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file is not None:
        handlers.append(_file_handler(log_file))

    for handler in handlers:
        handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(handler)

    return logger
