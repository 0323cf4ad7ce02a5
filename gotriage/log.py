"""Logging set up for the command-line programs
"""

import argparse
import logging
import os
import shlex
import sys
from typing import Optional


# Maps logging levels to syslog ones. Nothing maps to syslog level 5 (KERN_NOTICE).
SYSLOG_LEVELS = [
    (logging.DEBUG, 7),     # KERN_DEBUG
    (logging.INFO, 6),      # KERN_INFO
    (logging.WARNING, 4),   # KERN_WARNING
    (logging.ERROR, 3),     # KERN_ERR
    (logging.CRITICAL, 2),  # KERN_CRIT
]
KERN_ALERT = 1


def calling_program() -> str:
    "Return the name of the program that started us"
    return os.path.basename(sys.argv[0])


def logging_level_to_syslog(level: int) -> int:
    "Converts a logging level into a syslog-compatible one"
    for log_level, syslog_level in SYSLOG_LEVELS:
        if level <= log_level:
            return syslog_level
    return KERN_ALERT


class SyslogFormatter(logging.Formatter):
    "Prefixes each formatted message with its syslog level, like <3>"

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        return f'<{logging_level_to_syslog(record.levelno)}>' + super().format(record)


def log_format(args: argparse.Namespace, program: str) -> tuple[int, str]:
    """Returns the logging level and message format selected by the arguments."""
    if args.debug:
        return logging.DEBUG, program + ' %(levelno)s %(filename)s: %(message)s'
    if args.verbose:
        return logging.INFO, program + ' %(filename)s: %(message)s'
    return logging.WARNING, '%(filename)s: %(message)s'


def setup(args: argparse.Namespace, program: Optional[str] = None):
    """Set up the logging subsystem in a consistent way.

    program defaults to the program invoking this run.
    """
    if not program:
        program = shlex.quote(calling_program())
    # Escape percents to pass through the log format
    level, fmt = log_format(args, program.replace('%', '%%'))
    handler = logging.StreamHandler()
    handler.setFormatter(SyslogFormatter(fmt) if args.level_prefix else logging.Formatter(fmt))
    logging.basicConfig(level=level, handlers=[handler])
