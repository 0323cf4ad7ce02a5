"""Command-line arguments shared between programs."""

import argparse
import ast
import os
from typing import Optional

from gotriage import config


# File name meaning standard input
STDIN_NAME = '-'


def readable_file(filename: str) -> Optional[str]:
    """argparse type for an input file name.

    A leading ~ is expanded. The name is returned rather than an open file (unlike
    argparse.FileType) so that compressed files can be decompressed when opened later.
    None is returned for STDIN_NAME.
    """
    if filename == STDIN_NAME:
        return None
    fn = os.path.expanduser(filename)
    if not os.path.isfile(fn) or not os.access(fn, os.R_OK):
        raise argparse.ArgumentTypeError(f'{fn} is not a readable file')
    return fn


class OverrideConfigAction(argparse.Action):
    """argparse action that overrides a configuration variable with NAME=VALUE.

    VALUE is a Python literal, so strings must be quoted. Anything that isn't a valid literal
    is taken as a plain string. The overrides are also collected in a dict in the namespace.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        name, sep, rawval = values.partition('=')
        if not sep or not name:
            parser.error(f'{option_string} needs NAME=VALUE, not {values!r}')
        try:
            value = ast.literal_eval(rawval) if rawval else ''
        except (ValueError, SyntaxError):
            value = rawval
        config.add_override(name, value)
        setattr(namespace, self.dest, {**(getattr(namespace, self.dest) or {}), name: value})


def arguments_config(parser: argparse.ArgumentParser):
    """Add arguments needed for manipulating the configuration."""
    parser.add_argument(
        '--set',
        action=OverrideConfigAction,
        metavar='NAME=VALUE',
        help='Override a config value')


def arguments_logging(parser: argparse.ArgumentParser):
    """Add arguments needed for logging."""
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Go through the motions but don't file any issues")
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show more log messages')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Show debug level log messages (implies --verbose)')
    parser.add_argument(
        '--level-prefix',
        action='store_true',
        help='Include syslog priority level in log message as <N> prefix')


def arguments_events(parser: argparse.ArgumentParser):
    """Add arguments needed for reading a test event stream."""
    parser.add_argument(
        '--package',
        help='Full name of the Go package that was tested (default: from the '
             f'${config.get("package_env")} environment variable)')
    parser.add_argument(
        'file',
        nargs='?',
        type=readable_file,
        help='File holding go test -json output, optionally zstd compressed '
             f'(default or {STDIN_NAME}: stdin)')
