"""Access to the program configuration.

Values come from, in increasing order of precedence: the process environment, the defaults in
configdef, the user's gotriagerc file and overrides given on the command-line with --set.
"""

import functools
import importlib.machinery
import importlib.util
import logging
import os
import sys
from types import ModuleType
from typing import Any, Optional

from gotriage import configdef


CONFIG_FILE = 'gotriagerc'

# The user's configuration file, once loaded
_user_config: Optional[ModuleType] = None

# Config variables that override all others
overrides: dict[str, Any] = {}


def config_dir() -> str:
    """Returns the directory holding the configuration file."""
    if xdg := os.environ.get('XDG_CONFIG_HOME'):
        return xdg
    if home := os.environ.get('HOME'):
        return os.path.join(home, '.config')
    return os.curdir


def load_config_file(path: str) -> ModuleType:
    """Executes a Python configuration file and returns it as a module.

    An empty module is returned if the file can't be read.
    """
    if not os.access(path, os.R_OK):
        logging.info('Configuration file %s not found', path)
        return ModuleType('empty')

    loader = importlib.machinery.SourceFileLoader(CONFIG_FILE, path)
    spec = importlib.util.spec_from_loader(CONFIG_FILE, loader)
    module = importlib.util.module_from_spec(spec)
    # Never write a bytecode file for the config file
    saved_flag = sys.dont_write_bytecode
    sys.dont_write_bytecode = True
    try:
        loader.exec_module(module)
    finally:
        sys.dont_write_bytecode = saved_flag
    logging.debug('Loaded configuration file %s', path)
    return module


def user_config() -> ModuleType:
    global _user_config
    if _user_config is None:
        _user_config = load_config_file(os.path.join(config_dir(), CONFIG_FILE))
    return _user_config


def _variables(module: ModuleType) -> dict[str, Any]:
    return {name: value for name, value in vars(module).items() if not name.startswith('_')}


def environ() -> dict[str, Any]:
    """Returns all config and environment variables, merged by precedence.

    Config variables take precedence over environment variables so that an oddly-named
    environment variable can't change a configured value.
    """
    return {**os.environ, **_variables(configdef), **_variables(user_config()), **overrides}


def expandstr(s: str) -> str:
    """Expands {NAME} references to config or environment variables in a string."""
    return s.format(**environ())


@functools.lru_cache(maxsize=None)
def get(var: str) -> Any:
    """Returns a raw config variable.

    Raises:
        KeyError if no such variable exists
    """
    return environ()[var]


@functools.lru_cache(maxsize=None)
def expand(var: str) -> str:
    """Returns a string config variable with its {NAME} references expanded."""
    return expandstr(get(var))


def lookup(var: str, default: Any = None) -> Any:
    """Returns a config or environment variable that might not exist.

    This isn't cached since the environment may change.
    """
    return environ().get(var, default)


def add_override(name: str, value: Any):
    """Sets a config variable that overrides all others."""
    overrides[name] = value
    get.cache_clear()
    expand.cache_clear()
