"""Methods for retrieving the program configuration."""

import contextlib
import importlib.machinery
import importlib.util
import logging
import os
import sys
from types import ModuleType
from typing import Any

from commitsize import configdef


# Cache configuration module here
config_module = None

CONFIG_FILE = 'commitsizerc'

# Config variables that override all others
overrides = {}


def config_dir() -> str:
    """Get the directory in which to find the configuration file."""
    if 'XDG_CONFIG_HOME' in os.environ:
        return os.environ['XDG_CONFIG_HOME']
    if 'HOME' in os.environ:
        return os.path.join(os.environ['HOME'], '.config')
    return '.'


@contextlib.contextmanager
def override_var(obj, name: str, value: Any):
    """Change an object variable within a with context.

    The original value of the attribute is restored on context exit.
    """
    saved_value = getattr(obj, name)
    setattr(obj, name, value)
    try:
        yield saved_value
    finally:
        setattr(obj, name, saved_value)


def config() -> ModuleType:
    """Return the user configuration file as a module."""
    global config_module
    if config_module:
        return config_module

    configfn = os.path.join(config_dir(), CONFIG_FILE)
    if (os.access(configfn, os.R_OK)
        and (spec := importlib.util.spec_from_loader(
             'commitsizerc',
             importlib.machinery.SourceFileLoader(
                 'commitsizerc', configfn)))):
        config_module = importlib.util.module_from_spec(spec)

        # Don't write the imported config file bytecode file to eliminate caching problems
        with override_var(sys, 'dont_write_bytecode', True):
            spec.loader.exec_module(config_module)
    else:
        logging.debug('Configuration file %s not found', configfn)
        config_module = ModuleType('empty')

    return config_module  # noqa: R504


def get(var: str) -> Any:
    """Get a config variable.

    Overrides win over the user's config file, which wins over the defaults.
    """
    if var in overrides:
        return overrides[var]
    user = config()
    if hasattr(user, var):
        return getattr(user, var)
    return getattr(configdef, var)


def add_override(name: str, value: Any):
    """Add a config variable that overrides all others."""
    if not hasattr(configdef, name):
        logging.warning('Overriding unknown config variable %s', name)
    overrides[name] = value


def reset():
    """Forget the loaded config file and all overrides."""
    global config_module
    config_module = None
    overrides.clear()
