"""nsdispatch - wildcard (namespace, event) dispatching for Python.

Handlers are registered against namespace and event patterns (``*`` and
``all`` are wildcards) and triggered with a shared parameter bag, in
priority order, with support for early halting.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all nsdispatch logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("nsdispatch")
logger.disable("nsdispatch")

from nsdispatch.async_dispatcher import AsyncDispatcher
from nsdispatch.base_dispatcher import DEFAULT_PRIORITY
from nsdispatch.dispatcher import Dispatcher
from nsdispatch.exceptions import (
    ConfigValidationError,
    DispatcherError,
    InvalidHandlerError,
    PluginEntryPointError,
    PluginError,
    PluginImportError,
    PluginNotFoundError,
    PluginVersionError,
)
from nsdispatch.patterns import WildcardPattern, compile_pattern
from nsdispatch.registry import Registration

__all__ = [
    # Version
    "__version__",
    # Dispatcher classes
    "Dispatcher",
    "AsyncDispatcher",
    "DEFAULT_PRIORITY",
    "Registration",
    # Patterns
    "WildcardPattern",
    "compile_pattern",
    # Exception classes
    "DispatcherError",
    "InvalidHandlerError",
    "ConfigValidationError",
    "PluginError",
    "PluginNotFoundError",
    "PluginVersionError",
    "PluginEntryPointError",
    "PluginImportError",
]
