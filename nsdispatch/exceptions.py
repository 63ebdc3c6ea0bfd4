"""Exception hierarchy for nsdispatch.

All custom exceptions inherit from DispatcherError base class.
"""


class DispatcherError(Exception):
    """Base exception for all nsdispatch errors.

    All custom exceptions in nsdispatch inherit from this class, allowing
    users to catch all framework-specific errors with a single except clause.

    Errors raised by handlers during ``trigger()`` are never wrapped: they
    propagate to the caller unchanged.
    """


class InvalidHandlerError(DispatcherError, TypeError):
    """Handler passed to ``register()`` is not callable.

    Raised before the registry is touched, so a failed registration leaves
    no trace.
    """


class ConfigValidationError(DispatcherError, ValueError):
    """The ``[tool.nsdispatch]`` table failed validation.

    This wraps pydantic.ValidationError to provide a framework-specific exception type.
    """


# -- Plugin errors ------------------------------------------------------------


class PluginError(DispatcherError):
    """Base exception for plugin loading errors."""


class PluginNotFoundError(PluginError):
    """Required plugin package is not installed.

    Raised when a plugin declared in [tool.nsdispatch] plugins list
    cannot be found among installed packages.
    """


class PluginVersionError(PluginError):
    """Installed plugin version does not satisfy the requirement specifier."""


class PluginEntryPointError(PluginError):
    """Plugin has no usable entry point in the 'nsdispatch.plugins' group.

    Raised when a plugin package declares no entry point in the group, or
    when the entry point does not resolve to a callable setup function.
    """


class PluginImportError(PluginError):
    """Plugin module failed to import or its setup function raised.

    The original exception is chained via ``__cause__``.
    """
