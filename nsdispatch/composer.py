"""Load handler plugins onto a dispatcher.

A plugin is a setup function taking the dispatcher::

    # blog_audit/plugin.py
    def setup(dispatcher):
        dispatcher.register("obj:*", "saved", audit_saved)

Installed packages expose it as an entry point in ``nsdispatch.plugins``;
modules of the host application are named directly as ``pkg.mod``
(calls ``setup``) or ``pkg.mod:attr``.
"""

import importlib
import importlib.metadata
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger
from packaging.requirements import Requirement
from packaging.version import Version

from nsdispatch.base_dispatcher import BaseDispatcher
from nsdispatch.config import DispatchConfig
from nsdispatch.exceptions import (
    PluginEntryPointError,
    PluginImportError,
    PluginNotFoundError,
    PluginVersionError,
)
from nsdispatch.utils import callable_name, normalize_name

log = logger.bind(source=__name__)

ENTRY_POINT_GROUP = "nsdispatch.plugins"
SETUP_ATTR = "setup"


class PluginComposer:
    """Run plugin setup functions against one dispatcher.

    Each plugin is set up at most once per composer.  A plugin counts as
    loaded as soon as its setup starts, so a setup that fails halfway is
    not retried: handlers it registered before failing stay registered
    and are never registered twice.
    """

    def __init__(self, dispatcher: BaseDispatcher[Any]) -> None:
        self.dispatcher = dispatcher
        self.loaded_plugins: set[str] = set()
        self.loaded_local_plugins: set[str] = set()

    def compose(self, plugin_requirements: list[str]) -> None:
        """Set up installed plugins named by PEP 508 requirement strings.

        Raises:
            PluginNotFoundError: If a plugin is not installed.
            PluginVersionError: If its version misses the specifier.
            PluginEntryPointError: If it has no callable entry point in
                ``nsdispatch.plugins``.
            PluginImportError: If loading or setup raises.
        """
        for req_str in plugin_requirements:
            self._load_plugin(Requirement(req_str))

    def compose_local(self, module_paths: list[str]) -> None:
        """Set up host modules named as ``pkg.mod`` or ``pkg.mod:attr``.

        A module without ``setup`` is only imported.

        Raises:
            PluginEntryPointError: If a named ``attr`` is missing or not
                callable.
            PluginImportError: If the import or the setup call raises.
        """
        for module_path in module_paths:
            if module_path in self.loaded_local_plugins:
                log.debug("Local plugin already loaded: {}", module_path)
                continue

            module_name, _, attr = module_path.partition(":")
            try:
                module = importlib.import_module(module_name)
            except Exception as exc:
                log.exception("Failed to import local plugin '{}'", module_path)
                raise PluginImportError(
                    f"Failed to import local plugin '{module_path}'"
                ) from exc

            setup = getattr(module, attr or SETUP_ATTR, None)
            if attr and not callable(setup):
                raise PluginEntryPointError(
                    f"Local plugin '{module_path}' has no callable '{attr}'"
                )

            self.loaded_local_plugins.add(module_path)
            if callable(setup):
                self._run_setup(module_path, setup)
            log.info("Local plugin '{}' loaded", module_path)

    def compose_from_pyproject(self, pyproject_path: Path) -> None:
        """Set up the plugins of ``[tool.nsdispatch]``, installed ones first.

        Raises:
            ConfigValidationError: If the table is malformed.
        """
        config = DispatchConfig.from_pyproject(pyproject_path)
        if not config.plugins and not config.local_plugins:
            log.info("No plugins declared in {}", pyproject_path)
            return
        self.compose(config.plugins)
        self.compose_local(config.local_plugins)

    def _load_plugin(self, requirement: Requirement) -> None:
        plugin_name = requirement.name
        normalized_name = normalize_name(plugin_name)
        if normalized_name in self.loaded_plugins:
            log.debug("Plugin already loaded: {}", plugin_name)
            return

        try:
            dist = importlib.metadata.distribution(plugin_name)
        except importlib.metadata.PackageNotFoundError as err:
            raise PluginNotFoundError(
                f"Required plugin '{plugin_name}' is not installed"
            ) from err

        installed_version = Version(dist.version)
        if not requirement.specifier.contains(installed_version):
            raise PluginVersionError(
                f"Plugin '{plugin_name}' version {installed_version} "
                f"does not satisfy requirement '{requirement}'"
            )

        eps = importlib.metadata.entry_points(group=ENTRY_POINT_GROUP, name=plugin_name)
        if not eps:
            raise PluginEntryPointError(
                f"Plugin '{plugin_name}' has no entry point "
                f"in group '{ENTRY_POINT_GROUP}'"
            )
        ep = next(iter(eps))

        try:
            setup = ep.load()
        except Exception as exc:
            log.exception("Failed to load plugin '{}'", plugin_name)
            raise PluginImportError(
                f"Failed to load plugin '{plugin_name}' from entry point"
            ) from exc
        if not callable(setup):
            raise PluginEntryPointError(
                f"Entry point '{ep.value}' of plugin '{plugin_name}' is not callable"
            )

        self.loaded_plugins.add(normalized_name)
        self._run_setup(plugin_name, setup)
        log.info("Plugin '{}' v{} loaded", plugin_name, installed_version)

    def _run_setup(self, plugin_name: str, setup: Callable[..., Any]) -> None:
        try:
            setup(self.dispatcher)
        except Exception as exc:
            log.exception(
                "Setup {} of plugin '{}' failed", callable_name(setup), plugin_name
            )
            raise PluginImportError(f"Setup of plugin '{plugin_name}' failed") from exc
