"""Host configuration read from ``pyproject.toml``.

Only plugin composition is configurable; the dispatch core itself takes
its settings as constructor arguments.

Example::

    [tool.nsdispatch]
    plugins = ["blog-audit>=1.0"]
    local_plugins = ["myapp.handlers", "myapp.hooks:install"]
"""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from nsdispatch.exceptions import ConfigValidationError

TOOL_TABLE = "nsdispatch"


class DispatchConfig(BaseModel):
    """Validated ``[tool.nsdispatch]`` table.

    Attributes:
        plugins: PEP 508 requirement strings of installed plugin packages.
        local_plugins: Dotted module paths, optionally ``module:attr``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    plugins: list[str] = []
    local_plugins: list[str] = []

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into ConfigValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc

    @classmethod
    def from_pyproject(cls, pyproject_path: Path) -> "DispatchConfig":
        """Load the ``[tool.nsdispatch]`` table of a ``pyproject.toml``.

        Args:
            pyproject_path: Path to the ``pyproject.toml`` file.

        Returns:
            Parsed config; empty when the table is absent.

        Raises:
            ConfigValidationError: If the table has unknown keys or values
                of the wrong type.
        """
        with open(pyproject_path, "rb") as fh:
            document = tomllib.load(fh)
        table = document.get("tool", {}).get(TOOL_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigValidationError(
                f"[tool.{TOOL_TABLE}] in {pyproject_path} must be a table"
            )
        return cls(**table)
