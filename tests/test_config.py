"""Tests for the [tool.nsdispatch] configuration model."""

import pytest

from nsdispatch import ConfigValidationError
from nsdispatch.config import DispatchConfig


def _write(tmp_path, text: str):
    path = tmp_path / "pyproject.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDispatchConfig:
    def test_defaults(self):
        """An empty config declares no plugins."""
        config = DispatchConfig()
        assert config.plugins == []
        assert config.local_plugins == []

    def test_unknown_key_rejected(self):
        """Unknown keys raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError):
            DispatchConfig(plugin=["typo"])

    def test_wrong_type_rejected(self):
        """A string where a list is expected is rejected."""
        with pytest.raises(ConfigValidationError):
            DispatchConfig(plugins="blog-audit")

    def test_wraps_pydantic_error(self):
        """The pydantic error is chained as __cause__."""
        with pytest.raises(ConfigValidationError) as exc_info:
            DispatchConfig(local_plugins=[1, 2])
        assert exc_info.value.__cause__ is not None

    def test_frozen(self):
        """Config instances are immutable."""
        config = DispatchConfig()
        with pytest.raises(Exception):
            config.plugins = ["x"]  # type: ignore[misc]


class TestFromPyproject:
    def test_reads_table(self, tmp_path):
        """Both plugin lists are read from [tool.nsdispatch]."""
        path = _write(
            tmp_path,
            '[project]\nname = "host"\n\n'
            "[tool.nsdispatch]\n"
            'plugins = ["blog-audit>=1.0"]\n'
            'local_plugins = ["host.handlers", "host.hooks:install"]\n',
        )
        config = DispatchConfig.from_pyproject(path)
        assert config.plugins == ["blog-audit>=1.0"]
        assert config.local_plugins == ["host.handlers", "host.hooks:install"]

    def test_missing_table(self, tmp_path):
        """No [tool.nsdispatch] table yields an empty config."""
        path = _write(tmp_path, '[project]\nname = "host"\n')
        assert DispatchConfig.from_pyproject(path) == DispatchConfig()

    def test_non_table_rejected(self, tmp_path):
        """tool.nsdispatch must be a table."""
        path = _write(tmp_path, "[tool]\nnsdispatch = 1\n")
        with pytest.raises(ConfigValidationError, match="must be a table"):
            DispatchConfig.from_pyproject(path)

    def test_invalid_table_rejected(self, tmp_path):
        """Validation errors surface from from_pyproject()."""
        path = _write(tmp_path, "[tool.nsdispatch]\nplugins = [1]\n")
        with pytest.raises(ConfigValidationError):
            DispatchConfig.from_pyproject(path)
