"""
Tests for calculator configuration loading.
"""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from backend.calcengine.config import CalculatorConfig, load_config
from backend.calcengine.errors import ConfigError


class TestCalculatorConfig:
    """Tests for CalculatorConfig."""

    def test_defaults(self):
        """Test default settings."""
        config = CalculatorConfig()
        assert config.history_enabled is True
        assert config.history_file == Path("log.txt")
        assert config.history_format == "text"
        assert config.prompt == "> "
        assert config.stack_capacity == 10
        assert config.stack_growth == 32

    def test_from_yaml_nested(self):
        """Test settings under a calculator key."""
        config = CalculatorConfig.from_yaml(
            "calculator:\n  history_format: jsonl\n  log_level: debug\n"
        )
        assert config.history_format == "jsonl"
        assert config.log_level == "DEBUG"

    def test_from_yaml_flat(self):
        """Test settings at the top level."""
        config = CalculatorConfig.from_yaml("prompt: 'calc> '\nstack_growth: 4\n")
        assert config.prompt == "calc> "
        assert config.stack_growth == 4

    def test_empty_yaml(self):
        """Test an empty document yields defaults."""
        assert CalculatorConfig.from_yaml("") == CalculatorConfig()

    def test_invalid_yaml(self):
        """Test malformed YAML raises ConfigError."""
        with pytest.raises(ConfigError):
            CalculatorConfig.from_yaml("calculator: [unclosed")

    def test_non_mapping_yaml(self):
        """Test a YAML list is rejected."""
        with pytest.raises(ConfigError):
            CalculatorConfig.from_yaml("- a\n- b\n")

    def test_invalid_format(self):
        """Test an unknown history format fails validation."""
        with pytest.raises(ValidationError):
            CalculatorConfig(history_format="csv")

    def test_invalid_log_level(self):
        """Test an unknown log level fails validation."""
        with pytest.raises(ValidationError):
            CalculatorConfig(log_level="LOUD")

    def test_invalid_growth(self):
        """Test the stack growth increment must be positive."""
        with pytest.raises(ValidationError):
            CalculatorConfig(stack_growth=0)

    def test_unknown_key(self):
        """Test unexpected settings are reported."""
        with pytest.raises(ValidationError):
            CalculatorConfig.from_yaml("colour: blue\n")

    def test_from_file(self):
        """Test loading from a file on disk."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "calc.yaml"
            path.write_text("calculator:\n  history_enabled: false\n", encoding="utf-8")
            assert CalculatorConfig.from_file(path).history_enabled is False

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing config file is not an error."""
        assert CalculatorConfig.from_file(tmp_path / "nope.yaml") == CalculatorConfig()

    def test_with_overrides_ignores_none(self):
        """Test None overrides keep the existing value."""
        config = CalculatorConfig().with_overrides(prompt=None, history_enabled=False)
        assert config.prompt == "> "
        assert config.history_enabled is False


class TestLoadConfig:
    """Tests for load_config."""

    def test_environment_overrides(self, tmp_path):
        """Test environment variables win over the file."""
        path = tmp_path / "calc.yaml"
        path.write_text("history_file: from_file.txt\nprompt: '$ '\n", encoding="utf-8")
        config = load_config(
            path,
            environ={"CALCENGINE_HISTORY_FILE": "from_env.txt", "CALCENGINE_LOG_LEVEL": "info"},
        )
        assert config.history_file == Path("from_env.txt")
        assert config.prompt == "$ "
        assert config.log_level == "INFO"

    def test_os_environ(self, monkeypatch):
        """Test os.environ is used by default."""
        monkeypatch.setenv("CALCENGINE_PROMPT", ">> ")
        assert load_config().prompt == ">> "

    def test_no_file_no_env(self):
        """Test defaults with nothing configured."""
        assert load_config(environ={}) == CalculatorConfig()
