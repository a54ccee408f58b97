"""Tests for configuration loading."""

import pytest
import yaml

from semicolon_cli.config import ConfigManager, SemicolonConfig
from semicolon_cli.core.classifier import TerminatorPolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("AMBIGUOUS_EXPORT", "INSERT", "REMOVE", "PARALLEL", "LOG_LEVEL"):
        monkeypatch.delenv(f"SEMICOLON_CLI_{name}", raising=False)


def test_defaults(tmp_path):
    config = ConfigManager(tmp_path).load_config()

    assert config.ambiguous_export_policy is TerminatorPolicy.REQUIRED
    assert config.insert_missing and config.remove_redundant
    assert not config.parallel
    assert config.extensions == [".js", ".mjs", ".cjs"]


def test_load_from_file(tmp_path):
    (tmp_path / "config.yaml").write_text(yaml.dump({
        "ambiguous_export_policy": "exempt",
        "remove_redundant": False,
        "extensions": ["jsx", ".js"],
    }))

    config = ConfigManager(tmp_path).load_config()

    assert config.ambiguous_export_policy is TerminatorPolicy.EXEMPT
    assert not config.remove_redundant
    assert config.extensions == [".jsx", ".js"]


def test_environment_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text(yaml.dump({"parallel": False, "log_level": "info"}))
    monkeypatch.setenv("SEMICOLON_CLI_PARALLEL", "yes")
    monkeypatch.setenv("SEMICOLON_CLI_LOG_LEVEL", "debug")

    config = ConfigManager(tmp_path).load_config()

    assert config.parallel
    assert config.log_level == "DEBUG"


def test_invalid_values_fall_back_to_defaults(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("ambiguous_export_policy: [unclosed")
    monkeypatch.setenv("SEMICOLON_CLI_AMBIGUOUS_EXPORT", "sometimes")

    config = ConfigManager(tmp_path).load_config()

    assert config.ambiguous_export_policy is TerminatorPolicy.REQUIRED


def test_save_and_reload(tmp_path):
    manager = ConfigManager(tmp_path / "nested")
    manager.save_config(SemicolonConfig(parallel=True, ambiguous_export_policy=TerminatorPolicy.EXEMPT))

    reloaded = ConfigManager(tmp_path / "nested").load_config()

    assert reloaded.parallel
    assert reloaded.ambiguous_export_policy is TerminatorPolicy.EXEMPT
    assert manager.get_config_info()["config_exists"]


def test_quoted_switches_and_scalar_extension(tmp_path):
    (tmp_path / "config.yaml").write_text('parallel: "false"\ninsert_missing: "no"\nremove_redundant: "on"\nextensions: jsx\n')

    config = ConfigManager(tmp_path).load_config()

    assert config.parallel is False
    assert config.insert_missing is False
    assert config.remove_redundant is True
    assert config.extensions == [".jsx"]
