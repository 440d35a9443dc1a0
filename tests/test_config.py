import textwrap

import pytest

from orderflow.config import Config, config_from_mapping, refresh_config
from orderflow.errors import ConfigError


def test_defaults_without_pyproject_section(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'shop'\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    cfg = refresh_config()

    assert cfg == Config(tax_enabled=False, log_level="WARNING")


def test_config_loads_from_pyproject(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(
        textwrap.dedent(
            """
            [tool.orderflow]
            tax_enabled = true
            log_level = "info"
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    cfg = refresh_config()

    assert cfg.tax_enabled is True
    assert cfg.log_level == "INFO"
    assert cfg.log_level_value == 20


def test_config_found_in_parent_directory(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[tool.orderflow]\ntax_enabled = true\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert refresh_config(nested).tax_enabled is True


def test_env_overrides_pyproject(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[tool.orderflow]\ntax_enabled = true\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORDERFLOW_TAX_ENABLED", "off")
    monkeypatch.setenv("ORDERFLOW_LOG_LEVEL", "debug")

    cfg = refresh_config()

    assert cfg.tax_enabled is False
    assert cfg.log_level == "DEBUG"


def test_unparseable_bool_falls_back_to_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORDERFLOW_TAX_ENABLED", "maybe")

    assert refresh_config(tmp_path).tax_enabled is False


def test_invalid_log_level_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORDERFLOW_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigError) as excinfo:
        refresh_config(tmp_path)

    assert excinfo.value.error_code == "CONFIG_VALUE"
    assert "chatty" in excinfo.value.explanation


def test_malformed_pyproject_raises(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[tool.orderflow\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigError):
        refresh_config()


def test_scenario_block_overrides_base():
    base = Config(tax_enabled=False, log_level="ERROR")

    assert config_from_mapping({"taxEnabled": True}, base) == Config(tax_enabled=True, log_level="ERROR")
    assert config_from_mapping({"tax_enabled": "no"}, Config(tax_enabled=True)).tax_enabled is False
    assert config_from_mapping({}, base) == base
