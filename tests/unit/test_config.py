"""Unit tests for configuration loading."""

import logging

import pytest

from jde_er.event_rules.config import DecompilerConfig, configure_logging, get_config, reset_config

CONFIG_YAML = """
dev:
  log_level: warning
  spec_store:
    catalog_path: specs/catalog.yml
    templates_dir: specs/templates
local:
  log_level: DEBUG
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "project_config_er.yml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ER_CATALOG_PATH", "ER_TEMPLATES_DIR", "ER_LOG_LEVEL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


class TestDecompilerConfig:
    def test_yaml_environment_section(self, config_path, tmp_path):
        config = DecompilerConfig.from_yaml_and_env(config_path, env="dev", env_dir=tmp_path)

        assert config.environment == "dev"
        assert config.log_level == "WARNING"
        assert config.spec_store.catalog_path.name == "catalog.yml"
        assert config.spec_store.enabled

    def test_environment_variables_override_yaml(self, config_path, tmp_path, monkeypatch):
        monkeypatch.setenv("ER_LOG_LEVEL", "error")
        monkeypatch.setenv("ER_TEMPLATES_DIR", str(tmp_path))

        config = DecompilerConfig.from_yaml_and_env(config_path, env="dev", env_dir=tmp_path)

        assert config.log_level == "ERROR"
        assert config.spec_store.templates_dir == tmp_path

    def test_env_file_is_loaded(self, config_path, tmp_path, monkeypatch):
        # restored on teardown, so the value loaded from the file does not leak
        monkeypatch.setenv("ER_CATALOG_PATH", "")
        (tmp_path / ".env.local").write_text("ER_CATALOG_PATH=/srv/specs/catalog.yml\n", encoding="utf-8")

        config = DecompilerConfig.from_yaml_and_env(config_path, env="local", env_dir=tmp_path)

        assert str(config.spec_store.catalog_path) == "/srv/specs/catalog.yml"
        assert config.log_level == "DEBUG"

    def test_missing_yaml_falls_back_to_defaults(self, tmp_path):
        config = DecompilerConfig.from_yaml_and_env(tmp_path / "missing.yml", env="prd", env_dir=tmp_path)

        assert config.log_level == "INFO"
        assert not config.spec_store.enabled

    def test_invalid_environment(self, config_path):
        with pytest.raises(ValueError):
            DecompilerConfig.from_yaml_and_env(config_path, env="qa")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            DecompilerConfig(log_level="LOUD")


class TestConfigSingleton:
    def test_get_config_is_cached_until_reset(self):
        first = get_config()

        assert get_config() is first
        reset_config()
        assert get_config() is not first

    def test_configure_logging(self):
        root_logger = logging.getLogger()
        saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
        try:
            root = configure_logging("warning")

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
        finally:
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)
