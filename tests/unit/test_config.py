"""Unit tests for the unified configuration."""

import json

import pytest

from sfsearch.utils.config import ConfigError, UnifiedConfig

ENV_VARS = list(UnifiedConfig.ENV_MAPPINGS) + list(UnifiedConfig.SECRET_MAPPINGS.values())


@pytest.fixture
def clean_env(monkeypatch, log_dir):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep logs in the per-test directory
    monkeypatch.setenv("LOG_DIR", str(log_dir))
    return monkeypatch


class TestPrecedence:
    """Environment beats the config file, which beats code defaults."""

    def test_code_defaults(self, clean_env, tmp_path, log_dir):
        cfg = UnifiedConfig(config_file=str(tmp_path / "missing.json"))

        assert cfg.log_dir == str(log_dir)

        assert cfg.salesforce_domain == "login"
        assert cfg.salesforce_api_version is None
        assert cfg.default_search_scope == "ALL_FIELDS"
        assert cfg.default_limit_per_object == 20
        assert cfg.default_object_types == ["Account", "Contact", "Lead", "Opportunity", "Case"]

    def test_file_overrides_defaults(self, clean_env, tmp_path):
        config_file = tmp_path / "system_config.json"
        config_file.write_text(json.dumps({
            "salesforce": {"domain": "test", "default_object_types": ["Account"]},
        }))

        cfg = UnifiedConfig(config_file=str(config_file))

        assert cfg.salesforce_domain == "test"
        assert cfg.default_object_types == ["Account"]
        # Untouched keys in the same section keep their defaults
        assert cfg.default_limit_per_object == 20

    def test_env_overrides_file(self, clean_env, tmp_path):
        config_file = tmp_path / "system_config.json"
        config_file.write_text(json.dumps({"salesforce": {"default_limit_per_object": 50}}))
        clean_env.setenv("SOSL_DEFAULT_LIMIT", "5")
        clean_env.setenv("SOSL_DEFAULT_SCOPE", "NAME_FIELDS")
        clean_env.setenv("SFDC_API_VERSION", "59.0")

        cfg = UnifiedConfig(config_file=str(config_file))

        assert cfg.default_limit_per_object == 5
        assert cfg.default_search_scope == "NAME_FIELDS"
        assert cfg.salesforce_api_version == "59.0"

    def test_get_dotted_path(self, clean_env, tmp_path):
        cfg = UnifiedConfig(config_file=str(tmp_path / "missing.json"))
        assert cfg.get("salesforce.domain") == "login"
        assert cfg.get("salesforce.nothing.here", "fallback") == "fallback"

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_unreadable_file_falls_back_to_defaults(self, clean_env, tmp_path, read_log, content):
        config_file = tmp_path / "system_config.json"
        config_file.write_text(content)

        cfg = UnifiedConfig(config_file=str(config_file))

        assert cfg.salesforce_domain == "login"
        assert cfg.default_limit_per_object == 20
        errors = [e for e in read_log("errors.log") if e["message"] == "config_file_load_error"]
        assert errors and errors[0]["using_defaults"] is True

    @pytest.mark.parametrize("raw,expected", [("60", "60.0"), ("59.0", "59.0"), ("v58.0", "v58.0")])
    def test_api_version_formatting(self, clean_env, tmp_path, raw, expected):
        clean_env.setenv("SFDC_API_VERSION", raw)
        cfg = UnifiedConfig(config_file=str(tmp_path / "missing.json"))
        assert cfg.salesforce_api_version == expected

    def test_api_version_from_file_number(self, clean_env, tmp_path):
        config_file = tmp_path / "system_config.json"
        config_file.write_text(json.dumps({"salesforce": {"api_version": 61}}))
        cfg = UnifiedConfig(config_file=str(config_file))
        assert cfg.salesforce_api_version == "61.0"


class TestSecrets:
    """Secrets only come from the environment."""

    def test_secrets_from_env(self, clean_env, tmp_path):
        clean_env.setenv("SFDC_USER", "user@example.com")
        cfg = UnifiedConfig(config_file=str(tmp_path / "missing.json"))

        assert cfg.get_secret("salesforce_user") == "user@example.com"
        assert cfg.get_secret("salesforce_token", required=False) is None

    def test_secrets_not_read_from_file(self, clean_env, tmp_path):
        config_file = tmp_path / "system_config.json"
        config_file.write_text(json.dumps({"salesforce_pass": "in-file"}))
        cfg = UnifiedConfig(config_file=str(config_file))

        assert cfg.get_secret("salesforce_pass", required=False) is None

    def test_missing_required_secret(self, clean_env, tmp_path):
        cfg = UnifiedConfig(config_file=str(tmp_path / "missing.json"))
        with pytest.raises(ConfigError):
            cfg.get_secret("salesforce_user")


def test_config_load_logged(clean_env, tmp_path, read_log):
    UnifiedConfig(config_file=str(tmp_path / "missing.json"))

    entries = [e for e in read_log("system.log") if e["message"] == "unified_config_loaded"]
    assert entries and entries[0]["component"] == "config"
