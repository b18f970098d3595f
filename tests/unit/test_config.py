"""Unit tests for configuration management."""

import json
from pathlib import Path

import pytest

from dmnlint.config import (
    CONFIG_FILE_NAME,
    ApiConfig,
    DmnLintConfig,
    OutputFormat,
    ValidationConfig,
    create_default_config,
    find_config_file,
    load_config,
)


class TestDmnLintConfig:
    """Test complete DmnLintConfig model."""

    def test_defaults(self):
        config = create_default_config()

        assert config.validation.fail_on_warnings is False
        assert config.validation.max_document_bytes == 10 * 1024 * 1024
        assert config.output.format == "table"
        assert config.api.bind == "127.0.0.1"
        assert config.api.port == 8624
        assert config.logging.level == "warn"

    def test_config_from_dict_with_aliases(self):
        config = DmnLintConfig(**{
            "validation": {"failOnWarnings": True, "maxDocumentBytes": 2048},
            "output": {"format": "json"},
            "logging": {"level": "debug"},
        })

        assert config.validation.fail_on_warnings is True
        assert config.validation.max_document_bytes == 2048
        assert config.output.format == OutputFormat.JSON.value
        assert config.logging.level == "debug"

    def test_field_names_accepted(self):
        assert ValidationConfig(fail_on_warnings=True).fail_on_warnings is True

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError):
            DmnLintConfig(**{"project": {"name": "x"}})

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="greater than or equal to 1"):
            ValidationConfig(maxDocumentBytes=0)
        with pytest.raises(ValueError):
            DmnLintConfig(**{"output": {"format": "xml"}})


class TestApiConfig:

    @pytest.mark.parametrize("address", ["127.0.0.1", "localhost", "::1"])
    def test_localhost_addresses(self, address):
        assert ApiConfig(bind=address).bind == address

    @pytest.mark.parametrize("address", ["0.0.0.0", "192.168.1.1", "example.com"])
    def test_remote_addresses_rejected(self, address):
        with pytest.raises(ValueError, match="loopback address"):
            ApiConfig(bind=address)

    @pytest.mark.parametrize("port", [80, 1023, 65536])
    def test_port_range(self, port):
        with pytest.raises(ValueError, match="outside 1024-65535"):
            ApiConfig(port=port)


class TestLoadConfig:

    def test_load_explicit_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"validation": {"failOnWarnings": True}}), encoding="utf-8")

        assert load_config(path).validation.fail_on_warnings is True

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.json") == create_default_config()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="invalid JSON"):
            load_config(path)

    def test_invalid_content(self, tmp_path):
        path = tmp_path / CONFIG_FILE_NAME
        path.write_text(json.dumps({"api": {"port": 1}}), encoding="utf-8")

        with pytest.raises(ValueError, match="invalid configuration"):
            load_config(path)

    def test_find_config_searches_parents(self, tmp_path):
        config_file = tmp_path / CONFIG_FILE_NAME
        config_file.write_text("{}", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()

    def test_find_config_none(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "exists", lambda self: False)

        assert find_config_file(tmp_path) is None
