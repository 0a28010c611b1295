"""Tests for the configuration system."""

import json

import pytest

from firmware_strings.shared.config import CLIConfig, EncoderConfig


class TestEncoderConfig:
    """Test suite for EncoderConfig."""

    def test_default_configuration(self):
        """Test default encoder configuration values."""
        config = EncoderConfig()

        assert config.translate_line_endings is True
        assert config.enable_diagnostics is True
        assert config.correlation_id is None

    def test_presets(self):
        assert EncoderConfig.firmware() == EncoderConfig()
        assert EncoderConfig.verbatim().translate_line_endings is False

    def test_with_correlation_id_returns_copy(self):
        config = EncoderConfig()

        tagged = config.with_correlation_id("abc")

        assert tagged.correlation_id == "abc"
        assert config.correlation_id is None


class TestCLIConfig:
    """Test suite for CLIConfig."""

    def test_default_configuration(self):
        config = CLIConfig()

        assert config.kind == "ucs2"
        assert config.capacity == 256
        assert config.output_format == "json"
        assert config.byteorder == "little"
        assert config.translate_line_endings is True

    @pytest.mark.parametrize(
        "field_name,value,message",
        [
            ("kind", "utf8", "kind must be one of"),
            ("capacity", 0, "capacity must be > 0"),
            ("output_format", "csv", "output_format must be one of"),
            ("byteorder", "middle", "byteorder must be one of"),
        ],
    )
    def test_validation(self, field_name, value, message):
        with pytest.raises(ValueError, match=message):
            CLIConfig(**{field_name: value})

    def test_from_dict_ignores_unknown_keys(self):
        config = CLIConfig.from_dict({"kind": "latin1", "unknown": 1})

        assert config.kind == "latin1"

    def test_from_file(self, tmp_path):
        path = tmp_path / "cli.json"
        path.write_text(json.dumps({"capacity": 32, "output_format": "hex"}))

        config = CLIConfig.from_file(path)

        assert config.capacity == 32
        assert config.output_format == "hex"

    def test_from_missing_file_uses_defaults(self, tmp_path):
        assert CLIConfig.from_file(tmp_path / "missing.json") == CLIConfig()

    def test_from_malformed_file(self, tmp_path):
        path = tmp_path / "cli.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid config file"):
            CLIConfig.from_file(path)

    def test_from_file_requires_object(self, tmp_path):
        path = tmp_path / "cli.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError, match="JSON object"):
            CLIConfig.from_file(path)

    def test_encoder_config(self):
        config = CLIConfig(translate_line_endings=False)

        assert config.encoder_config().translate_line_endings is False
