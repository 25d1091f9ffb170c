"""
Tests for dumbo_config.sources module.

Tests layer construction including:
- Format selection by extension
- Parsing of YAML, JSON, TOML, and INI files
- Environment variable key paths and value coercion
- Error handling for missing files, bad content, and unknown prefixes
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dumbo_config.exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    EnvPrefixNotFoundError,
)
from dumbo_config.models import EnvConfig, LoadingParam
from dumbo_config.sources import (
    FileFormat,
    LayerKind,
    build_env_layer,
    build_file_layer,
    build_layers,
    coerce_env_value,
    env_key_path,
    get_file_format,
)


class TestGetFileFormat:
    """Tests for get_file_format function."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("cfg.json", FileFormat.JSON),
            ("cfg.yaml", FileFormat.YAML),
            ("cfg.yml", FileFormat.YAML),
            ("cfg.toml", FileFormat.TOML),
            ("cfg.ini", FileFormat.INI),
            ("cfg.conf", FileFormat.YAML),
            ("cfg", FileFormat.YAML),
            ("cfg.JSON", FileFormat.YAML),
        ],
    )
    def test_extension_mapping(self, filename, expected):
        """Test that the extension selects the format, YAML by default."""
        assert get_file_format(Path(filename)) is expected


class TestBuildFileLayer:
    """Tests for build_file_layer function."""

    def test_missing_file(self, tmp_test_dir):
        """Test that a missing file raises ConfigFileNotFoundError."""
        missing = tmp_test_dir / "missing.yaml"

        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            build_file_layer(missing)

        assert exc_info.value.path == missing

    def test_yaml_file(self, create_config_file):
        """Test that YAML files are parsed into nested dicts."""
        path = create_config_file("cfg.yaml", "name: test\ndb:\n  port: 5432\n")

        layer = build_file_layer(path)

        assert layer.kind is LayerKind.FILE
        assert layer.format is FileFormat.YAML
        assert layer.name == str(path)
        assert layer.data == {"name": "test", "db": {"port": 5432}}

    def test_json_file(self, create_config_file):
        """Test that JSON files are parsed."""
        path = create_config_file("cfg.json", '{"value": 5, "tags": ["a", "b"]}')

        layer = build_file_layer(path)

        assert layer.format is FileFormat.JSON
        assert layer.data == {"value": 5, "tags": ["a", "b"]}

    def test_toml_file(self, create_config_file):
        """Test that TOML files are parsed, tables becoming nested dicts."""
        path = create_config_file(
            "cfg.toml", 'name = "test"\n\n[db]\nhost = "localhost"\nport = 5432\n'
        )

        layer = build_file_layer(path)

        assert layer.format is FileFormat.TOML
        assert layer.data == {"name": "test", "db": {"host": "localhost", "port": 5432}}

    def test_ini_file(self, create_config_file):
        """Test that INI root keys stay top-level and sections nest."""
        path = create_config_file(
            "cfg.ini", "name = test\n\n[db]\nHost = localhost\nport = 5432\n"
        )

        layer = build_file_layer(path)

        assert layer.format is FileFormat.INI
        assert layer.data == {
            "name": "test",
            "db": {"Host": "localhost", "port": "5432"},
        }

    def test_ini_section_named_like_root_marker(self, create_config_file):
        """Test that a user section called __root__ is an ordinary section."""
        path = create_config_file(
            "cfg.ini", "name = test\n\n[__root__]\nkey = value\n"
        )

        layer = build_file_layer(path)

        assert layer.data == {"name": "test", "__root__": {"key": "value"}}

    def test_ini_parse_error_is_wrapped(self, create_config_file):
        """Test that malformed INI content raises ConfigLoadError."""
        path = create_config_file("bad.ini", "[db]\nno equals sign here\n")

        with pytest.raises(ConfigLoadError, match="bad.ini"):
            build_file_layer(path)

    def test_unknown_extension_read_as_yaml(self, create_config_file):
        """Test that an unknown extension falls back to YAML."""
        path = create_config_file("settings.conf", "value: 7\n")

        layer = build_file_layer(path)

        assert layer.format is FileFormat.YAML
        assert layer.data == {"value": 7}

    def test_empty_yaml_is_empty_mapping(self, create_config_file):
        """Test that an empty YAML file yields no keys."""
        path = create_config_file("empty.yaml", "")

        assert build_file_layer(path).data == {}

    def test_invalid_yaml(self, create_config_file):
        """Test that YAML syntax errors raise ConfigLoadError."""
        path = create_config_file("bad.yaml", "invalid: yaml: syntax: error:")

        with pytest.raises(ConfigLoadError) as exc_info:
            build_file_layer(path)

        assert "bad.yaml" in str(exc_info.value)
        assert exc_info.value.inner is not None

    def test_invalid_json_keeps_parser_message(self, create_config_file):
        """Test that the JSON parser's error is wrapped and chained."""
        path = create_config_file("bad.json", '{"value": }')

        with pytest.raises(ConfigLoadError) as exc_info:
            build_file_layer(path)

        assert isinstance(exc_info.value.inner, json.JSONDecodeError)
        assert exc_info.value.__cause__ is exc_info.value.inner
        assert "Expecting value" in str(exc_info.value)

    def test_non_mapping_top_level(self, create_config_file):
        """Test that a list at the top level is rejected."""
        path = create_config_file("list.yaml", "- item1\n- item2\n")

        with pytest.raises(ConfigLoadError, match="must be a mapping"):
            build_file_layer(path)

    def test_debug_output_lists_content(self, create_config_file, recording_logger):
        """Test that the file content is logged at debug level."""
        path = create_config_file("cfg.yaml", "name: test\n")

        build_file_layer(path, recording_logger)

        assert any("name: test" in m for m in recording_logger.messages("debug"))


class TestCoerceEnvValue:
    """Tests for the environment value coercion ladder."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("true", True),
            ("TRUE", True),
            ("False", False),
            ("42", 42),
            ("-7", -7),
            ("3.5", 3.5),
            ("1e3", 1000.0),
            ("hello", "hello"),
            ("yes", "yes"),
            ("", ""),
            ("1.2.3", "1.2.3"),
            ("\u0663", "\u0663"),
            ("\u0661.5", "\u0661.5"),
        ],
    )
    def test_ladder(self, raw, expected):
        """Test bool, then int, then float, then string."""
        result = coerce_env_value(raw)

        assert result == expected
        assert type(result) is type(expected)


class TestEnvKeyPath:
    """Tests for env_key_path function."""

    def test_nested_path_lowercased(self):
        """Test that segments are split on the separator and lower-cased."""
        assert env_key_path("PREFIX__DB__HOST", EnvConfig("PREFIX")) == ["db", "host"]

    def test_custom_separator(self):
        """Test that a custom separator is honored."""
        assert env_key_path("APP_DB_HOST", EnvConfig("APP", "_")) == ["db", "host"]

    def test_empty_segments_dropped(self):
        """Test that doubled separators do not create empty keys."""
        assert env_key_path("APP-A--B", EnvConfig("APP", "-")) == ["a", "b"]


class TestBuildEnvLayer:
    """Tests for build_env_layer function."""

    def test_maps_variables_to_nested_keys(self):
        """Test that prefixed variables become a coerced nested tree."""
        environ = {
            "APP__DB__HOST": "db.local",
            "APP__DB__PORT": "5432",
            "APP__DEBUG": "true",
            "OTHER__VALUE": "ignored",
        }

        layer = build_env_layer(EnvConfig("APP"), environ)

        assert layer.kind is LayerKind.ENV
        assert layer.format is None
        assert layer.data == {
            "db": {"host": "db.local", "port": 5432},
            "debug": True,
        }
        assert layer.raw == {
            "db": {"host": "db.local", "port": "5432"},
            "debug": "true",
        }

    def test_no_matching_variables(self):
        """Test that an unknown prefix raises EnvPrefixNotFoundError."""
        with pytest.raises(EnvPrefixNotFoundError) as exc_info:
            build_env_layer(EnvConfig("NONEXISTENT_PREFIX_12345"), {"PATH": "/bin"})

        assert exc_info.value.prefix == "NONEXISTENT_PREFIX_12345"

    def test_prefix_match_without_separator_is_empty_layer(self):
        """Test that variables matching only the bare prefix add no keys."""
        layer = build_env_layer(EnvConfig("APP"), {"APPLE": "1"})

        assert layer.data == {}

    def test_show_settings_flag_is_a_key(self):
        """Test that the diagnostics flag is also merged as configuration."""
        environ = {"APP__SHOW_SETTINGS": "true", "APP__VALUE": "1"}

        layer = build_env_layer(EnvConfig("APP"), environ)

        assert layer.data == {"show_settings": True, "value": 1}

    def test_deeper_key_replaces_scalar(self):
        """Test that a nested key wins over a scalar at the same segment."""
        environ = {"APP__DB": "plain", "APP__DB__HOST": "h"}

        layer = build_env_layer(EnvConfig("APP"), environ)

        assert layer.data == {"db": {"host": "h"}}


class TestBuildLayers:
    """Tests for build_layers function."""

    def test_file_and_env_layers_in_order(self, create_config_file):
        """Test that both layers are built, file first."""
        path = create_config_file("cfg.yaml", "value: 1\n")
        param = LoadingParam(file=path, env_prefix=EnvConfig("APP"))

        layers = build_layers(param, {"APP__VALUE": "2"})

        assert [layer.kind for layer in layers] == [LayerKind.FILE, LayerKind.ENV]

    def test_file_only(self, create_config_file):
        """Test that only a file layer is built without a prefix."""
        path = create_config_file("cfg.yaml", "value: 1\n")

        layers = build_layers(LoadingParam(file=path), {"APP__VALUE": "2"})

        assert len(layers) == 1
        assert layers[0].kind is LayerKind.FILE

    def test_reads_process_environment_by_default(self, monkeypatch):
        """Test that os.environ is used when no snapshot is given."""
        monkeypatch.setenv("DUMBO_SNAPSHOT_TEST__VALUE", "3")

        layers = build_layers(LoadingParam(env_prefix=EnvConfig("DUMBO_SNAPSHOT_TEST")))

        assert layers[0].data == {"value": 3}
