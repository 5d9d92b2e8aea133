"""Tests for the YAML config codec."""

from pathlib import Path

import pytest
import yaml

from mcwrap.config.app import CliOverrides, WrapperConfig, apply_cli_overrides
from mcwrap.config.bridge import BridgeSettings
from mcwrap.config.codec import decode, encode
from mcwrap.config.errors import DecodeError, MalformedConfigError, SchemaMismatchError
from mcwrap.config.logging import LoggingSettings, LogLevel
from mcwrap.config.server import ServerSettings

pytestmark = pytest.mark.unit


def _full_document() -> dict:
    return yaml.safe_load(encode(WrapperConfig.default()))


class TestEncode:
    """Tests for encode()."""

    def test_returns_utf8_bytes(self) -> None:
        """Test encode produces bytes of YAML text."""
        data = encode(WrapperConfig.default())
        assert isinstance(data, bytes)
        assert isinstance(yaml.safe_load(data.decode("utf-8")), dict)

    def test_section_order(self) -> None:
        """Test sections are written server, bridge, logging."""
        document = _full_document()
        assert list(document) == ["server", "bridge", "logging"]

    def test_key_names(self) -> None:
        """Test every field is written under its own name."""
        document = _full_document()
        assert list(document["server"]) == ["executable_path", "memory_mb", "auto_start"]
        assert list(document["bridge"]) == [
            "enabled",
            "credential_token",
            "channel_id",
            "publish_presence",
            "admin_id_list",
            "command_prefix",
        ]
        assert list(document["logging"]) == ["dependency_level", "self_level", "bridge_level"]

    def test_log_levels_written_as_integers(self) -> None:
        """Test log levels use their integer wire values."""
        config = WrapperConfig(
            logging=LoggingSettings(
                dependency_level=LogLevel.ERROR,
                self_level=LogLevel.TRACE,
                bridge_level=LogLevel.INFO,
            )
        )
        document = yaml.safe_load(encode(config))
        assert document["logging"] == {"dependency_level": 1, "self_level": 5, "bridge_level": 3}
        assert b"TRACE" not in encode(config)

    def test_path_written_as_string(self) -> None:
        """Test the executable path is written as plain text."""
        document = _full_document()
        assert document["server"]["executable_path"] == "server.jar"

    def test_none_values_omitted(self) -> None:
        """Test unset optional values do not appear in the file."""
        config = WrapperConfig(bridge=None)
        document = yaml.safe_load(encode(config))
        assert "bridge" not in document
        assert "extra_launch_flags" not in document["server"]

    def test_launch_flags_written_when_set(self) -> None:
        """Test optional launch flags appear once set."""
        config = WrapperConfig(server=ServerSettings(extra_launch_flags="-XX:+UseG1GC"))
        document = yaml.safe_load(encode(config))
        assert document["server"]["extra_launch_flags"] == "-XX:+UseG1GC"


class TestDecode:
    """Tests for decode()."""

    def test_decode_default_document(self) -> None:
        """Test decoding the encoded default."""
        assert decode(encode(WrapperConfig.default())) == WrapperConfig.default()

    def test_accepts_str(self) -> None:
        """Test decode also accepts already-decoded text."""
        text = encode(WrapperConfig.default()).decode("utf-8")
        assert decode(text) == WrapperConfig.default()

    def test_level_one_is_error(self) -> None:
        """Test the integer 1 decodes to ERROR."""
        document = _full_document()
        document["logging"]["dependency_level"] = 1
        config = decode(yaml.safe_dump(document))
        assert config.logging.dependency_level is LogLevel.ERROR

    @pytest.mark.parametrize("value", [0, 6])
    def test_out_of_range_level_is_schema_mismatch(self, value: int) -> None:
        """Test 0 and 6 are not valid log levels."""
        document = _full_document()
        document["logging"]["self_level"] = value
        with pytest.raises(SchemaMismatchError):
            decode(yaml.safe_dump(document))

    def test_level_name_is_schema_mismatch(self) -> None:
        """Test level names are not accepted in place of integers."""
        document = _full_document()
        document["logging"]["bridge_level"] = "info"
        with pytest.raises(SchemaMismatchError):
            decode(yaml.safe_dump(document))

    def test_missing_bridge_decodes_to_none(self) -> None:
        """Test an absent bridge section disables the bridge."""
        document = _full_document()
        del document["bridge"]
        config = decode(yaml.safe_dump(document))
        assert config.bridge is None

    def test_null_bridge_decodes_to_none(self) -> None:
        """Test an explicitly empty bridge section disables the bridge."""
        document = _full_document()
        document["bridge"] = None
        assert decode(yaml.safe_dump(document)).bridge is None

    def test_missing_launch_flags_decodes_to_none(self) -> None:
        """Test optional launch flags may be left out."""
        document = _full_document()
        assert "extra_launch_flags" not in document["server"]
        assert decode(yaml.safe_dump(document)).server.extra_launch_flags is None

    @pytest.mark.parametrize("section", ["server", "logging"])
    def test_missing_required_section(self, section: str) -> None:
        """Test required sections are not defaulted."""
        document = _full_document()
        del document[section]
        with pytest.raises(SchemaMismatchError) as exc_info:
            decode(yaml.safe_dump(document))
        assert section in str(exc_info.value)

    @pytest.mark.parametrize(
        ("section", "key"),
        [
            ("server", "memory_mb"),
            ("server", "executable_path"),
            ("bridge", "credential_token"),
            ("bridge", "admin_id_list"),
            ("logging", "self_level"),
        ],
    )
    def test_missing_required_key(self, section: str, key: str) -> None:
        """Test required keys inside sections are not defaulted."""
        document = _full_document()
        del document[section][key]
        with pytest.raises(SchemaMismatchError) as exc_info:
            decode(yaml.safe_dump(document))
        assert f"{section}.{key}" in str(exc_info.value)

    @pytest.mark.parametrize("memory", [-1, 70000, "lots"])
    def test_memory_not_u16(self, memory: object) -> None:
        """Test memory values that do not fit an unsigned 16-bit integer."""
        document = _full_document()
        document["server"]["memory_mb"] = memory
        with pytest.raises(SchemaMismatchError):
            decode(yaml.safe_dump(document))

    @pytest.mark.parametrize(
        ("section", "key", "value"),
        [
            ("server", "memory_mb", "1024"),
            ("server", "memory_mb", 2048.0),
            ("server", "memory_mb", True),
            ("server", "auto_start", "yes"),
            ("server", "auto_start", 1),
            ("bridge", "enabled", "true"),
            ("bridge", "channel_id", "42"),
            ("bridge", "publish_presence", 0),
            ("bridge", "admin_id_list", [1, "2"]),
            ("bridge", "credential_token", 12345),
        ],
    )
    def test_wrongly_typed_value_not_converted(self, section: str, key: str, value: object) -> None:
        """Test values of the wrong YAML type are rejected instead of coerced."""
        document = _full_document()
        document[section][key] = value
        with pytest.raises(SchemaMismatchError) as exc_info:
            decode(yaml.safe_dump(document))
        assert key in str(exc_info.value)

    def test_unquoted_yaml_boolean_accepted(self) -> None:
        """Test YAML's own boolean spellings still decode as booleans."""
        document = _full_document()
        text = yaml.safe_dump(document).replace("auto_start: false", "auto_start: yes")
        assert decode(text).server.auto_start is True

    def test_section_wrong_shape(self) -> None:
        """Test a section that is not a mapping."""
        document = _full_document()
        document["server"] = ["not", "a", "mapping"]
        with pytest.raises(SchemaMismatchError):
            decode(yaml.safe_dump(document))

    @pytest.mark.parametrize("text", ["", "just a string", "- a\n- list\n"])
    def test_top_level_not_mapping(self, text: str) -> None:
        """Test documents that are not a mapping of sections."""
        with pytest.raises(SchemaMismatchError):
            decode(text)

    def test_malformed_yaml(self) -> None:
        """Test text that is not well-formed YAML."""
        with pytest.raises(MalformedConfigError) as exc_info:
            decode(b"server: [unclosed\n  memory_mb: 1024")
        assert isinstance(exc_info.value, DecodeError)

    def test_invalid_utf8(self) -> None:
        """Test bytes that are not UTF-8."""
        with pytest.raises(MalformedConfigError):
            decode(b"server:\n  executable_path: \xff\xfe\n")

    def test_error_carries_path(self) -> None:
        """Test the source path is attached for diagnostics."""
        with pytest.raises(MalformedConfigError) as exc_info:
            decode(b"{{{", Path("/etc/mcwrap.yaml"))
        assert exc_info.value.path == Path("/etc/mcwrap.yaml")
        assert "/etc/mcwrap.yaml" in str(exc_info.value)

    def test_unknown_keys_ignored(self) -> None:
        """Test keys from newer versions do not break decoding."""
        document = _full_document()
        document["server"]["future_option"] = True
        document["metrics"] = {"enabled": True}
        assert decode(yaml.safe_dump(document)) == WrapperConfig.default()


class TestRoundTrip:
    """decode(encode(config)) gives back an equal document."""

    @pytest.mark.parametrize(
        "config",
        [
            WrapperConfig.default(),
            WrapperConfig(bridge=None),
            WrapperConfig(
                server=ServerSettings(
                    executable_path=Path("/srv/mc/paper-1.20.jar"),
                    memory_mb=65535,
                    extra_launch_flags="-Xss4M -XX:+UseG1GC",
                    auto_start=True,
                ),
                bridge=BridgeSettings(
                    enabled=False,
                    credential_token="abc.def.ghi",
                    channel_id=2**64 - 1,
                    publish_presence=False,
                    admin_id_list=[987654321987654321, 1, 2**63],
                    command_prefix="",
                ),
                logging=LoggingSettings(
                    dependency_level=LogLevel.TRACE,
                    self_level=LogLevel.ERROR,
                    bridge_level=LogLevel.WARN,
                ),
            ),
        ],
        ids=["default", "no-bridge", "custom"],
    )
    def test_round_trip(self, config: WrapperConfig) -> None:
        """Test documents survive encoding and decoding unchanged."""
        assert decode(encode(config)) == config

    def test_round_trip_after_merge(self) -> None:
        """Test documents produced by the override merger round trip."""
        config = WrapperConfig.default()
        apply_cli_overrides(
            config, CliOverrides(enable_bridge=True, server_path=Path("/x/y.jar"))
        )
        assert decode(encode(config)) == config
