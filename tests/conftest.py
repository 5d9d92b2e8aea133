"""Pytest configuration and shared fixtures for mcwrap tests."""

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from mcwrap.config.app import WrapperConfig
from mcwrap.config.bridge import BridgeSettings
from mcwrap.config.codec import encode


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Path for a config file that does not exist yet."""
    return temp_dir / "mcwrap-config.yaml"


@pytest.fixture
def default_config() -> WrapperConfig:
    """Create a default WrapperConfig for testing."""
    return WrapperConfig.default()


@pytest.fixture
def configured_bridge_config() -> WrapperConfig:
    """Config with a filled-in bridge section."""
    return WrapperConfig(
        bridge=BridgeSettings(
            enabled=False,
            credential_token="bot-token",
            channel_id=123456789012345678,
            admin_id_list=[11, 22, 33],
        )
    )


@pytest.fixture
def bridgeless_config() -> WrapperConfig:
    """Config with the bridge section removed."""
    return WrapperConfig(bridge=None)


@pytest.fixture
def written_config(config_path: Path, configured_bridge_config: WrapperConfig) -> Path:
    """Config file on disk holding configured_bridge_config."""
    config_path.write_bytes(encode(configured_bridge_config))
    return config_path
