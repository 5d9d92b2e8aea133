"""
Configuration package for the server wrapper.

Module structure:
- app.py: WrapperConfig root document, load/save, CLI override merging
- server.py: ServerSettings
- bridge.py: BridgeSettings
- logging.py: LogLevel and LoggingSettings
- codec.py: YAML encode/decode
- errors.py: ConfigError hierarchy
- watcher.py: ConfigWatcher live reload events
"""

from mcwrap.config.app import (
    CliOverrides,
    WrapperConfig,
    apply_cli_overrides,
    get_default_config_path,
    load_config,
    save_config,
)
from mcwrap.config.bridge import BridgeSettings
from mcwrap.config.codec import decode, encode
from mcwrap.config.errors import (
    ConfigError,
    ConfigIOError,
    DecodeError,
    DefaultConfigSaveError,
    MalformedConfigError,
    MergeError,
    MissingPrerequisiteError,
    SchemaMismatchError,
    WatchSetupError,
)
from mcwrap.config.logging import LoggingSettings, LogLevel
from mcwrap.config.server import ServerSettings
from mcwrap.config.watcher import (
    ChangeEvent,
    ChangeEventStream,
    ChangeKind,
    ConfigWatcher,
    setup_watcher,
)

__all__ = [
    "BridgeSettings",
    "ChangeEvent",
    "ChangeEventStream",
    "ChangeKind",
    "CliOverrides",
    "ConfigError",
    "ConfigIOError",
    "ConfigWatcher",
    "DecodeError",
    "DefaultConfigSaveError",
    "LogLevel",
    "LoggingSettings",
    "MalformedConfigError",
    "MergeError",
    "MissingPrerequisiteError",
    "SchemaMismatchError",
    "ServerSettings",
    "WatchSetupError",
    "WrapperConfig",
    "apply_cli_overrides",
    "decode",
    "encode",
    "get_default_config_path",
    "load_config",
    "save_config",
    "setup_watcher",
]
