"""
Server configuration module.

Contains the settings for the wrapped server process:
- ServerSettings: executable path, memory allocation, launch flags, auto start
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["ServerSettings", "MAX_MEMORY_MB"]

# memory_mb is stored as an unsigned 16-bit value
MAX_MEMORY_MB = 65535


class ServerSettings(BaseModel):
    """Wrapped server process configuration.

    Numbers and flags must be written as YAML integers and booleans; quoted
    values such as "1024" or "yes" are rejected rather than converted.
    """

    model_config = ConfigDict(validate_assignment=True)

    executable_path: Path = Field(
        default=Path("./server.jar"),
        description="Path to the server jar",
    )
    memory_mb: int = Field(
        default=1024,
        strict=True,
        ge=1,
        le=MAX_MEMORY_MB,
        description="Amount of memory in megabytes to allocate for the server",
    )
    extra_launch_flags: str | None = Field(
        default=None,
        description="Custom flags to pass to the JVM",
    )
    auto_start: bool = Field(
        default=False,
        strict=True,
        description="Start the server as soon as the wrapper starts",
    )
