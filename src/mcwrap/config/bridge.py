"""
Messaging bridge configuration module.

Contains the optional chat bridge settings:
- BridgeSettings: credential, channel, presence and admin settings

A config document without a bridge section disables the bridge entirely.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

__all__ = ["BridgeSettings", "MAX_SNOWFLAKE"]

# Channel and user IDs are unsigned 64-bit snowflakes
MAX_SNOWFLAKE = 2**64 - 1


class BridgeSettings(BaseModel):
    """Chat bridge configuration."""

    model_config = ConfigDict(validate_assignment=True)

    enabled: bool = Field(
        default=True,
        strict=True,
        description="Relay server chat to and from the bridge channel",
    )
    credential_token: str = Field(
        default="",
        description="Bot token used to connect to the chat service",
    )
    channel_id: int = Field(
        default=0,
        strict=True,
        ge=0,
        le=MAX_SNOWFLAKE,
        description="ID of the channel to bridge server chat into",
    )
    publish_presence: bool = Field(
        default=True,
        strict=True,
        description="Update the bot's status with the server's player count",
    )
    admin_id_list: list[StrictInt] = Field(
        default_factory=list,
        description="IDs of users allowed to run admin commands",
    )
    command_prefix: str = Field(
        default="!mc ",
        description="Prefix that marks a chat message as a bot command",
    )

    @field_validator("admin_id_list")
    @classmethod
    def validate_admin_ids(cls, v: list[int]) -> list[int]:
        """Validate every admin ID fits in an unsigned 64-bit integer."""
        for admin_id in v:
            if not (0 <= admin_id <= MAX_SNOWFLAKE):
                raise ValueError(f"Admin ID {admin_id} is not an unsigned 64-bit integer")
        return v
