"""Pydantic schemas for verification API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ApiErrorPayload(BaseModel):
    """The ``error`` object the API attaches to failed responses."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: int | None = Field(
        default=None,
        description="HTTP status echoed by the API.",
    )
    message: str | None = Field(
        default=None,
        description="Human-readable reason for the failure.",
    )
    retry_after: float | None = Field(
        default=None,
        alias="retryAfter",
        description="Seconds to wait before retrying (rate-limit responses only).",
    )


class ForwardLookupResponse(BaseModel):
    """Successful response of ``/api/roblox/{discordId}``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    roblox_id: int | None = Field(
        default=None,
        alias="robloxId",
        description="Roblox user id linked to the Discord account.",
    )
    roblox_username: str | None = Field(
        default=None,
        alias="robloxUsername",
        description="Roblox username at verification time, if provided.",
    )


class ReverseLookupResponse(BaseModel):
    """Successful response of ``/api/reverse/{robloxId}``."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    discord_id: str | None = Field(
        default=None,
        alias="discordId",
        description="Discord snowflake linked to the Roblox account.",
    )
