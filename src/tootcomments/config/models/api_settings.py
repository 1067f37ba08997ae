"""Mastodon API configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tootcomments.shared.constants import APIConfig


class MastodonSettings(BaseModel):
    """Mastodon API configuration.

    Security: token is masked in __repr__ so settings can be logged.
    """

    url: str = Field(default="", description="Base URL of the Mastodon instance")
    token: str = Field(
        default="",
        repr=False,
        description="Bearer token sent with every request",
    )
    userid: str = Field(
        default="",
        description="Account id whose posts may become roots (empty: any account)",
    )
    timeout: float = Field(
        default=APIConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    pool_size: int = Field(
        default=APIConfig.DEFAULT_POOL_SIZE,
        gt=0,
        description="Connection pool size of the HTTP session",
    )

    def __repr__(self) -> str:
        masked_token = "****" if self.token else "[empty]"
        return (
            f"MastodonSettings("
            f"url={self.url!r}, "
            f"token={masked_token}, "
            f"userid={self.userid!r}, "
            f"timeout={self.timeout})"
        )


__all__ = ["MastodonSettings"]
