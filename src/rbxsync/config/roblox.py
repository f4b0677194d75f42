"""Roblox Open Cloud configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_positive_int, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

ROBLOX_BASE_URL = "https://apis.roblox.com"
ROBLOX_BADGES_URL = "https://badges.roblox.com"
ROBLOX_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class RobloxConfig:
    """Holds the Open Cloud API key and the target universe."""

    api_key: str
    universe_id: int | None
    resilience: ResilienceConfig
    badges_base_url: str = ROBLOX_BADGES_URL


def build_roblox_resilience(api_key: str, *, base_url: str = ROBLOX_BASE_URL) -> ResilienceConfig:
    return ResilienceConfig(
        name="roblox",
        base_url=base_url,
        timeout_seconds=ROBLOX_TIMEOUT_SECONDS,
        retry=RetryPolicy(),
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={"x-api-key": api_key},
    )


def get_roblox_config(*, universe_id: int | None = None) -> RobloxConfig:
    """Read ``ROBLOX_API_KEY`` and ``ROBLOX_UNIVERSE_ID``; an explicit id wins."""

    values = require_env_vars(("ROBLOX_API_KEY",))
    api_key = values["ROBLOX_API_KEY"].strip()
    effective_universe = (
        universe_id if universe_id is not None else optional_positive_int("ROBLOX_UNIVERSE_ID")
    )
    return RobloxConfig(
        api_key=api_key,
        universe_id=effective_universe,
        resilience=build_roblox_resilience(api_key),
    )
