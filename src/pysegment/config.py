"""Configuration for pysegment stores and bundled segments."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pysegment._constants import DEFAULT_REQUEST_TIMEOUT, ENV_PREFIX, USER_AGENT
from pysegment.exceptions import SegmentConfigError
from pysegment.hydration import RenderType


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SegmentConfig:
    """Store and segment configuration.

    Parameters
    ----------
    render_type : RenderType
        Whether the store runs as part of a server render or on the client.
        Server stores honour ``HydrationOption.server_should_fetch``.
    base_url : str
        Base URL used by :class:`pysegment.segments.http.HttpSegment`.
    request_timeout : float
        Total timeout in seconds for a single HTTP fetch.
    user_agent : str
        User agent sent with HTTP fetches.
    server_should_fetch : bool
        Default for subscriptions that pass no hydration option.
    """

    render_type: RenderType = RenderType.CLIENT
    base_url: str = ""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = USER_AGENT
    server_should_fetch: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> SegmentConfig:
        """Create configuration from ``PYSEGMENT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        render_env = env.get(f"{ENV_PREFIX}RENDER_TYPE")
        if render_env is not None and "render_type" not in overrides:
            try:
                config_kwargs["render_type"] = RenderType(render_env.strip().lower())
            except ValueError as exc:
                raise SegmentConfigError(f"Invalid {ENV_PREFIX}RENDER_TYPE: {render_env!r}") from exc

        base_url_env = env.get(f"{ENV_PREFIX}BASE_URL")
        if base_url_env is not None:
            config_kwargs["base_url"] = base_url_env.strip()

        user_agent_env = env.get(f"{ENV_PREFIX}USER_AGENT")
        if user_agent_env is not None:
            config_kwargs["user_agent"] = user_agent_env

        timeout_env = env.get(f"{ENV_PREFIX}REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise SegmentConfigError(f"Invalid {ENV_PREFIX}REQUEST_TIMEOUT: {timeout_env!r}") from exc

        if "server_should_fetch" not in overrides:
            config_kwargs["server_should_fetch"] = _env_bool(
                env.get(f"{ENV_PREFIX}SERVER_SHOULD_FETCH"),
                True,
            )

        config_kwargs.update(overrides)
        if isinstance(config_kwargs.get("render_type"), str):
            try:
                config_kwargs["render_type"] = RenderType(config_kwargs["render_type"])
            except ValueError as exc:
                raise SegmentConfigError(f"Invalid render_type: {config_kwargs['render_type']!r}") from exc

        return cls(**config_kwargs)
