from __future__ import annotations

import pytest

from pysegment.config import SegmentConfig
from pysegment.exceptions import SegmentConfigError
from pysegment.hydration import RenderType


def test_defaults() -> None:
    config = SegmentConfig()
    assert config.render_type == RenderType.CLIENT
    assert config.server_should_fetch is True


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYSEGMENT_RENDER_TYPE", "SERVER")
    monkeypatch.setenv("PYSEGMENT_BASE_URL", " https://api.example.test ")
    monkeypatch.setenv("PYSEGMENT_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("PYSEGMENT_SERVER_SHOULD_FETCH", "no")

    config = SegmentConfig.from_env()

    assert config.render_type == RenderType.SERVER
    assert config.base_url == "https://api.example.test"
    assert config.request_timeout == 2.5
    assert config.server_should_fetch is False


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYSEGMENT_RENDER_TYPE", "server")
    monkeypatch.setenv("PYSEGMENT_REQUEST_TIMEOUT", "not-a-number")

    config = SegmentConfig.from_env(render_type="client", request_timeout=1.0)

    assert config.render_type == RenderType.CLIENT
    assert config.request_timeout == 1.0


def test_invalid_env_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYSEGMENT_RENDER_TYPE", "browser")
    with pytest.raises(SegmentConfigError):
        SegmentConfig.from_env()

    monkeypatch.setenv("PYSEGMENT_RENDER_TYPE", "client")
    monkeypatch.setenv("PYSEGMENT_REQUEST_TIMEOUT", "soon")
    with pytest.raises(SegmentConfigError):
        SegmentConfig.from_env()


def test_invalid_render_type_override() -> None:
    with pytest.raises(SegmentConfigError):
        SegmentConfig.from_env(render_type="browser")
