"""Tests for TweenSettings and environment overrides."""
import pytest

from stween.settings import TweenSettings, get_default_settings, set_default_settings
from stween.tween import EasingCurve, TweenRegistry


def test_defaults():
    settings = TweenSettings()
    assert settings.clamp_position is False
    assert settings.sample_before_increment is False
    assert settings.default_easing == "linear"


def test_from_env_overrides():
    settings = TweenSettings.from_env({
        "STWEEN_CLAMP_POSITION": "yes",
        "STWEEN_SAMPLE_BEFORE_INCREMENT": "1",
        "STWEEN_DEFAULT_EASING": " BACK_OUT ",
    })
    assert settings.clamp_position is True
    assert settings.sample_before_increment is True
    assert settings.default_easing == "back_out"


def test_from_env_ignores_garbage(caplog):
    with caplog.at_level("WARNING"):
        settings = TweenSettings.from_env({"STWEEN_CLAMP_POSITION": "maybe"})
    assert settings.clamp_position is False
    assert any("STWEEN_CLAMP_POSITION" in r.getMessage() for r in caplog.records)


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("STWEEN_CLAMP_POSITION", "on")
    assert TweenSettings.from_env().clamp_position is True


def test_with_overrides_returns_copy():
    base = TweenSettings()
    changed = base.with_overrides(clamp_position=True)
    assert changed.clamp_position is True
    assert base.clamp_position is False
    with pytest.raises(Exception):
        base.clamp_position = True  # frozen


def test_registry_uses_process_defaults(monkeypatch):
    set_default_settings(None)
    monkeypatch.setenv("STWEEN_DEFAULT_EASING", "quint_out")

    registry = TweenRegistry()
    assert registry.settings is get_default_settings()
    assert registry.begin_from_value(0.0).record.easing is EasingCurve.QUINT_OUT


def test_unknown_default_easing_falls_back_to_linear():
    registry = TweenRegistry(TweenSettings(default_easing="wobble"))
    assert registry.begin_from_value(0.0).record.easing is EasingCurve.LINEAR
