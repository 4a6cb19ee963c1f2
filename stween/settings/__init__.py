"""Tween engine settings."""

from .tween_settings import TweenSettings, get_default_settings, set_default_settings

__all__ = ['TweenSettings', 'get_default_settings', 'set_default_settings']
