"""
Shared pytest fixtures for tween tests.
"""
import os
import sys

import pytest

from stween.settings import TweenSettings, set_default_settings
from stween.tween import TweenRegistry

# Headless runs have no display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture(autouse=True)
def default_settings():
    """Pin process-wide settings so STWEEN_* variables in the shell don't leak in."""
    settings = TweenSettings()
    set_default_settings(settings)
    yield settings
    set_default_settings(None)


@pytest.fixture
def registry():
    """Create a TweenRegistry with default settings."""
    return TweenRegistry(TweenSettings())


@pytest.fixture
def recorder():
    """Collect callback invocations in order."""
    class Recorder:
        def __init__(self):
            self.steps = []
            self.finishes = 0

        def step(self, value):
            self.steps.append(value)

        def finish(self):
            self.finishes += 1

    return Recorder()
