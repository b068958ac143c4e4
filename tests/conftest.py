"""Shared pytest fixtures: settings pointing at the scripted fake engine."""
import sys
from dataclasses import replace
from pathlib import Path

import pytest

from ucibridge.config import Settings

FAKE_ENGINE = str(Path(__file__).parent / "fake_engine.py")
KQK_FEN = "8/8/8/8/8/8/4k3/4KQ2 w - - 0 1"


def fake_command(scenario):
    return (sys.executable, FAKE_ENGINE, scenario)


@pytest.fixture
def make_settings():
    """Build Settings that launch the fake engine in the given scenario."""

    def _make(scenario="bestmove", **overrides):
        base = Settings(
            engine_path=sys.executable,
            engine_args=(FAKE_ENGINE, scenario),
            syzygy_path="/tmp/syzygy",
            timeout_ms=5000,
            kill_grace_ms=500,
            static_dir="/nonexistent",
        )
        return replace(base, **overrides)

    return _make
