"""Tests for cooperative stop handling."""

from __future__ import annotations

import signal
from pathlib import Path

import pytest

from ks_common.stop_token import StopToken


pytestmark = pytest.mark.unit_common


def test_stop_file_trips_token(tmp_path: Path) -> None:
    stop_file = tmp_path / "STOP"
    token = StopToken(stop_file=stop_file, enable_signals=False)
    assert token.should_stop() is False

    stop_file.touch()
    assert token.should_stop() is True


def test_request_stop_invokes_callback_once() -> None:
    calls: list[str] = []
    token = StopToken(enable_signals=False, on_stop=lambda: calls.append("stop"))

    token.request_stop()
    token.request_stop()

    assert token.should_stop() is True
    assert calls == ["stop"]


def test_context_manager_restores_signal_handlers() -> None:
    previous = signal.getsignal(signal.SIGTERM)
    with StopToken() as token:
        assert signal.getsignal(signal.SIGTERM) == token._handle_signal
    assert signal.getsignal(signal.SIGTERM) == previous
