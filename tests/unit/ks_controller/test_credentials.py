"""Tests for kubeconfig persistence and controller settings."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

import pytest

from ks_common.api import PersistenceError
from ks_controller.credentials import kubeconfig_path, write_kubeconfig
from ks_controller.settings import DEFAULT_KUBECONFIG_MODE, ControllerSettings


pytestmark = pytest.mark.unit_controller


def test_kubeconfig_path_uses_prefix(tmp_path: Path) -> None:
    settings = ControllerSettings(kubeconfig_dir=tmp_path)
    assert kubeconfig_path("dev", settings) == tmp_path / ".kubeconfig_dev"


def test_cluster_name_with_separator_is_rejected(tmp_path: Path) -> None:
    settings = ControllerSettings(kubeconfig_dir=tmp_path)
    with pytest.raises(PersistenceError):
        kubeconfig_path("../etc/passwd", settings)


def test_write_replaces_previous_content(tmp_path: Path) -> None:
    settings = ControllerSettings(kubeconfig_dir=tmp_path, kubeconfig_mode=0o600)
    write_kubeconfig("dev", "old-config-with-more-bytes", settings)
    path = write_kubeconfig("dev", "new", settings)

    assert path.read_text(encoding="utf-8") == "new"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_write_failure_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    settings = ControllerSettings(kubeconfig_dir=tmp_path / "absent")
    with caplog.at_level(logging.ERROR):
        with pytest.raises(PersistenceError) as excinfo:
            write_kubeconfig("dev", "content", settings)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert "was created but its kubeconfig could not be written" in caplog.text


def test_settings_defaults() -> None:
    settings = ControllerSettings.from_env({})
    assert settings.kubeconfig_dir == Path.home()
    assert settings.kubeconfig_mode == DEFAULT_KUBECONFIG_MODE == 0o777


def test_settings_from_env(tmp_path: Path) -> None:
    settings = ControllerSettings.from_env(
        {"KS_KUBECONFIG_DIR": str(tmp_path), "KS_KUBECONFIG_MODE": "640"}
    )
    assert settings.kubeconfig_dir == tmp_path
    assert settings.kubeconfig_mode == 0o640


def test_invalid_mode_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    settings = ControllerSettings.from_env({"KS_KUBECONFIG_MODE": "rwx"})
    assert settings.kubeconfig_mode == DEFAULT_KUBECONFIG_MODE
    assert "Ignoring invalid KS_KUBECONFIG_MODE" in caplog.text
