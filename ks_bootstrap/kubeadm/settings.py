"""Settings for the kubeadm bootstrap engine."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_KUBERNETES_VERSION = "v1.30"


def _default_state_dir() -> Path:
    return Path(tempfile.gettempdir()) / "kubestrike_multipass"


@dataclass(frozen=True)
class KubeadmSettings:
    """Package channel and Multipass defaults used while bootstrapping."""

    kubernetes_version: str = DEFAULT_KUBERNETES_VERSION
    multipass_user: str = "ubuntu"
    state_dir: Path = field(default_factory=_default_state_dir)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KubeadmSettings":
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        version = env.get("KS_KUBERNETES_VERSION")
        if version:
            kwargs["kubernetes_version"] = version if version.startswith("v") else f"v{version}"
        state_dir = env.get("KS_MULTIPASS_STATE_DIR")
        if state_dir:
            kwargs["state_dir"] = Path(state_dir).expanduser()
        return cls(**kwargs)
