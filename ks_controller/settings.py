"""Runtime settings for cluster operations resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ks_common.api import parse_file_mode_env

logger = logging.getLogger(__name__)

# Matches the mode historically used for kubeconfig files; see DESIGN.md.
DEFAULT_KUBECONFIG_MODE = 0o777
KUBECONFIG_PREFIX = ".kubeconfig_"


@dataclass(frozen=True)
class ControllerSettings:
    """Where and how cluster credentials are written."""

    kubeconfig_dir: Path = field(default_factory=Path.home)
    kubeconfig_mode: int = DEFAULT_KUBECONFIG_MODE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ControllerSettings":
        """Build settings from KS_* environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        directory = env.get("KS_KUBECONFIG_DIR")
        if directory:
            kwargs["kubeconfig_dir"] = Path(directory).expanduser()

        raw_mode = env.get("KS_KUBECONFIG_MODE")
        if raw_mode is not None:
            mode = parse_file_mode_env(raw_mode)
            if mode is None:
                logger.warning("Ignoring invalid KS_KUBECONFIG_MODE=%r", raw_mode)
            else:
                kwargs["kubeconfig_mode"] = mode

        return cls(**kwargs)
