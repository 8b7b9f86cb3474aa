"""Lightweight host definition shared across layers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class HostSpec:
    """SSH connection details for a reachable host."""

    name: str
    address: str
    port: int = 22
    user: str = "root"
    private_key: Optional[Path] = None

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for an SSH client connection."""
        kwargs: Dict[str, Any] = {"banner_timeout": 30}
        if self.private_key is not None:
            kwargs["key_filename"] = str(Path(self.private_key).expanduser())
        return kwargs
