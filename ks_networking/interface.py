"""Descriptor for container networking (CNI) plugins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NetworkingPlugin:
    """A CNI plugin the bootstrap engine can install into a new cluster."""

    name: str
    manifest: str
    default_pod_cidr: Optional[str] = None
    description: str = ""
