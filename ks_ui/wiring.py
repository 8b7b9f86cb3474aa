"""Lazily built services shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ks_controller.api import OperationDispatcher, create_dispatcher
from ks_networking.api import NetworkingRegistry, create_registry
from ks_ui.presenters.console import RichPresenter


@dataclass
class UIContext:
    """Container for CLI services, overridable in tests."""

    dispatcher_factory: Callable[[], OperationDispatcher] = create_dispatcher
    registry_factory: Callable[[], NetworkingRegistry] = create_registry
    # Extra keyword arguments forwarded to operation constructors.
    operation_options: Dict[str, Any] = field(default_factory=dict)

    _presenter: Optional[RichPresenter] = None

    @property
    def presenter(self) -> RichPresenter:
        if self._presenter is None:
            self._presenter = RichPresenter()
        return self._presenter

    @presenter.setter
    def presenter(self, value: RichPresenter) -> None:
        self._presenter = value

    def dispatcher(self) -> OperationDispatcher:
        return self.dispatcher_factory()

    def registry(self) -> NetworkingRegistry:
        return self.registry_factory()
