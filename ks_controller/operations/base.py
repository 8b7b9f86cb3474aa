"""Lifecycle contract shared by every cluster operation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from ks_common.api import OperationStateError, StopToken


class OperationState(str, Enum):
    """Lifecycle state of one operation instance."""

    UNPARSED = "unparsed"
    PARSED = "parsed"
    VALIDATED = "validated"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ClusterOperation(ABC):
    """A cluster-affecting request driven through parse, validate and run.

    Subclasses declare the document ``kind`` they handle, build themselves in
    ``parse`` and implement ``_validate``/``_run``. The base class enforces
    ordering: ``run`` only starts after a successful ``validate``.
    """

    kind: ClassVar[str]

    def __init__(self) -> None:
        self.state = OperationState.UNPARSED

    @classmethod
    @abstractmethod
    def parse(cls, raw: Union[bytes, str], **options: Any) -> "ClusterOperation":
        """Build an operation from a raw configuration document."""

    @abstractmethod
    def _validate(self) -> None:
        """Raise on the first invalid field of the parsed request."""

    @abstractmethod
    def _run(self, verbose: bool, stop_token: Optional[StopToken]) -> Any:
        """Carry out the operation."""

    def validate(self) -> None:
        if self.state not in (OperationState.PARSED, OperationState.VALIDATED):
            raise OperationStateError(
                f"Cannot validate a {self.state.value} operation",
                context={"kind": self.kind, "state": self.state},
            )
        self._validate()
        self.state = OperationState.VALIDATED

    def run(self, verbose: bool = False, stop_token: Optional[StopToken] = None) -> Any:
        if self.state is not OperationState.VALIDATED:
            raise OperationStateError(
                f"Cannot run a {self.state.value} operation; validate it first",
                context={"kind": self.kind, "state": self.state},
            )
        self.state = OperationState.RUNNING
        try:
            result = self._run(verbose, stop_token)
        except BaseException:
            self.state = OperationState.FAILED
            raise
        self.state = OperationState.SUCCEEDED
        return result
