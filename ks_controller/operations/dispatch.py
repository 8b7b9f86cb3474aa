"""Map document kinds to cluster operation types."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Type, Union

from ks_common.api import UnsupportedOperationError

from ks_controller.models.cluster import load_document
from ks_controller.operations.base import ClusterOperation
from ks_controller.operations.create_cluster import CreateClusterOperation

logger = logging.getLogger(__name__)


class OperationDispatcher:
    """Select the operation type for a document by its ``kind``."""

    def __init__(self, operations: Iterable[Type[ClusterOperation]] = ()):
        self._operations: Dict[str, Type[ClusterOperation]] = {}
        for operation_cls in operations:
            self.register(operation_cls)

    def register(self, operation_cls: Type[ClusterOperation]) -> None:
        kind = getattr(operation_cls, "kind", None)
        if not isinstance(kind, str) or not kind:
            raise TypeError(f"{operation_cls!r} does not declare a kind")
        self._operations[kind] = operation_cls

    def kinds(self) -> List[str]:
        return sorted(self._operations)

    def resolve(self, kind: str) -> Type[ClusterOperation]:
        try:
            return self._operations[kind]
        except KeyError:
            raise UnsupportedOperationError(
                f"Unsupported operation kind: {kind}",
                context={"kind": kind, "supported": self.kinds()},
            ) from None

    def parse(self, raw: Union[bytes, str], **options: Any) -> ClusterOperation:
        """Parse ``raw`` into the operation registered for its kind."""
        document = load_document(raw)
        kind = document.get("kind")
        if not isinstance(kind, str) or not kind.strip():
            raise UnsupportedOperationError(
                "Configuration does not declare a kind",
                context={"supported": self.kinds()},
            )
        operation_cls = self.resolve(kind.strip())
        logger.debug("Dispatching %s to %s", kind, operation_cls.__name__)
        return operation_cls.parse(raw, **options)


def create_dispatcher() -> OperationDispatcher:
    """Dispatcher with every built-in operation registered."""
    return OperationDispatcher([CreateClusterOperation])
