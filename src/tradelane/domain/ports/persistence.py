"""Ports for persisting shipments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tradelane.domain.importing.registry import CanonicalRegistry
    from tradelane.domain.model import Shipment


@runtime_checkable
class ShipmentRepository(Protocol):
    """Persistence contract for shipments keyed by House BOL number."""

    def existing_keys(self) -> frozenset[str]: ...

    def canonical_registry(self) -> CanonicalRegistry: ...

    def get(self, key: str) -> Shipment | None: ...

    def upsert_many(self, shipments: Sequence[Shipment]) -> None: ...
