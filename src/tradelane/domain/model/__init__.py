"""Public domain model surface."""

from __future__ import annotations

from tradelane.domain.model.enums import NameField
from tradelane.domain.model.shipment import Shipment

__all__ = ["NameField", "Shipment"]
