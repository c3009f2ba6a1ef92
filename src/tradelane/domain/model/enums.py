"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class NameField(StrEnum):
    """Name-bearing shipment fields reconciled against known entities.

    Values double as the ``Shipment`` attribute names.
    """

    SHIPPER = "shipper_name"
    CONSIGNEE = "consignee_name"
    NOTIFY_PARTY = "notify_party"
