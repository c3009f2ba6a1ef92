"""Shipment record shared by the import pipeline and persistence adapters."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from tradelane.domain.model.enums import NameField


@dataclass(frozen=True, slots=True, kw_only=True)
class Shipment:
    """One house bill of lading.

    ``house_bol_number`` is the primary key used for deduplication and upserts.
    """

    house_bol_number: str
    shipper_name: str
    consignee_name: str
    consignee_city: str
    consignee_address: str
    place_of_receipt: str
    us_arrival_port: str
    arrival_date: date
    teu: float
    nvocc_name: str
    vocc_code: str
    vocc_name: str
    notify_party: str | None = None

    def name_value(self, field: NameField) -> str | None:
        return getattr(self, field.value)

    def with_name(self, field: NameField, value: str) -> Shipment:
        return replace(self, **{field.value: value})

    def as_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["arrival_date"] = self.arrival_date.isoformat()
        return payload
