from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    name: str
    role: str  # "admin", "shopkeeper", "beneficiary"
    family_members: int | None = None
    shop_id: str | None = None  # shopkeepers only
    card_number: str | None = None

    @staticmethod
    def from_payload(data: dict[str, Any]) -> "User":
        family = data.get("family_members", data.get("familyMembers"))
        return User(
            id=str(data.get("id") or data.get("_id") or ""),
            name=str(data.get("name") or ""),
            role=str(data.get("role") or "").strip().lower(),
            family_members=int(family) if family not in (None, "") else None,
            shop_id=data.get("shop_id") or data.get("shopId") or None,
            card_number=data.get("card_number") or data.get("cardNumber") or None,
        )


@dataclass(frozen=True)
class Shop:
    id: str
    name: str
    shopkeeper_id: str
    status: str = "pending"  # "pending", "approved", "rejected"
    address: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"

    @staticmethod
    def from_payload(data: dict[str, Any]) -> "Shop":
        return Shop(
            id=str(data.get("id") or data.get("_id") or ""),
            name=str(data.get("name") or ""),
            shopkeeper_id=str(data.get("shopkeeper_id") or data.get("shopkeeperId") or ""),
            status=str(data.get("status") or "pending").strip().lower(),
            address=data.get("address"),
        )
