from __future__ import annotations

from dataclasses import dataclass

ROLES = ("admin", "shopkeeper", "beneficiary")


@dataclass(frozen=True)
class CallerContext:
    """Identity of whoever is making the request, as supplied by the auth layer."""

    user_id: str
    role: str
    shop_id: str | None = None  # shopkeepers only
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_shopkeeper(self) -> bool:
        return self.role == "shopkeeper"

    @property
    def is_beneficiary(self) -> bool:
        return self.role == "beneficiary"

    def owns_shop(self, shop_id: str) -> bool:
        return self.is_shopkeeper and self.shop_id is not None and self.shop_id == shop_id
