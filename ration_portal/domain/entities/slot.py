from __future__ import annotations

from dataclasses import dataclass, replace

from ration_portal.domain.entities.stock import Stock


@dataclass(frozen=True)
class Slot:
    id: str
    shop_id: str
    date: str  # YYYY-MM-DD
    time_slot: str  # free text, e.g. "09:00 - 11:00"
    max_capacity: int
    stock_limit: Stock
    available_stock: Stock
    booked_count: int = 0
    version: int = 0  # bumped on every committed mutation
    created_at: float | None = None
    updated_at: float | None = None

    @property
    def remaining_capacity(self) -> int:
        return max(self.max_capacity - self.booked_count, 0)

    @property
    def is_full(self) -> bool:
        return self.booked_count >= self.max_capacity

    @property
    def distributed_stock(self) -> Stock:
        return self.stock_limit.minus(self.available_stock)

    def reserve(self, entitlement: Stock, now_ts: float) -> "Slot":
        return replace(
            self,
            booked_count=self.booked_count + 1,
            available_stock=self.available_stock.minus(entitlement),
            version=self.version + 1,
            updated_at=now_ts,
        )

    def release(self, entitlement: Stock, now_ts: float) -> "Slot":
        """Give back one seat and the entitlement, never past the slot's limits."""
        restored = self.available_stock.plus(entitlement).capped_at(self.stock_limit)
        return replace(
            self,
            booked_count=max(self.booked_count - 1, 0),
            available_stock=restored,
            version=self.version + 1,
            updated_at=now_ts,
        )
