from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

GOODS: tuple[str, ...] = ("rice", "wheat", "sugar", "kerosene")


@dataclass(frozen=True)
class Stock:
    rice: float = 0.0  # kg
    wheat: float = 0.0  # kg
    sugar: float = 0.0  # kg
    kerosene: float = 0.0  # litres

    @staticmethod
    def zero() -> "Stock":
        return Stock()

    @staticmethod
    def from_payload(data: Mapping[str, Any] | None) -> "Stock":
        data = data or {}
        return Stock(**{good: float(data.get(good) or 0) for good in GOODS})

    def to_dict(self) -> dict[str, float]:
        return {good: getattr(self, good) for good in GOODS}

    def covers(self, required: "Stock") -> bool:
        """True when every good here is at least the required amount."""
        return all(getattr(self, good) >= getattr(required, good) for good in GOODS)

    def shortfall(self, required: "Stock") -> list[str]:
        return [good for good in GOODS if getattr(self, good) < getattr(required, good)]

    def minus(self, other: "Stock") -> "Stock":
        return Stock(**{good: getattr(self, good) - getattr(other, good) for good in GOODS})

    def plus(self, other: "Stock") -> "Stock":
        return Stock(**{good: getattr(self, good) + getattr(other, good) for good in GOODS})

    def capped_at(self, limit: "Stock") -> "Stock":
        return Stock(**{good: min(getattr(self, good), getattr(limit, good)) for good in GOODS})

    def is_non_negative(self) -> bool:
        return self.covers(Stock.zero())

    def __str__(self) -> str:
        return (
            f"Rice: {self.rice:g}kg, Wheat: {self.wheat:g}kg, "
            f"Sugar: {self.sugar:g}kg, Kerosene: {self.kerosene:g}L"
        )
