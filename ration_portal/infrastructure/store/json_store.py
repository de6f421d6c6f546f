from __future__ import annotations

import hashlib
import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.domain.entities.booking import Booking, BookingStatus
from ration_portal.domain.entities.slot import Slot
from ration_portal.domain.entities.stock import Stock

_SAFE_NAME = re.compile(r"^[A-Za-z0-9_-]{1,100}$")


class JsonLedgerStore(LedgerStorePort):
    """
    One JSON document per shop holding that shop's slots and bookings.
    A slot and its bookings always live in the same file, so a reservation is a
    single atomic file replace under the shop's lock.
    """

    def __init__(self, data_dir: str = "./data/shops") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, shop_id: str) -> threading.Lock:
        """Get or create a lock for a shop_id."""
        with self._lock_lock:
            if shop_id not in self._locks:
                self._locks[shop_id] = threading.Lock()
            return self._locks[shop_id]

    def _get_file_path(self, shop_id: str) -> Path:
        name = shop_id if _SAFE_NAME.match(shop_id) else hashlib.sha256(shop_id.encode("utf-8")).hexdigest()
        return self._data_dir / f"{name}.json"

    def _empty_shop_data(self, shop_id: str) -> dict[str, Any]:
        return {"shop_id": shop_id, "slots": {}, "bookings": {}, "version": 1}

    def _load_shop_data(self, shop_id: str) -> dict[str, Any]:
        """Load a shop's ledger from disk, return an empty ledger if missing."""
        file_path = self._get_file_path(shop_id)
        if not file_path.exists():
            return self._empty_shop_data(shop_id)
        return self._read_file(file_path) or self._empty_shop_data(shop_id)

    def _read_file(self, file_path: Path) -> dict[str, Any] | None:
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.error("Unreadable ledger file", extra={"path": str(file_path), "error": str(e)})
            return None
        data.setdefault("slots", {})
        data.setdefault("bookings", {})
        data.setdefault("version", 1)
        return data

    def _save_shop_data(self, shop_id: str, data: dict[str, Any]) -> None:
        """Save a shop's ledger atomically."""
        file_path = self._get_file_path(shop_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def _serialize_slot(self, slot: Slot) -> dict[str, Any]:
        return {
            "id": slot.id,
            "shop_id": slot.shop_id,
            "date": slot.date,
            "time_slot": slot.time_slot,
            "max_capacity": slot.max_capacity,
            "booked_count": slot.booked_count,
            "stock_limit": slot.stock_limit.to_dict(),
            "available_stock": slot.available_stock.to_dict(),
            "version": slot.version,
            "created_at": slot.created_at,
            "updated_at": slot.updated_at,
        }

    def _deserialize_slot(self, data: dict[str, Any]) -> Slot:
        return Slot(
            id=data["id"],
            shop_id=data["shop_id"],
            date=data["date"],
            time_slot=data["time_slot"],
            max_capacity=int(data["max_capacity"]),
            booked_count=int(data.get("booked_count", 0)),
            stock_limit=Stock.from_payload(data.get("stock_limit")),
            available_stock=Stock.from_payload(data.get("available_stock")),
            version=int(data.get("version", 0)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def _serialize_booking(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "beneficiary_id": booking.beneficiary_id,
            "beneficiary_name": booking.beneficiary_name,
            "shop_id": booking.shop_id,
            "shop_name": booking.shop_name,
            "slot_id": booking.slot_id,
            "date": booking.date,
            "time_slot": booking.time_slot,
            "entitlement": booking.entitlement.to_dict(),
            "status": booking.status.value,
            "qr_code": booking.qr_code,
            "created_at": booking.created_at,
            "updated_at": booking.updated_at,
        }

    def _deserialize_booking(self, data: dict[str, Any]) -> Booking:
        return Booking(
            id=data["id"],
            beneficiary_id=data["beneficiary_id"],
            beneficiary_name=data.get("beneficiary_name", ""),
            shop_id=data["shop_id"],
            shop_name=data.get("shop_name", ""),
            slot_id=data["slot_id"],
            date=data["date"],
            time_slot=data["time_slot"],
            entitlement=Stock.from_payload(data.get("entitlement")),
            status=BookingStatus(data.get("status", "confirmed")),
            qr_code=data["qr_code"],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def add_slot(self, slot: Slot) -> None:
        with self._get_lock(slot.shop_id):
            data = self._load_shop_data(slot.shop_id)
            data["slots"][slot.id] = self._serialize_slot(slot)
            self._save_shop_data(slot.shop_id, data)

    def get_slot(self, shop_id: str, slot_id: str) -> Slot | None:
        with self._get_lock(shop_id):
            raw = self._load_shop_data(shop_id)["slots"].get(slot_id)
        return self._deserialize_slot(raw) if raw else None

    def list_slots(self, shop_id: str) -> list[Slot]:
        with self._get_lock(shop_id):
            data = self._load_shop_data(shop_id)
        return [self._deserialize_slot(raw) for raw in data["slots"].values()]

    def list_bookings_by_shop(self, shop_id: str) -> list[Booking]:
        with self._get_lock(shop_id):
            data = self._load_shop_data(shop_id)
        return [self._deserialize_booking(raw) for raw in data["bookings"].values()]

    def _iter_all_bookings(self) -> list[dict[str, Any]]:
        # Bookings are filed per shop, so user/id lookups scan every shop file
        found: list[dict[str, Any]] = []
        for file_path in self._data_dir.glob("*.json"):
            data = self._read_file(file_path)
            if data:
                found.extend(data["bookings"].values())
        return found

    def get_booking(self, booking_id: str) -> Booking | None:
        for raw in self._iter_all_bookings():
            if raw.get("id") == booking_id:
                return self._deserialize_booking(raw)
        return None

    def list_bookings_by_user(self, user_id: str) -> list[Booking]:
        return [
            self._deserialize_booking(raw)
            for raw in self._iter_all_bookings()
            if raw.get("beneficiary_id") == user_id
        ]

    def commit(self, slot: Slot, expected_version: int, booking: Booking | None = None) -> bool:
        with self._get_lock(slot.shop_id):
            data = self._load_shop_data(slot.shop_id)
            current = data["slots"].get(slot.id)
            if current is None or int(current.get("version", 0)) != expected_version:
                return False
            data["slots"][slot.id] = self._serialize_slot(slot)
            if booking is not None:
                data["bookings"][booking.id] = self._serialize_booking(booking)
            self._save_shop_data(slot.shop_id, data)
            return True
