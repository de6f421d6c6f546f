#!/usr/bin/env python3
"""
Local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py [seed_file]

What it does:
- Seeds the static directory from data/seed_directory.json (or the given file)
- Creates a slot at shop_1 as its shopkeeper
- Books it for every beneficiary in the seed, printing each outcome
- Verifies the first booking at the counter and prints the slot afterwards
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ration_portal.application.exceptions import RationPortalError
from ration_portal.application.use_cases.manage_slots import CreateSlotUseCase
from ration_portal.application.use_cases.reserve_slot import ReserveSlotUseCase
from ration_portal.application.use_cases.verify_booking import VerifyBookingUseCase
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.stock import Stock
from ration_portal.infrastructure.directory.static_directory import StaticDirectory
from ration_portal.infrastructure.store.memory_store import MemoryLedgerStore

BENEFICIARIES = ("u_ben", "u_ben2", "u_ben3")


def main() -> None:
    seed = sys.argv[1] if len(sys.argv) > 1 else str(ROOT / "data" / "seed_directory.json")
    directory = StaticDirectory.from_file(seed)
    store = MemoryLedgerStore()
    keeper = CallerContext(user_id="u_keeper", role="shopkeeper", shop_id="shop_1")

    slot = CreateSlotUseCase(store=store, directory=directory).execute(
        caller=keeper,
        shop_id="shop_1",
        date="2026-11-02",
        time_slot="09:00 - 11:00",
        max_capacity=2,
        stock_limit=Stock(rice=500, wheat=400, sugar=100, kerosene=50),
    )
    print(f"Created {slot.id}: capacity={slot.max_capacity} stock=({slot.available_stock})")
    print("-" * 60)

    reserve = ReserveSlotUseCase(store=store, directory=directory)
    bookings = []
    for user_id in BENEFICIARIES:
        try:
            booking = reserve.execute(CallerContext(user_id=user_id, role="beneficiary"), "shop_1", slot.id)
        except RationPortalError as e:
            print(f"{user_id}: rejected ({type(e).__name__}: {e})")
            continue
        bookings.append(booking)
        print(f"{user_id}: booked {booking.id} entitlement=({booking.entitlement}) code={booking.qr_code}")

    if bookings:
        result = VerifyBookingUseCase(store=store).execute(keeper, bookings[0].qr_code)
        print("-" * 60)
        print(f"Verify {bookings[0].qr_code}: found={result.found}")

    after = store.get_slot("shop_1", slot.id)
    print(f"Slot now: booked={after.booked_count}/{after.max_capacity} stock=({after.available_stock})")


if __name__ == "__main__":
    main()
