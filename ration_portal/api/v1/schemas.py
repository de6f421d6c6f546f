import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ration_portal.application.use_cases.manage_slots import StockOverview
from ration_portal.application.use_cases.verify_booking import VerificationResult
from ration_portal.domain.entities.booking import Booking
from ration_portal.domain.entities.slot import Slot
from ration_portal.domain.entities.stock import Stock


class BookingStatusSchema(str, Enum):
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class StockSchema(BaseModel):
    rice: float = Field(default=0, ge=0)
    wheat: float = Field(default=0, ge=0)
    sugar: float = Field(default=0, ge=0)
    kerosene: float = Field(default=0, ge=0)

    def to_entity(self) -> Stock:
        return Stock(rice=self.rice, wheat=self.wheat, sugar=self.sugar, kerosene=self.kerosene)

    @classmethod
    def from_entity(cls, stock: Stock) -> "StockSchema":
        return cls(**stock.to_dict())


class CreateSlotRequestSchema(BaseModel):
    date: datetime.date
    time_slot: str = Field(min_length=1)
    max_capacity: int = Field(ge=1)
    stock_limit: StockSchema


class UpdateSlotRequestSchema(BaseModel):
    max_capacity: int | None = Field(default=None, ge=1)
    stock_limit: StockSchema | None = None


class SlotSchema(BaseModel):
    id: str
    shop_id: str
    date: str
    time_slot: str
    max_capacity: int
    booked_count: int
    remaining_capacity: int
    stock_limit: StockSchema
    available_stock: StockSchema

    @classmethod
    def from_entity(cls, slot: Slot) -> "SlotSchema":
        return cls(
            id=slot.id,
            shop_id=slot.shop_id,
            date=slot.date,
            time_slot=slot.time_slot,
            max_capacity=slot.max_capacity,
            booked_count=slot.booked_count,
            remaining_capacity=slot.remaining_capacity,
            stock_limit=StockSchema.from_entity(slot.stock_limit),
            available_stock=StockSchema.from_entity(slot.available_stock),
        )


class StockOverviewSchema(BaseModel):
    shop_id: str
    slot_count: int
    total_capacity: int
    total_booked: int
    stock_limit: StockSchema
    available_stock: StockSchema
    distributed_stock: StockSchema

    @classmethod
    def from_entity(cls, overview: StockOverview) -> "StockOverviewSchema":
        return cls(
            shop_id=overview.shop_id,
            slot_count=overview.slot_count,
            total_capacity=overview.total_capacity,
            total_booked=overview.total_booked,
            stock_limit=StockSchema.from_entity(overview.stock_limit),
            available_stock=StockSchema.from_entity(overview.available_stock),
            distributed_stock=StockSchema.from_entity(overview.distributed_stock),
        )


class CreateBookingRequestSchema(BaseModel):
    shop_id: str = Field(min_length=1)
    slot_id: str = Field(min_length=1)


class BookingSchema(BaseModel):
    id: str
    beneficiary_id: str
    beneficiary_name: str
    shop_id: str
    shop_name: str
    slot_id: str
    date: str
    time_slot: str
    entitlement: StockSchema
    status: BookingStatusSchema
    qr_code: str
    created_at: float | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            beneficiary_id=booking.beneficiary_id,
            beneficiary_name=booking.beneficiary_name,
            shop_id=booking.shop_id,
            shop_name=booking.shop_name,
            slot_id=booking.slot_id,
            date=booking.date,
            time_slot=booking.time_slot,
            entitlement=StockSchema.from_entity(booking.entitlement),
            status=BookingStatusSchema(booking.status.value),
            qr_code=booking.qr_code,
            created_at=booking.created_at,
        )


class VerifyRequestSchema(BaseModel):
    code: str = Field(min_length=1)


class VerifyResponseSchema(BaseModel):
    found: bool
    booking: BookingSchema | None = None

    @classmethod
    def from_result(cls, result: VerificationResult) -> "VerifyResponseSchema":
        return cls(
            found=result.found,
            booking=BookingSchema.from_entity(result.booking) if result.booking else None,
        )
