from fastapi import APIRouter, Depends

from ration_portal.api.v1.caller import get_caller
from ration_portal.api.v1.errors import to_http_error
from ration_portal.api.v1.schemas import (
    BookingSchema,
    CreateBookingRequestSchema,
    VerifyRequestSchema,
    VerifyResponseSchema,
)
from ration_portal.application.exceptions import RationPortalError
from ration_portal.application.use_cases.list_bookings import ListBookingsUseCase
from ration_portal.application.use_cases.reserve_slot import ReserveSlotUseCase
from ration_portal.application.use_cases.update_booking_status import UpdateBookingStatusUseCase
from ration_portal.application.use_cases.verify_booking import VerifyBookingUseCase
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.wiring.dependencies import (
    get_list_bookings_use_case,
    get_reserve_slot_use_case,
    get_update_booking_status_use_case,
    get_verify_booking_use_case,
)

router = APIRouter()


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingRequestSchema,
    caller: CallerContext = Depends(get_caller),
    uc: ReserveSlotUseCase = Depends(get_reserve_slot_use_case),
):
    try:
        booking = uc.execute(caller=caller, shop_id=req.shop_id, slot_id=req.slot_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return BookingSchema.from_entity(booking)


@router.get("/bookings/user/{user_id}", response_model=list[BookingSchema])
def list_user_bookings(
    user_id: str,
    caller: CallerContext = Depends(get_caller),
    uc: ListBookingsUseCase = Depends(get_list_bookings_use_case),
):
    try:
        bookings = uc.by_user(caller, user_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return [BookingSchema.from_entity(b) for b in bookings]


@router.get("/bookings/shop/{shop_id}", response_model=list[BookingSchema])
def list_shop_bookings(
    shop_id: str,
    caller: CallerContext = Depends(get_caller),
    uc: ListBookingsUseCase = Depends(get_list_bookings_use_case),
):
    try:
        bookings = uc.by_shop(caller, shop_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return [BookingSchema.from_entity(b) for b in bookings]


@router.post("/bookings/verify", response_model=VerifyResponseSchema)
def verify_booking(
    req: VerifyRequestSchema,
    caller: CallerContext = Depends(get_caller),
    uc: VerifyBookingUseCase = Depends(get_verify_booking_use_case),
):
    try:
        result = uc.execute(caller=caller, code=req.code)
    except RationPortalError as e:
        raise to_http_error(e)
    return VerifyResponseSchema.from_result(result)


@router.post("/bookings/{booking_id}/complete", response_model=BookingSchema)
def complete_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_caller),
    uc: UpdateBookingStatusUseCase = Depends(get_update_booking_status_use_case),
):
    try:
        booking = uc.complete(caller, booking_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    caller: CallerContext = Depends(get_caller),
    uc: UpdateBookingStatusUseCase = Depends(get_update_booking_status_use_case),
):
    try:
        booking = uc.cancel(caller, booking_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return BookingSchema.from_entity(booking)
