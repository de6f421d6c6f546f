import logging

from fastapi import FastAPI

from ration_portal.api.v1.bookings import router as bookings_router
from ration_portal.api.v1.slots import router as slots_router
from ration_portal.core.config import settings


LOG_CONTEXT_KEYS = (
    "booking_id",
    "slot_id",
    "shop_id",
    "user_id",
    "attempt",
    "reason",
    "error",
    "url",
    "status_code",
    "path",
    "users",
    "shops",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in LOG_CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Ration Slot Booking Portal", version="1.0.0")

app.include_router(slots_router, prefix="/api/v1", tags=["slots"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
