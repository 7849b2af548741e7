from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from travelnest.roles import UserRole, UserStatus


class Document(BaseModel):
    """
    Loose document body. Known fields are typed, anything else the client
    sends is kept and stored as-is.
    """

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.pop("_id", None)
        return doc


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class TokenRequest(Document):
    email: str = Field(min_length=1)


class SuccessResponse(BaseModel):
    success: bool = True


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserUpdate(Document):
    role: UserRole | None = None
    status: UserStatus | str | None = None


class UserSave(Document):
    email: str | None = None
    name: str | None = None
    status: UserStatus | str | None = None


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


class Person(Document):
    email: str
    name: str | None = None
    image: str | None = None


class RoomCreate(Document):
    title: str | None = None
    location: str | None = None
    price: float | None = None
    host: Person | None = None
    booked: bool = False


class RoomStatusUpdate(BaseModel):
    status: bool


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class BookingCreate(Document):
    guest: Person | None = None
    host: str | None = None  # owner email
    price: float | None = None
    date: datetime | None = None
    room_id: str | None = None
    transaction_id: str | None = None


# ---------------------------------------------------------------------------
# Write results (mirror the driver's acknowledgement shape)
# ---------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InsertResult(CamelModel):
    acknowledged: bool
    inserted_id: str


class UpdateResult(CamelModel):
    acknowledged: bool
    matched_count: int
    modified_count: int
    upserted_id: str | None = None
    upserted_count: int = 0


# ---------------------------------------------------------------------------
# Admin / payments
# ---------------------------------------------------------------------------


class AdminStats(CamelModel):
    total_sale: int | float
    booking_count: int
    user_count: int
    room_count: int
    chart_data: list[list]


class PaymentIntentCreate(BaseModel):
    price: float | None = None


class PaymentIntentResponse(CamelModel):
    client_secret: str
