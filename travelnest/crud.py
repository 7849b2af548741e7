from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, status
from loguru import logger
from pymongo.asynchronous.collection import AsyncCollection

from travelnest import db
from travelnest.roles import UserRole, UserStatus
from travelnest.schemas import InsertResult, UpdateResult


def parse_object_id(value: str) -> ObjectId:
    """Turn a 24-hex path segment into an ObjectId, 400 on anything else."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid id: {value!r}",
        ) from None


def serialize(value: Any) -> Any:
    """Render ObjectIds as hex strings, recursing into nested documents."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize(v) for v in value]
    return value


def _now() -> datetime:
    return datetime.now(UTC)


class MongoCRUD:
    """
    Thin async repository over one collection.

    Absence is always None / an empty list. Connectivity errors raised by the
    driver propagate unchanged.
    """

    def __init__(
        self, collection_name: str, collection: AsyncCollection | None = None
    ) -> None:
        self.collection_name = collection_name
        self._collection = collection

    @property
    def collection(self) -> AsyncCollection:
        if self._collection is not None:
            return self._collection
        return db.get_database()[self.collection_name]

    async def find_one(self, filter: dict) -> dict | None:
        doc = await self.collection.find_one(filter)
        return serialize(doc) if doc is not None else None

    async def iter_many(
        self, filter: dict | None = None, projection: dict | None = None
    ) -> AsyncIterator[dict]:
        async for doc in self.collection.find(filter or {}, projection):
            yield serialize(doc)

    async def find_many(
        self, filter: dict | None = None, projection: dict | None = None
    ) -> list[dict]:
        return [doc async for doc in self.iter_many(filter, projection)]

    async def count(self, filter: dict | None = None) -> int:
        return await self.collection.count_documents(filter or {})

    async def insert(self, document: dict) -> InsertResult:
        result = await self.collection.insert_one(document)
        logger.info(
            "Inserted into {}: _id={}", self.collection_name, result.inserted_id
        )
        return InsertResult(
            acknowledged=result.acknowledged, inserted_id=str(result.inserted_id)
        )

    async def update_patch(
        self, filter: dict, fields: dict, upsert: bool = False
    ) -> UpdateResult:
        """$set-merge `fields` into the matching document."""
        if not fields:
            matched = await self.collection.count_documents(filter, limit=1)
            return UpdateResult(
                acknowledged=True, matched_count=matched, modified_count=0
            )
        result = await self.collection.update_one(
            filter, {"$set": fields}, upsert=upsert
        )
        return _update_result(result)

    async def upsert(
        self, filter: dict, fields: dict, defaults: dict | None = None
    ) -> UpdateResult:
        """
        Insert-if-absent, else merge. A new document also gets a creation
        `timestamp` plus `defaults`; both are left alone on an existing one.
        """
        fields = {k: v for k, v in fields.items() if k != "timestamp"}
        on_insert = {
            k: v for k, v in (defaults or {}).items() if k not in fields
        }
        on_insert["timestamp"] = _now()
        update = {"$setOnInsert": on_insert}
        if fields:
            update["$set"] = fields
        result = await self.collection.update_one(filter, update, upsert=True)
        return _update_result(result)


def _update_result(result) -> UpdateResult:
    upserted_id = result.upserted_id
    return UpdateResult(
        acknowledged=result.acknowledged,
        matched_count=result.matched_count,
        modified_count=result.modified_count,
        upserted_id=str(upserted_id) if upserted_id is not None else None,
        upserted_count=1 if upserted_id is not None else 0,
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCRUD(MongoCRUD):
    async def get_by_email(self, email: str) -> dict | None:
        return await self.find_one({"email": email})

    async def list_users(self) -> list[dict]:
        return await self.find_many()

    async def update_role(self, email: str, fields: dict) -> UpdateResult:
        """Write the submitted role/status document, stamping it with now."""
        result = await self.update_patch(
            {"email": email}, {**fields, "timestamp": _now()}, upsert=True
        )
        logger.info("Updated user {}: {}", email, sorted(fields))
        return result

    async def save_user(self, email: str, fields: dict) -> UpdateResult | dict:
        """
        Conditional save. New users are created (as guests). An existing user
        is only patched by a body filing a host request (status "Requested");
        any other body gets the stored record back and nothing is written,
        so a later login save cannot clobber a pending request.
        """
        query = {"email": email}
        fields = {k: v for k, v in fields.items() if k not in ("role", "email")}

        existing = await self.find_one(query)
        if existing is None:
            logger.info("Creating user {}", email)
            return await self.upsert(
                query, fields, defaults={"role": UserRole.GUEST.value}
            )

        if fields.get("status") == UserStatus.REQUESTED:
            logger.info("Filing host request for user {}", email)
            return await self.update_patch(query, fields)

        logger.debug(
            "User {} already processed (status={}), skipping write",
            email,
            existing.get("status"),
        )
        return existing


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


class RoomCRUD(MongoCRUD):
    async def list_rooms(self) -> list[dict]:
        return await self.find_many()

    async def get_room(self, room_id: ObjectId) -> dict | None:
        return await self.find_one({"_id": room_id})

    async def list_by_host(self, email: str) -> list[dict]:
        return await self.find_many({"host.email": email})

    async def add_room(self, room: dict) -> InsertResult:
        return await self.insert(room)

    async def set_booked(self, room_id: ObjectId, booked: bool) -> UpdateResult:
        return await self.update_patch({"_id": room_id}, {"booked": booked})


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class BookingCRUD(MongoCRUD):
    async def list_for_guest(self, email: str) -> list[dict]:
        return await self.find_many({"guest.email": email})

    async def list_for_host(self, email: str) -> list[dict]:
        return await self.find_many({"host": email})

    async def add_booking(self, booking: dict) -> InsertResult:
        return await self.insert(booking)

    def iter_sales(self) -> AsyncIterator[dict]:
        """Every booking, reduced to the fields revenue is computed from."""
        return self.iter_many({}, {"date": 1, "price": 1})


user_crud = UserCRUD(db.USERS)
room_crud = RoomCRUD(db.ROOMS)
booking_crud = BookingCRUD(db.BOOKINGS)
