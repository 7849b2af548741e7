from fastapi import APIRouter, Depends

from travelnest.crud import booking_crud
from travelnest.deps import CurrentUser, get_current_user, require_host
from travelnest.schemas import BookingCreate, InsertResult

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
async def list_guest_bookings(
    email: str | None = None,
    _: CurrentUser = Depends(get_current_user),
) -> list[dict]:
    if not email:
        return []
    return await booking_crud.list_for_guest(email)


@router.get("/host")
async def list_host_bookings(
    email: str | None = None,
    _: CurrentUser = Depends(require_host),
) -> list[dict]:
    if not email:
        return []
    return await booking_crud.list_for_host(email)


@router.post("", response_model=InsertResult)
async def create_booking(
    payload: BookingCreate,
    _: CurrentUser = Depends(get_current_user),
) -> InsertResult:
    """
    Stores the booking only. The client flips the room's `booked` flag with a
    separate PATCH /rooms/status/{id}; the two writes are not atomic.
    """
    return await booking_crud.add_booking(payload.to_document())
