from fastapi import APIRouter, Depends

from travelnest.crud import parse_object_id, room_crud
from travelnest.deps import CurrentUser, get_current_user
from travelnest.schemas import InsertResult, RoomCreate, RoomStatusUpdate, UpdateResult

router = APIRouter(tags=["rooms"])


@router.get("/rooms")
async def list_rooms() -> list[dict]:
    """Public listing of every room, read straight from storage."""
    return await room_crud.list_rooms()


@router.get("/room/{room_id}")
async def get_room(
    room_id: str,
    _: CurrentUser = Depends(get_current_user),
) -> dict | None:
    return await room_crud.get_room(parse_object_id(room_id))


@router.get("/rooms/{email}")
async def list_host_rooms(
    email: str,
    _: CurrentUser = Depends(get_current_user),
) -> list[dict]:
    return await room_crud.list_by_host(email)


@router.post("/add-room", response_model=InsertResult)
async def add_room(
    payload: RoomCreate,
    _: CurrentUser = Depends(get_current_user),
) -> InsertResult:
    return await room_crud.add_room(payload.to_document())


@router.patch("/rooms/status/{room_id}", response_model=UpdateResult)
async def update_room_status(
    room_id: str,
    payload: RoomStatusUpdate,
    _: CurrentUser = Depends(get_current_user),
) -> UpdateResult:
    """Flip the room's `booked` flag. Not coupled to any booking write."""
    return await room_crud.set_booked(parse_object_id(room_id), payload.status)
