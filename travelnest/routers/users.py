from fastapi import APIRouter, Depends, HTTPException, status

from travelnest.crud import user_crud
from travelnest.deps import CurrentUser, get_current_user, require_admin
from travelnest.schemas import UpdateResult, UserSave, UserUpdate

router = APIRouter(tags=["users"])


@router.get("/user/{email}")
async def get_user(
    email: str,
    _: CurrentUser = Depends(get_current_user),
) -> dict | None:
    """Full user record (the client reads `role` off it), or null."""
    return await user_crud.get_by_email(email)


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users() -> list[dict]:
    return await user_crud.list_users()


@router.put("/users/update/{email}", response_model=UpdateResult)
async def update_user_role(
    email: str,
    payload: UserUpdate,
    _: CurrentUser = Depends(get_current_user),
) -> UpdateResult:
    return await user_crud.update_role(email, payload.to_document())


@router.put("/users/{email}")
async def save_user(
    email: str,
    payload: UserSave,
    current_user: CurrentUser = Depends(get_current_user),
) -> UpdateResult | dict:
    """
    Create the caller's user record on first login, or file a pending
    host request. Already-processed records are returned untouched.
    """
    if current_user.email != email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Cannot save another user's record",
        )
    return await user_crud.save_user(email, payload.to_document())
