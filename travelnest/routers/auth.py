from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from loguru import logger

from travelnest import settings
from travelnest.deps import TOKEN_COOKIE
from travelnest.schemas import SuccessResponse, TokenRequest
from travelnest.tokens import issue_token

router = APIRouter(tags=["auth"])


def _cookie_policy() -> dict:
    """Cross-site cookies in production, same-site only everywhere else."""
    return {
        "httponly": True,
        "secure": settings.IS_PRODUCTION,
        "samesite": "none" if settings.IS_PRODUCTION else "strict",
    }


@router.post("/jwt", response_model=SuccessResponse)
async def create_session(payload: TokenRequest, response: Response) -> SuccessResponse:
    token = issue_token(payload.email)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **_cookie_policy(),
    )
    logger.info("Issued session for {}", payload.email)
    return SuccessResponse()


@router.get("/logout", response_model=SuccessResponse)
async def logout(response: Response):
    try:
        response.delete_cookie(TOKEN_COOKIE, **_cookie_policy())
    except Exception as exc:
        logger.exception("Logout failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(exc)},
        )
    logger.info("Logout successful")
    return SuccessResponse()
