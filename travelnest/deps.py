from dataclasses import dataclass
from functools import lru_cache

import httpx
from fastapi import Cookie, Depends, HTTPException, status
from loguru import logger

from travelnest import settings
from travelnest.crud import user_crud
from travelnest.payments import CURRENCY, PAYMENT_METHOD_TYPES
from travelnest.roles import UserRole
from travelnest.tokens import InvalidToken, verify_token

TOKEN_COOKIE = "token"


@dataclass
class CurrentUser:
    email: str


def get_current_user(token: str | None = Cookie(default=None)) -> CurrentUser:
    """
    Session guard. Reads the `token` cookie set by POST /jwt and returns the
    identity it carries. No database access.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized access",
        )
    try:
        email = verify_token(token)
    except InvalidToken as exc:
        logger.debug("Rejected session token: {}", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized access",
        ) from None

    return CurrentUser(email=email)


def require_role(role: UserRole):
    """
    Factory that returns a dependency enforcing a stored user role.

    The role is read from the users collection on every call, so a role
    change takes effect on the next request.

    Usage:
        @router.get("/protected")
        async def route(user = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    async def _dep(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        record = await user_crud.get_by_email(current_user.email)
        if record is None or record.get("role") != role:
            logger.debug(
                "Role check failed for {}: need {}, have {}",
                current_user.email,
                role,
                record.get("role") if record else None,
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized Access",
            )
        return current_user

    return _dep


require_admin = require_role(UserRole.ADMIN)
require_host = require_role(UserRole.HOST)


# ---------------------------------------------------------------------------
# PaymentsClient: thin async wrapper around the Stripe REST API
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _get_stripe_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.stripe_api_url,
        timeout=httpx.Timeout(10.0),
    )


class PaymentsClient:
    """
    Creates card payment intents at Stripe. Only the client secret leaves
    this class; the rest of the intent stays server-side.
    """

    @property
    def _client(self) -> httpx.AsyncClient:
        return _get_stripe_http_client()

    async def create_payment_intent(self, amount: int) -> str:
        """Returns the intent's client secret. Raises HTTP 502 on any failure."""
        data = {"amount": str(amount), "currency": CURRENCY}
        data.update(
            {
                f"payment_method_types[{i}]": method
                for i, method in enumerate(PAYMENT_METHOD_TYPES)
            }
        )
        try:
            resp = await self._client.post(
                "/v1/payment_intents",
                data=data,
                auth=(settings.STRIPE_SECRET_KEY, ""),
            )
        except httpx.RequestError:
            logger.opt(exception=True).warning("Stripe request failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment provider unreachable",
            ) from None

        if resp.status_code >= 400:
            logger.warning(
                "Stripe returned {} creating intent: {}", resp.status_code, resp.text
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Payment provider returned {resp.status_code}",
            )
        try:
            return resp.json()["client_secret"]
        except (ValueError, KeyError, TypeError):
            logger.warning("Stripe intent response had no client secret: {}", resp.text)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment provider returned no client secret",
            ) from None


_payments_client = PaymentsClient()


def get_payments_client() -> PaymentsClient:
    return _payments_client
