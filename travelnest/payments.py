from decimal import Decimal, InvalidOperation

from fastapi import HTTPException, status

CURRENCY = "usd"
PAYMENT_METHOD_TYPES = ["card"]


def to_amount(price) -> int:
    """
    Price in major units -> integer minor units (cents), truncated.

    Computed on the decimal string so 19.99 gives 1999, not 1998.
    """
    if not price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payment amount",
        )
    try:
        amount = int(Decimal(str(price)) * 100)
    except (InvalidOperation, ValueError, OverflowError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payment amount",
        ) from None
    if amount < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payment amount",
        )
    return amount
