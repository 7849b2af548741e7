from fastapi import APIRouter, Depends
from loguru import logger

from travelnest.deps import (
    CurrentUser,
    PaymentsClient,
    get_current_user,
    get_payments_client,
)
from travelnest.payments import to_amount
from travelnest.schemas import PaymentIntentCreate, PaymentIntentResponse

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: PaymentIntentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    payments_client: PaymentsClient = Depends(get_payments_client),
) -> PaymentIntentResponse:
    amount = to_amount(payload.price)
    client_secret = await payments_client.create_payment_intent(amount)
    logger.info("Created payment intent of {} cents for {}", amount, current_user.email)
    return PaymentIntentResponse(client_secret=client_secret)
