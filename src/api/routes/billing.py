from fastapi import APIRouter, status

from src.api.services.billing_service import BillingService
from src.config import get_settings
from src.models.support_schemas import CreateOrderRequest, CreateOrderResponse

router = APIRouter(prefix="/api/razorpay", tags=["billing"])


@router.post("/create-order", response_model=CreateOrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(payload: CreateOrderRequest):
    """Create a Razorpay order for a plan. 503 when the gateway keys are not configured."""
    service = BillingService(get_settings())
    order = service.create_order(payload.plan, payload.user_id, payload.user_email)
    return {**order, "key_id": service.key_id}
