"""
Endpoints para el checkout y la consulta de pagos.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.adapters import PaymentGateway, get_payment_gateway
from app.schemas import (
    APIResponse,
    Order,
    PaymentStatusRecord,
    PreferenceResponse,
)
from app.services import PaymentService
from app.utils.exceptions import (
    GatewayError,
    InvalidOrderError,
    OrderAlreadyPaidError,
    PaymentNotFoundError,
)


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_payment_service(
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    """Dependency para obtener PaymentService."""
    return PaymentService(gateway=gateway)


@router.post(
    "/preferences",
    response_model=APIResponse[PreferenceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Crear preferencia de pago para una orden",
    description="""
    Traduce la orden a una preferencia de Mercado Pago y la crea.

    - Retorna la URL del checkout hospedado a la que se redirige al comprador
    - `external_reference` es el id de la orden, usado luego en el webhook
    - Las órdenes ya pagadas se rechazan
    """,
)
async def create_preference(
    order: Order,
    service: PaymentService = Depends(get_payment_service),
):
    """Crea la preferencia de pago de una orden."""
    try:
        result = await service.create_checkout(order)
    except (InvalidOrderError, OrderAlreadyPaidError) as e:
        logger.warning("Checkout rejected", order_id=order.id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except GatewayError as e:
        logger.error("Payment gateway error", order_id=order.id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )

    return APIResponse(
        success=True,
        message="Payment preference created successfully",
        data=result,
    )


@router.get(
    "/{payment_id}",
    response_model=APIResponse[PaymentStatusRecord],
    summary="Obtener el estado de un pago",
)
async def get_payment(
    payment_id: str,
    service: PaymentService = Depends(get_payment_service),
):
    """Consulta el estado normalizado de un pago en la pasarela."""
    try:
        record = await service.get_payment_status(payment_id)
    except PaymentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Payment not found: {payment_id}",
        )
    except GatewayError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )

    return APIResponse(
        success=True,
        data=record,
    )
