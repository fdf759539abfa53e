"""
Endpoints para webhooks entrantes.
"""

import json

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from app.adapters import PaymentGateway, get_payment_gateway
from app.config import Settings, get_settings
from app.schemas import WebhookNotification
from app.services import FulfillmentNotifier, WebhookService
from app.utils.exceptions import (
    FulfillmentError,
    GatewayError,
    InvalidNotificationError,
    PaymentNotFoundError,
)
from app.utils.hmac_utils import verify_mercadopago_signature


logger = structlog.get_logger(__name__)

router = APIRouter()


async def get_webhook_service(
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> WebhookService:
    """Dependency para obtener WebhookService."""
    return WebhookService(gateway=gateway)


async def get_fulfillment_notifier(
    settings: Settings = Depends(get_settings),
) -> FulfillmentNotifier:
    """Dependency para obtener FulfillmentNotifier."""
    return FulfillmentNotifier(settings=settings)


async def _read_notification(request: Request) -> WebhookNotification:
    payload = await request.body()

    body = None
    if payload:
        try:
            body = json.loads(payload)
        except json.JSONDecodeError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid JSON payload",
            )
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid notification payload",
            )

    try:
        return WebhookNotification.from_request(body, request.query_params)
    except InvalidNotificationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.post(
    "/mercadopago",
    status_code=status.HTTP_200_OK,
    summary="Webhook de Mercado Pago",
    description="""
    Endpoint para recibir notificaciones de Mercado Pago.

    - Valida el header `x-signature` si hay `MERCADOPAGO_WEBHOOK_SECRET`
    - Para eventos `payment` consulta el estado real del pago
    - Entrega el pago normalizado al servicio de fulfillment
    - Cualquier respuesta no 2xx hace que Mercado Pago reintente
    """,
)
async def mercadopago_webhook(
    request: Request,
    service: WebhookService = Depends(get_webhook_service),
    notifier: FulfillmentNotifier = Depends(get_fulfillment_notifier),
    settings: Settings = Depends(get_settings),
):
    """Procesa una notificación de Mercado Pago."""
    event = await _read_notification(request)

    if settings.MERCADOPAGO_WEBHOOK_SECRET:
        is_valid, error = verify_mercadopago_signature(
            request.headers.get("x-signature"),
            request.headers.get("x-request-id"),
            event.data_id,
            settings.MERCADOPAGO_WEBHOOK_SECRET,
        )
        if not is_valid:
            logger.warning("Mercado Pago webhook verification failed", error=error)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Webhook verification failed: {error}",
            )

    logger.info(
        "Mercado Pago webhook received",
        event_type=event.event_type,
        action=event.action,
        data_id=event.data_id,
    )

    try:
        result = await service.handle_notification(event)
        if result.processed and result.record is not None:
            await notifier.dispatch(result.record)
    except InvalidNotificationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except PaymentNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except (GatewayError, FulfillmentError) as e:
        logger.error("Mercado Pago webhook processing error", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )

    return {
        "received": True,
        **result.model_dump(mode="json"),
    }
