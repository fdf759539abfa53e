"""
Servicio para procesar las notificaciones de Mercado Pago.
Consulta el estado real del pago y lo normaliza para el resto del sistema.
"""

from typing import Any, Mapping

import structlog

from app.adapters import PaymentGateway, get_payment_gateway
from app.schemas.payment import NotificationResult, PaymentStatusRecord
from app.schemas.webhook import WebhookNotification
from app.utils.exceptions import InvalidNotificationError


logger = structlog.get_logger(__name__)

PAYMENT_EVENT_TYPE = "payment"


class WebhookService:
    """
    Reconciliador de webhooks.

    - Eventos ``payment``: consulta el pago en la pasarela y retorna el
      registro normalizado.
    - Cualquier otro tipo: no-op, sin llamar a la pasarela.

    Los errores de la pasarela se propagan; los reintentos los hace la
    pasarela al recibir una respuesta no 2xx.
    """

    def __init__(self, gateway: PaymentGateway | None = None):
        self._gateway = gateway or get_payment_gateway()

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway

    async def handle_notification(
        self,
        event: WebhookNotification | Mapping[str, Any],
    ) -> NotificationResult:
        """
        Procesa una notificación.

        Args:
            event: Notificación ya parseada o el body JSON tal cual

        Returns:
            NotificationResult con ``processed=True`` y el registro del pago,
            o ``processed=False`` para eventos ignorados

        Raises:
            InvalidNotificationError: Notificación mal formada o evento de pago
                sin ``data.id``
            GatewayError: Si la consulta del pago falla
        """
        if not isinstance(event, WebhookNotification):
            event = WebhookNotification.from_request(event)

        event_type = event.event_type

        if event_type != PAYMENT_EVENT_TYPE:
            logger.info("Ignoring notification", event_type=event_type, action=event.action)
            return NotificationResult(processed=False, event_type=event_type)

        if not event.data_id:
            raise InvalidNotificationError("payment notification without data.id")

        raw = await self._gateway.get_payment_info(event.data_id)
        record = PaymentStatusRecord.from_gateway(raw)

        logger.info(
            "Payment notification processed",
            payment_id=record.payment_id,
            order_id=record.order_id,
            status=record.status,
            status_detail=record.status_detail,
        )

        return NotificationResult(processed=True, record=record, event_type=event_type)
