"""
Entrega de los pagos normalizados al servicio de fulfillment de órdenes.
"""

import json
import time

import httpx
import structlog

from app.config import Settings, get_settings
from app.schemas.payment import PaymentStatusRecord
from app.utils.exceptions import FulfillmentError
from app.utils.hmac_utils import create_webhook_signature_header


logger = structlog.get_logger(__name__)


class FulfillmentNotifier:
    """
    Envía cada PaymentStatusRecord al servicio de órdenes, que es quien lo
    persiste y decide si la orden pasa a "processing".

    Si la entrega falla se lanza FulfillmentError: el webhook responde no 2xx
    y Mercado Pago vuelve a enviar la notificación.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._settings.FULFILLMENT_WEBHOOK_URL)

    async def dispatch(self, record: PaymentStatusRecord) -> bool:
        """
        Entrega el registro.

        Returns:
            True si se entregó, False si no hay servicio configurado
        """
        if not self.enabled:
            logger.info(
                "Fulfillment webhook not configured, skipping hand-off",
                payment_id=record.payment_id,
                order_id=record.order_id,
            )
            return False

        body = {
            "event": "payment.updated",
            "approved": record.is_approved,
            "outcome": record.outcome.value,
            "data": record.model_dump(mode="json"),
        }
        payload_bytes = json.dumps(body, default=str).encode("utf-8")

        headers = {
            "Content-Type": "application/json",
            "X-Event-Type": "payment.updated",
            "User-Agent": "AutoRepuestos-Payments/1.0",
        }
        if self._settings.FULFILLMENT_WEBHOOK_SECRET:
            headers["X-Webhook-Signature"] = create_webhook_signature_header(
                payload_bytes, self._settings.FULFILLMENT_WEBHOOK_SECRET
            )

        start_time = time.time()

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.FULFILLMENT_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._settings.FULFILLMENT_WEBHOOK_URL,
                    content=payload_bytes,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(
                "Fulfillment delivery error",
                payment_id=record.payment_id,
                error=str(e),
            )
            raise FulfillmentError(None, str(e)) from e

        duration_ms = int((time.time() - start_time) * 1000)

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Fulfillment delivery failed",
                payment_id=record.payment_id,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            raise FulfillmentError(
                response.status_code,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )

        logger.info(
            "Payment record delivered to fulfillment",
            payment_id=record.payment_id,
            order_id=record.order_id,
            status=record.status,
            duration_ms=duration_ms,
        )
        return True
