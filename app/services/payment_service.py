"""
Servicio principal de pagos.
Orquesta la creación de preferencias y la consulta de pagos.
"""

from typing import Any, Mapping

import structlog

from app.adapters import PaymentGateway, get_payment_gateway
from app.config import Settings, get_settings
from app.schemas.order import Order
from app.schemas.payment import PaymentStatusRecord
from app.schemas.preference import PreferenceResponse
from app.services.order_translator import build_preference, load_order
from app.utils.exceptions import OrderAlreadyPaidError


logger = structlog.get_logger(__name__)


class PaymentService:
    """
    Servicio para el checkout.

    Coordina el traductor de órdenes con la pasarela de pago configurada.
    """

    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        settings: Settings | None = None,
    ):
        self._settings = settings or get_settings()
        self._gateway = gateway or get_payment_gateway()

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway

    async def create_checkout(self, order: Order | Mapping[str, Any] | None) -> PreferenceResponse:
        """
        Crea la preferencia de pago de una orden.

        1. Rechaza órdenes ya pagadas
        2. Traduce la orden a preferencia
        3. Crea la preferencia en la pasarela

        Raises:
            InvalidOrderError: Orden incompleta
            OrderAlreadyPaidError: La orden ya fue pagada
            GatewayError: La pasarela rechazó o no respondió
        """
        order = load_order(order)

        if order.is_paid:
            raise OrderAlreadyPaidError(str(order.id))

        payload = build_preference(order, self._settings)

        logger.info(
            "Creating payment preference",
            order_id=payload.external_reference,
            items=len(payload.items),
            provider=self._gateway.provider_name,
        )

        result = await self._gateway.create_preference(payload)

        return PreferenceResponse(
            preference_id=result.preference_id,
            redirect_url=result.redirect_url,
            sandbox_url=result.sandbox_url,
            external_reference=payload.external_reference,
            provider=result.provider,
        )

    async def get_payment_status(self, payment_id: str) -> PaymentStatusRecord:
        """
        Consulta el estado normalizado de un pago.

        Raises:
            PaymentNotFoundError: El pago no existe
            GatewayError: Error de la pasarela
        """
        raw = await self._gateway.get_payment_info(payment_id)
        return PaymentStatusRecord.from_gateway(raw)
