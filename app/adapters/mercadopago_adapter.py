"""
Adapter para Mercado Pago.
Implementa PaymentGateway usando el SDK oficial de Mercado Pago.
"""

from typing import Any

import mercadopago
import structlog
from fastapi.concurrency import run_in_threadpool

from app.adapters.base import PaymentGateway, PreferenceResult
from app.config import Settings, get_settings
from app.schemas.preference import PreferencePayload
from app.utils.exceptions import GatewayError, PaymentNotFoundError


logger = structlog.get_logger(__name__)


class MercadoPagoAdapter(PaymentGateway):
    """
    Adapter para Mercado Pago Checkout Pro.

    Crea preferencias y consulta pagos. El SDK es síncrono, así que cada
    llamada corre en el threadpool y el request solo se suspende en la I/O.
    """

    def __init__(self, settings: Settings | None = None, sdk: Any | None = None):
        """
        Inicializa el adapter de Mercado Pago.

        Args:
            settings: Configuración del servicio (usa la global si no se proporciona)
            sdk: Cliente del SDK ya construido (útil para tests)
        """
        self._settings = settings or get_settings()
        self._sdk = sdk or mercadopago.SDK(self._settings.MERCADOPAGO_ACCESS_TOKEN)

        logger.info("MercadoPagoAdapter initialized", sandbox=self._settings.MERCADOPAGO_SANDBOX)

    @property
    def provider_name(self) -> str:
        return "mercadopago"

    async def create_preference(self, payload: PreferencePayload) -> PreferenceResult:
        """Crea una preferencia de Checkout Pro."""
        try:
            result = await run_in_threadpool(
                self._sdk.preference().create, payload.to_gateway()
            )
        except Exception as e:
            logger.error(
                "Mercado Pago preference creation failed",
                error=str(e),
                external_reference=payload.external_reference,
            )
            raise GatewayError(self.provider_name, f"Preference creation failed: {e}") from e

        status_code = result.get("status")
        response = result.get("response") or {}

        if status_code not in (200, 201) or not response.get("id"):
            message = response.get("message") or f"unexpected status {status_code}"
            logger.error(
                "Mercado Pago rejected preference",
                status_code=status_code,
                error=message,
                external_reference=payload.external_reference,
            )
            raise GatewayError(
                self.provider_name,
                f"Preference creation failed: {message}",
                status_code=status_code,
            )

        logger.info(
            "Mercado Pago preference created",
            preference_id=response["id"],
            external_reference=payload.external_reference,
        )

        sandbox_url = response.get("sandbox_init_point")
        redirect_url = response.get("init_point") or ""
        if self._settings.MERCADOPAGO_SANDBOX and sandbox_url:
            redirect_url = sandbox_url

        return PreferenceResult(
            provider=self.provider_name,
            preference_id=str(response["id"]),
            redirect_url=redirect_url,
            sandbox_url=sandbox_url,
            raw_response=response,
        )

    async def get_payment_info(self, payment_id: str) -> dict[str, Any]:
        """Obtiene la información de un pago."""
        try:
            result = await run_in_threadpool(self._sdk.payment().get, payment_id)
        except Exception as e:
            logger.error("Failed to retrieve Mercado Pago payment", payment_id=payment_id, error=str(e))
            raise GatewayError(self.provider_name, f"Payment lookup failed: {e}") from e

        status_code = result.get("status")
        response = result.get("response") or {}

        if status_code == 404:
            raise PaymentNotFoundError(self.provider_name, payment_id)

        if status_code != 200:
            message = response.get("message") or f"unexpected status {status_code}"
            logger.error(
                "Mercado Pago payment lookup failed",
                payment_id=payment_id,
                status_code=status_code,
                error=message,
            )
            raise GatewayError(
                self.provider_name,
                f"Payment lookup failed: {message}",
                status_code=status_code,
            )

        return response
