"""
Mock Adapter para desarrollo y testing.
Simula el comportamiento de Mercado Pago en memoria.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import structlog

from app.adapters.base import PaymentGateway, PreferenceResult
from app.schemas.preference import PreferencePayload
from app.utils.exceptions import GatewayError, PaymentNotFoundError


logger = structlog.get_logger(__name__)


class MockAdapter(PaymentGateway):
    """
    Adapter mock para desarrollo y testing.

    Guarda las preferencias creadas y permite simular pagos sobre ellas con
    la misma forma de respuesta que ``GET /v1/payments/{id}``.
    Útil para desarrollo local sin credenciales reales.
    """

    def __init__(self, checkout_base_url: str = "http://localhost:3000"):
        self._checkout_base_url = checkout_base_url.rstrip("/")
        self._preferences: dict[str, dict[str, Any]] = {}
        self._payments: dict[str, dict[str, Any]] = {}
        self.lookups: list[str] = []
        logger.info("MockAdapter initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    def _generate_mock_id(self, prefix: str = "mock") -> str:
        return f"{prefix}_{uuid4().hex[:24]}"

    async def create_preference(self, payload: PreferencePayload) -> PreferenceResult:
        """Crea una preferencia mock."""
        preference_id = self._generate_mock_id("pref")
        body = payload.to_gateway()
        self._preferences[preference_id] = body

        checkout_url = f"{self._checkout_base_url}/mock-checkout/{preference_id}"

        logger.info(
            "Mock preference created",
            preference_id=preference_id,
            external_reference=payload.external_reference,
        )

        return PreferenceResult(
            provider=self.provider_name,
            preference_id=preference_id,
            redirect_url=checkout_url,
            sandbox_url=checkout_url,
            raw_response={"id": preference_id, "init_point": checkout_url, **body},
        )

    async def get_payment_info(self, payment_id: str) -> dict[str, Any]:
        """Obtiene un pago mock."""
        self.lookups.append(payment_id)
        payment = self._payments.get(str(payment_id))

        if not payment:
            raise PaymentNotFoundError(self.provider_name, payment_id)

        return dict(payment)

    # ============================================
    # Métodos auxiliares para testing
    # ============================================

    def get_preference(self, preference_id: str) -> dict[str, Any]:
        """Retorna el cuerpo enviado al crear una preferencia."""
        return self._preferences[preference_id]

    def simulate_payment(
        self,
        preference_id: str,
        status: str = "approved",
        status_detail: str = "accredited",
        payment_method: str = "visa",
        payment_type: str = "credit_card",
    ) -> str:
        """
        Simula que el comprador pagó una preferencia.

        Returns:
            ID del pago simulado (el que llegaría en ``data.id``)
        """
        preference = self._preferences.get(preference_id)
        if preference is None:
            raise GatewayError(self.provider_name, f"Preference not found: {preference_id}")

        amount = sum(item["quantity"] * item["unit_price"] for item in preference["items"])
        amount += preference.get("shipments", {}).get("cost", 0)
        now = datetime.now(timezone.utc).isoformat()

        payment_id = str(len(self._payments) + 1000001)
        self._payments[payment_id] = {
            "id": int(payment_id),
            "status": status,
            "status_detail": status_detail,
            "payment_method_id": payment_method,
            "payment_type_id": payment_type,
            "transaction_amount": amount,
            "currency_id": preference["items"][0].get("currency_id"),
            "date_created": now,
            "date_approved": now if status == "approved" else None,
            "external_reference": preference["external_reference"],
        }

        logger.info(
            "Mock payment simulated",
            payment_id=payment_id,
            preference_id=preference_id,
            status=status,
        )
        return payment_id

    def add_payment(self, payment: dict[str, Any]) -> None:
        """Registra un pago crudo arbitrario (para testing)."""
        self._payments[str(payment["id"])] = payment

    def clear(self) -> None:
        """Limpia preferencias y pagos mock."""
        self._preferences.clear()
        self._payments.clear()
        self.lookups.clear()
        logger.info("Mock gateway cleared")
