"""
Schemas para el estado de los pagos consultados en la pasarela.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field

from app.schemas.common import BaseSchema


class PaymentOutcome(str, Enum):
    """Agrupación de los estados de Mercado Pago para el resto del sistema."""

    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"
    UNKNOWN = "unknown"


# Estados de Mercado Pago -> resultado interno
OUTCOME_MAP = {
    "approved": PaymentOutcome.PAID,
    "pending": PaymentOutcome.PENDING,
    "in_process": PaymentOutcome.PENDING,
    "authorized": PaymentOutcome.PENDING,
    "in_mediation": PaymentOutcome.PENDING,
    "rejected": PaymentOutcome.FAILED,
    "cancelled": PaymentOutcome.FAILED,
    "refunded": PaymentOutcome.FAILED,
    "charged_back": PaymentOutcome.FAILED,
}


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


class PaymentStatusRecord(BaseSchema):
    """
    Estado normalizado de un pago, unido a la orden por ``order_id``.

    Se produce una vez por notificación y se entrega al servicio de
    fulfillment; este servicio no lo persiste. Solo ``approved`` dispara el
    fulfillment.
    """

    payment_id: str
    status: str | None = None
    status_detail: str | None = None
    payment_method: str | None = None
    payment_type: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    paid_at: datetime | None = None
    order_id: str | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"

    @property
    def outcome(self) -> PaymentOutcome:
        return OUTCOME_MAP.get(self.status or "", PaymentOutcome.UNKNOWN)

    @classmethod
    def from_gateway(cls, raw: dict[str, Any]) -> "PaymentStatusRecord":
        """Normaliza la respuesta cruda de ``GET /v1/payments/{id}``."""
        return cls(
            payment_id=str(raw.get("id")),
            status=raw.get("status"),
            status_detail=raw.get("status_detail"),
            payment_method=raw.get("payment_method_id"),
            payment_type=raw.get("payment_type_id"),
            amount=raw.get("transaction_amount"),
            currency=raw.get("currency_id"),
            # Sin fecha de aprobación se usa la de creación
            paid_at=raw.get("date_approved") or raw.get("date_created"),
            order_id=_as_str(raw.get("external_reference")),
        )


class NotificationResult(BaseSchema):
    """Resultado de procesar una notificación de la pasarela."""

    processed: bool
    record: PaymentStatusRecord | None = None
    event_type: str | None = Field(None, description="Tipo de evento recibido")
