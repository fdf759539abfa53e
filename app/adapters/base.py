"""
Interfaz base abstracta para pasarelas de pago.
Define el contrato que todos los adapters deben implementar.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from app.schemas.preference import PreferencePayload


@dataclass
class PreferenceResult:
    """
    Resultado normalizado de crear una preferencia.
    Todos los adapters deben retornar esta estructura.
    """

    provider: str
    preference_id: str
    redirect_url: str  # Checkout hospedado por la pasarela
    sandbox_url: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Interfaz abstracta para pasarelas de pago.

    Cada pasarela soportada (Mercado Pago, mock) implementa esta interfaz;
    los servicios solo dependen de ella, lo que permite sustituirla en tests.
    Las credenciales se inyectan al construir el adapter, nunca por llamada.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Nombre del proveedor (ej: 'mercadopago', 'mock')."""
        pass

    @abstractmethod
    async def create_preference(self, payload: PreferencePayload) -> PreferenceResult:
        """
        Crea una preferencia de pago en la pasarela.

        Args:
            payload: Preferencia construida a partir de la orden

        Returns:
            PreferenceResult con el id y la URL de redirección

        Raises:
            GatewayError: Ante cualquier respuesta no exitosa o error de transporte
        """
        pass

    @abstractmethod
    async def get_payment_info(self, payment_id: str) -> dict[str, Any]:
        """
        Consulta un pago por id.

        Args:
            payment_id: ID del pago en la pasarela

        Returns:
            Registro crudo del pago tal como lo entrega la pasarela

        Raises:
            PaymentNotFoundError: Si el pago no existe
            GatewayError: Ante cualquier otro error
        """
        pass
