"""
Adapters para pasarelas de pago.
Implementación del patrón Adapter para abstraer diferentes pasarelas.
"""

from app.adapters.base import PaymentGateway, PreferenceResult
from app.adapters.mercadopago_adapter import MercadoPagoAdapter
from app.adapters.mock_adapter import MockAdapter
from app.adapters.factory import get_gateway_by_name, get_payment_gateway

__all__ = [
    "PaymentGateway",
    "PreferenceResult",
    "MercadoPagoAdapter",
    "MockAdapter",
    "get_gateway_by_name",
    "get_payment_gateway",
]
