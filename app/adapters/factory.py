"""
Factory para obtener la pasarela de pago correcta.
Implementa el patrón Factory para instanciar adapters.
"""

from functools import lru_cache

import structlog

from app.adapters.base import PaymentGateway
from app.adapters.mercadopago_adapter import MercadoPagoAdapter
from app.adapters.mock_adapter import MockAdapter
from app.config import Settings, get_settings


logger = structlog.get_logger(__name__)


def _build_mercadopago(settings: Settings) -> PaymentGateway:
    return MercadoPagoAdapter(settings=settings)


def _build_mock(settings: Settings) -> PaymentGateway:
    return MockAdapter(checkout_base_url=settings.FRONTEND_URL)


# Registro de proveedores disponibles
PROVIDERS = {
    "mercadopago": _build_mercadopago,
    "mock": _build_mock,
}


def get_gateway_by_name(name: str, settings: Settings | None = None) -> PaymentGateway:
    """
    Obtiene una pasarela específica por nombre.

    Args:
        name: Nombre del proveedor ("mercadopago", "mock")
        settings: Configuración a inyectar (usa la global si no se proporciona)

    Raises:
        ValueError: Si el proveedor no está soportado
    """
    name = name.lower()

    if name not in PROVIDERS:
        raise ValueError(
            f"Payment provider '{name}' not supported. "
            f"Available: {list(PROVIDERS.keys())}"
        )

    return PROVIDERS[name](settings or get_settings())


@lru_cache()
def get_payment_gateway() -> PaymentGateway:
    """
    Factory que retorna la pasarela configurada en PAYMENT_PROVIDER.
    La instancia es cacheada y compartida (solo lectura) entre requests.
    """
    settings = get_settings()
    gateway = get_gateway_by_name(settings.PAYMENT_PROVIDER, settings)

    logger.info("Payment gateway initialized", provider=gateway.provider_name)

    return gateway
