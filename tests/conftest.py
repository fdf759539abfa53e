"""
Configuración de tests y fixtures compartidos.
"""

import os

# Configuración mínima antes de importar la app (la carga de settings es al importar)
os.environ.setdefault("PAYMENT_PROVIDER", "mock")
os.environ.setdefault("MERCADOPAGO_ACCESS_TOKEN", "TEST-0000000000000000-000000-test")
os.environ.setdefault("FRONTEND_URL", "http://shop.test")
os.environ.setdefault("BACKEND_URL", "http://api.shop.test")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.adapters import MockAdapter, get_payment_gateway
from app.config import Settings, get_settings
from app.main import app
from app.routes.webhooks import get_fulfillment_notifier
from app.services import FulfillmentNotifier


@pytest.fixture
def settings() -> Settings:
    """Settings explícitos, sin depender del entorno ni de .env."""
    return Settings(
        _env_file=None,
        PAYMENT_PROVIDER="mock",
        MERCADOPAGO_ACCESS_TOKEN="TEST-token",
        FRONTEND_URL="http://shop.test/",
        BACKEND_URL="http://api.shop.test",
    )


@pytest.fixture
def gateway() -> MockAdapter:
    """Pasarela mock aislada por test."""
    return MockAdapter(checkout_base_url="http://shop.test")


@pytest_asyncio.fixture(scope="function")
async def client(gateway: MockAdapter) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP para tests de API."""
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_fulfillment_notifier] = lambda: FulfillmentNotifier(
        settings=get_settings()
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_order():
    """Orden de ejemplo con las claves que envía la tienda."""
    return {
        "_id": "O1",
        "items": [
            {
                "product": {
                    "_id": "P1",
                    "name": "Filter",
                    "description": "Filtro de aceite",
                    "images": ["f.jpg"],
                    "category": {"_id": "C1", "name": "Filtros"},
                },
                "quantity": 2,
                "price": "15.5",
            }
        ],
        "user": {"name": "Jane Doe", "email": "j@x.com", "phone": "+56 9 1234 5678"},
        "shippingAddress": {"street": "Av. Siempre Viva", "number": 742, "postalCode": "8320000"},
        "shippingPrice": "3990",
        "isPaid": False,
    }


@pytest.fixture
def mp_payment():
    """Respuesta cruda de GET /v1/payments/{id} de Mercado Pago."""
    return {
        "id": 123456789,
        "status": "approved",
        "status_detail": "accredited",
        "payment_method_id": "visa",
        "payment_type_id": "credit_card",
        "transaction_amount": 34990.0,
        "currency_id": "CLP",
        "date_created": "2024-05-10T12:00:00.000-04:00",
        "date_approved": "2024-05-10T12:01:30.000-04:00",
        "external_reference": "O1",
    }
