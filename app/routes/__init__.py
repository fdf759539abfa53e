"""
Rutas/Endpoints del microservicio de pagos.
"""

from app.routes.payments import router as payments_router
from app.routes.webhooks import router as webhooks_router

__all__ = [
    "payments_router",
    "webhooks_router",
]
