"""
Servicios de negocio del microservicio de pagos.
"""

from app.services.fulfillment import FulfillmentNotifier
from app.services.order_translator import build_preference
from app.services.payment_service import PaymentService
from app.services.webhook_service import WebhookService

__all__ = [
    "FulfillmentNotifier",
    "PaymentService",
    "WebhookService",
    "build_preference",
]
