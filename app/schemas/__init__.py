"""
Schemas del microservicio de pagos.
Exporta todos los schemas para fácil acceso.
"""

# Common
from app.schemas.common import (
    APIResponse,
    BaseSchema,
)

# Order
from app.schemas.order import (
    Buyer,
    Category,
    Order,
    OrderItem,
    Product,
    ShippingAddress,
)

# Preference
from app.schemas.preference import (
    BackUrls,
    Payer,
    PreferenceItem,
    PreferencePayload,
    PreferenceResponse,
    Shipments,
)

# Payment
from app.schemas.payment import (
    NotificationResult,
    PaymentOutcome,
    PaymentStatusRecord,
)

# Webhook
from app.schemas.webhook import (
    NotificationData,
    WebhookNotification,
)

__all__ = [
    # Common
    "APIResponse",
    "BaseSchema",
    # Order
    "Buyer",
    "Category",
    "Order",
    "OrderItem",
    "Product",
    "ShippingAddress",
    # Preference
    "BackUrls",
    "Payer",
    "PreferenceItem",
    "PreferencePayload",
    "PreferenceResponse",
    "Shipments",
    # Payment
    "NotificationResult",
    "PaymentOutcome",
    "PaymentStatusRecord",
    # Webhook
    "NotificationData",
    "WebhookNotification",
]
