"""
Utilidades del microservicio de pagos.
"""

from app.utils.hmac_utils import (
    generate_signature,
    verify_signature,
    create_webhook_signature_header,
    verify_webhook_signature_header,
    verify_mercadopago_signature,
)

__all__ = [
    "generate_signature",
    "verify_signature",
    "create_webhook_signature_header",
    "verify_webhook_signature_header",
    "verify_mercadopago_signature",
]
