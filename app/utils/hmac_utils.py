"""
Utilidades para firmas HMAC-SHA256.

- Verificación del header ``x-signature`` de las notificaciones de Mercado Pago.
- Firma de los webhooks salientes hacia el servicio de fulfillment.
"""

import hashlib
import hmac
import time
from typing import Tuple

import structlog


logger = structlog.get_logger(__name__)

# Tolerancia de tiempo para verificar webhooks (5 minutos)
TIMESTAMP_TOLERANCE_SECONDS = 300

# Mercado Pago envía ``ts`` en milisegundos; por debajo de esto son segundos
MILLISECOND_TIMESTAMP_THRESHOLD = 10**11


def generate_signature(payload: bytes, secret: str) -> str:
    """
    Genera una firma HMAC-SHA256 para un payload.

    Args:
        payload: Datos a firmar (bytes)
        secret: Clave secreta

    Returns:
        Firma hexadecimal
    """
    return hmac.new(
        secret.encode("utf-8"),
        payload,
        hashlib.sha256,
    ).hexdigest()


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """Verifica una firma HMAC-SHA256 en tiempo constante."""
    expected = generate_signature(payload, secret)
    return hmac.compare_digest(expected, signature)


def parse_signature_header(signature_header: str) -> dict[str, str]:
    """Parsea un header con formato ``k1=v1,k2=v2`` (ej: ``ts=...,v1=...``)."""
    parts = {}
    for item in signature_header.split(","):
        if "=" in item:
            key, value = item.split("=", 1)
            parts[key.strip()] = value.strip()
    return parts


def _within_tolerance(timestamp: int, tolerance_seconds: int) -> bool:
    return abs(int(time.time()) - timestamp) <= tolerance_seconds


def create_webhook_signature_header(
    payload: bytes,
    secret: str,
    timestamp: int | None = None,
) -> str:
    """
    Crea el header de firma para un webhook saliente.

    Formato: "t=<timestamp>,v1=<signature>"
    La firma se calcula sobre: "<timestamp>.<payload>"
    """
    if timestamp is None:
        timestamp = int(time.time())

    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    signature = generate_signature(signed_payload, secret)

    return f"t={timestamp},v1={signature}"


def verify_webhook_signature_header(
    payload: bytes,
    signature_header: str,
    secret: str,
    tolerance_seconds: int = TIMESTAMP_TOLERANCE_SECONDS,
) -> Tuple[bool, str | None]:
    """
    Verifica un header "t=<timestamp>,v1=<signature>" generado por
    create_webhook_signature_header.

    Returns:
        Tupla de (es_válido, mensaje_error)
    """
    parts = parse_signature_header(signature_header)
    timestamp_str = parts.get("t")
    received_signature = parts.get("v1")

    if not timestamp_str or not received_signature:
        return False, "Invalid signature header format"

    try:
        timestamp = int(timestamp_str)
    except ValueError as e:
        return False, f"Failed to parse signature: {e}"

    if not _within_tolerance(timestamp, tolerance_seconds):
        return False, "Timestamp out of tolerance"

    signed_payload = f"{timestamp}.".encode("utf-8") + payload
    if not verify_signature(signed_payload, received_signature, secret):
        return False, "Invalid signature"

    return True, None


def build_mercadopago_manifest(data_id: str | None, request_id: str | None, ts: str) -> str:
    """
    Construye el manifest que Mercado Pago firma en el header ``x-signature``.

    Formato: ``id:<data.id>;request-id:<x-request-id>;ts:<ts>;``. Las partes
    ausentes se omiten y los ids alfanuméricos van en minúsculas.
    """
    manifest = ""
    if data_id:
        manifest += f"id:{data_id.lower() if data_id.isalnum() else data_id};"
    if request_id:
        manifest += f"request-id:{request_id};"
    manifest += f"ts:{ts};"
    return manifest


def verify_mercadopago_signature(
    signature_header: str | None,
    request_id: str | None,
    data_id: str | None,
    secret: str,
    tolerance_seconds: int = TIMESTAMP_TOLERANCE_SECONDS,
) -> Tuple[bool, str | None]:
    """
    Verifica el header ``x-signature`` de una notificación de Mercado Pago.

    Args:
        signature_header: Valor de ``x-signature`` ("ts=<ts>,v1=<hash>")
        request_id: Valor de ``x-request-id``
        data_id: ``data.id`` de la notificación
        secret: Clave secreta configurada en el panel de Mercado Pago
        tolerance_seconds: Antigüedad máxima aceptada del ``ts`` firmado

    Returns:
        Tupla de (es_válido, mensaje_error)
    """
    if not signature_header:
        return False, "Missing x-signature header"

    parts = parse_signature_header(signature_header)
    ts = parts.get("ts")
    received_signature = parts.get("v1")

    if not ts or not received_signature:
        logger.warning("Invalid x-signature header format", parts=list(parts))
        return False, "Invalid signature header format"

    try:
        timestamp = int(ts)
    except ValueError:
        return False, "Invalid signature header format"

    if timestamp > MILLISECOND_TIMESTAMP_THRESHOLD:
        timestamp //= 1000

    if not _within_tolerance(timestamp, tolerance_seconds):
        logger.warning("Mercado Pago signature timestamp out of tolerance", ts=ts)
        return False, "Timestamp out of tolerance"

    manifest = build_mercadopago_manifest(data_id, request_id, ts)

    if not verify_signature(manifest.encode("utf-8"), received_signature, secret):
        logger.warning("Mercado Pago signature mismatch", data_id=data_id, request_id=request_id)
        return False, "Invalid signature"

    return True, None
