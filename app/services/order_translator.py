"""
Traductor de órdenes a preferencias de Mercado Pago.

Cada campo opcional de la orden tiene su valor por defecto explícito; la
construcción es pura (solo se registra el resultado en debug).
"""

import math
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.schemas.order import Buyer, Order, OrderItem, ShippingAddress
from app.schemas.preference import (
    SHIPMENT_MODE_NOT_SPECIFIED,
    BackUrls,
    Payer,
    PayerAddress,
    PayerPhone,
    PreferenceItem,
    PreferencePayload,
    Shipments,
)
from app.utils.exceptions import InvalidOrderError


logger = structlog.get_logger(__name__)

DESCRIPTION_MAX_LENGTH = 100

DEFAULT_TITLE = "Producto"
DEFAULT_DESCRIPTION = "Sin descripción"
DEFAULT_CATEGORY_ID = "general"
DEFAULT_QUANTITY = 1
DEFAULT_PAYER_NAME = "Usuario"
DEFAULT_PAYER_SURNAME = "Apellido"

SUCCESS_PATH = "/payment/success"
FAILURE_PATH = "/payment/failure"
PENDING_PATH = "/payment/pending"


def coerce_number(value: Any, default: float = 0) -> float:
    """Convierte a número; lo no numérico (o no finito) queda en ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_quantity(value: Any) -> int:
    number = coerce_number(value, default=DEFAULT_QUANTITY)
    return int(number)


def split_display_name(display_name: str | None) -> tuple[str, str]:
    """Separa "Nombre Apellido1 Apellido2" en (nombre, apellidos)."""
    tokens = (display_name or "").split()
    name = tokens[0] if tokens else DEFAULT_PAYER_NAME
    surname = " ".join(tokens[1:]) or DEFAULT_PAYER_SURNAME
    return name, surname


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def build_item(item: OrderItem, settings: Settings) -> PreferenceItem:
    product = item.product

    title = DEFAULT_TITLE
    description = DEFAULT_DESCRIPTION
    picture_url = ""
    category_id = DEFAULT_CATEGORY_ID
    item_id = ""

    if product is not None:
        if product.name:
            title = product.name
        if product.description:
            description = product.description[:DESCRIPTION_MAX_LENGTH]
        if product.images:
            picture_url = f"{settings.BACKEND_URL}{settings.UPLOADS_PATH}/{product.images[0]}"
        if product.category is not None and product.category.id is not None:
            category_id = str(product.category.id)
        item_id = _text(product.id)

    return PreferenceItem(
        id=item_id,
        title=title,
        description=description,
        picture_url=picture_url,
        category_id=category_id,
        quantity=coerce_quantity(item.quantity),
        unit_price=coerce_number(item.price),
        currency_id=settings.CURRENCY_ID or None,
    )


def build_payer(
    buyer: Buyer | None,
    address: ShippingAddress | None,
    settings: Settings,
) -> Payer:
    buyer = buyer or Buyer()
    address = address or ShippingAddress()

    name, surname = split_display_name(buyer.name)

    return Payer(
        name=name,
        surname=surname,
        email=buyer.email or settings.PAYER_EMAIL_FALLBACK,
        phone=PayerPhone(area_code="", number=_text(buyer.phone)),
        address=PayerAddress(
            street_name=_text(address.street),
            street_number=_text(address.number),
            zip_code=_text(address.postal_code),
        ),
    )


def build_back_urls(settings: Settings) -> BackUrls:
    return BackUrls(
        success=f"{settings.FRONTEND_URL}{SUCCESS_PATH}",
        failure=f"{settings.FRONTEND_URL}{FAILURE_PATH}",
        pending=f"{settings.FRONTEND_URL}{PENDING_PATH}",
    )


def load_order(order: Order | Mapping[str, Any] | None) -> Order:
    if order is None:
        raise InvalidOrderError("order is required")

    if isinstance(order, Order):
        return order

    try:
        return Order.model_validate(order)
    except ValidationError as e:
        raise InvalidOrderError(str(e)) from e


def build_preference(
    order: Order | Mapping[str, Any] | None,
    settings: Settings | None = None,
) -> PreferencePayload:
    """
    Construye la preferencia de pago para una orden.

    Args:
        order: Orden (modelo o dict con las claves de la tienda)
        settings: Configuración (usa la global si no se proporciona)

    Returns:
        PreferencePayload listo para la pasarela

    Raises:
        InvalidOrderError: Si la orden falta, no tiene id o no tiene items
    """
    settings = settings or get_settings()
    order = load_order(order)

    if order.id is None or str(order.id).strip() == "":
        raise InvalidOrderError("order id is required")

    if not order.items:
        raise InvalidOrderError(f"order {order.id} has no items")

    payload = PreferencePayload(
        items=[build_item(item, settings) for item in order.items],
        payer=build_payer(order.user, order.shipping_address, settings),
        back_urls=build_back_urls(settings),
        notification_url=f"{settings.BACKEND_URL}{settings.WEBHOOK_PATH}",
        external_reference=str(order.id),
        statement_descriptor=settings.STATEMENT_DESCRIPTOR or None,
        shipments=Shipments(
            cost=coerce_number(order.shipping_price),
            mode=SHIPMENT_MODE_NOT_SPECIFIED,
        ),
    )

    logger.debug(
        "Preference payload built",
        external_reference=payload.external_reference,
        items=len(payload.items),
        payload=payload.model_dump(),
    )

    return payload
