"""
Schemas de la orden recibida desde la tienda.

La orden pertenece al servicio de órdenes; aquí solo se lee. Se aceptan tanto
claves snake_case como las camelCase / ``_id`` que envía el backend de la
tienda. Los campos numéricos quedan sin tipar a propósito: la conversión (y
sus valores por defecto) ocurre en el traductor de órdenes.
"""

from typing import Any, Mapping

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from app.schemas.common import BaseSchema


class OrderSchema(BaseSchema):
    """Base de los schemas de orden: tolera campos extra de la tienda."""

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class Category(OrderSchema):
    id: str | int | None = Field(None, validation_alias=AliasChoices("id", "_id"))
    name: str | None = None


class Product(OrderSchema):
    id: str | int | None = Field(None, validation_alias=AliasChoices("id", "_id"))
    name: str | None = None
    description: str | None = None
    images: list[str] | None = Field(default_factory=list)
    category: Category | None = None


class OrderItem(OrderSchema):
    product: Product | None = None
    quantity: Any = None
    price: Any = None

    @field_validator("product", mode="before")
    @classmethod
    def unpopulated_product(cls, v):
        """Una referencia sin poblar (solo el id) cuenta como producto ausente."""
        if v is None or isinstance(v, (Mapping, Product)):
            return v
        return None


class Buyer(OrderSchema):
    name: str | None = None
    email: str | None = None
    phone: str | int | None = None


class ShippingAddress(OrderSchema):
    street: str | None = None
    number: str | int | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | int | None = Field(
        None, validation_alias=AliasChoices("postal_code", "postalCode")
    )


class Order(OrderSchema):
    """Orden de compra (solo lectura para este servicio)."""

    id: str | int | None = Field(None, validation_alias=AliasChoices("id", "_id"))
    items: list[OrderItem] = Field(default_factory=list)
    user: Buyer | None = None
    shipping_address: ShippingAddress | None = Field(
        None, validation_alias=AliasChoices("shipping_address", "shippingAddress")
    )
    shipping_price: Any = Field(
        None, validation_alias=AliasChoices("shipping_price", "shippingPrice")
    )
    shipment_method: str | None = Field(
        None, validation_alias=AliasChoices("shipment_method", "shipmentMethod")
    )
    is_paid: bool = Field(False, validation_alias=AliasChoices("is_paid", "isPaid"))
