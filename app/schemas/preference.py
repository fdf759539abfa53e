"""
Schemas de la preferencia de pago enviada a Mercado Pago.
"""

from pydantic import BaseModel, Field

from app.schemas.common import BaseSchema


# Modo de envío fijo: el costo se informa pero el envío no lo gestiona Mercado Pago
SHIPMENT_MODE_NOT_SPECIFIED = "not_specified"


class PreferenceItem(BaseModel):
    id: str = ""
    title: str
    description: str
    picture_url: str = ""
    category_id: str
    quantity: int
    unit_price: float
    currency_id: str | None = None


class PayerPhone(BaseModel):
    area_code: str = ""
    number: str = ""


class PayerAddress(BaseModel):
    street_name: str = ""
    street_number: str = ""
    zip_code: str = ""


class Payer(BaseModel):
    name: str
    surname: str
    email: str
    phone: PayerPhone = Field(default_factory=PayerPhone)
    address: PayerAddress = Field(default_factory=PayerAddress)


class BackUrls(BaseModel):
    success: str
    failure: str
    pending: str


class Shipments(BaseModel):
    cost: float = 0
    mode: str = SHIPMENT_MODE_NOT_SPECIFIED


class PreferencePayload(BaseModel):
    """
    Proyección de una orden con la forma que espera la pasarela.

    Se construye por cada llamada de creación y se descarta al terminar.
    ``external_reference`` siempre es el id de la orden como string.
    """

    items: list[PreferenceItem]
    payer: Payer
    back_urls: BackUrls
    auto_return: str = "approved"
    notification_url: str
    external_reference: str
    statement_descriptor: str | None = None
    shipments: Shipments = Field(default_factory=Shipments)

    def to_gateway(self) -> dict:
        """Cuerpo listo para el SDK (sin claves nulas)."""
        return self.model_dump(exclude_none=True)


class PreferenceResponse(BaseSchema):
    """Respuesta al crear una preferencia (para el frontend)."""

    preference_id: str
    redirect_url: str
    sandbox_url: str | None = None
    external_reference: str
    provider: str
