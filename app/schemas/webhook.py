"""
Schemas para las notificaciones (webhooks) de Mercado Pago.
"""

from typing import Any, Mapping

from pydantic import Field, ValidationError, field_validator

from app.schemas.common import BaseSchema
from app.utils.exceptions import InvalidNotificationError


class NotificationData(BaseSchema):
    id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v):
        """Mercado Pago envía el id a veces como número."""
        if v is None or v == "":
            return None
        return str(v)


class WebhookNotification(BaseSchema):
    """
    Notificación entrante de Mercado Pago.

    Cubre tanto el formato webhook (``type`` + ``data.id`` en el body) como
    el IPN antiguo (``topic`` + ``id`` en la query string).
    """

    id: str | int | None = None
    type: str | None = None
    topic: str | None = None
    action: str | None = None
    live_mode: bool | None = None
    data: NotificationData = Field(default_factory=NotificationData)

    @property
    def event_type(self) -> str | None:
        return self.type or self.topic

    @property
    def data_id(self) -> str | None:
        return self.data.id

    @classmethod
    def from_request(
        cls,
        body: Mapping[str, Any] | None,
        query: Mapping[str, Any] | None = None,
    ) -> "WebhookNotification":
        """
        Construye la notificación desde el body, completando con la query string.

        Raises:
            InvalidNotificationError: Si el payload no es una notificación válida
        """
        payload = dict(body or {})
        query = query or {}

        if not payload.get("type") and not payload.get("topic"):
            event_type = query.get("type") or query.get("topic")
            if event_type:
                payload["type"] = event_type

        data = payload.get("data")
        if not isinstance(data, Mapping) or not data.get("id"):
            data_id = query.get("data.id") or query.get("id")
            if data_id:
                payload["data"] = {"id": data_id}
            elif not isinstance(data, Mapping):
                payload.pop("data", None)

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidNotificationError(f"{e.error_count()} validation errors") from e
