"""
Configuración del microservicio de pagos.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from typing import Literal

import structlog
from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings


logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """Configuración principal del servicio (inmutable tras la carga)."""

    # Aplicación
    APP_NAME: str = "AutoRepuestos Payment Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Proveedor de pago activo: "mercadopago" o "mock"
    PAYMENT_PROVIDER: Literal["mercadopago", "mock"] = "mercadopago"

    # Mercado Pago
    MERCADOPAGO_ACCESS_TOKEN: str = ""
    MERCADOPAGO_WEBHOOK_SECRET: str = ""
    MERCADOPAGO_SANDBOX: bool = False

    # URLs base (sin "/" final)
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_URL: str = "http://localhost:5000"
    UPLOADS_PATH: str = "/uploads"
    WEBHOOK_PATH: str = "/api/webhooks/mercadopago"

    # Datos fijos de la preferencia
    STATEMENT_DESCRIPTOR: str = "AutoRepuestos"
    CURRENCY_ID: str = "CLP"
    PAYER_EMAIL_FALLBACK: str = "test_user@testuser.com"

    # Colaborador de fulfillment (recibe los pagos normalizados)
    FULFILLMENT_WEBHOOK_URL: str = ""
    FULFILLMENT_WEBHOOK_SECRET: str = ""
    FULFILLMENT_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        frozen = True

    @field_validator("FRONTEND_URL", "BACKEND_URL", "UPLOADS_PATH", "WEBHOOK_PATH")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def require_gateway_credentials(self) -> "Settings":
        """Sin access token no se puede hablar con Mercado Pago: error de arranque."""
        if self.PAYMENT_PROVIDER == "mercadopago" and not self.MERCADOPAGO_ACCESS_TOKEN:
            raise ValueError(
                "MERCADOPAGO_ACCESS_TOKEN is required when PAYMENT_PROVIDER=mercadopago"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """Retorna instancia cacheada de settings. Falla si la configuración es inválida."""
    try:
        return Settings()
    except ValidationError as e:
        logger.error(
            "Invalid payment service configuration",
            errors=[err["msg"] for err in e.errors()],
        )
        raise


settings = get_settings()
