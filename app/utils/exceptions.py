"""
Excepciones personalizadas del microservicio de pagos.
"""


class PaymentServiceError(Exception):
    """Error base del servicio de pagos."""

    def __init__(self, message: str, code: str = "PAYMENT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidOrderError(PaymentServiceError):
    """La orden recibida está incompleta o mal formada (error del llamador)."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Invalid order: {message}",
            code="INVALID_ORDER",
        )


class OrderAlreadyPaidError(PaymentServiceError):
    """La orden ya fue pagada; no se crea una nueva preferencia."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order already paid: {order_id}",
            code="ORDER_ALREADY_PAID",
        )
        self.order_id = order_id


class GatewayError(PaymentServiceError):
    """Error del proveedor de pago externo (transporte o respuesta no exitosa)."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        code: str = "GATEWAY_ERROR",
    ):
        super().__init__(
            message=f"Payment gateway error ({provider}): {message}",
            code=code,
        )
        self.provider = provider
        self.status_code = status_code


class PaymentNotFoundError(GatewayError):
    """El pago consultado no existe en la pasarela."""

    def __init__(self, provider: str, payment_id: str):
        super().__init__(
            provider=provider,
            message=f"Payment not found: {payment_id}",
            status_code=404,
            code="PAYMENT_NOT_FOUND",
        )
        self.payment_id = payment_id


class InvalidNotificationError(PaymentServiceError):
    """La notificación de webhook no trae los datos mínimos."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Invalid notification: {message}",
            code="INVALID_NOTIFICATION",
        )


class FulfillmentError(PaymentServiceError):
    """Error al entregar el resultado del pago al servicio de fulfillment."""

    def __init__(self, status_code: int | None, message: str):
        super().__init__(
            message=f"Failed to deliver payment record to fulfillment: {message}",
            code="FULFILLMENT_DELIVERY_FAILED",
        )
        self.status_code = status_code
