"""
Tests para los adapters de pasarela.
"""

from dataclasses import asdict

import pytest

from app.adapters import MercadoPagoAdapter, MockAdapter, get_gateway_by_name
from app.config import Settings
from app.services.order_translator import build_preference
from app.utils.exceptions import GatewayError, PaymentNotFoundError


class FakeResource:
    """Imita los recursos del SDK de Mercado Pago (preference(), payment())."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def _respond(self, *args):
        self.calls.append(args)
        if self.error:
            raise self.error
        return self.result

    def create(self, data):
        return self._respond(data)

    def get(self, payment_id):
        return self._respond(payment_id)


class FakeSDK:
    def __init__(self, preference=None, payment=None):
        self._preference = preference or FakeResource()
        self._payment = payment or FakeResource()

    def preference(self):
        return self._preference

    def payment(self):
        return self._payment


@pytest.fixture
def payload(settings, sample_order):
    return build_preference(sample_order, settings)


class TestMercadoPagoAdapter:
    """Tests para MercadoPagoAdapter con un SDK falso."""

    @pytest.mark.asyncio
    async def test_create_preference(self, settings, payload):
        resource = FakeResource(result={
            "status": 201,
            "response": {
                "id": "123-abc",
                "init_point": "https://www.mercadopago.cl/checkout/v1/redirect?pref_id=123-abc",
                "sandbox_init_point": "https://sandbox.mercadopago.cl/checkout/v1/redirect?pref_id=123-abc",
            },
        })
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(preference=resource))

        result = await adapter.create_preference(payload)

        assert result.provider == "mercadopago"
        assert result.preference_id == "123-abc"
        assert result.redirect_url.startswith("https://www.mercadopago.cl/")
        assert result.sandbox_url.startswith("https://sandbox.")
        # El SDK recibe el cuerpo ya serializado
        (sent,) = resource.calls[0]
        assert sent["external_reference"] == "O1"
        assert sent["items"][0]["unit_price"] == 15.5

    @pytest.mark.asyncio
    async def test_create_preference_sandbox_redirect(self, payload):
        settings = Settings(
            _env_file=None,
            MERCADOPAGO_ACCESS_TOKEN="TEST-token",
            MERCADOPAGO_SANDBOX=True,
        )
        resource = FakeResource(result={
            "status": 201,
            "response": {"id": "p1", "init_point": "https://prod", "sandbox_init_point": "https://sandbox"},
        })
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(preference=resource))

        result = await adapter.create_preference(payload)

        assert result.redirect_url == "https://sandbox"

    @pytest.mark.asyncio
    async def test_create_preference_rejected(self, settings, payload):
        resource = FakeResource(result={
            "status": 400,
            "response": {"message": "invalid items.unit_price", "status": 400},
        })
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(preference=resource))

        with pytest.raises(GatewayError, match="invalid items.unit_price") as exc_info:
            await adapter.create_preference(payload)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_create_preference_transport_error(self, settings, payload):
        cause = ConnectionError("connection reset")
        adapter = MercadoPagoAdapter(
            settings=settings,
            sdk=FakeSDK(preference=FakeResource(error=cause)),
        )

        with pytest.raises(GatewayError) as exc_info:
            await adapter.create_preference(payload)

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_get_payment_info(self, settings, mp_payment):
        resource = FakeResource(result={"status": 200, "response": mp_payment})
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(payment=resource))

        raw = await adapter.get_payment_info("123456789")

        assert raw["external_reference"] == "O1"
        assert resource.calls == [("123456789",)]

    @pytest.mark.asyncio
    async def test_get_payment_info_not_found(self, settings):
        resource = FakeResource(result={"status": 404, "response": {"message": "Payment not found"}})
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(payment=resource))

        with pytest.raises(PaymentNotFoundError) as exc_info:
            await adapter.get_payment_info("999")

        assert exc_info.value.payment_id == "999"
        assert isinstance(exc_info.value, GatewayError)

    @pytest.mark.asyncio
    async def test_get_payment_info_gateway_failure(self, settings):
        resource = FakeResource(result={"status": 500, "response": {"message": "internal_error"}})
        adapter = MercadoPagoAdapter(settings=settings, sdk=FakeSDK(payment=resource))

        with pytest.raises(GatewayError, match="internal_error"):
            await adapter.get_payment_info("1")

    @pytest.mark.asyncio
    async def test_get_payment_info_transport_error(self, settings):
        adapter = MercadoPagoAdapter(
            settings=settings,
            sdk=FakeSDK(payment=FakeResource(error=TimeoutError("read timeout"))),
        )

        with pytest.raises(GatewayError, match="read timeout"):
            await adapter.get_payment_info("1")


class TestMockAdapter:
    """Tests para MockAdapter."""

    @pytest.mark.asyncio
    async def test_create_preference(self, gateway: MockAdapter, payload):
        result = await gateway.create_preference(payload)

        assert result.provider == "mock"
        assert result.preference_id.startswith("pref_")
        assert result.redirect_url == f"http://shop.test/mock-checkout/{result.preference_id}"
        assert gateway.get_preference(result.preference_id)["external_reference"] == "O1"

    @pytest.mark.asyncio
    async def test_preference_result_fields(self, gateway: MockAdapter, payload):
        result = await gateway.create_preference(payload)

        assert set(asdict(result)) == {
            "provider",
            "preference_id",
            "redirect_url",
            "sandbox_url",
            "raw_response",
        }

    @pytest.mark.asyncio
    async def test_simulated_payment_lookup(self, gateway: MockAdapter, payload):
        result = await gateway.create_preference(payload)
        payment_id = gateway.simulate_payment(result.preference_id)

        raw = await gateway.get_payment_info(payment_id)

        assert raw["status"] == "approved"
        assert raw["external_reference"] == "O1"
        # 2 x 15.5 + 3990 de envío
        assert raw["transaction_amount"] == 4021.0
        assert gateway.lookups == [payment_id]

    @pytest.mark.asyncio
    async def test_rejected_payment_has_no_approval_date(self, gateway: MockAdapter, payload):
        result = await gateway.create_preference(payload)
        payment_id = gateway.simulate_payment(result.preference_id, status="rejected")

        raw = await gateway.get_payment_info(payment_id)

        assert raw["date_approved"] is None

    @pytest.mark.asyncio
    async def test_unknown_payment(self, gateway: MockAdapter):
        with pytest.raises(PaymentNotFoundError):
            await gateway.get_payment_info("nope")

    def test_simulate_unknown_preference(self, gateway: MockAdapter):
        with pytest.raises(GatewayError):
            gateway.simulate_payment("pref_missing")

    @pytest.mark.asyncio
    async def test_clear(self, gateway: MockAdapter, mp_payment):
        gateway.add_payment(mp_payment)
        gateway.clear()

        with pytest.raises(PaymentNotFoundError):
            await gateway.get_payment_info(str(mp_payment["id"]))


class TestFactory:

    def test_get_mock_by_name(self, settings):
        assert isinstance(get_gateway_by_name("MOCK", settings), MockAdapter)

    def test_get_mercadopago_by_name(self, settings):
        gateway = get_gateway_by_name("mercadopago", settings)

        assert isinstance(gateway, MercadoPagoAdapter)
        assert gateway.provider_name == "mercadopago"

    def test_unsupported_provider(self, settings):
        with pytest.raises(ValueError, match="not supported"):
            get_gateway_by_name("transbank", settings)
