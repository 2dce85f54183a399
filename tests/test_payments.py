"""Tests for the simulated payment gateway and its factory."""
import pytest

from checkout_form.errors import PaymentBoundaryError
from checkout_form.form.schema import CardOrder, PaymentMethod, PayPalOrder
from checkout_form.payments import SimulatedPaymentGateway, get_gateway


@pytest.fixture
def card_order():
    return CardOrder(email="a@b.co", card_number="1234567890123456", expiry="09/27", cvc="123")


class TestSimulatedGateway:
    @pytest.mark.asyncio
    async def test_approves_by_default(self, card_order):
        gateway = SimulatedPaymentGateway(delay=0)
        receipt = await gateway.process_payment(card_order)
        assert receipt.reference.startswith("SIM-")
        assert receipt.method is PaymentMethod.CREDIT_CARD
        assert receipt.email == "a@b.co"
        assert gateway.call_count == 1

    @pytest.mark.asyncio
    async def test_receipt_references_are_unique(self):
        gateway = SimulatedPaymentGateway(delay=0)
        order = PayPalOrder(email="x@y.com")
        first = await gateway.process_payment(order)
        second = await gateway.process_payment(order)
        assert first.reference != second.reference

    @pytest.mark.asyncio
    async def test_decline(self, card_order):
        gateway = SimulatedPaymentGateway(delay=0, decline_reason="card declined")
        with pytest.raises(PaymentBoundaryError) as exc:
            await gateway.process_payment(card_order)
        assert exc.value.reason == "card declined"
        assert gateway.call_count == 1

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            SimulatedPaymentGateway(delay=-1)

    @pytest.mark.asyncio
    async def test_receipt_to_dict(self, card_order):
        receipt = await SimulatedPaymentGateway(delay=0).process_payment(card_order)
        data = receipt.to_dict()
        assert data["method"] == "credit-card"
        assert "T" in data["created_at"]


class TestGetGateway:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CHECKOUT_GATEWAY_DELAY", raising=False)
        monkeypatch.delenv("CHECKOUT_GATEWAY_DECLINE", raising=False)
        gateway = get_gateway()
        assert gateway.delay == 2.0
        assert gateway.decline_reason is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CHECKOUT_GATEWAY_DELAY", "0.5")
        monkeypatch.setenv("CHECKOUT_GATEWAY_DECLINE", "insufficient funds")
        gateway = get_gateway()
        assert gateway.delay == 0.5
        assert gateway.decline_reason == "insufficient funds"

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setenv("CHECKOUT_GATEWAY_DELAY", "5")
        assert get_gateway(delay=0).delay == 0
