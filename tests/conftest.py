"""Shared test fixtures."""
import pytest

from checkout_form.controller import SubmissionController
from checkout_form.form.schema import FormState, PaymentMethod
from checkout_form.notifications import InMemoryNotificationSink
from checkout_form.payments import SimulatedPaymentGateway


@pytest.fixture
def card_form():
    return FormState(
        email="a@b.co",
        payment_method=PaymentMethod.CREDIT_CARD,
        card_number="1234567890123456",
        expiry="09/27",
        cvc="123",
    )


@pytest.fixture
def paypal_form():
    return FormState(email="x@y.com", payment_method=PaymentMethod.PAYPAL)


@pytest.fixture
def gateway():
    """Instant, always-approving gateway."""
    return SimulatedPaymentGateway(delay=0)


@pytest.fixture
def notifier():
    return InMemoryNotificationSink()


@pytest.fixture
def controller(gateway, notifier):
    return SubmissionController(gateway=gateway, notifier=notifier)


def fill_card_form(controller: SubmissionController) -> None:
    """Type the happy-path card details into a controller's form."""
    controller.update_field("email", "a@b.co")
    controller.update_field("payment_method", "credit-card")
    controller.update_field("card_number", "1234567890123456")
    controller.update_field("expiry", "09/27")
    controller.update_field("cvc", "123")
