"""Pydantic models for checkout form state and validated orders."""
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..output_sanitizer import redact_card_number, redact_email


class PaymentMethod(str, Enum):
    """Payment options offered by the checkout form."""
    CREDIT_CARD = "credit-card"
    PAYPAL = "paypal"
    APPLE_PAY = "apple-pay"
    GOOGLE_PAY = "google-pay"


# Fields that only matter when paying by card
CARD_FIELDS = ("card_number", "expiry", "cvc")

FORM_FIELDS = ("email", "payment_method") + CARD_FIELDS


class FormState(BaseModel):
    """Raw, unvalidated form values plus the errors currently displayed per field."""
    model_config = ConfigDict(validate_assignment=True)

    email: str = ""
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    card_number: Optional[str] = ""
    expiry: Optional[str] = ""
    cvc: Optional[str] = ""
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def requires_card(self) -> bool:
        return self.payment_method is PaymentMethod.CREDIT_CARD

    def snapshot(self) -> dict:
        """Form view for the surrounding UI. Card number, expiry and CVC are masked."""
        return {
            "email": self.email,
            "payment_method": self.payment_method.value,
            "card_fields_required": self.requires_card,
            "card_number": redact_card_number(self.card_number) if self.card_number else "",
            "expiry": "**/**" if self.expiry else "",
            "cvc": "***" if self.cvc else "",
            "errors": dict(self.errors),
        }


class _OrderBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str

    def summary(self) -> dict:
        """Log-safe view: email partly hidden, no card details beyond the last four digits."""
        return {"method": self.method.value, "email": redact_email(self.email)}


class CardOrder(_OrderBase):
    """Card payment, the only order shape that carries card details."""
    method: Literal[PaymentMethod.CREDIT_CARD] = PaymentMethod.CREDIT_CARD
    card_number: str
    expiry: str
    cvc: str

    def summary(self) -> dict:
        data = super().summary()
        data["card"] = redact_card_number(self.card_number)
        return data


class PayPalOrder(_OrderBase):
    method: Literal[PaymentMethod.PAYPAL] = PaymentMethod.PAYPAL


class ApplePayOrder(_OrderBase):
    method: Literal[PaymentMethod.APPLE_PAY] = PaymentMethod.APPLE_PAY


class GooglePayOrder(_OrderBase):
    method: Literal[PaymentMethod.GOOGLE_PAY] = PaymentMethod.GOOGLE_PAY


ValidatedOrder = Annotated[
    Union[CardOrder, PayPalOrder, ApplePayOrder, GooglePayOrder],
    Field(discriminator="method"),
]

# Wallet-style methods carry nothing beyond the email
WALLET_ORDERS: dict[PaymentMethod, type[_OrderBase]] = {
    PaymentMethod.PAYPAL: PayPalOrder,
    PaymentMethod.APPLE_PAY: ApplePayOrder,
    PaymentMethod.GOOGLE_PAY: GooglePayOrder,
}
