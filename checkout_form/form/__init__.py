"""Checkout form state, order shapes, and validation rules."""
from .schema import (
    CARD_FIELDS,
    FORM_FIELDS,
    ApplePayOrder,
    CardOrder,
    FormState,
    GooglePayOrder,
    PaymentMethod,
    PayPalOrder,
    ValidatedOrder,
)
from .validation import RULES, ValidationRule, collect_errors, validate

__all__ = [
    "CARD_FIELDS",
    "FORM_FIELDS",
    "ApplePayOrder",
    "CardOrder",
    "FormState",
    "GooglePayOrder",
    "PaymentMethod",
    "PayPalOrder",
    "ValidatedOrder",
    "RULES",
    "ValidationRule",
    "collect_errors",
    "validate",
]
