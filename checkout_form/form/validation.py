"""
Checkout form validation.

Every rule is evaluated independently so the UI can show all violations at once.
Card rules apply only when the buyer pays by card; for any other method the
card fields are not looked at, whatever they contain.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import FormValidationError
from .schema import CardOrder, FormState, PaymentMethod, WALLET_ORDERS, ValidatedOrder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationRule:
    """Shape check for one form field."""
    field: str
    pattern: re.Pattern
    message: str
    required_message: Optional[str] = None
    card_only: bool = False

    def check(self, value: Optional[str]) -> Optional[str]:
        """Return the error message for value, or None if it passes."""
        if not value:
            return self.required_message or self.message
        if not self.pattern.fullmatch(value):
            return self.message
        return None


EMAIL_PATTERN = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
)

RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        field="email",
        pattern=EMAIL_PATTERN,
        message="Invalid email address.",
    ),
    ValidationRule(
        field="card_number",
        pattern=re.compile(r"[0-9]{16}"),
        message="Card number must be 16 digits.",
        required_message="Card number is required.",
        card_only=True,
    ),
    ValidationRule(
        field="expiry",
        pattern=re.compile(r"(0[1-9]|1[0-2])/[0-9]{2}"),
        message="Expiry date must be in MM/YY format.",
        required_message="Expiry date is required.",
        card_only=True,
    ),
    ValidationRule(
        field="cvc",
        pattern=re.compile(r"[0-9]{3,4}"),
        message="CVC must be 3 or 4 digits.",
        required_message="CVC is required.",
        card_only=True,
    ),
)


def normalize_email(email: str) -> str:
    """Strip surrounding whitespace and lower-case the domain."""
    email = email.strip()
    local, sep, domain = email.rpartition("@")
    if not sep:
        return email
    return f"{local}@{domain.lower()}"


def _field_value(state: FormState, field: str) -> Optional[str]:
    value = getattr(state, field)
    if field == "email" and value is not None:
        return value.strip()
    return value


def collect_errors(state: FormState) -> dict[str, str]:
    """Run every applicable rule and return field -> message for each failure."""
    if not isinstance(state.payment_method, PaymentMethod):
        # Always set by the form; anything else is a caller bug, not user input
        raise TypeError(f"payment_method must be a PaymentMethod, got {state.payment_method!r}")

    errors: dict[str, str] = {}
    for rule in RULES:
        if rule.card_only and not state.requires_card:
            continue
        message = rule.check(_field_value(state, rule.field))
        if message:
            errors[rule.field] = message
    return errors


def validate(state: FormState) -> ValidatedOrder:
    """
    Validate a form snapshot.

    Returns the order shaped to the selected payment method, or raises
    FormValidationError carrying every field error.
    """
    errors = collect_errors(state)
    if errors:
        logger.debug("Validation failed for fields: %s", ", ".join(sorted(errors)))
        raise FormValidationError(errors)

    email = normalize_email(state.email)
    if state.requires_card:
        return CardOrder(
            email=email,
            card_number=state.card_number,
            expiry=state.expiry,
            cvc=state.cvc,
        )
    return WALLET_ORDERS[state.payment_method](email=email)
