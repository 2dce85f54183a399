"""Error taxonomy for the checkout flow."""


class CheckoutError(Exception):
    """Base class for checkout errors."""


class FormValidationError(CheckoutError):
    """One or more fields failed validation. Carries every violation, not just the first."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid fields: {fields}")


class SubmissionConflict(CheckoutError):
    """Submit (or reset) attempted while the controller cannot accept it."""


class PaymentBoundaryError(CheckoutError):
    """The payment gateway declined or failed to process the order."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class PaymentTimeout(PaymentBoundaryError):
    """The payment gateway did not answer in time."""

    def __init__(self, reason: str = "timeout"):
        super().__init__(reason)


class AuthenticationError(CheckoutError):
    """Session is not allowed to reach the checkout form."""
