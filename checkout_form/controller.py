"""
Submission controller: owns the form, validates on submit, and drives one
payment attempt at a time to success or failure.

State machine:
    idle      --submit(valid)-->   processing --ok-->    succeeded
    idle      --submit(invalid)--> idle (errors shown)
    failed    --submit(valid)-->   processing --error--> failed
    succeeded is terminal until reset()
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import FormValidationError, PaymentBoundaryError, SubmissionConflict
from .form.schema import CARD_FIELDS, FORM_FIELDS, FormState, PaymentMethod
from .form.validation import validate
from .notifications import PURCHASE_SUCCEEDED, NotificationSink, payment_failed
from .payments.base import PaymentGateway, Receipt

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionStatus:
    """Current submission state; reason is set only for failures."""
    state: SubmissionState
    reason: Optional[str] = None

    @classmethod
    def failed(cls, reason: str) -> "SubmissionStatus":
        return cls(SubmissionState.FAILED, reason)

    def to_dict(self) -> dict:
        return {"state": self.state.value, "reason": self.reason}


IDLE = SubmissionStatus(SubmissionState.IDLE)
PROCESSING = SubmissionStatus(SubmissionState.PROCESSING)
SUCCEEDED = SubmissionStatus(SubmissionState.SUCCEEDED)


class SubmissionController:
    """Mediates between field edits, validation, and the payment gateway."""

    def __init__(
        self,
        gateway: PaymentGateway,
        notifier: NotificationSink,
        timeout: float | None = None,
    ):
        self._gateway = gateway
        self._notifier = notifier
        self._timeout = timeout
        self.state = FormState()
        self._status = IDLE
        self._receipt: Optional[Receipt] = None

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def receipt(self) -> Optional[Receipt]:
        """Receipt of the last successful purchase, until reset()."""
        return self._receipt

    @property
    def can_submit(self) -> bool:
        """False while a payment is in flight or after success (submit button disabled)."""
        return self._status.state not in (SubmissionState.PROCESSING, SubmissionState.SUCCEEDED)

    def update_field(self, name: str, value: Any) -> None:
        """Overwrite one form field. Values are type-checked; field rules run only on submit."""
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name}")

        if name == "payment_method":
            value = PaymentMethod(value)
            setattr(self.state, name, value)
            if value is not PaymentMethod.CREDIT_CARD:
                # Card fields stop being required, so their errors go too
                for card_field in CARD_FIELDS:
                    self.state.errors.pop(card_field, None)
            return

        setattr(self.state, name, value)

    async def submit(self) -> SubmissionStatus:
        """
        Validate the form and, if valid, charge through the gateway once.

        Raises SubmissionConflict while a payment is in flight or after a
        successful purchase. Returns the resulting status otherwise.
        """
        if self._status.state is SubmissionState.PROCESSING:
            logger.warning("Submit rejected: payment already in flight")
            raise SubmissionConflict("A payment is already being processed.")
        if self._status.state is SubmissionState.SUCCEEDED:
            raise SubmissionConflict("Purchase already completed. Reset the form to start a new one.")

        try:
            order = validate(self.state)
        except FormValidationError as e:
            self.state.errors = e.errors
            logger.info("Submit blocked by %d field error(s)", len(e.errors))
            return self._status

        self.state.errors = {}
        # No await between the guard above and this line
        self._status = PROCESSING
        logger.info("Submitting order: %s", order.summary())

        try:
            if self._timeout is None:
                receipt = await self._gateway.process_payment(order)
            else:
                receipt = await asyncio.wait_for(
                    self._gateway.process_payment(order), timeout=self._timeout,
                )
        except PaymentBoundaryError as e:
            self._fail(e.reason)
            return self._status
        except asyncio.TimeoutError:
            logger.warning("Payment gateway timed out after %.1fs", self._timeout)
            self._fail("timeout")
            return self._status
        except asyncio.CancelledError:
            self._fail("cancelled")
            raise
        except Exception:
            logger.exception("Payment gateway raised unexpectedly")
            self._fail("unexpected error")
            raise

        self._receipt = receipt
        self._status = SUCCEEDED
        logger.info("Payment succeeded: %s", receipt.reference)
        self._notifier.notify(PURCHASE_SUCCEEDED)
        return self._status

    def reset(self) -> None:
        """Return the form to its defaults and the status to idle."""
        if self._status.state is SubmissionState.PROCESSING:
            raise SubmissionConflict("Cannot reset while a payment is being processed.")
        self.state = FormState()
        self._status = IDLE
        self._receipt = None

    def _fail(self, reason: str) -> None:
        self._status = SubmissionStatus.failed(reason)
        logger.info("Payment failed: %s", reason)
        self._notifier.notify(payment_failed(reason))
