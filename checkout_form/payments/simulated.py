"""Simulated gateway: fixed delay, then a configurable approve or decline."""
import asyncio
import logging
import os
import secrets
from typing import Optional

from ..errors import PaymentBoundaryError
from ..form.schema import ValidatedOrder
from .base import PaymentGateway, Receipt

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 2.0  # seconds


def get_gateway(
    delay: float | None = None,
    decline_reason: str | None = None,
) -> "SimulatedPaymentGateway":
    """Factory function to create the gateway configured by the environment."""
    if delay is None:
        delay = float(os.environ.get("CHECKOUT_GATEWAY_DELAY", DEFAULT_DELAY))
    if decline_reason is None:
        decline_reason = os.environ.get("CHECKOUT_GATEWAY_DECLINE") or None
    return SimulatedPaymentGateway(delay=delay, decline_reason=decline_reason)


class SimulatedPaymentGateway(PaymentGateway):
    """Stand-in for a real payment provider. No money moves."""

    def __init__(self, delay: float = DEFAULT_DELAY, decline_reason: Optional[str] = None):
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self.decline_reason = decline_reason
        self.calls: list[ValidatedOrder] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def process_payment(self, order: ValidatedOrder) -> Receipt:
        self.calls.append(order)
        logger.info("Processing %s payment (%.1fs simulated)", order.method.value, self.delay)
        await asyncio.sleep(self.delay)

        if self.decline_reason:
            logger.info("Simulated decline: %s", self.decline_reason)
            raise PaymentBoundaryError(self.decline_reason)

        return Receipt(
            reference=f"SIM-{secrets.token_hex(4).upper()}",
            method=order.method,
            email=order.email,
        )
