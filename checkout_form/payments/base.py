"""Abstract payment gateway: the external boundary that actually charges the buyer."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..form.schema import PaymentMethod, ValidatedOrder


@dataclass
class Receipt:
    """Proof of a successful charge returned by a gateway."""
    reference: str
    method: PaymentMethod
    email: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "reference": self.reference,
            "method": self.method.value,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


class PaymentGateway(ABC):
    """Abstract base for payment gateways."""

    @abstractmethod
    async def process_payment(self, order: ValidatedOrder) -> Receipt:
        """Charge the buyer for order. Raises PaymentBoundaryError on failure."""
        ...
