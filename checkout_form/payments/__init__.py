"""Payment gateway boundary and the simulated implementation."""
from .base import PaymentGateway, Receipt
from .simulated import SimulatedPaymentGateway, get_gateway

__all__ = ["PaymentGateway", "Receipt", "SimulatedPaymentGateway", "get_gateway"]
