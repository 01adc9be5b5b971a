"""Checkout orchestration for the event ticketing client."""
from .errors import CheckoutError, GatewayRejected, TransportFault, UserCancelled, WidgetError
from .main import create_orchestrator
from .models import Order, PaymentMode
from .orchestrator import CheckoutAttempt, CheckoutOrchestrator, CheckoutOutcome, CheckoutState

__all__ = [
    "CheckoutAttempt",
    "CheckoutError",
    "CheckoutOrchestrator",
    "CheckoutOutcome",
    "CheckoutState",
    "GatewayRejected",
    "Order",
    "PaymentMode",
    "TransportFault",
    "UserCancelled",
    "WidgetError",
    "create_orchestrator",
]
__version__ = "0.1.0"
