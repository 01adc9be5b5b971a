from typing import Callable, Optional

import httpx

from .config import settings as default_settings, Settings
from .interfaces import CardTokenWidget, HostedCheckoutWidget, Navigator, Notifier, WalletWidget
from .logging_config import setup_logging
from .orchestrator import CheckoutOrchestrator
from .services.api import ApiClient


def create_orchestrator(notifier: Notifier,
                        navigator: Navigator,
                        card_widget: CardTokenWidget,
                        wallet_widget: WalletWidget,
                        hosted_widget: HostedCheckoutWidget,
                        settings: Settings = default_settings,
                        translate: Optional[Callable[[str], str]] = None,
                        transport: Optional[httpx.AsyncBaseTransport] = None,
                        ) -> CheckoutOrchestrator:
    """Wire logging, the API client and the page's collaborators together."""
    setup_logging(settings)
    api = ApiClient.from_settings(settings, transport=transport)

    kwargs = {"translate": translate} if translate else {}
    return CheckoutOrchestrator(
        api,
        notifier,
        navigator,
        card_widget=card_widget,
        wallet_widget=wallet_widget,
        hosted_widget=hosted_widget,
        settings=settings,
        **kwargs,
    )
